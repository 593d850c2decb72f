"""Response handler for API responses."""
import json
from typing import Any, Callable, Optional, TypeVar

from ..errors import BadStatusCode, ResponseDecodingError
from ..models import APIResponse

T = TypeVar('T')


class ResponseHandler:
    """Decodes responses and maps failures to errors with full context."""

    @staticmethod
    def parse_json(response: APIResponse, allow_empty: bool = False) -> Any:
        """
        Parses the JSON body.

        Raises:
            ResponseDecodingError: If the body is not valid JSON
        """
        if allow_empty and not response.body.strip():
            return {}
        try:
            return json.loads(response.body)
        except ValueError as e:
            raise ResponseDecodingError(e, response.body, response) from e

    @staticmethod
    def decode(
        response: APIResponse,
        factory: Callable[[Any], T],
        allow_empty: bool = False
    ) -> T:
        """
        Decodes the body strictly into a model.

        Args:
            response: Response to decode
            factory: Callable building the model from parsed JSON,
                raising ``ValueError``/``KeyError``/``TypeError`` on mismatch
            allow_empty: Treat an empty body as an empty object

        Raises:
            ResponseDecodingError: On invalid JSON or schema mismatch
        """
        data = ResponseHandler.parse_json(response, allow_empty)
        try:
            return factory(data)
        except (ValueError, KeyError, TypeError) as e:
            raise ResponseDecodingError(e, response.body, response) from e

    @staticmethod
    def parse_loose(response: APIResponse) -> Optional[Any]:
        """Parses the JSON body, returning None when it is not JSON."""
        try:
            return json.loads(response.body)
        except ValueError:
            return None

    @staticmethod
    def ensure_success(response: APIResponse) -> APIResponse:
        """
        Raises:
            BadStatusCode: For non-2xx responses
        """
        if not response.ok:
            raise BadStatusCode(response.status, response.body, response)
        return response
