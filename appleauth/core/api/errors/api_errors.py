"""API transport and decoding errors."""
from typing import Optional

from ...exceptions import AppleAuthError, legible_description
from ..models import APIResponse


class APIError(AppleAuthError):
    """Base exception for transport-level failures."""
    
    tag_prefix = 'APIError'


class ResponseDecodingError(APIError):
    """
    Raised when a response expected to be strictly typed does not match.
    
    Carries the wrapped error, the raw body and the response metadata so
    that the failure can be diagnosed outside the library.
    """
    
    def __init__(self, error: BaseException, body: bytes, response: APIResponse) -> None:
        self.error = error
        self.body = body
        self.response = response
        super().__init__(
            "Error occurred while decoding response body.\n"
            f"Error: {legible_description(error)}\n"
            f"Response: {response}\n"
            f"Body: {body.decode('utf-8', errors='replace')}"
        )


class BadStatusCode(APIError):
    """Raised when a call that must succeed returns a non-2xx status."""
    
    def __init__(self, status_code: int, body: bytes, response: APIResponse) -> None:
        self.status_code = status_code
        self.body = body
        self.response = response
        super().__init__(f"Bad HTTP status code {status_code} from {response.url}.")


class NetworkError(APIError):
    """Raised when a request could not be completed at the network level."""
    
    def __init__(self, message: str, url: Optional[str] = None) -> None:
        self.url = url
        super().__init__(message)
