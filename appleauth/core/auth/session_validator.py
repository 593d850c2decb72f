"""Session status check."""
from ..api.async_client import AsyncAPIClient
from ..api.request import RequestBuilder, ResponseHandler
from ..exceptions import InvalidSession
from ..logging import get_logger


class SessionValidator:
    """
    Checks whether the cookies held by the client form a usable session.
    
    The status endpoint is checked loosely: the
    session is valid if the body is a JSON object with a top-level
    ``provider`` key, whatever its value.
    """
    
    def __init__(self, client: AsyncAPIClient, builder: RequestBuilder):
        self._client = client
        self._builder = builder
        self._logger = get_logger('appleauth.auth.session')
    
    async def validate_session(self) -> None:
        """
        Raises:
            InvalidSession: If the session is missing or expired
        """
        response = await self._client.send(self._builder.session())
        data = ResponseHandler.parse_loose(response)
        
        if not isinstance(data, dict) or 'provider' not in data:
            self._logger.debug(f"Session check failed with status {response.status}")
            raise InvalidSession()
    
    async def is_session_valid(self) -> bool:
        """Like ``validate_session`` but returns a bool."""
        try:
            await self.validate_session()
        except InvalidSession:
            return False
        return True
