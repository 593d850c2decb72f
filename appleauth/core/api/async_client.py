"""
Async Apple API client.

Thin asynchronous transport over aiohttp with configuration support.
"""
import asyncio
import json
import logging
from typing import Optional

import aiohttp

from .config import APIConfig
from .errors import NetworkError
from .models import APIResponse, PreparedRequest
from ..logging import get_logger, truncate


class AsyncAPIClient:
    """
    Asynchronous HTTP client for the sign-in flow.

    Features:
    - Full async/await support
    - Configurable proxy, SSL, timeouts
    - Shared cookie jar, the authenticated artifact of a login

    Status codes are never validated here; callers classify responses.

    Example:
        >>> config = APIConfig.default()
        >>> async with AsyncAPIClient(config) as client:
        ...     response = await client.send(RequestBuilder(config.endpoints).session())
    """

    def __init__(
        self,
        config: Optional[APIConfig] = None,
        cookie_jar: Optional[aiohttp.CookieJar] = None
    ):
        """
        Initialize async API client.

        Args:
            config: API configuration (uses defaults if not provided)
            cookie_jar: Cookie jar to share (a new one is created if omitted)
        """
        self._config = config or APIConfig.default()
        self._cookie_jar = cookie_jar
        self._session: Optional[aiohttp.ClientSession] = None
        self._connector: Optional[aiohttp.TCPConnector] = None
        self._closed = False

        self._logger = get_logger('appleauth.api')
        # Only set level if root logger has no handlers (basicConfig not called)
        root_logger = logging.getLogger()
        if not root_logger.handlers:
            self._logger.setLevel(self._config.log_level)

    @property
    def config(self) -> APIConfig:
        """Get current configuration."""
        return self._config

    @property
    def cookie_jar(self) -> aiohttp.CookieJar:
        """Cookie jar holding the session cookies."""
        if self._cookie_jar is None:
            self._cookie_jar = aiohttp.CookieJar()
        return self._cookie_jar

    @property
    def closed(self) -> bool:
        return self._closed

    async def __aenter__(self) -> 'AsyncAPIClient':
        """Async context manager entry."""
        await self.ensure_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

    async def ensure_session(self) -> aiohttp.ClientSession:
        """Ensure session is created and open."""
        if self._closed:
            raise NetworkError("Client is closed")

        if self._session is None or self._session.closed:
            self._connector = aiohttp.TCPConnector(
                **self._config.get_connector_kwargs()
            )
            self._session = aiohttp.ClientSession(
                connector=self._connector,
                cookie_jar=self.cookie_jar,
                **self._config.get_session_kwargs()
            )
        return self._session

    async def close(self):
        """Close client and release resources."""
        self._closed = True

        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None

        if self._connector and not self._connector.closed:
            await self._connector.close()
        self._connector = None

    async def send(self, request: PreparedRequest) -> APIResponse:
        """
        Send a request and read the full response.

        Args:
            request: Request to send

        Returns:
            APIResponse with the body read

        Raises:
            NetworkError: If the request could not be completed
        """
        session = await self.ensure_session()

        self._logger.debug(f"{request.method} {request.url}")
        if request.json is not None:
            self._logger.debug(f"Request data: {truncate(self._redact(request.json), 300)}")

        try:
            async with session.request(
                request.method,
                request.url,
                headers=dict(request.headers),
                json=request.json,
                proxy=self._config.proxy.to_aiohttp_proxy() if self._config.proxy else None
            ) as response:
                body = await response.read()
                result = APIResponse(
                    status=response.status,
                    headers=dict(response.headers),
                    body=body,
                    url=str(response.url),
                    method=request.method
                )
        except asyncio.TimeoutError as e:
            raise NetworkError(f"Request to {request.url} timed out", request.url) from e
        except aiohttp.ClientError as e:
            raise NetworkError(f"Request to {request.url} failed: {e}", request.url) from e

        self._logger.debug(f"Response [{result.status}]: {truncate(result.text)}")
        return result

    @staticmethod
    def _redact(data: dict) -> str:
        if 'password' in data:
            data = {**data, 'password': '********'}
        return json.dumps(data)
