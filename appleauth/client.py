"""
AppleAuthClient - High-level async client for Apple ID sign-in.

Example:
    >>> async with AppleAuthClient() as apple:
    ...     result = await apple.start()
    ...     if result.authenticated:
    ...         session = await apple.get_http_session()
"""
from typing import Optional, Tuple

import aiohttp

from .core.api import APIConfig, AsyncAPIClient, RequestBuilder
from .core.auth import (
    ConsolePrompt,
    ConsoleSink,
    LoginResult,
    LoginStatus,
    LogSink,
    PromptInterface,
)
from .core.auth.protocols import ask
from .core.auth.second_factor import SecondFactorResolver
from .core.auth.session_validator import SessionValidator
from .core.auth.sign_in import SignInNegotiator
from .core.exceptions import InvalidSession
from .core.logging import get_logger
from .core.session import CookieStorage, FileCookieStorage, MemoryCookieStorage


class AppleAuthClient:
    """
    Produces an authenticated Apple ID session, prompting the user as needed.

    The product of a successful login is the client's cookie jar; reuse it
    through ``get_http_session()`` for further authorized requests.

    1. Session mode:
        >>> config = APIConfig(cookie_file=Path("~/.config/appleauth/cookies"))
        >>> apple = AppleAuthClient(config)
        >>> await apple.start()  # Reuses saved cookies or prompts for an Apple ID

    2. Direct credentials:
        >>> async with AppleAuthClient() as apple:
        ...     await apple.login("user@example.com", "password")
    """

    def __init__(
        self,
        config: Optional[APIConfig] = None,
        *,
        prompt: Optional[PromptInterface] = None,
        log_sink: Optional[LogSink] = None,
        storage: Optional[CookieStorage] = None,
        max_phone_selection_attempts: Optional[int] = None,
        api_client: Optional[AsyncAPIClient] = None
    ):
        """
        Initialize the client.

        Args:
            config: Optional API configuration
            prompt: Source of interactive input (terminal by default)
            log_sink: Destination of user-facing messages (terminal by default)
            storage: Cookie storage (file storage when config.cookie_file is set)
            max_phone_selection_attempts: Bound on invalid phone selections
            api_client: Pre-built transport, mainly for tests
        """
        self._config = config or APIConfig.default()
        self._prompt = prompt or ConsolePrompt()
        self._sink = log_sink or ConsoleSink()
        self._max_phone_selection_attempts = max_phone_selection_attempts
        self._api = api_client
        self._logger = get_logger('appleauth.client')

        if storage is not None:
            self._storage = storage
        elif self._config.cookie_file is not None:
            self._storage = FileCookieStorage(self._config.cookie_file)
        else:
            self._storage = MemoryCookieStorage()

        self._validator: Optional[SessionValidator] = None
        self._negotiator: Optional[SignInNegotiator] = None
        self._authenticated = False

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def connect(self) -> 'AppleAuthClient':
        """Open the transport and load stored cookies."""
        if self._negotiator is not None:
            return self

        if self._api is None:
            self._api = AsyncAPIClient(self._config)
        await self._api.ensure_session()

        if self._storage.load(self._api.cookie_jar):
            self._logger.debug("Loaded stored session cookies")

        builder = RequestBuilder(self._config.endpoints)
        self._validator = SessionValidator(self._api, builder)
        resolver = SecondFactorResolver(
            self._api,
            builder,
            self._validator,
            self._prompt,
            self._sink,
            self._max_phone_selection_attempts
        )
        self._negotiator = SignInNegotiator(self._api, builder, self._validator, resolver)
        return self

    async def __aenter__(self) -> 'AppleAuthClient':
        return await self.connect()

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self):
        """Save cookies of an authenticated session and release resources."""
        if self._api is None:
            return

        if self._authenticated:
            self._storage.save(self._api.cookie_jar)

        await self._api.close()
        self._api = None
        self._validator = None
        self._negotiator = None

    # =========================================================================
    # Authentication
    # =========================================================================

    async def start(
        self,
        account_name: Optional[str] = None,
        password: Optional[str] = None
    ) -> LoginResult:
        """
        Reuse a valid session or sign in, prompting for what is missing.

        Args:
            account_name: Optional Apple ID (skips prompt)
            password: Optional password (skips prompt)

        Returns:
            LoginResult of the reused session or the new login
        """
        await self.connect()

        if await self.is_session_valid():
            self._logger.info("Existing session is valid")
            return LoginResult(LoginStatus.AUTHENTICATED, account_name or None)

        account_name, password = await self._prompt_credentials(account_name, password)
        return await self.login(account_name, password)

    async def login(self, account_name: str, password: str) -> LoginResult:
        """
        Sign in with credentials, driving any second factor interactively.

        Raises:
            AppleAuthError: On any failure of the attempt
        """
        await self.connect()

        result = await self._negotiator.login(account_name, password)
        self._authenticated = result.authenticated

        if result.authenticated:
            self._storage.save(self._api.cookie_jar)
            self._logger.info(f"Signed in as {account_name}")
        else:
            self._logger.info(f"Sign-in for {account_name} ended without a session")

        return result

    async def validate_session(self) -> None:
        """
        Raises:
            InvalidSession: If the current cookies are not a usable session
        """
        await self.connect()
        try:
            await self._validator.validate_session()
        except InvalidSession:
            self._authenticated = False
            raise
        self._authenticated = True

    async def is_session_valid(self) -> bool:
        try:
            await self.validate_session()
        except InvalidSession:
            return False
        return True

    async def logout(self) -> None:
        """Forget the session locally; no request is sent to Apple."""
        if self._api is not None:
            self._api.cookie_jar.clear()
        self._storage.delete()
        self._authenticated = False

    @property
    def is_authenticated(self) -> bool:
        return self._authenticated

    async def get_http_session(self) -> aiohttp.ClientSession:
        """
        The HTTP session carrying the authenticated cookies.

        Raises:
            InvalidSession: If no session has been validated yet
        """
        if not self._authenticated or self._api is None:
            raise InvalidSession()
        return await self._api.ensure_session()

    async def _prompt_credentials(
        self,
        account_name: Optional[str],
        password: Optional[str]
    ) -> Tuple[str, str]:
        if not account_name:
            account_name = (await ask(self._prompt.read_line, "Apple ID: ") or '').strip()
        if not password:
            read_secret = getattr(self._prompt, 'read_secret', self._prompt.read_line)
            password = await ask(read_secret, "Apple ID Password: ") or ''

        if not account_name or not password:
            raise ValueError("An Apple ID and password are required to sign in")
        return account_name, password
