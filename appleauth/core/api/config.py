"""
API configuration module.

Provides configuration for the Apple ID authentication client: transport
settings (proxy, SSL, timeouts) and the provider-specific endpoint
constants used by the sign-in flow.
"""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Dict, Any, FrozenSet, Union
import ssl


@dataclass
class ProxyConfig:
    """
    Proxy configuration.

    Supports HTTP and HTTPS proxies.
    """
    url: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None

    def to_aiohttp_proxy(self) -> Optional[str]:
        """Convert to aiohttp proxy format."""
        if not self.url:
            return None

        if self.username and self.password:
            # Insert credentials into URL
            if '://' in self.url:
                protocol, rest = self.url.split('://', 1)
                return f"{protocol}://{self.username}:{self.password}@{rest}"

        return self.url


@dataclass
class SSLConfig:
    """
    SSL/TLS configuration.

    Allows customization of SSL behavior for security requirements.
    """
    verify: bool = True
    cert_file: Optional[str] = None
    key_file: Optional[str] = None
    ca_file: Optional[str] = None
    check_hostname: bool = True

    def create_ssl_context(self) -> Union[ssl.SSLContext, bool]:
        """Create SSL context from configuration."""
        if not self.verify:
            return False  # Disable SSL verification

        context = ssl.create_default_context()

        if self.ca_file:
            context.load_verify_locations(self.ca_file)

        if self.cert_file:
            context.load_cert_chain(
                self.cert_file,
                keyfile=self.key_file
            )

        context.check_hostname = self.check_hostname

        return context


@dataclass
class TimeoutConfig:
    """
    Timeout configuration.

    Applies to individual network calls only. Interactive prompts are
    never subject to a timeout.
    """
    total: float = 60.0
    connect: float = 30.0
    sock_read: float = 30.0
    sock_connect: float = 30.0

    def to_aiohttp_timeout(self):
        """Convert to aiohttp ClientTimeout."""
        import aiohttp
        return aiohttp.ClientTimeout(
            total=self.total,
            connect=self.connect,
            sock_read=self.sock_read,
            sock_connect=self.sock_connect
        )


@dataclass(frozen=True)
class Endpoints:
    """
    Provider-specific URLs and header names.

    Defaults target the App Store Connect "olympus" service and the
    Apple ID "appleauth" sign-in service.
    """
    service_key_url: str = (
        'https://appstoreconnect.apple.com/olympus/v1/app/config'
        '?hostname=itunesconnect.apple.com'
    )
    session_url: str = 'https://appstoreconnect.apple.com/olympus/v1/session'
    auth_base_url: str = 'https://idmsa.apple.com/appleauth/auth'

    widget_key_header: str = 'X-Apple-Widget-Key'
    session_id_header: str = 'X-Apple-ID-Session-Id'
    scnt_header: str = 'scnt'

    # authType values reported with 412 that mean a pending agreement
    acknowledgement_auth_types: FrozenSet[str] = frozenset({'sa', 'hsa', 'non-sa', 'hsa2'})

    @property
    def sign_in_url(self) -> str:
        return f"{self.auth_base_url}/signin"

    @property
    def auth_options_url(self) -> str:
        return self.auth_base_url

    @property
    def request_phone_code_url(self) -> str:
        return f"{self.auth_base_url}/verify/phone"

    def submit_code_url(self, path_component: str) -> str:
        """URL receiving a security code for the given delivery channel."""
        return f"{self.auth_base_url}/verify/{path_component}/securitycode"

    @property
    def trust_url(self) -> str:
        return f"{self.auth_base_url}/2sv/trust"


@dataclass
class APIConfig:
    """
    Complete API configuration.

    Centralizes all configuration options for the authentication client.
    """
    # User agent
    user_agent: str = 'appleauth/1.0.0'

    # Provider constants
    endpoints: Endpoints = field(default_factory=Endpoints)

    # Sub-configurations
    proxy: Optional[ProxyConfig] = None
    ssl: SSLConfig = field(default_factory=SSLConfig)
    timeout: TimeoutConfig = field(default_factory=TimeoutConfig)

    # Additional headers
    extra_headers: Dict[str, str] = field(default_factory=dict)

    # Cookie persistence (None keeps cookies in memory only)
    cookie_file: Optional[Path] = None

    # Logging
    log_level: int = 20  # logging.INFO

    # Connection pool settings
    limit_per_host: int = 4
    limit: int = 20

    @classmethod
    def default(cls) -> 'APIConfig':
        """Create default configuration."""
        return cls()

    @classmethod
    def with_proxy(cls, proxy_url: str, **kwargs) -> 'APIConfig':
        """Create configuration with proxy."""
        return cls(
            proxy=ProxyConfig(url=proxy_url),
            **kwargs
        )

    @classmethod
    def insecure(cls, **kwargs) -> 'APIConfig':
        """Create configuration with SSL verification disabled."""
        return cls(
            ssl=SSLConfig(verify=False, check_hostname=False),
            **kwargs
        )

    def get_connector_kwargs(self) -> Dict[str, Any]:
        """Get kwargs for aiohttp TCPConnector."""
        return {
            'limit': self.limit,
            'limit_per_host': self.limit_per_host,
            'ssl': self.ssl.create_ssl_context(),
        }

    def get_session_kwargs(self) -> Dict[str, Any]:
        """Get kwargs for aiohttp ClientSession."""
        headers = {
            'User-Agent': self.user_agent,
            **self.extra_headers
        }

        return {
            'headers': headers,
            'timeout': self.timeout.to_aiohttp_timeout(),
        }
