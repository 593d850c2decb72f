"""Apple API module: transport, configuration and request building."""
from .config import APIConfig, ProxyConfig, SSLConfig, TimeoutConfig, Endpoints
from .models import APIResponse, PreparedRequest
from .errors import APIError, ResponseDecodingError, BadStatusCode, NetworkError
from .async_client import AsyncAPIClient
from .request import RequestBuilder, ResponseHandler

__all__ = [
    # Client
    'AsyncAPIClient',
    'RequestBuilder',
    'ResponseHandler',
    'APIResponse',
    'PreparedRequest',
    
    # Configuration
    'APIConfig',
    'ProxyConfig',
    'SSLConfig',
    'TimeoutConfig',
    'Endpoints',
    
    # Errors
    'APIError',
    'ResponseDecodingError',
    'BadStatusCode',
    'NetworkError',
]
