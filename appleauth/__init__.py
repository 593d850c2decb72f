"""
appleauth - Async Apple ID sign-in with two-factor support.

Usage:
    >>> from appleauth import AppleAuthClient
    >>> 
    >>> async with AppleAuthClient() as apple:
    ...     result = await apple.login("user@example.com", "password")
    ...     print(result.status)
"""
import logging
from .client import AppleAuthClient

# Configuration
from .core.api import (
    APIConfig,
    ProxyConfig,
    SSLConfig,
    TimeoutConfig,
    Endpoints,
    AsyncAPIClient,
    APIError,
    ResponseDecodingError,
    BadStatusCode,
    NetworkError,
)

# Authentication
from .core.auth import (
    AuthKind,
    AuthOptions,
    LoginResult,
    LoginStatus,
    PromptInterface,
    LogSink,
    LoggerSink,
    ConsolePrompt,
    ConsoleSink,
)

# Errors
from .core.exceptions import (
    AppleAuthError,
    InvalidSession,
    InvalidCredentials,
    InvalidPhoneNumberIndex,
    IncorrectSecurityCode,
    UnexpectedSignInResponse,
    AcknowledgementRequired,
    legible_description,
)

# Cookie storage
from .core.session import CookieStorage, MemoryCookieStorage, FileCookieStorage

__version__ = '1.0.0'


def setup_logging(level=logging.INFO):
    """
    Configure logging for appleauth modules.
    
    Args:
        level: Logging level (default: logging.INFO)
    """
    loggers = [
        'appleauth',
        'appleauth.api',
        'appleauth.auth',
        'appleauth.auth.session',
        'appleauth.auth.sign_in',
        'appleauth.auth.second_factor',
        'appleauth.client',
        'appleauth.session',
    ]
    
    for logger_name in loggers:
        logger = logging.getLogger(logger_name)
        logger.setLevel(level)
        logger.propagate = True


__all__ = [
    'AppleAuthClient',
    'APIConfig',
    'ProxyConfig',
    'SSLConfig',
    'TimeoutConfig',
    'Endpoints',
    'AsyncAPIClient',
    'AuthKind',
    'AuthOptions',
    'LoginResult',
    'LoginStatus',
    'PromptInterface',
    'LogSink',
    'LoggerSink',
    'ConsolePrompt',
    'ConsoleSink',
    'CookieStorage',
    'MemoryCookieStorage',
    'FileCookieStorage',
    'AppleAuthError',
    'APIError',
    'ResponseDecodingError',
    'BadStatusCode',
    'NetworkError',
    'InvalidSession',
    'InvalidCredentials',
    'InvalidPhoneNumberIndex',
    'IncorrectSecurityCode',
    'UnexpectedSignInResponse',
    'AcknowledgementRequired',
    'legible_description',
    'setup_logging',
]
