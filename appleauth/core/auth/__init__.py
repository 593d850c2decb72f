"""
Authentication models and collaborator protocols.

The flow components live in their own modules:
``session_validator``, ``sign_in`` and ``second_factor``.
"""
from .models import (
    Credentials,
    SessionContext,
    ServiceError,
    TrustedPhoneNumber,
    TrustedDevice,
    SecurityCodeInfo,
    AuthKind,
    AuthOptions,
    DeviceSecurityCode,
    SMSSecurityCode,
    SecurityCode,
    LoginStatus,
    LoginResult,
    classify_auth_kind,
)
from .protocols import PromptInterface, SecretPromptInterface, LogSink, LoggerSink
from .console import ConsolePrompt, ConsoleSink

__all__ = [
    'Credentials',
    'SessionContext',
    'ServiceError',
    'TrustedPhoneNumber',
    'TrustedDevice',
    'SecurityCodeInfo',
    'AuthKind',
    'AuthOptions',
    'DeviceSecurityCode',
    'SMSSecurityCode',
    'SecurityCode',
    'LoginStatus',
    'LoginResult',
    'classify_auth_kind',
    'PromptInterface',
    'SecretPromptInterface',
    'LogSink',
    'LoggerSink',
    'ConsolePrompt',
    'ConsoleSink',
]
