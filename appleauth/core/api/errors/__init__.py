"""Apple API errors and exceptions."""
from .api_errors import APIError, ResponseDecodingError, BadStatusCode, NetworkError

__all__ = [
    'APIError',
    'ResponseDecodingError',
    'BadStatusCode',
    'NetworkError',
]
