"""Request building and response decoding."""
from .request_builder import RequestBuilder
from .response_handler import ResponseHandler

__all__ = [
    'RequestBuilder',
    'ResponseHandler',
]
