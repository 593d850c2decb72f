"""
Session cookie storage.

Keeps the cookies of a validated session between runs.
"""
from .protocols import CookieStorage
from .memory_session import MemoryCookieStorage
from .file_session import FileCookieStorage

__all__ = [
    'CookieStorage',
    'MemoryCookieStorage',
    'FileCookieStorage',
]
