"""
In-memory cookie storage implementation.

Keeps nothing between runs; cookies live only in the client's jar.
"""
import aiohttp

from .protocols import CookieStorage


class MemoryCookieStorage(CookieStorage):
    """
    Non-persistent cookie storage.
    
    Useful for:
    - Unit testing
    - One-shot scripts
    - CI/CD environments
    """
    
    def __init__(self):
        self._saved = False
    
    def load(self, jar: aiohttp.CookieJar) -> bool:
        return False
    
    def save(self, jar: aiohttp.CookieJar) -> None:
        self._saved = True
    
    def delete(self) -> None:
        self._saved = False
    
    def exists(self) -> bool:
        return self._saved
