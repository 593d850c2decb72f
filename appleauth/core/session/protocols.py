"""
Cookie storage protocols.

Defines the interface for keeping session cookies between runs.
Credentials are never stored, only the cookies the provider issued.
"""
from typing import Protocol, runtime_checkable

import aiohttp


@runtime_checkable
class CookieStorage(Protocol):
    """
    Protocol for cookie storage implementations.
    
    Implementations can use a file, a keyring, or nothing at all.
    """
    
    def load(self, jar: aiohttp.CookieJar) -> bool:
        """
        Load stored cookies into ``jar``.
        
        Returns:
            True if cookies were loaded
        """
        ...
    
    def save(self, jar: aiohttp.CookieJar) -> None:
        """
        Persist the cookies currently held by ``jar``.
        """
        ...
    
    def delete(self) -> None:
        """
        Delete stored cookies.
        """
        ...
    
    def exists(self) -> bool:
        """
        Check if stored cookies exist.
        """
        ...
