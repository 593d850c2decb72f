"""
File-based cookie storage implementation.

Persists the aiohttp cookie jar to a single file so that a validated
session can be reused by later runs.
"""
import os
from pathlib import Path
from typing import Union

import aiohttp

from .protocols import CookieStorage
from ..logging import get_logger


class FileCookieStorage(CookieStorage):
    """
    Cookie storage backed by ``aiohttp.CookieJar.save``/``load``.
    
    The file is created with owner-only permissions.
    
    Example:
        >>> storage = FileCookieStorage("~/.config/appleauth/cookies")
        >>> storage.load(jar)
    """
    
    def __init__(self, path: Union[str, Path]):
        """
        Initialize file cookie storage.
        
        Args:
            path: Cookie file path; ``~`` is expanded
        """
        self._path = Path(path).expanduser()
        self._logger = get_logger('appleauth.session')
    
    @property
    def path(self) -> Path:
        """Get cookie file path."""
        return self._path
    
    def load(self, jar: aiohttp.CookieJar) -> bool:
        """
        Load cookies from file.
        
        An unreadable file is treated as absent and removed.
        """
        if not self.exists():
            return False
        
        try:
            jar.load(self._path)
        except Exception as e:
            # Unpickling a damaged file can raise nearly anything
            self._logger.warning(f"Discarding unreadable cookie file {self._path}: {e}")
            self.delete()
            return False
        
        self._logger.debug(f"Loaded cookies from {self._path}")
        return True
    
    def save(self, jar: aiohttp.CookieJar) -> None:
        """Write cookies to file."""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        
        # Restrict the file before any cookie is written to it
        fd = os.open(self._path, os.O_CREAT | os.O_WRONLY, 0o600)
        os.close(fd)
        os.chmod(self._path, 0o600)
        
        jar.save(self._path)
        os.chmod(self._path, 0o600)
        self._logger.debug(f"Saved cookies to {self._path}")
    
    def delete(self) -> None:
        """Delete cookie file if present."""
        try:
            self._path.unlink()
        except FileNotFoundError:
            pass
    
    def exists(self) -> bool:
        return self._path.is_file()
