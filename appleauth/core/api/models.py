"""Request and response value objects exchanged with the transport."""
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional


@dataclass(frozen=True)
class PreparedRequest:
    """
    A fully built HTTP request.
    
    Attributes:
        method: HTTP method
        url: Absolute URL
        headers: Request headers
        json: JSON body, or None for requests without a body
    """
    method: str
    url: str
    headers: Mapping[str, str] = field(default_factory=dict)
    json: Optional[Dict[str, Any]] = None


@dataclass(frozen=True)
class APIResponse:
    """
    A received HTTP response with its body fully read.
    
    Headers are stored with their original case; use ``header()`` for
    case-insensitive lookup.
    """
    status: int
    headers: Mapping[str, str]
    body: bytes
    url: str = ''
    method: str = 'GET'
    
    @property
    def ok(self) -> bool:
        """True for 2xx status codes."""
        return 200 <= self.status < 300
    
    @property
    def text(self) -> str:
        """Body decoded as UTF-8, undecodable bytes replaced."""
        return self.body.decode('utf-8', errors='replace')
    
    def header(self, name: str) -> Optional[str]:
        """Case-insensitive header lookup."""
        wanted = name.lower()
        for key, value in self.headers.items():
            if key.lower() == wanted:
                return value
        return None
    
    def __str__(self) -> str:
        return f"<APIResponse {self.method} {self.url} [{self.status}]>"
