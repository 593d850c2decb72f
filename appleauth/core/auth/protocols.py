"""
Interactive collaborator protocols.

The sign-in flow never talks to a terminal directly. User input goes
through a ``PromptInterface`` and user-facing messages through a
``LogSink``, so the flow can be driven by a console, a GUI or a test.
"""
import asyncio
import logging
from typing import Callable, Optional, Protocol, runtime_checkable

from ..logging import get_logger


@runtime_checkable
class PromptInterface(Protocol):
    """Reads a line of user input."""
    
    def read_line(self, prompt: str) -> Optional[str]:
        """
        Show ``prompt`` and read one line.
        
        Returns:
            The line without its trailing newline, or None at end of input
        """
        ...


@runtime_checkable
class SecretPromptInterface(PromptInterface, Protocol):
    """Prompt that can also read input without echoing it."""
    
    def read_secret(self, prompt: str) -> Optional[str]:
        ...


@runtime_checkable
class LogSink(Protocol):
    """Receives informational and diagnostic messages meant for the user."""
    
    def log(self, message: str) -> None:
        ...


class LoggerSink:
    """LogSink writing to a standard library logger."""
    
    def __init__(self, logger: Optional[logging.Logger] = None, level: int = logging.INFO):
        self._logger = logger or get_logger('appleauth.auth')
        self._level = level
    
    def log(self, message: str) -> None:
        self._logger.log(self._level, message)


async def ask(read: Callable[[str], Optional[str]], prompt: str) -> Optional[str]:
    """
    Call a blocking prompt method without stalling the event loop.
    
    Args:
        read: ``read_line`` or ``read_secret`` of a prompt
        prompt: Text shown to the user
    """
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, read, prompt)
