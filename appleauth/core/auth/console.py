"""Terminal implementations of the collaborator protocols, built on rich."""
from typing import Optional

from rich.console import Console


class ConsolePrompt:
    """Reads answers from the terminal."""
    
    def __init__(self, console: Optional[Console] = None):
        self._console = console or Console()
    
    def read_line(self, prompt: str) -> Optional[str]:
        try:
            return self._console.input(prompt, markup=False)
        except EOFError:
            return None
    
    def read_secret(self, prompt: str) -> Optional[str]:
        try:
            return self._console.input(prompt, markup=False, password=True)
        except EOFError:
            return None


class ConsoleSink:
    """Prints user-facing messages to the terminal."""
    
    def __init__(self, console: Optional[Console] = None):
        self._console = console or Console()
    
    def log(self, message: str) -> None:
        # Provider messages may contain brackets
        self._console.print(message, markup=False, highlight=False)
