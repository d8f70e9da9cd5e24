"""Top bar showing the shell prompt and the live query."""

import getpass
import socket

from rich.text import Text
from textual.widgets import Static


def shell_prompt() -> str:
    """Return a ``user@host$`` prompt for the top bar."""
    try:
        user = getpass.getuser()
    except (KeyError, OSError):
        user = "user"
    return f"{user}@{socket.gethostname()}$"


class QueryBar(Static):
    """Single-line display of the prompt and current query text."""

    DEFAULT_CSS = """
    QueryBar {
        height: 1;
        padding: 0 1;
        text-style: bold;
    }
    """

    def __init__(self, prompt: str) -> None:
        super().__init__("")
        self._prompt = prompt
        self._query = ""
        self._refresh_content()

    @property
    def rendered(self) -> str:
        return f"{self._prompt} {self._query}"

    def _refresh_content(self) -> None:
        # Text, not a markup string: queries may contain "[" and "]"
        self.update(Text(self.rendered))

    def update_query(self, text: str) -> None:
        """Show new query text."""
        self._query = text
        self._refresh_content()
