"""Candidate list widget: renders one page and captures key presses."""

from collections.abc import Callable, Sequence

from rich.text import Text
from textual import events
from textual.message import Message
from textual.widgets import Static

from histbox.history.models import Command
from histbox.search import Query, match_spans
from histbox.tui.keys import action_for_key
from histbox.tui.state import Action

SELECTED_STYLE = "white on green"
FAVORITE_STYLE = "cyan"
MATCH_STYLE = "bold red"


def render_rows(
    items: Sequence[Command],
    cursor: int,
    query: Query,
    is_favorite: Callable[[str], bool],
) -> Text:
    """Render a page of commands.

    Favorites are colored, matched characters highlighted, and the row
    under the cursor drawn last so its style wins.
    """
    text = Text(no_wrap=True, overflow="ellipsis")
    for row, command in enumerate(items):
        line = Text(command.text)
        if is_favorite(command.text):
            line.stylize(FAVORITE_STYLE)
        for start, end in match_spans(command.text, query):
            line.stylize(MATCH_STYLE, start, end)
        if row == cursor:
            line.stylize(SELECTED_STYLE)
        if row:
            text.append("\n")
        text.append_text(line)
    return text


class CandidateList(Static, can_focus=True):
    """Focusable list of the current page of candidates.

    All key presses are translated into state machine actions and posted
    to the app; the widget never changes state itself.
    """

    DEFAULT_CSS = """
    CandidateList {
        height: 1fr;
        padding: 0 1;
    }
    """

    class ActionRequested(Message):
        """Posted when a key press maps to a state machine action."""

        def __init__(self, action: Action) -> None:
            super().__init__()
            self.action = action

    def __init__(self) -> None:
        super().__init__("")
        self._confirming = False
        self._lines: list[str] = []

    @property
    def confirming(self) -> bool:
        """Whether a delete confirmation is pending."""
        return self._confirming

    @confirming.setter
    def confirming(self, value: bool) -> None:
        self._confirming = value

    @property
    def lines(self) -> list[str]:
        """Plain text of the rows currently shown."""
        return list(self._lines)

    def show_page(
        self,
        items: Sequence[Command],
        cursor: int,
        query: Query,
        is_favorite: Callable[[str], bool],
    ) -> None:
        """Render a page of commands."""
        self._lines = [c.text for c in items]
        self.update(render_rows(items, cursor, query, is_favorite))

    async def _on_key(self, event: events.Key) -> None:
        """Translate key events into actions."""
        action = action_for_key(event.key, event.character, confirming=self._confirming)
        if action is None:
            await super()._on_key(event)
            return
        event.prevent_default()
        event.stop()
        self.post_message(CandidateList.ActionRequested(action))
