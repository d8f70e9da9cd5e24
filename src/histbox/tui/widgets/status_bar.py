"""Status bar widget."""

from dataclasses import dataclass, field

from rich.text import Text
from textual.widgets import Static

from histbox.search import MatchMode
from histbox.tui.keys import HELP_LABEL
from histbox.tui.state import View, ViewState


def format_view(view: View) -> str:
    return view.value


def format_regex_mode(mode: MatchMode) -> str:
    return "on" if mode is MatchMode.REGEX else "off"


def format_case(case_sensitive: bool) -> str:
    return "sensitive" if case_sensitive else "insensitive"


def deletion_prompt(command: str) -> str:
    return f"Do you want to delete all occurrences of {command}? y/n"


@dataclass
class StatusBarState:
    """Data model for the status bar, independent of Textual.

    The render_lines() method produces the message line and the mode line.
    """

    view: View = View.RANKED
    mode: MatchMode = MatchMode.SUBSTRING
    case_sensitive: bool = False
    page: int = 0
    page_count: int = 0
    _message: str | None = field(default=None, init=False)
    _prompt: str | None = field(default=None, init=False)

    def set_view_state(self, state: ViewState, page_count: int) -> None:
        """Copy the displayed fields from a state machine snapshot."""
        self.view = state.active_view
        self.mode = state.query.mode
        self.case_sensitive = state.query.case_sensitive
        self.page = state.page
        self.page_count = page_count
        if state.pending_delete is not None:
            self._prompt = deletion_prompt(state.pending_delete.text)
        else:
            self._prompt = None

    def set_message(self, message: str | None) -> None:
        """Show an advisory message in place of the help line."""
        self._message = message

    def render_lines(self) -> tuple[str, str]:
        """Render the message line and the mode line."""
        line1 = self._prompt or self._message or HELP_LABEL
        # Pages are shown 1-based; an empty list shows page 0/0
        page = self.page + 1 if self.page_count else 0
        line2 = (
            f"- view:{format_view(self.view)} (C-/) "
            f"- regex:{format_regex_mode(self.mode)} (C-e) "
            f"- case:{format_case(self.case_sensitive)} (C-t) "
            f"- page {page}/{self.page_count} -"
        )
        return line1, line2

    @property
    def alert(self) -> bool:
        """True when line 1 carries a prompt or error rather than help."""
        return self._prompt is not None or self._message is not None


class StatusBar(Static):
    """Textual widget displaying the help/message line and the mode line."""

    DEFAULT_CSS = """
    StatusBar {
        height: 2;
        padding: 0 1;
    }
    StatusBar.alert {
        color: $error;
    }
    """

    def __init__(self) -> None:
        super().__init__("")
        self._state = StatusBarState()
        self._refresh_content()

    def _refresh_content(self) -> None:
        """Re-render from state."""
        line1, line2 = self._state.render_lines()
        self.set_class(self._state.alert, "alert")
        self.update(Text(f"{line1}\n{line2}"))

    def update_state(self, state: ViewState, page_count: int, message: str | None) -> None:
        """Refresh from a state machine snapshot."""
        self._state.set_view_state(state, page_count)
        self._state.set_message(message)
        self._refresh_content()
