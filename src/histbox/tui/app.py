"""Main Textual application for the histbox suggest box."""

from __future__ import annotations

import logging

from textual import events
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.css.query import NoMatches

from histbox.tui.state import (
    Action,
    CancelDelete,
    Outcome,
    Quit,
    Resize,
    ViewStateMachine,
)
from histbox.tui.widgets.candidate_list import CandidateList
from histbox.tui.widgets.query_bar import QueryBar, shell_prompt
from histbox.tui.widgets.status_bar import StatusBar

logger = logging.getLogger(__name__)

# Rows taken by the query bar and the two status lines
CHROME_ROWS = 3


def page_size_for_height(height: int) -> int:
    """Number of candidate rows that fit a terminal of ``height`` lines."""
    return max(height - CHROME_ROWS, 1)


class HistboxApp(App[Outcome | None]):
    """Full-screen suggest box driven by a ViewStateMachine.

    The app only renders and forwards actions; every decision is made by
    the state machine. ``run()`` returns the terminal outcome.

    Args:
        machine: State machine over the ingested history.
        prompt: Text shown before the query. Defaults to ``user@host$``.
        fit_page_size: Derive the page size from the terminal height.
    """

    CSS = """
    Screen {
        layout: vertical;
    }
    """

    BINDINGS = [
        Binding("ctrl+c", "cancel", "Quit", show=False, priority=True),
    ]

    def __init__(
        self,
        machine: ViewStateMachine,
        prompt: str | None = None,
        *,
        fit_page_size: bool = True,
    ) -> None:
        super().__init__()
        self._machine = machine
        self._prompt = prompt if prompt is not None else shell_prompt()
        self._fit_page_size = fit_page_size

    @property
    def machine(self) -> ViewStateMachine:
        return self._machine

    def compose(self) -> ComposeResult:
        """Create the app layout."""
        yield QueryBar(self._prompt)
        yield StatusBar()
        yield CandidateList()

    def on_mount(self) -> None:
        """Focus the list and size the page to the terminal."""
        try:
            self.query_one(CandidateList).focus()
        except NoMatches:
            pass
        if self._fit_page_size:
            self._apply(Resize(page_size_for_height(self.size.height)))
        else:
            self._refresh_view()

    def on_resize(self, event: events.Resize) -> None:
        """Re-clamp paging after a terminal resize."""
        if self._fit_page_size:
            self._apply(Resize(page_size_for_height(event.size.height)))

    def on_candidate_list_action_requested(self, event: CandidateList.ActionRequested) -> None:
        """Apply an action posted by the candidate list."""
        self._apply(event.action)

    def action_cancel(self) -> None:
        """Quit from any state, abandoning a pending deletion."""
        if self._machine.state.confirming:
            self._machine.dispatch(CancelDelete())
        self._apply(Quit())

    def _apply(self, action: Action) -> None:
        step = self._machine.dispatch(action)
        if step.outcome is not None:
            logger.info("Session ended: %s", type(step.outcome).__name__)
            self.exit(step.outcome)
            return
        self._refresh_view()

    def _refresh_view(self) -> None:
        """Redraw every widget from the state machine."""
        machine = self._machine
        state = machine.state
        try:
            query_bar = self.query_one(QueryBar)
            status_bar = self.query_one(StatusBar)
            candidates = self.query_one(CandidateList)
        except NoMatches:
            return  # not mounted yet
        query_bar.update_query(state.query.text)
        status_bar.update_state(state, machine.page_count, machine.error)
        candidates.confirming = state.confirming
        candidates.show_page(machine.page_items(), state.cursor, state.query, machine.is_favorite)
