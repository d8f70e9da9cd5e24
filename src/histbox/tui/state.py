"""UI-agnostic view state machine for the suggest box.

No Textual imports: every transition is a plain method call, so the whole
interaction can be driven and checked without a terminal.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable
from dataclasses import dataclass, replace
from enum import Enum

from histbox.exceptions import InvalidPatternError, PersistenceWriteError
from histbox.favorites import FavoritesStore
from histbox.history.ingest import CommandStore
from histbox.history.models import Command
from histbox.search import MatchMode, Query, SearchFilter

logger = logging.getLogger(__name__)


class View(Enum):
    RANKED = "ranked"
    FAVORITES = "favorites"


# --- Actions ---


@dataclass(frozen=True)
class InsertChar:
    char: str


@dataclass(frozen=True)
class Backspace:
    pass


@dataclass(frozen=True)
class ToggleView:
    pass


@dataclass(frozen=True)
class ToggleCase:
    pass


@dataclass(frozen=True)
class ToggleMatchMode:
    pass


@dataclass(frozen=True)
class MovePage:
    delta: int


@dataclass(frozen=True)
class MoveCursor:
    delta: int


@dataclass(frozen=True)
class RequestDelete:
    pass


@dataclass(frozen=True)
class ConfirmDelete:
    pass


@dataclass(frozen=True)
class CancelDelete:
    pass


@dataclass(frozen=True)
class ToggleFavorite:
    pass


@dataclass(frozen=True)
class Select:
    pass


@dataclass(frozen=True)
class Quit:
    pass


@dataclass(frozen=True)
class Resize:
    page_size: int


Action = (
    InsertChar
    | Backspace
    | ToggleView
    | ToggleCase
    | ToggleMatchMode
    | MovePage
    | MoveCursor
    | RequestDelete
    | ConfirmDelete
    | CancelDelete
    | ToggleFavorite
    | Select
    | Quit
    | Resize
)

# Actions accepted while a deletion is awaiting confirmation
_MODAL_ACTIONS = (ConfirmDelete, CancelDelete, Resize)


# --- Outcomes ---


@dataclass(frozen=True)
class Selected:
    command: Command


@dataclass(frozen=True)
class Cancelled:
    pass


Outcome = Selected | Cancelled


@dataclass(frozen=True)
class ViewState:
    """Snapshot of everything that determines what is displayed."""

    active_view: View = View.RANKED
    query: Query = Query()
    page: int = 0
    cursor: int = 0
    pending_delete: Command | None = None

    @property
    def confirming(self) -> bool:
        """True while the delete confirmation prompt is shown."""
        return self.pending_delete is not None


@dataclass(frozen=True)
class Step:
    """Result of applying one action.

    Attributes:
        state: State after the transition.
        outcome: Terminal outcome, if the loop should end.
        error: Advisory message to surface (invalid pattern, save failure).
        accepted: False when the action is not allowed in the current state.
    """

    state: ViewState
    outcome: Outcome | None = None
    error: str | None = None
    accepted: bool = True


class ViewStateMachine:
    """Single source of truth for the interactive session.

    Reads candidates from the CommandStore and favorites from the
    FavoritesStore; deletions and favorite toggles are delegated back to
    those owners.

    Args:
        store: Candidate commands.
        favorites: Favorites store (already loaded).
        page_size: Rows per page (>= 1).
        query: Initial query text and mode.
        search: Filter implementation.
    """

    def __init__(
        self,
        store: CommandStore,
        favorites: FavoritesStore,
        *,
        page_size: int = 20,
        query: Query | None = None,
        search: SearchFilter | None = None,
    ) -> None:
        if page_size < 1:
            raise ValueError("page_size must be at least 1")
        self._store = store
        self._favorites = favorites
        self._page_size = page_size
        self._search = search or SearchFilter()
        self._state = ViewState(query=query or Query())
        self._last_valid_query = Query(
            mode=self._state.query.mode, case_sensitive=self._state.query.case_sensitive
        )
        self._visible: list[Command] = []
        self._error: str | None = None
        self._pattern_error: str | None = None
        self._handlers: dict[type, Callable[[Action], Step]] = {
            InsertChar: self._on_insert_char,
            Backspace: self._on_backspace,
            ToggleView: self._on_toggle_view,
            ToggleCase: self._on_toggle_case,
            ToggleMatchMode: self._on_toggle_match_mode,
            MovePage: self._on_move_page,
            MoveCursor: self._on_move_cursor,
            RequestDelete: self._on_request_delete,
            ConfirmDelete: self._on_confirm_delete,
            CancelDelete: self._on_cancel_delete,
            ToggleFavorite: self._on_toggle_favorite,
            Select: self._on_select,
            Quit: self._on_quit,
            Resize: self._on_resize,
        }
        self._recompute(reset_page=True)

    # --- Read-only views ---

    @property
    def state(self) -> ViewState:
        return self._state

    @property
    def page_size(self) -> int:
        return self._page_size

    @property
    def error(self) -> str | None:
        """Advisory message to show, if any.

        A save failure is reported for the transition that caused it. An
        invalid pattern is reported until the query compiles again.
        """
        return self._error or self._pattern_error

    @property
    def visible(self) -> list[Command]:
        """Filtered candidates for the active view, best-first."""
        return list(self._visible)

    @property
    def page_count(self) -> int:
        return math.ceil(len(self._visible) / self._page_size)

    def page_items(self) -> list[Command]:
        """Candidates on the current page."""
        start = self._state.page * self._page_size
        return self._visible[start : start + self._page_size]

    @property
    def selected(self) -> Command | None:
        """Command under the cursor, or None when the page is empty."""
        items = self.page_items()
        if not items:
            return None
        return items[self._state.cursor]

    def is_favorite(self, text: str) -> bool:
        return text in self._favorites

    # --- Dispatch ---

    def dispatch(self, action: Action) -> Step:
        """Apply one action and return the resulting step."""
        if self._state.confirming and not isinstance(action, _MODAL_ACTIONS):
            return Step(self._state, error=self.error, accepted=False)
        if not self._state.confirming and isinstance(action, (ConfirmDelete, CancelDelete)):
            return Step(self._state, error=self.error, accepted=False)
        handler = self._handlers.get(type(action))
        if handler is None:
            raise TypeError(f"Unknown action: {action!r}")
        self._error = None
        return handler(action)

    # --- Handlers ---

    def _on_insert_char(self, action: Action) -> Step:
        assert isinstance(action, InsertChar)
        query = self._state.query
        self._state = replace(self._state, query=query.with_text(query.text + action.char))
        self._recompute(reset_page=True)
        return self._step()

    def _on_backspace(self, action: Action) -> Step:
        query = self._state.query
        if not query.text:
            return self._step()
        self._state = replace(self._state, query=query.with_text(query.text[:-1]))
        self._recompute(reset_page=True)
        return self._step()

    def _on_toggle_view(self, action: Action) -> Step:
        view = View.FAVORITES if self._state.active_view is View.RANKED else View.RANKED
        self._state = replace(self._state, active_view=view)
        self._recompute(reset_page=True)
        return self._step()

    def _on_toggle_case(self, action: Action) -> Step:
        self._state = replace(self._state, query=self._state.query.toggled_case())
        self._recompute(reset_page=True)
        return self._step()

    def _on_toggle_match_mode(self, action: Action) -> Step:
        self._state = replace(self._state, query=self._state.query.toggled_mode())
        self._recompute(reset_page=True)
        return self._step()

    def _on_move_page(self, action: Action) -> Step:
        assert isinstance(action, MovePage)
        last_page = max(self.page_count - 1, 0)
        page = min(max(self._state.page + action.delta, 0), last_page)
        self._state = replace(self._state, page=page)
        self._clamp()
        return self._step()

    def _on_move_cursor(self, action: Action) -> Step:
        assert isinstance(action, MoveCursor)
        self._state = replace(self._state, cursor=self._state.cursor + action.delta)
        self._clamp()
        return self._step()

    def _on_request_delete(self, action: Action) -> Step:
        command = self.selected
        if command is None:
            return self._step()
        self._state = replace(self._state, pending_delete=command)
        return self._step()

    def _on_confirm_delete(self, action: Action) -> Step:
        command = self._state.pending_delete
        assert command is not None
        self._state = replace(self._state, pending_delete=None)
        self._store.delete(command.text)
        if self._favorites.remove(command.text):
            self._save_favorites()
        self._recompute(reset_page=False)
        return self._step()

    def _on_cancel_delete(self, action: Action) -> Step:
        self._state = replace(self._state, pending_delete=None)
        return self._step()

    def _on_toggle_favorite(self, action: Action) -> Step:
        command = self.selected
        if command is None:
            return self._step()
        self._favorites.toggle(command.text)
        self._save_favorites()
        if self._state.active_view is View.FAVORITES:
            self._recompute(reset_page=False)
        return self._step()

    def _on_select(self, action: Action) -> Step:
        command = self.selected
        if command is None:
            return self._step()
        return self._step(outcome=Selected(command))

    def _on_quit(self, action: Action) -> Step:
        return self._step(outcome=Cancelled())

    def _on_resize(self, action: Action) -> Step:
        assert isinstance(action, Resize)
        self._page_size = max(action.page_size, 1)
        self._clamp()
        return self._step()

    # --- Internals ---

    def _step(self, outcome: Outcome | None = None) -> Step:
        return Step(self._state, outcome=outcome, error=self.error)

    def _source(self) -> list[Command]:
        ranked = self._store.ranked()
        if self._state.active_view is View.FAVORITES:
            return [c for c in ranked if c.text in self._favorites]
        return ranked

    def _recompute(self, *, reset_page: bool) -> None:
        """Refilter the active view.

        An invalid pattern keeps the last valid query in effect against
        the current source, so the list never shows deleted or
        out-of-view commands.
        """
        source = self._source()
        query = self._state.query
        previous = self._visible
        try:
            self._visible = self._search.apply(source, query)
            self._last_valid_query = query
            self._pattern_error = None
            changed = True
        except InvalidPatternError as e:
            logger.debug("Keeping previous results: %s", e)
            self._pattern_error = str(e)
            self._visible = self._search.apply(source, self._last_valid_query)
            changed = self._visible != previous
        if reset_page and changed:
            self._state = replace(self._state, page=0, cursor=0)
        self._clamp()

    def _clamp(self) -> None:
        last_page = max(self.page_count - 1, 0)
        page = min(max(self._state.page, 0), last_page)
        start = page * self._page_size
        on_page = len(self._visible[start : start + self._page_size])
        cursor = min(max(self._state.cursor, 0), max(on_page - 1, 0))
        if page != self._state.page or cursor != self._state.cursor:
            self._state = replace(self._state, page=page, cursor=cursor)

    def _save_favorites(self) -> None:
        try:
            self._favorites.persist()
        except PersistenceWriteError as e:
            logger.warning("%s", e)
            self._error = str(e)


def initial_query(text: str = "", *, regex: bool = False, case_sensitive: bool = False) -> Query:
    """Build the starting query from configuration."""
    mode = MatchMode.REGEX if regex else MatchMode.SUBSTRING
    return Query(text=text, mode=mode, case_sensitive=case_sensitive)
