"""Translation of terminal key presses into state machine actions."""

from histbox.tui.state import (
    Action,
    Backspace,
    CancelDelete,
    ConfirmDelete,
    InsertChar,
    MoveCursor,
    MovePage,
    Quit,
    RequestDelete,
    Select,
    ToggleCase,
    ToggleFavorite,
    ToggleMatchMode,
    ToggleView,
)

_KEY_ACTIONS: dict[str, Action] = {
    "up": MoveCursor(-1),
    "down": MoveCursor(1),
    "pageup": MovePage(-1),
    "pagedown": MovePage(1),
    "backspace": Backspace(),
    "ctrl+h": Backspace(),
    "delete": RequestDelete(),
    "enter": Select(),
    "escape": Quit(),
    "ctrl+e": ToggleMatchMode(),
    "ctrl+t": ToggleCase(),
    "ctrl+f": ToggleFavorite(),
    # Terminals send Ctrl-/ as 0x1f, which Textual reports as ctrl+underscore
    "ctrl+slash": ToggleView(),
    "ctrl+underscore": ToggleView(),
    "tab": ToggleView(),
}

HELP_LABEL = (
    "Type to filter, UP/DOWN move, PGUP/PGDN page, ENTER select, "
    "DEL remove, ESC quit, C-f add/rm fav"
)


def action_for_key(key: str, character: str | None, *, confirming: bool = False) -> Action | None:
    """Map a key press to an action, or None if the key is unbound.

    While a deletion is pending, ``y`` confirms and any other key cancels.
    """
    if confirming:
        if character in ("y", "Y"):
            return ConfirmDelete()
        return CancelDelete()
    action = _KEY_ACTIONS.get(key)
    if action is not None:
        return action
    if character is not None and len(character) == 1 and character.isprintable():
        return InsertChar(character)
    return None
