"""Interactive terminal UI for histbox."""

from histbox.tui.app import HistboxApp

__all__ = ["HistboxApp"]
