"""Exception hierarchy for histbox."""

from pathlib import Path


class HistboxError(Exception):
    """Base exception for histbox errors."""


class InvalidPatternError(HistboxError):
    """Raised when a search pattern is not a valid regular expression."""

    def __init__(self, pattern: str, reason: str) -> None:
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"Invalid pattern {pattern!r}: {reason}")


class PersistenceWriteError(HistboxError):
    """Raised when the favorites file cannot be written."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Could not save favorites to {path}: {reason}")


class InputUnreadableError(HistboxError):
    """Raised when the history source cannot be read at startup."""


class OutputUnwritableError(HistboxError):
    """Raised when the selected command cannot be delivered to the shell."""
