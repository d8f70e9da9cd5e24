"""Delivery of the session outcome to the invoking shell."""

from enum import IntEnum
from typing import TextIO

from histbox.exceptions import OutputUnwritableError
from histbox.tui.state import Outcome, Selected


class ExitCode(IntEnum):
    OK = 0
    CANCELLED = 1
    STARTUP_FAILURE = 2
    OUTPUT_FAILURE = 3


def emit(outcome: Outcome | None, stream: TextIO) -> ExitCode:
    """Write the selected command to ``stream`` and return the exit code.

    The command is written exactly as stored, without a trailing newline,
    so the wrapping shell can put it back on the command line. A
    cancelled (or missing) outcome writes nothing.

    Raises:
        OutputUnwritableError: If the command cannot be written.
    """
    if not isinstance(outcome, Selected):
        return ExitCode.CANCELLED
    try:
        stream.write(outcome.command.text)
        stream.flush()
    except (OSError, ValueError) as e:
        raise OutputUnwritableError(f"Could not write selected command: {e}") from e
    return ExitCode.OK
