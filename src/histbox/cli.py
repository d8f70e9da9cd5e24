"""Command-line entry point for histbox."""

from __future__ import annotations

import argparse
import logging
import os
import sys
import tomllib
from pathlib import Path

from histbox import __version__
from histbox.config import SUPPORTED_SHELLS, HistboxConfig
from histbox.exceptions import (
    InputUnreadableError,
    OutputUnwritableError,
    PersistenceWriteError,
)
from histbox.favorites import FavoritesStore
from histbox.history.ingest import CommandStore
from histbox.history.normalizer import LineNormalizer, unmetafy
from histbox.history.ranking import RankingWeights
from histbox.output import ExitCode, emit
from histbox.tui.app import HistboxApp
from histbox.tui.state import Outcome, ViewStateMachine, initial_query

logger = logging.getLogger(__name__)

STDIN_SOURCE = "-"
# Used until the first resize when page size follows the terminal
DEFAULT_PAGE_SIZE = 20


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments.

    Args:
        argv: Command line arguments. If None, uses sys.argv.

    Returns:
        Parsed arguments namespace. Options left unset are None so that
        config file and environment values apply.
    """
    p = argparse.ArgumentParser(
        prog="histbox",
        description="Interactive suggest box over your shell history",
    )
    p.add_argument("-v", "--version", action="version", version=f"%(prog)s {__version__}")
    p.add_argument("query", nargs="*", help="Initial search query")
    p.add_argument(
        "-f",
        "--history-file",
        default=None,
        help="History file to read, or '-' for stdin (default: piped stdin, $HISTFILE, "
        "or ~/.<shell>_history)",
    )
    p.add_argument("-s", "--shell", choices=SUPPORTED_SHELLS, default=None, help="Shell flavor")
    p.add_argument(
        "--newest-first",
        action="store_true",
        default=None,
        help="Input lists the most recent command first",
    )
    p.add_argument(
        "-n",
        "--numbered",
        action="store_true",
        default=None,
        help="Input is 'history' builtin output with leading indices",
    )
    p.add_argument(
        "-e", "--regex", action="store_true", default=None, help="Start in regex mode"
    )
    p.add_argument(
        "-c",
        "--case-sensitive",
        action="store_true",
        default=None,
        help="Start with case-sensitive matching",
    )
    p.add_argument("--page-size", type=int, default=None, help="Rows per page (default: fit)")
    p.add_argument("--favorites", default=None, help="Favorites file location")
    p.add_argument("--config", default=None, help="TOML config file")
    p.add_argument("--log-file", default=None, help="Write debug log to this file")
    p.add_argument("--log-level", default=None, help="Log level (default: WARNING)")
    return p.parse_args(argv)


def load_config(args: argparse.Namespace) -> HistboxConfig:
    """Build the configuration, letting command-line options win."""
    history_file = args.history_file if args.history_file != STDIN_SOURCE else None
    return HistboxConfig.load(
        config_path=Path(args.config).expanduser() if args.config else None,
        shell=args.shell,
        history_file=history_file,
        newest_first=args.newest_first,
        numbered=args.numbered,
        regex=args.regex,
        case_sensitive=args.case_sensitive,
        page_size=args.page_size,
        favorites_file=args.favorites,
        log_file=args.log_file,
        log_level=args.log_level,
    )


def configure_logging(config: HistboxConfig) -> None:
    """Send log records to the configured file, if any."""
    if config.log_file is None:
        return
    logging.basicConfig(
        filename=config.log_file,
        level=config.log_level,
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    )


def reattach_terminal() -> None:
    """Point stdin at the controlling terminal after consuming piped input.

    Raises:
        InputUnreadableError: If there is no terminal to interact with.
    """
    try:
        fd = os.open("/dev/tty", os.O_RDONLY)
    except OSError as e:
        raise InputUnreadableError(f"No terminal available for interaction: {e}") from e
    try:
        os.dup2(fd, 0)
    finally:
        os.close(fd)


def read_history(args: argparse.Namespace, config: HistboxConfig) -> list[str]:
    """Read raw history lines from stdin or the history file.

    Raises:
        InputUnreadableError: If the source cannot be read.
    """
    use_stdin = args.history_file == STDIN_SOURCE or (
        args.history_file is None and config.history_file is None and not sys.stdin.isatty()
    )
    if use_stdin:
        try:
            data = sys.stdin.buffer.read()
        except OSError as e:
            raise InputUnreadableError(f"Cannot read history from stdin: {e}") from e
        reattach_terminal()
    else:
        path = config.resolved_history_file
        try:
            data = path.read_bytes()
        except OSError as e:
            raise InputUnreadableError(f"Cannot read history file {path}: {e}") from e
    if config.shell == "zsh":
        data = unmetafy(data)
    return data.decode("utf-8", errors="replace").splitlines()


def build_machine(
    lines: list[str], config: HistboxConfig, query_text: str = ""
) -> tuple[ViewStateMachine, FavoritesStore]:
    """Ingest history and set up the state machine."""
    weights = RankingWeights(config.frequency_weight, config.recency_weight)
    store = CommandStore.from_lines(
        lines,
        LineNormalizer(numbered=config.numbered),
        newest_first=config.newest_first,
        weights=weights,
    )
    favorites = FavoritesStore(config.resolved_favorites_file)
    favorites.load()
    logger.debug("Loaded %d commands and %d favorites", len(store), len(favorites))
    machine = ViewStateMachine(
        store,
        favorites,
        page_size=config.page_size or DEFAULT_PAGE_SIZE,
        query=initial_query(
            query_text, regex=config.regex, case_sensitive=config.case_sensitive
        ),
    )
    return machine, favorites


def run_interactive(machine: ViewStateMachine, *, fit_page_size: bool) -> Outcome | None:
    """Run the full-screen UI until the user selects or quits."""
    return HistboxApp(machine, fit_page_size=fit_page_size).run()


def _error(message: str) -> None:
    print(f"histbox: {message}", file=sys.stderr)


def main(argv: list[str] | None = None) -> int:
    """Run histbox and return the process exit code."""
    args = parse_args(argv)

    try:
        config = load_config(args)
        configure_logging(config)
        lines = read_history(args, config)
        machine, favorites = build_machine(lines, config, " ".join(args.query))
    except (OSError, ValueError, tomllib.TOMLDecodeError, InputUnreadableError) as e:
        _error(str(e))
        return ExitCode.STARTUP_FAILURE

    outcome = run_interactive(machine, fit_page_size=config.page_size is None)

    if favorites.dirty:
        try:
            favorites.persist()
        except PersistenceWriteError as e:
            logger.warning("%s", e)
            _error(str(e))

    try:
        return emit(outcome, sys.stdout)
    except OutputUnwritableError as e:
        logger.error("%s", e)
        _error(str(e))
        return ExitCode.OUTPUT_FAILURE
