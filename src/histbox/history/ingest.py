"""History ingestion and the owning store of candidate commands."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

from histbox.history.models import Command
from histbox.history.normalizer import LineNormalizer
from histbox.history.ranking import DEFAULT_WEIGHTS, RankingWeights, rank

logger = logging.getLogger(__name__)


def ingest(
    lines: Iterable[str],
    normalizer: Callable[[str], str | None] | None = None,
    *,
    newest_first: bool = False,
) -> list[Command]:
    """Build the deduplicated candidate set from raw history lines.

    Args:
        lines: Raw lines in stream order.
        normalizer: Maps a raw line to command text or None. Defaults to
            a plain ``LineNormalizer``.
        newest_first: True when the stream starts with the most recent
            entry. History files are oldest-first.

    Returns:
        One Command per distinct normalized text, in first-encounter order.
    """
    normalize = normalizer or LineNormalizer()
    raw_lines = list(lines)
    total = len(raw_lines)
    # text -> [occurrences, last_seen_index, first_seen]
    stats: dict[str, list[int]] = {}
    skipped = 0
    for position, raw in enumerate(raw_lines):
        text = normalize(raw)
        if text is None:
            skipped += 1
            continue
        recency = position if newest_first else total - 1 - position
        entry = stats.get(text)
        if entry is None:
            stats[text] = [1, recency, len(stats)]
        else:
            entry[0] += 1
            entry[1] = min(entry[1], recency)
    if skipped:
        logger.debug("Skipped %d of %d history lines", skipped, total)
    return [
        Command(text=text, occurrences=occ, last_seen_index=last, first_seen=first)
        for text, (occ, last, first) in stats.items()
    ]


class CommandStore:
    """Owns the candidate commands for the lifetime of a session.

    Deletion is the only mutation. Deleted texts stay excluded for the
    rest of the run. The ranked order is computed once and re-used until
    the next deletion.

    Args:
        commands: Commands produced by ``ingest``.
        weights: Ranking weights.
    """

    def __init__(
        self, commands: Iterable[Command], weights: RankingWeights = DEFAULT_WEIGHTS
    ) -> None:
        self._commands: dict[str, Command] = {c.text: c for c in commands}
        self._weights = weights
        self._ranked: list[Command] | None = None

    @classmethod
    def from_lines(
        cls,
        lines: Iterable[str],
        normalizer: Callable[[str], str | None] | None = None,
        *,
        newest_first: bool = False,
        weights: RankingWeights = DEFAULT_WEIGHTS,
    ) -> CommandStore:
        """Ingest raw lines and wrap the result in a store."""
        return cls(ingest(lines, normalizer, newest_first=newest_first), weights)

    def __len__(self) -> int:
        return len(self._commands)

    def ranked(self) -> list[Command]:
        """Return the live commands best-first."""
        if self._ranked is None:
            self._ranked = rank(self._commands.values(), self._weights)
        return list(self._ranked)

    def delete(self, text: str) -> bool:
        """Remove a command. Returns False if it was not present."""
        if self._commands.pop(text, None) is None:
            return False
        self._ranked = None
        return True
