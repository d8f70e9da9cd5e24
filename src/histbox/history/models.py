"""Candidate model shared by ingestion, ranking and search."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Command:
    """A distinct, deduplicated command line with usage statistics.

    Attributes:
        text: Normalized command text. Identity key.
        occurrences: Number of raw lines that normalized to ``text``.
        last_seen_index: Distance of the most recent occurrence from the
            newest end of the stream (0 = most recent).
        first_seen: Position at which ``text`` was first encountered
            while reading the stream. Final tie-break for ranking.
    """

    text: str
    occurrences: int
    last_seen_index: int
    first_seen: int
