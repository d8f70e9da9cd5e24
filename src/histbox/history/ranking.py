"""Frequency/recency scoring and the total order over commands."""

from collections.abc import Iterable
from dataclasses import dataclass

from histbox.history.models import Command


@dataclass(frozen=True)
class RankingWeights:
    """Tunable weights for the rank score.

    The recency penalty is bounded by ``recency_weight``. While
    ``recency_weight <= frequency_weight`` one extra occurrence always
    outweighs any difference in recency; raising ``recency_weight`` above
    that lets a recent command overtake one that was used more often
    long ago.
    """

    frequency_weight: float = 1.0
    recency_weight: float = 1.0

    def __post_init__(self) -> None:
        if self.frequency_weight <= 0:
            raise ValueError("frequency_weight must be positive")
        if self.recency_weight < 0:
            raise ValueError("recency_weight must not be negative")


DEFAULT_WEIGHTS = RankingWeights()


def recency_penalty(last_seen_index: int, weights: RankingWeights = DEFAULT_WEIGHTS) -> float:
    """Penalty for age; 0 for the newest entry, approaching recency_weight."""
    return weights.recency_weight * last_seen_index / (last_seen_index + 1)


def score(command: Command, weights: RankingWeights = DEFAULT_WEIGHTS) -> float:
    """Compute the rank score of a command (higher ranks first)."""
    return command.occurrences * weights.frequency_weight - recency_penalty(
        command.last_seen_index, weights
    )


def rank_key(
    command: Command, weights: RankingWeights = DEFAULT_WEIGHTS
) -> tuple[float, int, int]:
    """Sort key implementing (score desc, last_seen asc, first_seen asc)."""
    return (-score(command, weights), command.last_seen_index, command.first_seen)


def rank(commands: Iterable[Command], weights: RankingWeights = DEFAULT_WEIGHTS) -> list[Command]:
    """Return commands sorted best-first with a deterministic tie-break."""
    return sorted(commands, key=lambda c: rank_key(c, weights))
