"""History ingestion, normalization and ranking."""

from histbox.history.ingest import CommandStore, ingest
from histbox.history.models import Command
from histbox.history.normalizer import LineNormalizer, unmetafy
from histbox.history.ranking import RankingWeights, rank, score

__all__ = [
    "Command",
    "CommandStore",
    "LineNormalizer",
    "RankingWeights",
    "ingest",
    "rank",
    "score",
    "unmetafy",
]
