"""Live search over ranked candidates."""

from __future__ import annotations

import functools
import re
from collections.abc import Sequence
from dataclasses import dataclass, replace
from enum import Enum

from histbox.exceptions import InvalidPatternError
from histbox.history.models import Command


class MatchMode(Enum):
    SUBSTRING = "substring"
    REGEX = "regex"


@dataclass(frozen=True)
class Query:
    """Search text plus the matching mode."""

    text: str = ""
    mode: MatchMode = MatchMode.SUBSTRING
    case_sensitive: bool = False

    def with_text(self, text: str) -> Query:
        return replace(self, text=text)

    def toggled_mode(self) -> Query:
        """Switch between substring and regex matching."""
        mode = MatchMode.SUBSTRING if self.mode is MatchMode.REGEX else MatchMode.REGEX
        return replace(self, mode=mode)

    def toggled_case(self) -> Query:
        return replace(self, case_sensitive=not self.case_sensitive)


@functools.lru_cache(maxsize=128)
def compile_pattern(pattern: str, case_sensitive: bool) -> re.Pattern[str]:
    """Compile a user pattern, caching by (pattern, case sensitivity).

    Raises:
        InvalidPatternError: If the pattern does not compile.
    """
    flags = 0 if case_sensitive else re.IGNORECASE
    try:
        return re.compile(pattern, flags)
    except re.error as e:
        raise InvalidPatternError(pattern, str(e)) from e


class SearchFilter:
    """Narrows a ranked candidate list to the commands matching a query.

    Filtering only removes non-matches; survivors keep their ranked order.
    """

    def apply(self, ranked: Sequence[Command], query: Query) -> list[Command]:
        """Return the commands of ``ranked`` that match ``query``.

        Raises:
            InvalidPatternError: In regex mode, if the pattern does not compile.
        """
        if not query.text:
            return list(ranked)
        if query.mode is MatchMode.REGEX:
            pattern = compile_pattern(query.text, query.case_sensitive)
            return [c for c in ranked if pattern.search(c.text)]
        if query.case_sensitive:
            return [c for c in ranked if query.text in c.text]
        needle = query.text.casefold()
        return [c for c in ranked if needle in c.text.casefold()]

    __call__ = apply


def match_spans(text: str, query: Query) -> list[tuple[int, int]]:
    """Return (start, end) spans of ``text`` matched by ``query``.

    Used for highlighting. Empty matches and invalid patterns yield no spans.
    """
    if not query.text:
        return []
    source = query.text if query.mode is MatchMode.REGEX else re.escape(query.text)
    try:
        pattern = compile_pattern(source, query.case_sensitive)
    except InvalidPatternError:
        return []
    return [m.span() for m in pattern.finditer(text) if m.end() > m.start()]
