"""Normalization of raw shell history lines into canonical command text."""

import re

ZSH_META = 0x83

# zsh EXTENDED_HISTORY entries look like ": 1330648651:0;sudo reboot"
_ZSH_EXTENDED_RE = re.compile(r"^: ?\d+:\d+;")
# bash writes "#1625000000" before each entry when HISTTIMEFORMAT is set
_BASH_TIMESTAMP_RE = re.compile(r"^#\d+$")
# "history" builtin output: "  123  cmd" or "  123* cmd" for modified entries
_ORDINAL_RE = re.compile(r"^\s*\d+\*?\s+")
# HISTTIMEFORMAT / fc -i style timestamps that may follow the ordinal
_TIMESTAMP_RE = re.compile(r"^\d{4}-\d{2}-\d{2}[ T]\d{2}:\d{2}(:\d{2})?\s+")


def unmetafy(data: bytes) -> bytes:
    """Undo zsh's metafication of a raw history file.

    zsh stores bytes that are special to it as a 0x83 marker followed by
    the original byte XOR 32. The marker is dropped and the next byte
    restored.
    """
    out = bytearray()
    pending_meta = False
    for byte in data:
        if pending_meta:
            out.append(byte ^ 32)
            pending_meta = False
        elif byte == ZSH_META:
            pending_meta = True
        else:
            out.append(byte)
    return bytes(out)


class LineNormalizer:
    """Strips shell-specific decoration from one raw history line.

    Args:
        numbered: Input carries a leading ordinal index (``history``
            builtin output). An optional timestamp token after the index
            is stripped as well.
    """

    def __init__(self, numbered: bool = False) -> None:
        self.numbered = numbered

    def normalize(self, raw: str) -> str | None:
        """Return the canonical command for ``raw``, or None to drop it."""
        line = raw.rstrip("\r\n")
        if _BASH_TIMESTAMP_RE.match(line.strip()):
            return None
        line = _ZSH_EXTENDED_RE.sub("", line, count=1)
        if self.numbered:
            stripped = _ORDINAL_RE.sub("", line, count=1)
            if stripped == line:
                # Numbered output without an index is not a history entry
                return None
            line = _TIMESTAMP_RE.sub("", stripped, count=1)
        line = line.strip()
        return line or None

    __call__ = normalize
