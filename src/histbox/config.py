"""Configuration for histbox.

Values are resolved from, in increasing precedence: built-in defaults, a
TOML config file, ``HISTBOX_*`` environment variables, and explicit
overrides (normally command-line options).
"""

from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

SUPPORTED_SHELLS = ("bash", "zsh")
ENV_PREFIX = "HISTBOX_"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def config_home() -> Path:
    """Return the histbox directory under $XDG_CONFIG_HOME (or ~/.config)."""
    base = os.environ.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return Path(base) / "histbox"


def detect_shell() -> str:
    """Guess the invoking shell from $SHELL, defaulting to bash."""
    name = Path(os.environ.get("SHELL", "")).name
    return name if name in SUPPORTED_SHELLS else "bash"


def _parse_bool(name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ValueError(f"{name}: expected a boolean, got {value!r}")


def _parse_page_size(value: Any) -> int | None:
    if value is None or (isinstance(value, str) and value.strip().lower() in ("", "auto")):
        return None
    try:
        size = int(value)
    except (TypeError, ValueError):
        raise ValueError(f"page_size: expected an integer, got {value!r}") from None
    if size < 1:
        raise ValueError(f"page_size: must be at least 1, got {size}")
    return size


def _parse_float(name: str, value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValueError(f"{name}: expected a number, got {value!r}") from None


def _parse_path(value: Any) -> Path | None:
    if value is None or value == "":
        return None
    return Path(str(value)).expanduser()


_PARSERS: dict[str, Any] = {
    "newest_first": lambda v: _parse_bool("newest_first", v),
    "numbered": lambda v: _parse_bool("numbered", v),
    "regex": lambda v: _parse_bool("regex", v),
    "case_sensitive": lambda v: _parse_bool("case_sensitive", v),
    "page_size": _parse_page_size,
    "history_file": _parse_path,
    "favorites_file": _parse_path,
    "log_file": _parse_path,
    "frequency_weight": lambda v: _parse_float("frequency_weight", v),
    "recency_weight": lambda v: _parse_float("recency_weight", v),
}


@dataclass
class HistboxConfig:
    """Settings read once at startup."""

    shell: str = field(default_factory=detect_shell)
    history_file: Path | None = None
    newest_first: bool = False
    numbered: bool = False
    regex: bool = False
    case_sensitive: bool = False
    page_size: int | None = None
    favorites_file: Path | None = None
    frequency_weight: float = 1.0
    recency_weight: float = 1.0
    log_file: Path | None = None
    log_level: str = "WARNING"

    def __post_init__(self) -> None:
        if not isinstance(self.shell, str) or self.shell not in SUPPORTED_SHELLS:
            raise ValueError(
                f"shell: expected one of {', '.join(SUPPORTED_SHELLS)}, got {self.shell!r}"
            )
        if not isinstance(self.log_level, str):
            raise ValueError(f"log_level: expected a string, got {self.log_level!r}")
        self.log_level = self.log_level.upper()
        if self.log_level not in logging.getLevelNamesMapping():
            raise ValueError(f"log_level: unknown level {self.log_level!r}")

    @property
    def resolved_history_file(self) -> Path:
        """History file to read when no stream is piped in."""
        if self.history_file is not None:
            return self.history_file
        histfile = os.environ.get("HISTFILE")
        if histfile:
            return Path(histfile).expanduser()
        return Path.home() / f".{self.shell}_history"

    @property
    def resolved_favorites_file(self) -> Path:
        """Per-shell favorites file."""
        if self.favorites_file is not None:
            return self.favorites_file
        return config_home() / f"{self.shell}_favorites"

    @classmethod
    def from_file(cls, path: Path) -> dict[str, Any]:
        """Read raw settings from a TOML file."""
        with path.open("rb") as fh:
            data = tomllib.load(fh)
        table = data.get("histbox", data)
        if not isinstance(table, dict):
            raise ValueError(f"{path}: [histbox] must be a table")
        return dict(table)

    @classmethod
    def from_env(cls) -> dict[str, Any]:
        """Read raw settings from HISTBOX_* environment variables."""
        values: dict[str, Any] = {}
        for f in fields(cls):
            raw = os.environ.get(ENV_PREFIX + f.name.upper())
            if raw is not None:
                values[f.name] = raw
        return values

    @classmethod
    def load(cls, config_path: Path | None = None, **overrides: Any) -> HistboxConfig:
        """Load configuration with defaults, file, environment and overrides.

        Args:
            config_path: Explicit TOML file. Must exist. When omitted, the
                default file under the config home is used if present.
            **overrides: Explicit values; None means "not given".

        Raises:
            FileNotFoundError: If ``config_path`` does not exist.
            ValueError: If a value is invalid.
        """
        values: dict[str, Any] = {}
        if config_path is not None:
            if not config_path.exists():
                raise FileNotFoundError(f"Config file not found: {config_path}")
            values.update(cls.from_file(config_path))
        else:
            default_path = config_home() / "config.toml"
            if default_path.exists():
                values.update(cls.from_file(default_path))
        values.update(cls.from_env())
        values.update({k: v for k, v in overrides.items() if v is not None})

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(values) - known)
        if unknown:
            raise ValueError(f"Unknown option(s): {', '.join(unknown)}")
        parsed = {
            name: _PARSERS[name](value) if name in _PARSERS else value
            for name, value in values.items()
        }
        return cls(**parsed)
