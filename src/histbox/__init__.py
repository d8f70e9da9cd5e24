"""histbox: an interactive suggest box over shell command history."""

import logging

try:
    from importlib.metadata import version

    __version__ = version("histbox")
except Exception:
    __version__ = "0.0.0.dev"

logging.getLogger(__name__).addHandler(logging.NullHandler())
