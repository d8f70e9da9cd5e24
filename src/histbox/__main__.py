"""Entry point for ``python -m histbox``."""

import sys

from histbox.cli import main

if __name__ == "__main__":
    sys.exit(main())
