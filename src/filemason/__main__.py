"""filemason - package entry point.

This module enables running the project with:

    python -m filemason ...
"""

from __future__ import annotations

import sys

from filemason.cli import main

if __name__ == "__main__":
    sys.exit(main())
