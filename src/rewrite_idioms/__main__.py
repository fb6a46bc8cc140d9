"""
Entry point for module execution (``python -m rewrite_idioms``).

This module delegates execution to the CLI handler in ``rewrite_idioms.cli.__main__``.
"""

import sys
from rewrite_idioms.cli.__main__ import main

if __name__ == "__main__":
  sys.exit(main())
