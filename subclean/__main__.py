"""Allow running subclean as ``python -m subclean``."""

import sys

from subclean.cli import main

sys.exit(main())
