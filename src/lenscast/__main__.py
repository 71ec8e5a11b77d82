"""Allow running the renderer with ``python -m lenscast``."""

import sys

from lenscast.cli import main

sys.exit(main())
