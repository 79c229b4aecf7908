"""Entry point for `python -m cronops`."""

import sys

from cronops.cli import main

sys.exit(main())
