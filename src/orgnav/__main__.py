"""Allow running as ``python -m orgnav``."""

import sys

from orgnav.cli import main

sys.exit(main())
