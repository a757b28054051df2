"""Allow ``python -m track_analytics``."""

import sys

from track_analytics.adapters.inbound.cli import main

sys.exit(main())
