"""Run the podcast feed service with ``python -m podcast_feed``."""

import sys

from podcast_feed.app import main

sys.exit(main())
