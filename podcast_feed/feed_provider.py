"""Feed build strategies.

Two strategies are supported and selected explicitly through
``FEED_STRATEGY``:

- ``rebuild``: list the directory and render a fresh feed on every request, so
  added or removed files show up without a restart.
- ``startup``: render the feed once while the application starts and serve
  the same immutable document for the lifetime of the process.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional

from podcast_feed.config import STRATEGY_REBUILD, STRATEGY_STARTUP, FeedConfig
from podcast_feed.feed_builder import FeedAssembler
from podcast_feed.lister import list_directory

logger = logging.getLogger(__name__)


class FeedProvider(ABC):
    """Base class for feed providers."""

    strategy: str = ""

    def __init__(self, config: FeedConfig):
        self.config = config
        self.assembler = FeedAssembler(config)

    def prime(self) -> None:
        """Prepare the provider during application startup."""

    @abstractmethod
    def get_feed(self) -> bytes:
        """Return the RSS document to serve."""

    def _render(self) -> bytes:
        entries = list_directory(self.config.files_dir)
        return self.assembler.render(entries)


class RebuildingFeedProvider(FeedProvider):
    """Render the feed from the current directory contents on every call."""

    strategy = STRATEGY_REBUILD

    def get_feed(self) -> bytes:
        return self._render()


class StartupFeedProvider(FeedProvider):
    """Render the feed once and serve the stored document afterwards."""

    strategy = STRATEGY_STARTUP

    def __init__(self, config: FeedConfig):
        super().__init__(config)
        self._feed: Optional[bytes] = None

    def prime(self) -> None:
        """Build the feed. Errors propagate and abort startup."""
        self._feed = self._render()
        logger.info(f"Feed built once at startup ({len(self._feed)} bytes)")

    def get_feed(self) -> bytes:
        if self._feed is None:
            raise RuntimeError("Feed requested before the provider was primed")
        return self._feed


def create_feed_provider(config: FeedConfig) -> FeedProvider:
    """Create the provider matching ``config.strategy``.

    Raises:
        ValueError: If the strategy is unknown.
    """
    if config.strategy == RebuildingFeedProvider.strategy:
        return RebuildingFeedProvider(config)
    if config.strategy == StartupFeedProvider.strategy:
        return StartupFeedProvider(config)
    raise ValueError(f"Unknown feed strategy: {config.strategy}")
