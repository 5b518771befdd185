"""Podcast Feed - RSS feed and file server for a directory of audio files.

This module exposes a directory of MP3 files as a podcast RSS feed and serves
the files themselves over HTTP.

Main Components:
    - FeedConfig: Configuration loaded from the environment
    - FeedAssembler: Builds feed envelopes and renders them as RSS
    - create_feed_provider: Selects the rebuild or build-once strategy
    - create_app: FastAPI application factory

Example:
    >>> from podcast_feed import FeedConfig, create_app
    >>> config = FeedConfig.from_env()
    >>> config.validate()
    >>> app = create_app(config)
"""

from podcast_feed.app import create_app
from podcast_feed.config import FeedConfig
from podcast_feed.feed_builder import FeedAssembler, FeedEnvelope, FeedItem, build_item
from podcast_feed.feed_provider import create_feed_provider
from podcast_feed.lister import DirectoryEntry, list_directory

__version__ = "1.0.0"
__all__ = [
    "FeedConfig",
    "FeedAssembler",
    "FeedEnvelope",
    "FeedItem",
    "DirectoryEntry",
    "build_item",
    "list_directory",
    "create_feed_provider",
    "create_app",
]
