"""Configuration management for the podcast feed service.

Loads configuration from environment variables once at startup. The resulting
object is immutable and passed explicitly to every component, so request
handlers never read the environment themselves.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from podcast_feed.exceptions import RootDirectoryMissingError

STRATEGY_REBUILD = "rebuild"
STRATEGY_STARTUP = "startup"
VALID_STRATEGIES = (STRATEGY_REBUILD, STRATEGY_STARTUP)

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class FeedConfig:
    """Configuration for the podcast feed service.

    Attributes:
        item_url: Base URL for item links and enclosure URLs
        feed_title: Channel title
        feed_url: Channel link
        feed_description: Channel description
        feed_author: Channel author name
        http_port: Port the HTTP server listens on
        host: Interface the HTTP server binds to
        files_dir: Directory whose entries become feed items
        strategy: ``rebuild`` to build the feed per request, ``startup`` to
            build it once when the application starts
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_path: Directory for JSON log files, console only when unset
        log_file_max_bytes: Maximum size of a log file before rotation
        log_file_backup_count: Number of rotated log files to keep
        debug: Enable debug mode
    """

    item_url: str = ""
    feed_title: str = ""
    feed_url: str = ""
    feed_description: str = ""
    feed_author: str = ""

    http_port: int = 8080
    host: str = "0.0.0.0"
    files_dir: str = "./files"
    strategy: str = STRATEGY_REBUILD

    log_level: str = "INFO"
    log_path: Optional[str] = None
    log_file_max_bytes: int = 10 * 1024 * 1024  # 10 MB
    log_file_backup_count: int = 5

    debug: bool = False

    @classmethod
    def from_env(cls) -> "FeedConfig":
        """Create configuration from environment variables.

        Environment variables:
            ITEM_URL: Base URL for item links and enclosures
            FEED_TITLE: Channel title (required)
            FEED_URL: Channel link (required)
            FEED_DESC: Channel description (required)
            FEED_AUTHOR: Channel author name
            HTTP_PORT: Listening port (default: 8080)
            HTTP_HOST: Bind address (default: 0.0.0.0)
            FILES_DIR: Files directory (default: ./files)
            FEED_STRATEGY: rebuild or startup (default: rebuild)
            LOG_LEVEL: Logging level (default: INFO)
            LOG_PATH: Log file directory (default: unset, console only)
            LOG_FILE_MAX_BYTES: Max log file size (default: 10MB)
            LOG_FILE_BACKUP_COUNT: Number of backup files (default: 5)
            DEBUG: Debug mode (default: false)

        Returns:
            FeedConfig instance with values from environment

        Raises:
            ValueError: If a numeric variable is not an integer.
        """
        return cls(
            item_url=os.getenv("ITEM_URL", ""),
            feed_title=os.getenv("FEED_TITLE", ""),
            feed_url=os.getenv("FEED_URL", ""),
            feed_description=os.getenv("FEED_DESC", ""),
            feed_author=os.getenv("FEED_AUTHOR", ""),
            http_port=int(os.getenv("HTTP_PORT", "8080")),
            host=os.getenv("HTTP_HOST", "0.0.0.0"),
            files_dir=os.getenv("FILES_DIR", "./files"),
            strategy=os.getenv("FEED_STRATEGY", STRATEGY_REBUILD).lower(),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            log_path=os.getenv("LOG_PATH") or None,
            log_file_max_bytes=int(
                os.getenv("LOG_FILE_MAX_BYTES", str(10 * 1024 * 1024))
            ),
            log_file_backup_count=int(os.getenv("LOG_FILE_BACKUP_COUNT", "5")),
            debug=os.getenv("DEBUG", "false").lower() == "true",
        )

    @property
    def root_path(self) -> Path:
        """Get the files directory as a Path."""
        return Path(self.files_dir)

    def missing_channel_fields(self) -> List[str]:
        """Get the names of required channel variables that are empty.

        feedgen refuses to render RSS without a channel title, link and
        description, so a feed cannot be served until these are set.
        """
        required = {
            "FEED_TITLE": self.feed_title,
            "FEED_URL": self.feed_url,
            "FEED_DESC": self.feed_description,
        }
        return [key for key, value in required.items() if not value]

    @property
    def build_once(self) -> bool:
        """Whether the feed is built a single time at startup."""
        return self.strategy == STRATEGY_STARTUP

    def validate(self) -> None:
        """Validate configuration values.

        Raises:
            ValueError: If configuration is invalid
        """
        missing = self.missing_channel_fields()
        if missing:
            raise ValueError(f"Missing required environment variables: {', '.join(missing)}")

        if not (1 <= self.http_port <= 65535):
            raise ValueError(f"Invalid http_port: {self.http_port}")

        if not self.files_dir:
            raise ValueError("files_dir cannot be empty")

        if self.strategy not in VALID_STRATEGIES:
            raise ValueError(
                f"Invalid strategy '{self.strategy}'. "
                f"Must be one of: {', '.join(VALID_STRATEGIES)}"
            )

        if self.log_level not in VALID_LOG_LEVELS:
            raise ValueError(
                f"Invalid log_level: {self.log_level}. Must be one of {list(VALID_LOG_LEVELS)}"
            )

        if self.log_file_max_bytes < 1024:  # At least 1 KB
            raise ValueError(
                f"log_file_max_bytes must be >= 1024, got {self.log_file_max_bytes}"
            )

        if self.log_file_backup_count < 1:
            raise ValueError(
                f"log_file_backup_count must be >= 1, got {self.log_file_backup_count}"
            )


def ensure_root_directory(config: FeedConfig) -> Path:
    """Check that the files directory exists.

    Args:
        config: Service configuration

    Returns:
        The files directory path.

    Raises:
        RootDirectoryMissingError: If the directory is absent.
    """
    root = config.root_path
    if not root.is_dir():
        raise RootDirectoryMissingError(config.files_dir)
    return root
