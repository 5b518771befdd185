"""Exception types raised by the podcast feed service.

Internal failures (listing, building and serialising the feed) are mapped to
generic 500 responses by :mod:`podcast_feed.error_handler`; client-input
failures carry their own status code and message.
"""

from typing import Optional


class PodcastFeedError(Exception):
    """Base class for all podcast feed errors."""

    status_code: int = 500
    public_message: str = "Internal server error"


class RootDirectoryMissingError(PodcastFeedError):
    """Raised at startup when the configured files directory does not exist."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Files directory '{path}' does not exist")


class DirectoryReadError(PodcastFeedError):
    """Raised when the files directory cannot be listed."""

    def __init__(self, path: str, cause: Optional[OSError] = None):
        self.path = path
        message = f"Error reading files directory '{path}'"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)


class EmptyTitleError(PodcastFeedError):
    """Raised when a directory entry has no name to use as an item title."""

    def __init__(self):
        super().__init__("No item title.")


class FeedBuildError(PodcastFeedError):
    """Raised when any single item fails, so no partial feed is produced."""


class FeedSerializationError(PodcastFeedError):
    """Raised when the feed envelope cannot be rendered as RSS."""


class UnsupportedMediaTypeError(PodcastFeedError):
    """Raised when the media route is asked for a non-MP3 file."""

    status_code = 400
    public_message = "Only MP3 files are supported"

    def __init__(self, filename: str):
        self.filename = filename
        super().__init__(f"Unsupported media type requested: {filename}")


class FileNotFoundInRootError(PodcastFeedError):
    """Raised when a requested file does not exist under the files directory."""

    status_code = 404
    public_message = "404 page not found"

    def __init__(self, relative_path: str, message: Optional[str] = None):
        self.relative_path = relative_path
        super().__init__(message or f"File not found: {relative_path}")


class PathTraversalError(FileNotFoundInRootError):
    """Raised when a requested path resolves outside the files directory.

    Subclasses :class:`FileNotFoundInRootError` so clients see a plain 404 and
    learn nothing about the filesystem layout.
    """

    def __init__(self, relative_path: str):
        super().__init__(
            relative_path, f"Path escapes files directory: {relative_path}"
        )
