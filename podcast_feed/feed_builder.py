"""Feed item building, assembly and RSS serialisation.

Turns directory entries into feed items and renders the resulting envelope as
an RSS 2.0 document using feedgen.
"""

import logging
import os
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterable, List, Optional

from feedgen.feed import FeedGenerator

from podcast_feed.config import FeedConfig
from podcast_feed.exceptions import (
    EmptyTitleError,
    FeedBuildError,
    FeedSerializationError,
    PodcastFeedError,
)
from podcast_feed.lister import DirectoryEntry

logger = logging.getLogger(__name__)

# Route prefix the media responder is registered under. Enclosure URLs are
# built from the same constant so the two cannot drift apart.
MEDIA_ROUTE_PREFIX = "/files"
AUDIO_EXTENSION = ".mp3"
AUDIO_MIME_TYPE = "audio/mpeg"
RSS_MIME_TYPE = "application/rss+xml"


@dataclass(frozen=True)
class Enclosure:
    """Downloadable media attached to a feed item."""

    url: str
    length: str
    type: str = AUDIO_MIME_TYPE


@dataclass(frozen=True)
class FeedItem:
    """One feed item, derived from one directory entry."""

    title: str
    link: str
    enclosure: Optional[Enclosure] = None


@dataclass
class FeedEnvelope:
    """Channel metadata plus its ordered items."""

    title: str
    link: str
    description: str
    author: str
    created: datetime
    items: List[FeedItem] = field(default_factory=list)

    def add(self, item: FeedItem) -> None:
        self.items.append(item)


def is_audio_file(name: str) -> bool:
    """Check whether a file name carries the recognised audio extension."""
    return name.lower().endswith(AUDIO_EXTENSION)


def enclosure_url(item_url: str, name: str) -> str:
    """Build the URL the media route serves ``name`` from."""
    return f"{item_url.rstrip('/')}{MEDIA_ROUTE_PREFIX}/{name}"


def build_item(entry: DirectoryEntry, config: FeedConfig) -> FeedItem:
    """Build a feed item for a directory entry.

    An MP3 entry gets an enclosure sized from a stat of the file. If the stat
    fails the item is still returned, just without an enclosure.

    Args:
        entry: Directory entry to describe
        config: Service configuration (item base URL and files directory)

    Returns:
        FeedItem for the entry

    Raises:
        EmptyTitleError: If the entry has no name.
    """
    title = entry.name
    if not title:
        raise EmptyTitleError()

    item_url = config.item_url
    enclosure = None

    if is_audio_file(title):
        file_path = os.path.join(config.files_dir, title)
        try:
            size = os.stat(file_path).st_size
        except OSError as e:
            logger.warning(f"Could not get file info for {title}: {e}")
        else:
            enclosure = Enclosure(
                url=enclosure_url(item_url, title),
                length=str(size),
                type=AUDIO_MIME_TYPE,
            )

    return FeedItem(title=title, link=f"{item_url}/{title}", enclosure=enclosure)


class FeedAssembler:
    """Assemble feed envelopes and render them as RSS.

    Example:
        >>> assembler = FeedAssembler(FeedConfig.from_env())
        >>> xml = assembler.render(list_directory("./files"))
    """

    def __init__(self, config: FeedConfig):
        self.config = config

    def build(self, entries: Iterable[DirectoryEntry]) -> FeedEnvelope:
        """Build an envelope holding one item per entry, in order.

        Args:
            entries: Directory entries in listing order

        Returns:
            Populated FeedEnvelope stamped with the current time

        Raises:
            FeedBuildError: If any item cannot be built. No partial feed is
                returned.
        """
        envelope = FeedEnvelope(
            title=self.config.feed_title,
            link=self.config.feed_url,
            description=self.config.feed_description,
            author=self.config.feed_author,
            created=datetime.now(timezone.utc),
        )

        for entry in entries:
            try:
                item = build_item(entry, self.config)
            except PodcastFeedError as e:
                raise FeedBuildError(f"Error generating feed: {e}") from e
            envelope.add(item)

        return envelope

    def to_rss(self, envelope: FeedEnvelope) -> bytes:
        """Serialise an envelope as an RSS 2.0 document.

        Raises:
            FeedSerializationError: If feedgen rejects the envelope, for
                example when a required channel field is empty.
        """
        fg = FeedGenerator()
        fg.load_extension("podcast")

        fg.title(envelope.title)
        fg.link(href=envelope.link)
        fg.description(envelope.description)
        if envelope.author:
            fg.author({"name": envelope.author})
            fg.podcast.itunes_author(envelope.author)
        fg.pubDate(envelope.created)
        fg.lastBuildDate(envelope.created)

        for item in envelope.items:
            fe = fg.add_entry(order="append")
            fe.title(item.title)
            fe.link(href=item.link)
            if item.enclosure is not None:
                fe.enclosure(item.enclosure.url, item.enclosure.length, item.enclosure.type)

        try:
            return fg.rss_str(pretty=True)
        except ValueError as e:
            raise FeedSerializationError(f"Could not serialise feed: {e}") from e

    def render(self, entries: Iterable[DirectoryEntry]) -> bytes:
        """Build and serialise a feed for the given entries."""
        envelope = self.build(entries)
        rss = self.to_rss(envelope)
        logger.debug(f"Rendered feed with {len(envelope.items)} items")
        return rss
