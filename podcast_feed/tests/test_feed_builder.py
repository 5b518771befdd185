"""Unit tests for podcast_feed.feed_builder."""

import logging
from datetime import datetime, timezone

import feedparser
import pytest

from podcast_feed.exceptions import EmptyTitleError, FeedBuildError, FeedSerializationError
from podcast_feed.feed_builder import (
    AUDIO_MIME_TYPE,
    MEDIA_ROUTE_PREFIX,
    Enclosure,
    FeedAssembler,
    FeedItem,
    build_item,
    enclosure_url,
    is_audio_file,
)
from podcast_feed.lister import DirectoryEntry, list_directory

ITEM_URL = "http://podcast.example.com"


class TestIsAudioFile:
    """Tests for the extension check."""

    @pytest.mark.parametrize("name", ["a.mp3", "B.MP3", "c.Mp3", "multi.part.mp3"])
    def test_recognised(self, name):
        assert is_audio_file(name)

    @pytest.mark.parametrize("name", ["notes.txt", "mp3", "track.mp3.bak", "song.ogg"])
    def test_not_recognised(self, name):
        assert not is_audio_file(name)


class TestBuildItem:
    """Tests for build_item."""

    def test_mp3_item_has_enclosure(self, sample_files, test_config):
        """Test the example episode gets a sized enclosure."""
        item = build_item(DirectoryEntry(name="episode1.mp3"), test_config)

        assert item.title == "episode1.mp3"
        assert item.link == f"{ITEM_URL}/episode1.mp3"
        assert item.enclosure == Enclosure(
            url=f"{ITEM_URL}/files/episode1.mp3",
            length="1000",
            type="audio/mpeg",
        )

    def test_non_audio_item_has_no_enclosure(self, sample_files, test_config):
        """Test a text file is listed without an enclosure."""
        item = build_item(DirectoryEntry(name="notes.txt"), test_config)

        assert item == FeedItem(title="notes.txt", link=f"{ITEM_URL}/notes.txt")

    def test_uppercase_extension_gets_enclosure(self, files_dir, test_config):
        """Test the extension check ignores case."""
        (files_dir / "LOUD.MP3").write_bytes(b"x" * 42)

        item = build_item(DirectoryEntry(name="LOUD.MP3"), test_config)

        assert item.enclosure is not None
        assert item.enclosure.length == "42"
        assert item.enclosure.url == f"{ITEM_URL}/files/LOUD.MP3"

    def test_directory_entry_has_no_enclosure(self, files_dir, test_config):
        """Test subdirectories become plain items."""
        (files_dir / "season1").mkdir()

        item = build_item(DirectoryEntry(name="season1", is_dir=True), test_config)

        assert item.enclosure is None
        assert item.link == f"{ITEM_URL}/season1"

    def test_stat_failure_omits_enclosure(self, files_dir, test_config, caplog):
        """Test a failed stat logs a warning and still returns the item."""
        with caplog.at_level(logging.WARNING, logger="podcast_feed.feed_builder"):
            item = build_item(DirectoryEntry(name="ghost.mp3"), test_config)

        assert item.title == "ghost.mp3"
        assert item.enclosure is None
        assert "Could not get file info for ghost.mp3" in caplog.text

    def test_empty_name_raises(self, test_config):
        """Test an empty entry name is rejected."""
        with pytest.raises(EmptyTitleError):
            build_item(DirectoryEntry(name=""), test_config)

    def test_trailing_slash_in_item_url(self, sample_files, make_config):
        """Test only the enclosure URL trims the trailing slash."""
        config = make_config(item_url="http://cdn.example.com/")

        item = build_item(DirectoryEntry(name="episode1.mp3"), config)

        assert item.link == "http://cdn.example.com//episode1.mp3"
        assert item.enclosure.url == "http://cdn.example.com/files/episode1.mp3"


class TestEnclosureUrl:
    """Tests for enclosure_url."""

    def test_uses_media_route_prefix(self):
        """Test the URL follows the media route constant."""
        assert enclosure_url("http://x", "a.mp3") == f"http://x{MEDIA_ROUTE_PREFIX}/a.mp3"

    def test_names_are_not_escaped(self):
        """Test file names are appended verbatim."""
        assert enclosure_url("http://x", "my show.mp3") == "http://x/files/my show.mp3"


class TestFeedAssembler:
    """Tests for FeedAssembler."""

    def test_build_envelope_metadata(self, sample_files, test_config):
        """Test channel metadata comes from configuration."""
        before = datetime.now(timezone.utc)
        envelope = FeedAssembler(test_config).build(list_directory(sample_files))
        after = datetime.now(timezone.utc)

        assert envelope.title == "Test Podcast"
        assert envelope.link == "http://podcast.example.com/"
        assert envelope.description == "Episodes for testing"
        assert envelope.author == "Test Author"
        assert before <= envelope.created <= after

    def test_build_one_item_per_entry_in_order(self, files_dir, test_config):
        """Test N entries give N items with matching titles and order."""
        names = ["a.mp3", "b.txt", "c.mp3", "d"]
        for name in names:
            (files_dir / name).write_text("data")

        envelope = FeedAssembler(test_config).build(list_directory(files_dir))

        assert [item.title for item in envelope.items] == names

    def test_build_example_directory(self, sample_files, test_config):
        """Test the episode-plus-notes example."""
        envelope = FeedAssembler(test_config).build(list_directory(sample_files))

        assert len(envelope.items) == 2
        episode, notes = envelope.items
        assert episode.enclosure == Enclosure(
            url=f"{ITEM_URL}/files/episode1.mp3", length="1000", type=AUDIO_MIME_TYPE
        )
        assert notes.enclosure is None

    def test_build_fails_on_any_bad_item(self, test_config):
        """Test one failing item aborts the whole build."""
        entries = [DirectoryEntry(name="fine.txt"), DirectoryEntry(name="")]

        with pytest.raises(FeedBuildError) as exc_info:
            FeedAssembler(test_config).build(entries)

        assert isinstance(exc_info.value.__cause__, EmptyTitleError)

    def test_created_is_non_decreasing(self, test_config):
        """Test later builds never carry an earlier timestamp."""
        assembler = FeedAssembler(test_config)

        first = assembler.build([])
        second = assembler.build([])

        assert second.created >= first.created

    def test_rss_round_trip(self, files_dir, test_config):
        """Test parsing the document gives back titles, links and enclosures."""
        (files_dir / "episode1.mp3").write_bytes(b"\x00" * 1000)
        (files_dir / "episode2.MP3").write_bytes(b"\x00" * 2048)
        (files_dir / "notes.txt").write_text("notes")

        assembler = FeedAssembler(test_config)
        envelope = assembler.build(list_directory(files_dir))
        parsed = feedparser.parse(assembler.to_rss(envelope))

        assert parsed.feed.title == "Test Podcast"
        assert len(parsed.entries) == len(envelope.items)
        for entry, item in zip(parsed.entries, envelope.items):
            assert entry.title == item.title
            assert entry.link == item.link
            if item.enclosure is None:
                assert entry.get("enclosures", []) == []
            else:
                (enclosure,) = entry.enclosures
                assert enclosure["href"] == item.enclosure.url
                assert enclosure["length"] == item.enclosure.length
                assert enclosure["type"] == item.enclosure.type

    def test_rss_contains_channel_fields(self, sample_files, test_config):
        """Test RSS output carries the channel metadata and author."""
        rss = FeedAssembler(test_config).render(list_directory(sample_files)).decode()

        assert rss.startswith("<?xml")
        assert "<rss " in rss and 'version="2.0"' in rss
        assert "<title>Test Podcast</title>" in rss
        assert "<description>Episodes for testing</description>" in rss
        assert "<itunes:author>Test Author</itunes:author>" in rss
        assert "<pubDate>" in rss
        assert rss.count("<item>") == 2
        assert rss.count("<enclosure ") == 1

    def test_empty_directory_renders_empty_channel(self, test_config):
        """Test a feed with no entries is still valid RSS."""
        parsed = feedparser.parse(FeedAssembler(test_config).render([]))

        assert parsed.feed.title == "Test Podcast"
        assert parsed.entries == []

    def test_serialization_failure(self, make_config):
        """Test an empty required channel field raises FeedSerializationError."""
        assembler = FeedAssembler(make_config(feed_description=""))

        with pytest.raises(FeedSerializationError) as exc_info:
            assembler.render([])

        assert isinstance(exc_info.value.__cause__, ValueError)
