"""Pytest configuration and fixtures for podcast_feed tests."""

import logging
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from podcast_feed.app import create_app
from podcast_feed.config import FeedConfig
from podcast_feed.logging_setup import LOGGER_NAME

ITEM_URL = "http://podcast.example.com"


@pytest.fixture
def files_dir(tmp_path: Path) -> Path:
    """Create an empty files directory."""
    root = tmp_path / "files"
    root.mkdir()
    return root


@pytest.fixture
def sample_files(files_dir: Path) -> Path:
    """Populate the files directory with one episode and one text file."""
    (files_dir / "episode1.mp3").write_bytes(b"\x00" * 1000)
    (files_dir / "notes.txt").write_text("show notes")
    return files_dir


@pytest.fixture
def make_config(files_dir: Path):
    """Build a FeedConfig rooted at the temporary files directory."""

    def _make(**overrides) -> FeedConfig:
        values = dict(
            item_url=ITEM_URL,
            feed_title="Test Podcast",
            feed_url="http://podcast.example.com/",
            feed_description="Episodes for testing",
            feed_author="Test Author",
            http_port=8080,
            files_dir=str(files_dir),
            log_level="DEBUG",
        )
        values.update(overrides)
        return FeedConfig(**values)

    return _make


@pytest.fixture
def test_config(make_config) -> FeedConfig:
    """Default test configuration."""
    return make_config()


@pytest.fixture
def client(test_config):
    """Create a test client running the application lifespan."""
    with TestClient(create_app(test_config)) as test_client:
        yield test_client


@pytest.fixture
def reset_package_logger():
    """Restore the package logger after a test configures it."""
    logger = logging.getLogger(LOGGER_NAME)
    saved_handlers = list(logger.handlers)
    saved_level = logger.level
    yield logger
    for handler in list(logger.handlers):
        if handler not in saved_handlers:
            logger.removeHandler(handler)
            handler.close()
    logger.setLevel(saved_level)
