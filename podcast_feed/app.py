"""FastAPI application for the podcast feed service.

Serves the RSS feed at ``/``, MP3 files at ``/files/{filename}`` and any file
under the files directory at ``/feed/{path}``.
"""

import logging
import sys
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import List

from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import Response
from pydantic import BaseModel

from podcast_feed.config import FeedConfig, ensure_root_directory
from podcast_feed.error_handler import setup_exception_handlers
from podcast_feed.exceptions import RootDirectoryMissingError
from podcast_feed.feed_builder import MEDIA_ROUTE_PREFIX, RSS_MIME_TYPE
from podcast_feed.feed_provider import FeedProvider, create_feed_provider
from podcast_feed.file_responder import (
    STATIC_ROUTE_PREFIX,
    serve_media_file,
    serve_static_path,
)
from podcast_feed.logging_setup import configure_logging

SERVICE_NAME = "podcast-feed"

logger = logging.getLogger(__name__)

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    service: str
    timestamp: str
    root_exists: bool
    missing_fields: List[str]
    strategy: str


def _config(request: Request) -> FeedConfig:
    return request.app.state.config


def _feed_provider(request: Request) -> FeedProvider:
    return request.app.state.feed_provider


@router.api_route(MEDIA_ROUTE_PREFIX + "/{filename:path}", methods=["GET", "HEAD"])
def media_file(filename: str, request: Request):
    """Stream an MP3 with byte-range support."""
    return serve_media_file(_config(request).files_dir, filename)


@router.api_route(STATIC_ROUTE_PREFIX + "/{path:path}", methods=["GET", "HEAD"])
def static_file(path: str, request: Request):
    """Serve any file under the files directory."""
    return serve_static_path(_config(request).files_dir, path)


@router.get("/health", response_model=HealthResponse)
def health_check(request: Request):
    """Health check endpoint."""
    config = _config(request)
    root_exists = config.root_path.is_dir()
    missing_fields = config.missing_channel_fields()
    return HealthResponse(
        status="healthy" if root_exists and not missing_fields else "degraded",
        service=SERVICE_NAME,
        timestamp=datetime.now(timezone.utc).isoformat(),
        root_exists=root_exists,
        missing_fields=missing_fields,
        strategy=config.strategy,
    )


@router.api_route("/", methods=["GET", "HEAD"])
def feed(request: Request):
    """Return the RSS feed for the files directory."""
    return Response(content=_feed_provider(request).get_feed(), media_type=RSS_MIME_TYPE)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup/shutdown.

    Startup fails if the files directory is missing or, with the build-once
    strategy, if the feed cannot be built.
    """
    config: FeedConfig = app.state.config
    provider: FeedProvider = app.state.feed_provider

    logger.info("Starting podcast feed service...")
    ensure_root_directory(config)
    provider.prime()
    logger.info(
        f"Serving {config.files_dir} with feed strategy '{provider.strategy}' "
        f"on port {config.http_port}"
    )

    yield

    logger.info("Shutting down podcast feed service...")


def create_app(config: FeedConfig) -> FastAPI:
    """Create the FastAPI application.

    Args:
        config: Validated service configuration

    Returns:
        Configured FastAPI instance
    """
    app = FastAPI(
        title="Podcast Feed",
        description="RSS podcast feed and file server for a directory of audio files",
        version="1.0.0",
        debug=config.debug,
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.feed_provider = create_feed_provider(config)

    setup_exception_handlers(app)
    app.include_router(router)

    return app


def main() -> int:
    """Load configuration, check the files directory and run the server.

    Returns:
        Process exit code (non-zero if startup preconditions fail)
    """
    try:
        config = FeedConfig.from_env()
        config.validate()
    except ValueError as e:
        configure_logging(FeedConfig())
        logger.critical(f"Invalid configuration: {e}")
        return 1

    configure_logging(config)

    try:
        ensure_root_directory(config)
    except RootDirectoryMissingError as e:
        logger.critical(str(e))
        return 1

    import uvicorn

    logger.info(f"HTTP server running on port: {config.http_port}")
    uvicorn.run(
        create_app(config),
        host=config.host,
        port=config.http_port,
        log_level=config.log_level.lower(),
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
