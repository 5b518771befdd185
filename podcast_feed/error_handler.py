"""Exception handlers for the podcast feed application."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import PlainTextResponse

from podcast_feed.exceptions import PathTraversalError, PodcastFeedError

logger = logging.getLogger(__name__)


def setup_exception_handlers(app: FastAPI) -> None:
    """Setup exception handlers for the app.

    Client errors keep their specific status and message. Internal errors are
    logged with their detail and answered with a generic 500 body.

    Args:
        app: FastAPI application instance.
    """

    @app.exception_handler(PodcastFeedError)
    async def podcast_feed_exception_handler(request: Request, exc: PodcastFeedError):
        """Handle errors raised by feed and file handlers."""
        if isinstance(exc, PathTraversalError):
            logger.warning(f"Rejected {request.url.path}: {exc}")
        elif exc.status_code >= 500:
            logger.error(f"{exc}", exc_info=exc)
        else:
            logger.info(f"{request.url.path}: {exc}")

        return PlainTextResponse(exc.public_message, status_code=exc.status_code)

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle all other exceptions."""
        logger.error(f"Unhandled exception: {exc}", exc_info=exc)
        return PlainTextResponse(
            str(exc) if app.debug else "Internal server error",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
