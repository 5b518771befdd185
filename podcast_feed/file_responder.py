"""File responses for the media route and the static prefix route.

Both routes resolve the requested name against the files directory with
:func:`resolve_within_root`, which refuses anything that ends up outside the
directory after ``..`` segments and symlinks are resolved.
"""

import html
import logging
import mimetypes
import os
import re
from pathlib import Path
from typing import Union
from urllib.parse import quote

from fastapi.responses import FileResponse, HTMLResponse, Response

from podcast_feed.exceptions import (
    FileNotFoundInRootError,
    PathTraversalError,
    UnsupportedMediaTypeError,
)
from podcast_feed.feed_builder import AUDIO_MIME_TYPE, is_audio_file

logger = logging.getLogger(__name__)

STATIC_ROUTE_PREFIX = "/feed"

# The media route pattern is case-sensitive: "track.MP3" passes the
# lower-cased extension check but is not a registered media route.
MEDIA_FILENAME_PATTERN = re.compile(r".+\.mp3")

DEFAULT_CONTENT_TYPE = "application/octet-stream"


def resolve_within_root(root: Union[str, Path], relative: str) -> Path:
    """Resolve a request path against the files directory.

    Args:
        root: Files directory
        relative: Path taken from the request URL

    Returns:
        Absolute, symlink-free path inside ``root``

    Raises:
        PathTraversalError: If the path resolves outside ``root`` or is not a
            valid filesystem path.
    """
    if "\x00" in relative:
        raise PathTraversalError(relative)

    root_real = os.path.realpath(root)
    candidate = os.path.join(root_real, relative.lstrip("/"))

    try:
        resolved = os.path.realpath(candidate)
        common = os.path.commonpath([resolved, root_real])
    except ValueError as e:
        raise PathTraversalError(relative) from e

    if common != root_real:
        raise PathTraversalError(relative)

    return Path(resolved)


def serve_media_file(root: Union[str, Path], filename: str) -> FileResponse:
    """Serve an MP3 from the files directory.

    Args:
        root: Files directory
        filename: File name from the ``/files/{filename}`` route

    Returns:
        FileResponse with ``audio/mpeg`` content type and byte-range support

    Raises:
        UnsupportedMediaTypeError: If the name does not end in ``.mp3``.
        FileNotFoundInRootError: If the name is empty, does not match the
            case-sensitive route pattern or the file does not exist.
        PathTraversalError: If the name escapes the files directory.
    """
    if not filename:
        raise FileNotFoundInRootError(filename)

    if not is_audio_file(filename):
        raise UnsupportedMediaTypeError(filename)

    if not MEDIA_FILENAME_PATTERN.fullmatch(filename):
        raise FileNotFoundInRootError(filename)

    file_path = resolve_within_root(root, filename)
    if not file_path.is_file():
        raise FileNotFoundInRootError(filename)

    return FileResponse(
        file_path,
        media_type=AUDIO_MIME_TYPE,
        headers={"Accept-Ranges": "bytes"},
    )


def serve_static_path(root: Union[str, Path], path: str) -> Response:
    """Serve any file under the files directory, with no type restriction.

    Directories serve their ``index.html`` when present, otherwise a plain
    HTML listing of their entries.

    Raises:
        FileNotFoundInRootError: If nothing exists at the path.
        PathTraversalError: If the path escapes the files directory.
    """
    target = resolve_within_root(root, path)

    if target.is_dir():
        index = target / "index.html"
        if index.is_file():
            return FileResponse(index, media_type="text/html")
        return _directory_listing(target, path)

    if not target.is_file():
        raise FileNotFoundInRootError(path)

    media_type = mimetypes.guess_type(target.name)[0] or DEFAULT_CONTENT_TYPE
    return FileResponse(target, media_type=media_type)


def _directory_listing(directory: Path, path: str) -> HTMLResponse:
    base = f"{STATIC_ROUTE_PREFIX}/{quote(path.strip('/'))}".rstrip("/")
    lines = ["<pre>"]
    for child in sorted(directory.iterdir(), key=lambda p: p.name):
        name = child.name + ("/" if child.is_dir() else "")
        lines.append(f'<a href="{base}/{quote(name)}">{html.escape(name)}</a>')
    lines.append("</pre>")
    return HTMLResponse("\n".join(lines) + "\n")
