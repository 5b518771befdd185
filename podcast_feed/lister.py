"""Directory listing for feed generation."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Union

from podcast_feed.exceptions import DirectoryReadError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DirectoryEntry:
    """A single direct child of the files directory."""

    name: str
    is_dir: bool = False


def list_directory(root: Union[str, Path]) -> List[DirectoryEntry]:
    """List the direct entries of a directory, sorted by name.

    Subdirectories are included but not descended into.

    Args:
        root: Directory to list

    Returns:
        Entries in name order.

    Raises:
        DirectoryReadError: If the directory is missing or unreadable.
    """
    try:
        with os.scandir(root) as it:
            entries = [
                DirectoryEntry(name=entry.name, is_dir=entry.is_dir()) for entry in it
            ]
    except OSError as e:
        raise DirectoryReadError(str(root), e) from e

    entries.sort(key=lambda entry: entry.name)
    logger.debug(f"Listed {len(entries)} entries in {root}")
    return entries
