from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterator, Union

from buyers_checker.errors import TraversalError

logger = logging.getLogger(__name__)


WalkItem = Union[os.DirEntry, TraversalError]     # an entry, or an inline listing failure


def _list_dir(path: Path) -> list[os.DirEntry]:
    """List one directory, entries sorted by name so reruns visit files in the same order."""
    with os.scandir(path) as it:
        return sorted(it, key=lambda e: e.name)


def walk_files(root: Path | str) -> Iterator[WalkItem]:
    """
    Lazily yield every non-directory entry under `root`.

    The walk keeps an explicit stack of pending directories rather than recursing,
    so depth is bounded by memory and not by the call stack. Each directory's
    children are yielded before the next pending directory is listed.

    A directory that cannot be listed (permissions, removed mid-walk, `root` is not
    a directory) is yielded as a `TraversalError` item and the walk carries on with
    the next pending directory. Nothing is filtered by extension, callers inspect
    `entry.path` for that. Symlinked directories are not followed.
    """
    pending: list[Path] = [Path(root)]

    while pending:
        current = pending.pop()
        logger.debug("listing directory %s", current)
        try:
            entries = _list_dir(current)
        except OSError as e:
            yield TraversalError(current, e)
            continue

        for entry in entries:
            try:
                is_dir = entry.is_dir(follow_symlinks=False)
            except OSError:
                is_dir = False
            if is_dir:
                pending.append(Path(entry.path))
            else:
                yield entry
