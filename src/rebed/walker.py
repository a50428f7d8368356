"""Breadth-first traversal of a read-only source tree.

The walker owns no policy: it lists directories and hands every entry to
a visitor together with the path of the directory that contains it.
Building the entry's own path is left to the visitor (see
``rebed.source.join_path``).
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Callable

from rebed.source import ROOT, SourceEntry, SourceTree, join_path

logger = logging.getLogger(__name__)

Visitor = Callable[[str, SourceEntry], None]


def _ignore(dirpath: str, entry: SourceEntry) -> None:
    pass


def walk_dir(source: SourceTree, path: str, visit: Visitor) -> list[SourceEntry]:
    """Apply *visit* to every immediate child of *path*.

    Children are visited in listing order.  An exception raised by the
    listing or by *visit* stops the loop and propagates.

    Returns:
        The entries that were listed.
    """
    entries = source.list_dir(path)
    for entry in entries:
        visit(path, entry)
    return entries


def walk(source: SourceTree, start: str = ROOT, visit: Visitor | None = None) -> int:
    """Visit every entry below *start* in breadth-first order.

    Directories are expanded from a FIFO queue.  A directory is queued
    exactly once, when it is first seen as an entry, so every directory is
    listed once and every entry is visited once.  All entries at depth *d*
    are visited before any directory at depth *d + 1* is listed.

    The walk is fail-fast: the first exception raised while listing any
    directory, or by *visit* for any entry, aborts the traversal and
    propagates to the caller.

    Args:
        source: Tree to traverse.
        start: Root-relative directory to start from.
        visit: Called as ``visit(dirpath, entry)``; may be omitted to only
            count entries.

    Returns:
        Number of entries visited.
    """
    pending: deque[str] = deque([start])
    visited = 0
    while pending:
        dirpath = pending.popleft()
        logger.debug("Listing %s", dirpath)
        entries = walk_dir(source, dirpath, visit or _ignore)
        pending.extend(join_path(dirpath, e.name) for e in entries if e.is_dir)
        visited += len(entries)
    return visited
