"""Materialize a source tree under a destination root.

Four reconciliation policies share one breadth-first walk and differ only
in what the per-entry visitor does with a file:

- ``tree``:   directories only, files are ignored
- ``touch``:  missing files are created empty, existing files untouched
- ``create``: every file is written with the source bytes (overwrite)
- ``patch``:  missing files are written with the source bytes, existing
  files untouched

Directories are always created with all missing ancestors and succeed
silently when already present.  Existence is checked with ``os.stat``;
only "not found" counts as missing, any other stat failure raises
``AmbiguousExistenceError``.  Nothing is rolled back on failure: files
written before the error stay on disk.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from rebed.config import get_destination_root
from rebed.errors import AmbiguousExistenceError, DestinationWriteError, SourceReadError
from rebed.source import SourceEntry, SourceTree, join_path, split_path
from rebed.walker import Visitor, walk

logger = logging.getLogger(__name__)

# rwxr-xr-x
FOLDER_MODE = 0o755

COPY_CHUNK_SIZE = 64 * 1024


class ReconcileMode(Enum):
    """Write policy applied to the destination."""

    TREE = "tree"  # Directories only
    TOUCH = "touch"  # Create missing files empty
    CREATE = "create"  # Create or overwrite with source bytes
    PATCH = "patch"  # Create missing files, keep existing ones


@dataclass
class ReconcileReport:
    """Actions taken by one reconciliation run."""

    mode: ReconcileMode
    root: Path
    directories: list[Path] = field(default_factory=list)
    created: list[Path] = field(default_factory=list)
    overwritten: list[Path] = field(default_factory=list)
    skipped: list[Path] = field(default_factory=list)

    def summary(self) -> dict[str, int]:
        return {
            "directories": len(self.directories),
            "created": len(self.created),
            "overwritten": len(self.overwritten),
            "skipped": len(self.skipped),
        }


def make_dirs(path: Path) -> None:
    """Create *path* and any missing ancestors; no-op when present."""
    try:
        path.mkdir(mode=FOLDER_MODE, parents=True, exist_ok=True)
    except OSError as exc:
        raise DestinationWriteError(path, "Cannot create directory") from exc


def path_exists(path: Path) -> bool:
    """Return whether *path* exists.

    Raises:
        AmbiguousExistenceError: If the stat call fails for any reason other
            than the path not existing (e.g. permission denied).
    """
    try:
        os.stat(path)
    except FileNotFoundError:
        return False
    except OSError as exc:
        raise AmbiguousExistenceError(path, exc.strerror) from exc
    return True


def create_empty(path: Path) -> None:
    """Create a new zero-length file at *path*."""
    try:
        with open(path, "xb"):
            pass
    except OSError as exc:
        raise DestinationWriteError(path, "Cannot create file") from exc


def copy_to_file(source: SourceTree, entry_path: str, target: Path) -> bool:
    """Stream the source file at *entry_path* into *target*.

    *target* is created, or truncated when it already exists.

    Returns:
        True if an existing file was overwritten.
    """
    with source.open(entry_path) as reader:
        try:
            try:
                writer = open(target, "xb")
                existed = False
            except FileExistsError:
                writer = open(target, "wb")
                existed = True
        except OSError as exc:
            raise DestinationWriteError(target, "Cannot create file") from exc
        with writer:
            while True:
                try:
                    chunk = reader.read(COPY_CHUNK_SIZE)
                except OSError as exc:
                    raise SourceReadError(entry_path, "Cannot read source file") from exc
                if not chunk:
                    break
                try:
                    writer.write(chunk)
                except OSError as exc:
                    raise DestinationWriteError(target, "Cannot write file") from exc
    return existed


def _target(root: Path, entry_path: str) -> Path:
    return root.joinpath(*split_path(entry_path))


def _ensure_dir(report: ReconcileReport, target: Path) -> None:
    make_dirs(target)
    report.directories.append(target)
    logger.debug("Directory %s", target)


def _run(source: SourceTree, visit: Visitor, report: ReconcileReport) -> ReconcileReport:
    make_dirs(report.root)
    walk(source, visit=visit)
    logger.info(
        "%s %s -> %s: %s",
        report.mode.value,
        source,
        report.root,
        ", ".join(f"{count} {name}" for name, count in report.summary().items()),
    )
    return report


def tree(source: SourceTree, dest: Path | str | None = None) -> ReconcileReport:
    """Replicate the directory structure of *source*, without files."""
    report = ReconcileReport(ReconcileMode.TREE, get_destination_root(dest))

    def visit(dirpath: str, entry: SourceEntry) -> None:
        if entry.is_dir:
            _ensure_dir(report, _target(report.root, join_path(dirpath, entry.name)))

    return _run(source, visit, report)


def touch(source: SourceTree, dest: Path | str | None = None) -> ReconcileReport:
    """Replicate *source* with empty files; existing files are untouched."""
    report = ReconcileReport(ReconcileMode.TOUCH, get_destination_root(dest))

    def visit(dirpath: str, entry: SourceEntry) -> None:
        target = _target(report.root, join_path(dirpath, entry.name))
        if entry.is_dir:
            _ensure_dir(report, target)
        elif path_exists(target):
            report.skipped.append(target)
            logger.debug("Kept %s", target)
        else:
            create_empty(target)
            report.created.append(target)
            logger.debug("Touched %s", target)

    return _run(source, visit, report)


def create(source: SourceTree, dest: Path | str | None = None) -> ReconcileReport:
    """Write every file of *source*, overwriting files of the same path."""
    report = ReconcileReport(ReconcileMode.CREATE, get_destination_root(dest))

    def visit(dirpath: str, entry: SourceEntry) -> None:
        entry_path = join_path(dirpath, entry.name)
        target = _target(report.root, entry_path)
        if entry.is_dir:
            _ensure_dir(report, target)
        elif copy_to_file(source, entry_path, target):
            report.overwritten.append(target)
            logger.debug("Overwrote %s", target)
        else:
            report.created.append(target)
            logger.debug("Wrote %s", target)

    return _run(source, visit, report)


def patch(
    source: SourceTree,
    dest: Path | str | None = None,
    *,
    fill_content: bool = True,
) -> ReconcileReport:
    """Create the files of *source* that are missing; existing files are untouched.

    Missing files receive the source bytes.  With ``fill_content=False``
    they are created empty instead, which reproduces the historical
    behaviour of this operation (identical to ``touch``).
    """
    report = ReconcileReport(ReconcileMode.PATCH, get_destination_root(dest))

    def visit(dirpath: str, entry: SourceEntry) -> None:
        entry_path = join_path(dirpath, entry.name)
        target = _target(report.root, entry_path)
        if entry.is_dir:
            _ensure_dir(report, target)
            return
        if path_exists(target):
            report.skipped.append(target)
            logger.debug("Kept %s", target)
            return
        if fill_content:
            copy_to_file(source, entry_path, target)
        else:
            create_empty(target)
        report.created.append(target)
        logger.debug("Patched %s", target)

    return _run(source, visit, report)


def materialize(
    source: SourceTree,
    mode: ReconcileMode,
    dest: Path | str | None = None,
    *,
    fill_content: bool = True,
) -> ReconcileReport:
    """Run the operation selected by *mode*.

    *fill_content* only applies to ``ReconcileMode.PATCH``.
    """
    if mode is ReconcileMode.TREE:
        return tree(source, dest)
    if mode is ReconcileMode.TOUCH:
        return touch(source, dest)
    if mode is ReconcileMode.CREATE:
        return create(source, dest)
    return patch(source, dest, fill_content=fill_content)
