"""Read-only source trees that can be materialized onto disk.

A source tree is anything that can list the immediate children of a
root-relative directory path and open a file entry for reading.  Paths
are ``/``-separated and relative to the tree root, which is ``"."``.

Two implementations are provided:

- ``ResourceTree`` wraps an ``importlib.resources`` traversable, i.e. the
  data bundled inside an installed package (or a plain ``Path`` during
  development).
- ``MemoryTree`` holds the whole bundle in a dict of bytes.
"""

from __future__ import annotations

import importlib.resources
import io
import posixpath
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from importlib.resources.abc import Traversable
from pathlib import PurePosixPath
from typing import BinaryIO, Protocol, runtime_checkable

from rebed.errors import SourceReadError

ROOT = "."


@dataclass(frozen=True)
class SourceEntry:
    """One child of a source directory."""

    name: str
    is_dir: bool


@runtime_checkable
class SourceTree(Protocol):
    """Read-only hierarchical source."""

    def list_dir(self, path: str) -> list[SourceEntry]:
        """Return the immediate children of *path*, sorted by name."""
        ...

    def open(self, path: str) -> BinaryIO:
        """Open the file entry at *path* for sequential byte reading."""
        ...


def split_path(path: str) -> tuple[str, ...]:
    """Split a root-relative source path into its components.

    ``"."`` and ``""`` name the root and yield an empty tuple.  Absolute
    paths and ``..`` components are rejected so that no lookup escapes the
    tree.
    """
    pure = PurePosixPath(path)
    if pure.is_absolute() or ".." in pure.parts:
        raise SourceReadError(path, "Source path must stay inside the tree")
    return pure.parts


def join_path(dirpath: str, name: str) -> str:
    """Join a directory path and an entry name, collapsing the root."""
    if dirpath in ("", ROOT):
        return name
    return posixpath.join(dirpath, name)


class ResourceTree:
    """Source tree backed by an ``importlib.resources`` traversable."""

    def __init__(self, root: Traversable):
        self._root = root

    @classmethod
    def from_package(cls, package: str, subdir: str = "") -> "ResourceTree":
        """Build a tree over ``package`` data, optionally below *subdir*.

        Raises:
            SourceReadError: If the package cannot be imported or *subdir*
                is not a directory inside it.
        """
        try:
            root = importlib.resources.files(package)
        except (ModuleNotFoundError, TypeError) as exc:
            raise SourceReadError(package, "Cannot locate package resources") from exc
        for part in split_path(subdir):
            root = root.joinpath(part)
        if not root.is_dir():
            raise SourceReadError(f"{package}:{subdir}", "No such resource directory")
        return cls(root)

    @property
    def root(self) -> Traversable:
        return self._root

    def _resolve(self, path: str) -> Traversable:
        node = self._root
        for part in split_path(path):
            node = node.joinpath(part)
        return node

    def list_dir(self, path: str) -> list[SourceEntry]:
        node = self._resolve(path)
        try:
            if not node.is_dir():
                raise SourceReadError(path, "No such source directory")
            entries = [SourceEntry(child.name, child.is_dir()) for child in node.iterdir()]
        except OSError as exc:
            raise SourceReadError(path, "Cannot list source directory") from exc
        return sorted(entries, key=lambda entry: entry.name)

    def open(self, path: str) -> BinaryIO:
        node = self._resolve(path)
        try:
            if not node.is_file():
                raise SourceReadError(path, "No such source file")
            return node.open("rb")
        except OSError as exc:
            raise SourceReadError(path, "Cannot open source file") from exc

    def __repr__(self) -> str:
        return f"ResourceTree({self._root!r})"


def _entry_parts(path: str) -> tuple[str, ...]:
    try:
        return split_path(path)
    except SourceReadError as exc:
        raise ValueError(f"Invalid entry path {path!r}") from exc


class MemoryTree:
    """Source tree held entirely in memory.

    Built from a mapping of file paths to contents; every ancestor of a
    file is an implied directory.  Empty directories are declared through
    *directories*.
    """

    def __init__(
        self,
        files: Mapping[str, bytes] | None = None,
        directories: Iterable[str] = (),
    ):
        self._files: dict[str, bytes] = {}
        self._children: dict[str, dict[str, bool]] = {"": {}}
        for path in directories:
            self._add(_entry_parts(path), is_file=False)
        for path, content in (files or {}).items():
            parts = _entry_parts(path)
            if not parts:
                raise ValueError("A file entry needs a name")
            self._add(parts, is_file=True)
            self._files["/".join(parts)] = bytes(content)

    def _add(self, parts: tuple[str, ...], is_file: bool) -> None:
        for depth, name in enumerate(parts):
            parent = "/".join(parts[:depth])
            key = "/".join(parts[: depth + 1])
            is_dir = not (is_file and depth == len(parts) - 1)
            known = self._children[parent].get(name)
            if known is not None and known != is_dir:
                raise ValueError(f"Conflicting file and directory entries for {key!r}")
            self._children[parent][name] = is_dir
            if is_dir:
                self._children.setdefault(key, {})

    def list_dir(self, path: str) -> list[SourceEntry]:
        key = "/".join(split_path(path))
        children = self._children.get(key)
        if children is None:
            raise SourceReadError(path, "No such source directory")
        return [SourceEntry(name, is_dir) for name, is_dir in sorted(children.items())]

    def open(self, path: str) -> BinaryIO:
        key = "/".join(split_path(path))
        if key not in self._files:
            raise SourceReadError(path, "No such source file")
        return io.BytesIO(self._files[key])

    def __repr__(self) -> str:
        return f"MemoryTree({len(self._files)} files)"
