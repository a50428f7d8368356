"""Destination root and source resolution.

Both lookups take an explicit value first, then an environment variable
(REBED_DEST, REBED_SOURCE). The destination falls back to the working
directory. A source that resolves to nothing is an error.
"""

from __future__ import annotations

import os
from pathlib import Path

from rebed.errors import SourceReadError
from rebed.source import ResourceTree, SourceTree

DEST_ENV_VAR = "REBED_DEST"
SOURCE_ENV_VAR = "REBED_SOURCE"


def get_destination_root(explicit: Path | str | None = None) -> Path:
    """Return the directory a source tree is materialized under.

    Resolution order:
    1. *explicit* argument
    2. REBED_DEST environment variable
    3. The current working directory

    Returns:
        Path: Destination root (not required to exist yet).
    """
    if explicit is not None:
        return Path(explicit)

    if env_dest := os.environ.get(DEST_ENV_VAR):
        return Path(env_dest)

    return Path.cwd()


def resolve_source(spec: str | None = None) -> SourceTree:
    """Return the source tree described by *spec*.

    Resolution order for *spec*:
    1. An existing directory on disk (development layout)
    2. ``package`` or ``package:sub/dir``, resolved with
       ``importlib.resources`` (installed package data)

    When *spec* is omitted the REBED_SOURCE environment variable is used.

    Raises:
        SourceReadError: If no spec is given or it names nothing usable.
    """
    if not spec:
        spec = os.environ.get(SOURCE_ENV_VAR, "")
    if not spec:
        raise SourceReadError(SOURCE_ENV_VAR, "No source given and environment variable is unset")

    candidate = Path(spec)
    if candidate.is_dir():
        return ResourceTree(candidate)

    package, _, subdir = spec.partition(":")
    if not all(part.isidentifier() for part in package.split(".")):
        raise SourceReadError(spec, "Not a directory or package name")
    return ResourceTree.from_package(package, subdir)
