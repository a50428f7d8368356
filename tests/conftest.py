from __future__ import annotations

from pathlib import Path

import pytest

from rebed.source import MemoryTree


@pytest.fixture()
def bundle() -> MemoryTree:
    """Two files in two nested directories."""
    return MemoryTree({"a/x.txt": b"hello", "a/b/y.txt": b"world"})


@pytest.fixture()
def dest(tmp_path: Path) -> Path:
    """An empty destination root."""
    root = tmp_path / "dest"
    root.mkdir()
    return root
