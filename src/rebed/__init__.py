"""rebed: materialize packaged, read-only file trees onto disk.

Ships bundled assets (web pages, templates, default configs) as ordinary
editable files so that users may inspect, modify or reset them.
"""

from rebed.errors import (
    AmbiguousExistenceError,
    DestinationWriteError,
    RebedError,
    SourceReadError,
)
from rebed.reconcile import (
    FOLDER_MODE,
    ReconcileMode,
    ReconcileReport,
    create,
    materialize,
    patch,
    touch,
    tree,
)
from rebed.source import MemoryTree, ResourceTree, SourceEntry, SourceTree
from rebed.walker import walk, walk_dir

__version__ = "0.1.0"

__all__ = [
    "AmbiguousExistenceError",
    "DestinationWriteError",
    "FOLDER_MODE",
    "MemoryTree",
    "RebedError",
    "ReconcileMode",
    "ReconcileReport",
    "ResourceTree",
    "SourceEntry",
    "SourceReadError",
    "SourceTree",
    "create",
    "materialize",
    "patch",
    "touch",
    "tree",
    "walk",
    "walk_dir",
]
