"""Exception hierarchy for tree materialization."""

from __future__ import annotations


class RebedError(Exception):
    """Base exception for rebed errors."""

    def __init__(self, path: object, message: str):
        self.path = path
        super().__init__(f"{message}: {path}")


class SourceReadError(RebedError):
    """Listing or opening an entry of the source tree failed."""

    def __init__(self, path: object, message: str = "Cannot read source entry"):
        super().__init__(path, message)


class DestinationWriteError(RebedError):
    """Creating a directory, creating a file or copying bytes failed."""

    def __init__(self, path: object, message: str = "Cannot write destination"):
        super().__init__(path, message)


class AmbiguousExistenceError(DestinationWriteError):
    """A stat call failed for a reason other than "not found".

    The path may or may not exist, so it is neither treated as present
    nor as missing.
    """

    def __init__(self, path: object, reason: str | None = None):
        message = "Cannot determine whether path exists"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(path, message)
