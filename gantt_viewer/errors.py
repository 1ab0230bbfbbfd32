from __future__ import annotations


class GanttError(Exception):
    """Base class for errors raised outside the layout core."""


class StorageError(GanttError):
    """The blob store could not complete a put/get."""


class DocumentNotFoundError(StorageError):
    """No document has been uploaded under the requested key."""

    def __init__(self, key: str):
        super().__init__(f"No file uploaded yet: {key}")
        self.key = key
