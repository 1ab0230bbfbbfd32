"""Blob store holding the most recently uploaded workbook."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from .errors import DocumentNotFoundError, StorageError

logger = logging.getLogger(__name__)


class LocalBlobStore:
    """
    Key/value blob store on the local filesystem.

    `get` hands back a download URL for the stored document: under
    `base_url` when the store is served over HTTP, otherwise a file URI.
    """

    def __init__(self, root: Path | str, key: str, base_url: Optional[str] = None):
        self.root = Path(root)
        self.key = key
        self.base_url = base_url.rstrip("/") if base_url else None

    @property
    def path(self) -> Path:
        return self.root / self.key

    def put(self, data: bytes) -> None:
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            tmp = self.path.with_name(self.path.name + ".part")
            tmp.write_bytes(data)
            tmp.replace(self.path)
        except OSError as exc:
            logger.error("upload of %s failed: %s", self.key, exc)
            raise StorageError(f"Could not store {self.key}: {exc}") from exc
        logger.info("stored %s (%d bytes)", self.key, len(data))

    def exists(self) -> bool:
        return self.path.is_file()

    def get(self) -> str:
        if not self.exists():
            raise DocumentNotFoundError(self.key)
        if self.base_url:
            return f"{self.base_url}/{self.key}"
        return self.path.resolve().as_uri()

    def read(self) -> bytes:
        if not self.exists():
            raise DocumentNotFoundError(self.key)
        try:
            return self.path.read_bytes()
        except OSError as exc:
            logger.error("read of %s failed: %s", self.key, exc)
            raise StorageError(f"Could not read {self.key}: {exc}") from exc
