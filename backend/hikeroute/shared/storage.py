"""
Object storage for uploaded track files.

The engine only needs put/delete of opaque bytes under a key. The local
filesystem store is the default backend; anything implementing
ObjectStore (S3, GCS, ...) can be injected instead.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from pathlib import Path, PurePosixPath

from hikeroute.config import settings
from hikeroute.exceptions import StorageFailure

logger = logging.getLogger(__name__)


class ObjectStore(ABC):
    """Binary object store interface."""

    @abstractmethod
    async def put(self, key: str, content: bytes) -> str:
        """Store content under key and return the storage path."""

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove the object stored under key, if any."""


class LocalObjectStore(ObjectStore):
    """Stores objects as files below a root directory."""

    def __init__(self, root: str | Path | None = None):
        self.root = Path(root or settings.storage_directory)

    def _resolve(self, key: str) -> Path:
        relative = PurePosixPath(key)
        if relative.is_absolute() or ".." in relative.parts:
            raise StorageFailure(f"Invalid storage key: {key}")
        return self.root.joinpath(*relative.parts)

    async def put(self, key: str, content: bytes) -> str:
        path = self._resolve(key)
        try:
            await asyncio.to_thread(self._write, path, content)
        except OSError as e:
            logger.error(f"Failed to store {key}: {e}")
            raise StorageFailure(f"Failed to store file: {e}") from e
        logger.info(f"Stored {len(content)} bytes at {key}")
        return key

    async def delete(self, key: str) -> None:
        path = self._resolve(key)
        try:
            await asyncio.to_thread(path.unlink, missing_ok=True)
        except OSError as e:
            logger.error(f"Failed to delete {key}: {e}")
            raise StorageFailure(f"Failed to delete file: {e}") from e

    @staticmethod
    def _write(path: Path, content: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)


def get_object_store() -> ObjectStore:
    """FastAPI dependency returning the configured object store."""
    return LocalObjectStore()
