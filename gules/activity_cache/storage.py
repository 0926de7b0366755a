"""Blob storage backends for the activity cache.

The cache only needs whole-blob reads and writes keyed by file name, so the
backend interface stays small. ``DirectoryStorage`` is the real one;
``MemoryStorage`` lets tests run without touching the filesystem.
"""

from __future__ import annotations

import logging
import shutil
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Optional

from ..errors import CacheStorageError

LOGGER = logging.getLogger(__name__)


class BlobStorage(ABC):
    """Opaque key -> bytes store."""

    @property
    @abstractmethod
    def location(self) -> str:
        """Human readable description of where blobs live."""

    @abstractmethod
    def read(self, key: str) -> Optional[bytes]:
        """Return the blob for ``key`` or ``None`` when absent."""

    @abstractmethod
    def write(self, key: str, data: bytes) -> None:
        """Replace the blob for ``key``."""

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Remove ``key``; return False when it did not exist."""

    @abstractmethod
    def list_keys(self) -> List[str]:
        """Return every stored key."""

    @abstractmethod
    def size(self, key: str) -> Optional[int]:
        """Return the blob size in bytes, or ``None`` when absent."""

    @abstractmethod
    def clear(self) -> None:
        """Remove every blob, leaving an empty, usable store."""


class DirectoryStorage(BlobStorage):
    """One file per key inside a single directory."""

    def __init__(self, base_dir: str | Path) -> None:
        base = Path(base_dir).expanduser()
        self._base_dir = base if base.is_absolute() else Path.cwd() / base

    @property
    def base_dir(self) -> Path:
        return self._base_dir

    @property
    def location(self) -> str:
        return str(self._base_dir)

    def _path(self, key: str) -> Path:
        return self._base_dir / key

    def _ensure_dir(self) -> None:
        try:
            self._base_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise CacheStorageError(
                f"Failed to create cache directory {self._base_dir}: {exc}"
            ) from exc

    def read(self, key: str) -> Optional[bytes]:
        path = self._path(key)
        try:
            return path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise CacheStorageError(f"Failed to read {path}: {exc}") from exc

    def write(self, key: str, data: bytes) -> None:
        self._ensure_dir()
        path = self._path(key)
        temp_path = path.with_name(path.name + ".tmp")
        try:
            temp_path.write_bytes(data)
            temp_path.replace(path)
        except OSError as exc:
            try:
                temp_path.unlink(missing_ok=True)
            except OSError as cleanup_exc:
                LOGGER.warning("Failed to remove %s: %s", temp_path, cleanup_exc)
            raise CacheStorageError(f"Failed to write {path}: {exc}") from exc

    def delete(self, key: str) -> bool:
        path = self._path(key)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as exc:
            raise CacheStorageError(f"Failed to delete {path}: {exc}") from exc
        return True

    def list_keys(self) -> List[str]:
        if not self._base_dir.exists():
            return []
        try:
            return sorted(
                entry.name
                for entry in self._base_dir.iterdir()
                if entry.is_file() and not entry.name.endswith(".tmp")
            )
        except OSError as exc:
            raise CacheStorageError(
                f"Failed to list cache directory {self._base_dir}: {exc}"
            ) from exc

    def size(self, key: str) -> Optional[int]:
        try:
            return self._path(key).stat().st_size
        except OSError:
            return None

    def clear(self) -> None:
        if self._base_dir.exists():
            try:
                shutil.rmtree(self._base_dir)
            except OSError as exc:
                raise CacheStorageError(
                    f"Failed to clear cache directory {self._base_dir}: {exc}"
                ) from exc
        self._ensure_dir()
        LOGGER.debug("Cache directory reset dir=%s", self._base_dir)


class MemoryStorage(BlobStorage):
    """Dictionary-backed storage for tests and throwaway caches."""

    def __init__(self) -> None:
        self._blobs: Dict[str, bytes] = {}

    @property
    def location(self) -> str:
        return "<memory>"

    def read(self, key: str) -> Optional[bytes]:
        return self._blobs.get(key)

    def write(self, key: str, data: bytes) -> None:
        self._blobs[key] = bytes(data)

    def delete(self, key: str) -> bool:
        return self._blobs.pop(key, None) is not None

    def list_keys(self) -> List[str]:
        return sorted(self._blobs)

    def size(self, key: str) -> Optional[int]:
        blob = self._blobs.get(key)
        return None if blob is None else len(blob)

    def clear(self) -> None:
        self._blobs.clear()


__all__ = ["BlobStorage", "DirectoryStorage", "MemoryStorage"]
