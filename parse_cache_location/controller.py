"""Cache controllers turn a relative cache path into a file on the host.

The API is intentionally small: a controller exposes
``get_file_for_relative_path`` and returns a :class:`FileHandle` saying
whether the file exists and where it lives. Nothing is created on disk.
"""
from __future__ import annotations

import os
from pathlib import Path
from typing import Protocol, Union

from .schema import FileHandle


class CacheController(Protocol):
    def get_file_for_relative_path(self, relative_path: str) -> FileHandle:
        ...


class FileSystemCacheController:
    """Resolves relative cache paths against a storage root directory."""

    def __init__(self, storage_root: Union[str, os.PathLike] = "."):
        self.storage_root = Path(storage_root).expanduser().resolve()

    def get_file_for_relative_path(self, relative_path: str) -> FileHandle:
        rel = Path(relative_path)
        if rel.is_absolute() or ".." in rel.parts:
            raise ValueError(f"Cache path must stay inside the storage root: {relative_path}")
        target = self.storage_root / rel
        return FileHandle(exists=target.exists(), absolute_path=str(target))

    def __repr__(self) -> str:
        return f"FileSystemCacheController(storage_root={str(self.storage_root)!r})"


__all__ = ["CacheController", "FileSystemCacheController"]
