"""Transport-agnostic storage-driver contract consumed by the registry host."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import BinaryIO, Protocol

from pydantic import BaseModel, ConfigDict, Field


class FileInfo(BaseModel):
    """Metadata for one path as seen through the driver."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    path: str
    size: int = Field(default=0, ge=0)
    is_dir: bool = False
    modified_at: datetime | None = None


class FileWriter(Protocol):
    """Buffered writer handle returned by ``StorageDriver.writer``."""

    def write(self, data: bytes) -> int:
        """Append bytes to the pending content and return the count accepted."""

    def size(self) -> int:
        """Return the number of bytes held by this writer."""

    def close(self) -> None:
        """Flush pending content without marking the writer committed."""

    def commit(self) -> None:
        """Flush pending content and mark the writer committed."""

    def cancel(self) -> None:
        """Discard pending content without touching the backend."""


class StorageDriver(Protocol):
    """Hierarchical path-addressed storage operations over one backend."""

    def name(self) -> str:
        """Return the registered driver name."""

    def get_content(self, path: str) -> bytes:
        """Return the full content stored at ``path``."""

    def put_content(self, path: str, content: bytes) -> None:
        """Store ``content`` at ``path`` and wait until it is observable."""

    def reader(self, path: str, offset: int = 0) -> BinaryIO:
        """Return a read-only stream over ``path`` starting at ``offset``."""

    def writer(self, path: str, append: bool = False) -> FileWriter:
        """Return a buffered writer for ``path``."""

    def stat(self, path: str) -> FileInfo:
        """Return metadata for ``path``."""

    def list(self, path: str) -> list[str]:
        """Return the child paths directly under ``path``."""

    def move(self, source_path: str, dest_path: str) -> None:
        """Move a file or directory tree from ``source_path`` to ``dest_path``."""

    def delete(self, path: str) -> None:
        """Delete a file or directory tree at ``path``."""

    def url_for(self, path: str, options: Mapping[str, object] | None = None) -> str:
        """Return a direct URL for ``path`` when the backend supports one."""

    def close(self) -> None:
        """Release backend resources held by the driver."""
