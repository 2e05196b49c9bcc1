"""Transport-agnostic protocol for UpYun object-storage primitives."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from pydantic import BaseModel, ConfigDict, Field

FILE_TYPE = "file"
FOLDER_TYPE = "folder"


class ObjectInfo(BaseModel):
    """Backend metadata for one stored object or folder."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str
    file_type: str = FILE_TYPE
    size: int = Field(default=0, ge=0)
    modified_at: datetime | None = None

    @property
    def is_dir(self) -> bool:
        """Anything other than the plain-file marker is a directory."""
        return self.file_type != FILE_TYPE


@dataclass(eq=False)
class UpyunBackendError(Exception):
    """Backend call failed."""

    message: str
    key: str
    retryable: bool = False
    status_code: int | None = None

    def __str__(self) -> str:
        return self.message


@dataclass(eq=False)
class ObjectNotFoundError(UpyunBackendError):
    """Backend has no record for the requested key."""


class UpyunObjectClient(Protocol):
    """Flat key-object operations against one UpYun bucket.

    Keys are absolute object keys (leading ``/``). Writes and deletes are not
    immediately visible to ``get_info`` or ``list``.
    """

    def get(self, key: str) -> bytes:
        """Return the full content of one object."""

    def put(self, key: str, content: bytes) -> None:
        """Upload one object, replacing any existing content."""

    def delete(self, key: str) -> None:
        """Delete one object or empty folder."""

    def async_delete(self, key: str) -> None:
        """Request deletion without waiting for the backend to perform it."""

    def mkdir(self, key: str) -> None:
        """Create one folder marker."""

    def get_info(self, key: str) -> ObjectInfo:
        """Return metadata for one object or folder."""

    def list(self, key: str) -> Iterator[ObjectInfo]:
        """Yield entries under one folder, fetching pages lazily.

        Entries and failures arrive through the same iterator: a failure on a
        later page raises after the earlier entries were yielded.
        """

    def close(self) -> None:
        """Release transport resources."""
