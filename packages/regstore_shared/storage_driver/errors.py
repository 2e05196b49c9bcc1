"""Typed error kinds raised by storage-driver implementations."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(eq=False)
class StorageDriverError(Exception):
    """Base error type for storage-driver contract failures."""

    driver_name: str

    def __str__(self) -> str:
        """Return the human-readable error message prefixed by driver name."""
        return f"{self.driver_name}: {self.describe()}"

    def describe(self) -> str:
        """Return the driver-independent part of the message."""
        return "storage driver failure"


@dataclass(eq=False)
class PathNotFoundError(StorageDriverError):
    """Requested path has no backend record.

    ``partial`` holds entries already enumerated when a listing failed
    part-way through.
    """

    path: str
    partial: tuple[str, ...] = ()

    def describe(self) -> str:
        return f"path not found: {self.path}"


@dataclass(eq=False)
class InvalidPathError(StorageDriverError):
    """Directory creation or object upload failed for a path."""

    path: str

    def describe(self) -> str:
        return f"invalid path: {self.path}"


@dataclass(eq=False)
class InvalidOffsetError(StorageDriverError):
    """Read offset lies outside the stored object."""

    path: str
    offset: int

    def describe(self) -> str:
        return f"invalid offset: {self.offset} for path: {self.path}"


@dataclass(eq=False)
class UnsupportedMethodError(StorageDriverError):
    """Operation is not offered by this driver."""

    def describe(self) -> str:
        return "unsupported method"


@dataclass(eq=False)
class AlreadyFinalizedError(StorageDriverError):
    """Writer method invoked after a terminal state was reached."""

    path: str
    state: str

    def describe(self) -> str:
        return f"already {self.state}"


@dataclass(eq=False)
class ConvergenceTimeoutError(StorageDriverError):
    """Backend state did not converge within the configured retry policy."""

    path: str
    attempts: int
    elapsed_seconds: float

    def describe(self) -> str:
        return (
            f"backend did not converge for path: {self.path} "
            f"after {self.attempts} attempts ({self.elapsed_seconds:.1f}s)"
        )
