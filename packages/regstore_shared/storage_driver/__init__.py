"""Public storage-driver contract, error kinds, and registry."""

from .base import FileInfo, FileWriter, StorageDriver
from .errors import (
    AlreadyFinalizedError,
    ConvergenceTimeoutError,
    InvalidOffsetError,
    InvalidPathError,
    PathNotFoundError,
    StorageDriverError,
    UnsupportedMethodError,
)
from .factory import (
    DriverFactory,
    DriverRegistrationError,
    InvalidDriverParametersError,
    StorageDriverRegistry,
)

__all__ = [
    "AlreadyFinalizedError",
    "ConvergenceTimeoutError",
    "DriverFactory",
    "DriverRegistrationError",
    "FileInfo",
    "FileWriter",
    "InvalidDriverParametersError",
    "InvalidOffsetError",
    "InvalidPathError",
    "PathNotFoundError",
    "StorageDriver",
    "StorageDriverError",
    "StorageDriverRegistry",
    "UnsupportedMethodError",
]
