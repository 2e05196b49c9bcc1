"""Reduce exceptions raised through a storage driver to ``ErrorDetail``."""

from __future__ import annotations

from collections.abc import Callable

from packages.regstore_shared.storage_driver.errors import (
    AlreadyFinalizedError,
    ConvergenceTimeoutError,
    InvalidOffsetError,
    InvalidPathError,
    PathNotFoundError,
    StorageDriverError,
    UnsupportedMethodError,
)

from . import codes
from .factories import (
    conflict_error,
    dependency_error,
    internal_error,
    not_found_error,
    policy_error,
    validation_error,
)
from .types import ErrorDetail

_Factory = Callable[..., ErrorDetail]

# Most specific kinds first; the base class catches third-party driver errors.
_DRIVER_ERRORS: tuple[tuple[type[StorageDriverError], _Factory, str], ...] = (
    (PathNotFoundError, not_found_error, codes.PATH_NOT_FOUND),
    (InvalidPathError, validation_error, codes.INVALID_PATH),
    (InvalidOffsetError, validation_error, codes.INVALID_OFFSET),
    (AlreadyFinalizedError, conflict_error, codes.ALREADY_FINALIZED),
    (UnsupportedMethodError, policy_error, codes.UNSUPPORTED_METHOD),
    (ConvergenceTimeoutError, dependency_error, codes.CONVERGENCE_TIMEOUT),
    (StorageDriverError, internal_error, codes.DRIVER_FAILURE),
)

_BUILTIN_ERRORS: tuple[tuple[type[Exception], _Factory, str], ...] = (
    (ValueError, validation_error, codes.INVALID_ARGUMENT),
    (KeyError, not_found_error, codes.NOT_FOUND),
    (PermissionError, policy_error, codes.PERMISSION_DENIED),
    (TimeoutError, dependency_error, codes.DEPENDENCY_TIMEOUT),
    (ConnectionError, dependency_error, codes.DEPENDENCY_UNAVAILABLE),
)


def exception_to_error(exc: Exception) -> ErrorDetail:
    """Normalize one exception into a shared ``ErrorDetail``.

    Storage-driver kinds keep their own code and carry driver name and path;
    anything else falls back to a conservative builtin-type mapping.
    """
    metadata = {"exception_type": type(exc).__name__}
    message = str(exc) or type(exc).__name__

    if isinstance(exc, StorageDriverError):
        for kind, factory, code in _DRIVER_ERRORS:
            if isinstance(exc, kind):
                path = getattr(exc, "path", None)
                return factory(
                    message,
                    code=code,
                    driver=exc.driver_name,
                    path=path if isinstance(path, str) else None,
                    metadata=metadata,
                )

    for kind, factory, code in _BUILTIN_ERRORS:
        if isinstance(exc, kind):
            return factory(message, code=code, metadata=metadata)

    return internal_error(message, code=codes.UNEXPECTED_EXCEPTION, metadata=metadata)
