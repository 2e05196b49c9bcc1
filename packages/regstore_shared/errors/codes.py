"""Stable machine-readable error codes.

Each storage-driver error kind owns one code; the remaining codes cover
builtin exceptions that escape a driver unwrapped.
"""

# Storage-driver kinds
PATH_NOT_FOUND = "PATH_NOT_FOUND"
INVALID_PATH = "INVALID_PATH"
INVALID_OFFSET = "INVALID_OFFSET"
ALREADY_FINALIZED = "ALREADY_FINALIZED"
UNSUPPORTED_METHOD = "UNSUPPORTED_METHOD"
CONVERGENCE_TIMEOUT = "CONVERGENCE_TIMEOUT"
DRIVER_FAILURE = "DRIVER_FAILURE"

# Builtin fallbacks
INVALID_ARGUMENT = "INVALID_ARGUMENT"
NOT_FOUND = "NOT_FOUND"
PERMISSION_DENIED = "PERMISSION_DENIED"
DEPENDENCY_TIMEOUT = "DEPENDENCY_TIMEOUT"
DEPENDENCY_UNAVAILABLE = "DEPENDENCY_UNAVAILABLE"
UNEXPECTED_EXCEPTION = "UNEXPECTED_EXCEPTION"
