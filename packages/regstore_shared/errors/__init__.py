"""Error normalization shared by storage drivers and their host."""

from . import codes
from .normalize import exception_to_error
from .types import ErrorCategory, ErrorDetail

__all__ = ["ErrorCategory", "ErrorDetail", "codes", "exception_to_error"]
