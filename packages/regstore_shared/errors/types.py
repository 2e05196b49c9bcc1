"""Flattened error records for storage-driver failures.

Drivers raise typed exceptions; the host and the instrumentation layer reduce
them to an ``ErrorDetail`` so logs and span attributes carry one stable shape
regardless of which driver failed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping


class ErrorCategory(str, Enum):
    """Coarse failure classes a registry host can act on."""

    VALIDATION = "validation"
    CONFLICT = "conflict"
    NOT_FOUND = "not_found"
    POLICY = "policy"
    DEPENDENCY = "dependency"
    INTERNAL = "internal"


@dataclass(frozen=True)
class ErrorDetail:
    """One failed driver operation, reduced to loggable fields.

    ``driver`` and ``path`` are set when the failure came from a storage-driver
    exception; builtin exceptions leave them empty.
    """

    code: str
    message: str
    category: ErrorCategory
    retryable: bool = False
    driver: str | None = None
    path: str | None = None
    metadata: Mapping[str, str] = field(default_factory=dict)
