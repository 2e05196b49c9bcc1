"""Per-category constructors for ``ErrorDetail``."""

from __future__ import annotations

from typing import Mapping

from .types import ErrorCategory, ErrorDetail


def validation_error(message: str, *, code: str, **context: object) -> ErrorDetail:
    return _detail(ErrorCategory.VALIDATION, message, code, retryable=False, **context)


def not_found_error(message: str, *, code: str, **context: object) -> ErrorDetail:
    return _detail(ErrorCategory.NOT_FOUND, message, code, retryable=False, **context)


def conflict_error(message: str, *, code: str, **context: object) -> ErrorDetail:
    return _detail(ErrorCategory.CONFLICT, message, code, retryable=False, **context)


def policy_error(message: str, *, code: str, **context: object) -> ErrorDetail:
    return _detail(ErrorCategory.POLICY, message, code, retryable=False, **context)


def dependency_error(message: str, *, code: str, **context: object) -> ErrorDetail:
    """Dependency failures are retryable; the backend may recover."""
    return _detail(ErrorCategory.DEPENDENCY, message, code, retryable=True, **context)


def internal_error(message: str, *, code: str, **context: object) -> ErrorDetail:
    return _detail(ErrorCategory.INTERNAL, message, code, retryable=False, **context)


def _detail(
    category: ErrorCategory,
    message: str,
    code: str,
    *,
    retryable: bool,
    driver: str | None = None,
    path: str | None = None,
    metadata: Mapping[str, str] | None = None,
) -> ErrorDetail:
    return ErrorDetail(
        code=code,
        message=message,
        category=category,
        retryable=retryable,
        driver=driver,
        path=path,
        metadata={} if metadata is None else dict(metadata),
    )
