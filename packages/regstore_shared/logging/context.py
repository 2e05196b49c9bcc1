"""Scoped structured-logging fields stored in a ``ContextVar``.

Driver code binds fields such as the logical path or object key around a log
call; ``ContextFilter`` copies whatever is bound onto each record.
"""

from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Mapping

_LOG_CONTEXT: ContextVar[dict[str, str]] = ContextVar("regstore_log_context", default={})


def _stringify(values: Mapping[str, object]) -> dict[str, str]:
    return {str(key): str(value) for key, value in values.items() if value is not None}


def get_context() -> dict[str, str]:
    """Return a copy of the fields bound in the current context."""
    return dict(_LOG_CONTEXT.get())


def bind_context(**values: object) -> None:
    """Bind fields until cleared; ``None`` values are skipped."""
    if values:
        _LOG_CONTEXT.set({**_LOG_CONTEXT.get(), **_stringify(values)})


def clear_context(*keys: str) -> None:
    """Drop the named fields, or every field when none are named."""
    if not keys:
        _LOG_CONTEXT.set({})
        return
    _LOG_CONTEXT.set({k: v for k, v in _LOG_CONTEXT.get().items() if k not in keys})


@contextmanager
def log_context(values: Mapping[str, object]) -> Iterator[None]:
    """Bind ``values`` for the duration of the block only."""
    token = _LOG_CONTEXT.set({**_LOG_CONTEXT.get(), **_stringify(values)})
    try:
        yield
    finally:
        _LOG_CONTEXT.reset(token)
