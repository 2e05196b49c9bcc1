"""Stdout logging setup driven by ``LoggingSettings``.

Records go to one stdout handler as newline-delimited JSON, or as a plain line
with the bound context appended as ``key=value`` pairs. Context fields whose
names look like credentials are masked before formatting.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any, TextIO

from packages.regstore_shared.config.models import LoggingSettings

from . import fields
from .context import bind_context, get_context

REDACTED = "***"
_SENSITIVE_MARKERS = ("password", "secret", "authorization", "token")


def _redact(context: dict[str, str]) -> dict[str, str]:
    return {
        key: REDACTED if any(marker in key.lower() for marker in _SENSITIVE_MARKERS) else value
        for key, value in context.items()
    }


class ContextFilter(logging.Filter):
    """Attach the bound logging context to each record, credentials masked."""

    def filter(self, record: logging.LogRecord) -> bool:
        context = _redact(get_context())
        record.context = context
        for key, value in context.items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return True


class JsonFormatter(logging.Formatter):
    """One JSON object per line: core fields, then the bound context."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            fields.TIMESTAMP: datetime.now(UTC).isoformat(),
            fields.LEVEL: record.levelname,
            fields.LOGGER: record.name,
            fields.MESSAGE: record.getMessage(),
        }
        context = getattr(record, "context", None)
        if isinstance(context, dict):
            payload.update(context)
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str, separators=(",", ":"))


class PlainFormatter(logging.Formatter):
    """Human-readable line with sorted ``key=value`` context appended."""

    def __init__(self) -> None:
        super().__init__(
            fmt="%(asctime)s %(levelname)s %(name)s %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S%z",
        )

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        context = getattr(record, "context", None)
        if not context:
            return message
        suffix = " ".join(f"{key}={value}" for key, value in sorted(context.items()))
        return f"{message} {suffix}"


def configure_logging(
    settings: LoggingSettings | None = None, *, stream: TextIO | None = None
) -> logging.Handler:
    """Install a single root handler and bind service-level context.

    Existing root handlers are replaced, so repeated calls do not duplicate
    output. Returns the installed handler.
    """
    resolved = settings if settings is not None else LoggingSettings()
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(resolved.level)

    handler = logging.StreamHandler(stream=stream if stream is not None else sys.stdout)
    handler.setLevel(resolved.level)
    handler.addFilter(ContextFilter())
    handler.setFormatter(JsonFormatter() if resolved.json_output else PlainFormatter())
    root.addHandler(handler)

    bind_context(
        **{fields.SERVICE: resolved.service, fields.ENVIRONMENT: resolved.environment}
    )
    return handler
