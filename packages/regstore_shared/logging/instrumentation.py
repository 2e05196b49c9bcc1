"""Instrumentation decorator for public storage-driver methods.

Each decorated call emits one structured invocation log, one completion log
with duration and normalized error category, and one OpenTelemetry span. The
host decides whether a tracer provider is installed; without one the span is
a no-op.
"""

from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass
from functools import wraps
from time import perf_counter
from typing import Any, Callable, Mapping

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

from packages.regstore_shared.errors import exception_to_error

from . import fields
from .context import log_context

_TRACER_NAME = "regstore.storage_driver"


@dataclass(frozen=True)
class InvocationContext:
    """Structured metadata describing one driver API invocation."""

    driver: str
    api_name: str
    references: Mapping[str, str]


@dataclass(frozen=True)
class CompletionContext:
    """Structured metadata describing one completed driver API invocation."""

    invocation: InvocationContext
    success: bool
    duration_ms: float
    error: str | None = None
    error_category: str | None = None
    error_code: str | None = None


def driver_api_logged(
    *,
    logger: logging.Logger,
    driver: str,
    api_name: str | None = None,
    id_fields: tuple[str, ...] = (),
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Decorate one driver method with logging and tracing.

    ``id_fields`` names call arguments (positional or keyword) whose values
    are attached to log lines and span attributes.
    """

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        method_name = api_name or func.__name__
        signature = inspect.signature(func)

        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            invocation = InvocationContext(
                driver=driver,
                api_name=method_name,
                references=_references(signature, id_fields, args, kwargs),
            )
            with log_context(_invocation_log_context(invocation)):
                logger.debug("Driver API invocation")

            tracer = trace.get_tracer(_TRACER_NAME)
            with tracer.start_as_current_span(
                f"storage_driver.{driver}.{method_name}",
                record_exception=False,
                set_status_on_exception=False,
            ) as span:
                span.set_attribute(fields.DRIVER, driver)
                span.set_attribute(fields.API_NAME, method_name)
                for key, value in invocation.references.items():
                    span.set_attribute(f"reference.{key}", value)

                started = perf_counter()
                try:
                    result = func(*args, **kwargs)
                except Exception as exc:
                    detail = exception_to_error(exc)
                    completion = CompletionContext(
                        invocation=invocation,
                        success=False,
                        duration_ms=_elapsed_ms(started),
                        error=f"{type(exc).__name__}: {exc}",
                        error_category=detail.category.value,
                        error_code=detail.code,
                    )
                    span.set_attribute(fields.ERROR_CODE, detail.code)
                    span.record_exception(exc)
                    span.set_status(Status(StatusCode.ERROR))
                    _log_completion(logger, completion)
                    raise

                completion = CompletionContext(
                    invocation=invocation,
                    success=True,
                    duration_ms=_elapsed_ms(started),
                )
                span.set_attribute(fields.DURATION_MS, completion.duration_ms)
                _log_completion(logger, completion)
                return result

        return wrapper

    return decorator


def _references(
    signature: inspect.Signature,
    id_fields: tuple[str, ...],
    args: tuple[Any, ...],
    kwargs: dict[str, Any],
) -> dict[str, str]:
    """Resolve configured identifier arguments into string references."""
    if not id_fields:
        return {}
    try:
        bound = signature.bind_partial(*args, **kwargs)
    except TypeError:
        return {}
    return {
        name: str(bound.arguments[name])
        for name in id_fields
        if bound.arguments.get(name) not in (None, "")
    }


def _elapsed_ms(started: float) -> float:
    return round((perf_counter() - started) * 1000.0, 3)


def _invocation_log_context(context: InvocationContext) -> dict[str, object]:
    """Build common structured fields for one invocation event."""
    return {
        fields.EVENT: fields.DRIVER_API_INVOCATION_EVENT,
        fields.DRIVER: context.driver,
        fields.API_NAME: context.api_name,
        **context.references,
    }


def _log_completion(logger: logging.Logger, context: CompletionContext) -> None:
    """Emit standardized structured completion log."""
    payload = _invocation_log_context(context.invocation)
    payload.update(
        {
            fields.EVENT: fields.DRIVER_API_COMPLETION_EVENT,
            fields.SUCCESS: context.success,
            fields.DURATION_MS: context.duration_ms,
            fields.ERRORS: context.error,
            fields.ERROR_CATEGORY: context.error_category,
            fields.ERROR_CODE: context.error_code,
        }
    )
    with log_context(payload):
        if context.success:
            logger.info("Driver API completion")
        else:
            logger.warning("Driver API completion")
