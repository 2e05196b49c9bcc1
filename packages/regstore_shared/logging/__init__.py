"""Structured logging for regstore components.

Wraps Python's ``logging`` module with a stdout handler, scoped context
fields, and the instrumentation decorator applied to driver API methods.
"""

from .config import configure_logging
from .context import bind_context, clear_context, get_context, log_context
from .instrumentation import CompletionContext, InvocationContext, driver_api_logged

__all__ = [
    "CompletionContext",
    "InvocationContext",
    "bind_context",
    "clear_context",
    "configure_logging",
    "driver_api_logged",
    "get_context",
    "log_context",
]
