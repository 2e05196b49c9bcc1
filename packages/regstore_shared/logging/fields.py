"""Canonical logging field names for structured log lines.

Keeping names centralized prevents drift between driver code and the
instrumentation decorator.
"""

TIMESTAMP = "timestamp"
LEVEL = "level"
LOGGER = "logger"
MESSAGE = "message"
EVENT = "event"

# Driver API invocation fields.
DRIVER = "driver"
API_NAME = "api_name"
DRIVER_API_INVOCATION_EVENT = "driver_api_invocation"
DRIVER_API_COMPLETION_EVENT = "driver_api_completion"
SUCCESS = "success"
DURATION_MS = "duration_ms"
ERRORS = "errors"
ERROR_CATEGORY = "error_category"
ERROR_CODE = "error_code"

# Storage operation fields.
PATH = "path"
OBJECT_KEY = "object_key"
ATTEMPT = "attempt"
DELAY_SECONDS = "delay_seconds"

# Common service-level fields.
SERVICE = "service"
ENVIRONMENT = "environment"
