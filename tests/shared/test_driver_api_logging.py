"""Tests for structured logging context and driver API instrumentation."""

from __future__ import annotations

import io
import json
import logging
from collections.abc import Iterator

import pytest

from packages.regstore_shared.config import LoggingSettings
from packages.regstore_shared.logging import (
    bind_context,
    clear_context,
    configure_logging,
    driver_api_logged,
    get_context,
    log_context,
)
from packages.regstore_shared.logging.config import ContextFilter, JsonFormatter
from packages.regstore_shared.storage_driver import PathNotFoundError


class _ContextCapture(logging.Handler):
    """Record each message together with the logging context bound at emit time."""

    def __init__(self) -> None:
        super().__init__(level=logging.DEBUG)
        self.events: list[tuple[str, str, dict[str, str]]] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.events.append((record.levelname, record.getMessage(), get_context()))


@pytest.fixture
def capture() -> Iterator[tuple[logging.Logger, _ContextCapture]]:
    logger = logging.getLogger("tests.driver_api_logging")
    handler = _ContextCapture()
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    clear_context()
    try:
        yield logger, handler
    finally:
        logger.removeHandler(handler)
        clear_context()


def test_log_context_is_scoped_to_block() -> None:
    """Values bound in a block should disappear when it exits."""
    clear_context()
    bind_context(service="regstore", skipped=None)

    with log_context({"path": "/a"}):
        assert get_context() == {"service": "regstore", "path": "/a"}

    assert get_context() == {"service": "regstore"}
    clear_context("service")
    assert get_context() == {}


def test_successful_call_logs_invocation_and_completion(
    capture: tuple[logging.Logger, _ContextCapture],
) -> None:
    """Decorated calls should log references and a successful completion."""
    logger, handler = capture

    @driver_api_logged(logger=logger, driver="upyun", id_fields=("path",))
    def stat(path: str) -> int:
        return 3

    assert stat("/a") == 3

    (first_level, first_message, first_context), (level, message, context) = handler.events
    assert (first_level, first_message) == ("DEBUG", "Driver API invocation")
    assert first_context["path"] == "/a"
    assert (level, message) == ("INFO", "Driver API completion")
    assert context["event"] == "driver_api_completion"
    assert context["driver"] == "upyun"
    assert context["api_name"] == "stat"
    assert context["success"] == "True"


def test_failed_call_logs_normalized_error_and_reraises(
    capture: tuple[logging.Logger, _ContextCapture],
) -> None:
    """Driver errors should propagate unchanged after a warning completion log."""
    logger, handler = capture

    @driver_api_logged(logger=logger, driver="upyun", api_name="GetContent", id_fields=("path",))
    def get_content(path: str) -> bytes:
        raise PathNotFoundError(driver_name="upyun", path=path)

    with pytest.raises(PathNotFoundError, match="path not found: /missing"):
        get_content(path="/missing")

    level, _, context = handler.events[-1]
    assert level == "WARNING"
    assert context["api_name"] == "GetContent"
    assert context["error_code"] == "PATH_NOT_FOUND"
    assert context["error_category"] == "not_found"
    assert context["path"] == "/missing"


def test_json_formatter_includes_bound_context() -> None:
    """JSON lines should merge core fields with the bound context."""
    clear_context()
    record = logging.LogRecord(
        name="regstore.test",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="hello %s",
        args=("world",),
        exc_info=None,
    )

    with log_context({"driver": "upyun"}):
        ContextFilter().filter(record)
    payload = json.loads(JsonFormatter().format(record))

    assert payload["message"] == "hello world"
    assert payload["level"] == "INFO"
    assert payload["driver"] == "upyun"


def test_configure_logging_writes_json_with_masked_credentials() -> None:
    """Configured root handler should emit JSON and mask credential fields."""
    stream = io.StringIO()
    root = logging.getLogger()
    previous_handlers, previous_level = list(root.handlers), root.level
    clear_context()
    try:
        configure_logging(LoggingSettings(level="INFO", service="regstore-test"), stream=stream)
        with log_context({"path": "/a", "password": "hunter2"}):
            logging.getLogger("regstore.test").info("stored")
    finally:
        root.handlers[:] = previous_handlers
        root.setLevel(previous_level)
        clear_context()

    payload = json.loads(stream.getvalue().strip().splitlines()[-1])
    assert payload["message"] == "stored"
    assert payload["service"] == "regstore-test"
    assert payload["path"] == "/a"
    assert payload["password"] == "***"
