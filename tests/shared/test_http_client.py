"""Unit tests for the shared HTTP client wrapper."""

from __future__ import annotations

import httpx
import pytest

from packages.regstore_shared.http import (
    HttpClient,
    HttpJsonDecodeError,
    HttpRequestError,
    HttpStatusError,
)


def test_http_client_request_json_returns_decoded_payload() -> None:
    """HttpClient.request_json should decode and return JSON content."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"ok": True}, request=request)

    with HttpClient(
        base_url="https://example.test",
        transport=httpx.MockTransport(handler),
    ) as client:
        assert client.request_json("GET", "/health") == {"ok": True}


def test_http_client_maps_status_failure_to_typed_error() -> None:
    """HttpClient should raise HttpStatusError on non-2xx status codes."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, text="unavailable", request=request)

    client = HttpClient(
        base_url="https://example.test",
        transport=httpx.MockTransport(handler),
    )
    try:
        with pytest.raises(HttpStatusError) as exc_info:
            client.request("GET", "/health")
    finally:
        client.close()

    error = exc_info.value
    assert error.method == "GET"
    assert error.status_code == 503
    assert error.retryable is True
    assert error.response_body == "unavailable"


def test_http_client_returns_error_response_when_not_raising() -> None:
    """raise_for_status=False should hand back the raw response."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, request=request)

    with HttpClient(
        base_url="https://example.test",
        transport=httpx.MockTransport(handler),
    ) as client:
        response = client.request("HEAD", "/missing", raise_for_status=False)

    assert response.status_code == 404


def test_http_client_maps_transport_failure_to_typed_error() -> None:
    """HttpClient should raise HttpRequestError on transport failures."""

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection failed", request=request)

    client = HttpClient(
        base_url="https://example.test",
        transport=httpx.MockTransport(handler),
    )
    try:
        with pytest.raises(HttpRequestError) as exc_info:
            client.request("GET", "/health")
    finally:
        client.close()

    error = exc_info.value
    assert error.method == "GET"
    assert error.url == "https://example.test/health"
    assert error.retryable is True
    assert isinstance(error.cause, httpx.ConnectError)


def test_http_client_maps_json_decode_failure_to_typed_error() -> None:
    """HttpClient should raise HttpJsonDecodeError for invalid JSON payloads."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="not-json", request=request)

    client = HttpClient(
        base_url="https://example.test",
        transport=httpx.MockTransport(handler),
    )
    try:
        with pytest.raises(HttpJsonDecodeError) as exc_info:
            client.request_json("GET", "/health")
    finally:
        client.close()

    error = exc_info.value
    assert error.status_code == 200
    assert error.method == "GET"
    assert error.response_body == "not-json"
