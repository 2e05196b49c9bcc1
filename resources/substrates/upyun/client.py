"""UpYun REST API client built on the shared httpx wrapper."""

from __future__ import annotations

import base64
import hashlib
import hmac
import logging
from collections.abc import Callable, Iterator, Mapping
from contextlib import contextmanager
from datetime import UTC, datetime
from email.utils import format_datetime
from typing import Any
from urllib.parse import quote

import httpx

from packages.regstore_shared.http import (
    HttpClient,
    HttpClientError,
    HttpJsonDecodeError,
    HttpStatusError,
)
from resources.substrates.upyun.config import UpyunDriverSettings
from resources.substrates.upyun.paths import full_path
from resources.substrates.upyun.substrate import (
    FILE_TYPE,
    FOLDER_TYPE,
    ObjectInfo,
    ObjectNotFoundError,
    UpyunBackendError,
    UpyunObjectClient,
)

logger = logging.getLogger(__name__)

# Iterator token the listing API returns once the last page was served.
END_OF_LISTING = "g2gCZAAEbmV4dGQAA2VvZg"


def _utcnow() -> datetime:
    return datetime.now(UTC)


class UpyunRestClient(UpyunObjectClient):
    """Concrete object client speaking the UpYun REST protocol.

    Requests carry ``UPYUN <operator>:<signature>`` authorization where the
    signature is an HMAC-SHA1, keyed by the MD5 hex of the password, over
    ``METHOD&URI&DATE``.
    """

    def __init__(
        self,
        *,
        settings: UpyunDriverSettings,
        transport: httpx.BaseTransport | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._bucket = settings.bucket
        self._operator = settings.username
        self._secret = hashlib.md5(settings.password.encode("utf-8")).hexdigest()
        self._list_limit = settings.list_limit
        self._clock = clock
        self._http = HttpClient(
            base_url=settings.base_url(),
            timeout_seconds=settings.timeout_seconds,
            transport=transport,
        )

    def close(self) -> None:
        """Close the underlying connection pool."""
        self._http.close()

    def get(self, key: str) -> bytes:
        """Download one object."""
        return self._request("GET", key).content

    def put(self, key: str, content: bytes) -> None:
        """Upload one object."""
        self._request(
            "PUT",
            key,
            headers={"Content-Type": "application/octet-stream"},
            content=content,
        )

    def delete(self, key: str) -> None:
        """Delete one object or empty folder synchronously."""
        self._request("DELETE", key)

    def async_delete(self, key: str) -> None:
        """Ask the backend to delete one object in the background."""
        self._request("DELETE", key, headers={"x-upyun-async": "true"})

    def mkdir(self, key: str) -> None:
        """Create one folder marker."""
        self._request("POST", key, headers={"folder": "true"})

    def get_info(self, key: str) -> ObjectInfo:
        """Read object metadata from ``HEAD`` response headers."""
        response = self._request("HEAD", key)
        headers = response.headers
        return ObjectInfo(
            name=key.rstrip("/").rsplit("/", 1)[-1],
            file_type=headers.get("x-upyun-file-type", FILE_TYPE),
            size=int(headers.get("x-upyun-file-size", "0") or 0),
            modified_at=_parse_timestamp(headers.get("x-upyun-file-date")),
        )

    def list(self, key: str) -> Iterator[ObjectInfo]:
        """Yield folder entries page by page until the end-of-listing token."""
        token: str | None = None
        while True:
            headers = {
                "Accept": "application/json",
                "x-list-limit": str(self._list_limit),
            }
            if token is not None:
                headers["x-list-iter"] = token
            page = self._request_json("GET", key, headers=headers)
            for entry in page.get("files") or []:
                if isinstance(entry, Mapping) and entry.get("name"):
                    yield _entry_info(entry)

            token = page.get("iter")
            if not token or token == END_OF_LISTING:
                return

    def _uri(self, key: str) -> str:
        return quote(full_path(self._bucket, key))

    def _authorization(self, method: str, uri: str, date: str) -> str:
        message = "&".join((method, uri, date)).encode("utf-8")
        digest = hmac.new(self._secret.encode("utf-8"), message, hashlib.sha1).digest()
        return f"UPYUN {self._operator}:{base64.b64encode(digest).decode('ascii')}"

    def _request(
        self,
        method: str,
        key: str,
        *,
        headers: Mapping[str, str] | None = None,
        content: bytes | None = None,
    ) -> httpx.Response:
        """Send one signed request and map failures to backend errors."""
        uri = self._uri(key)
        with self._mapped_errors(key):
            response = self._http.request(
                method, uri, headers=self._signed_headers(method, uri, headers), content=content
            )
        return response

    def _request_json(
        self, method: str, key: str, *, headers: Mapping[str, str]
    ) -> dict[str, Any]:
        """Send one signed request and decode a JSON object body."""
        uri = self._uri(key)
        with self._mapped_errors(key):
            payload = self._http.request_json(
                method, uri, headers=self._signed_headers(method, uri, headers)
            )
        if not isinstance(payload, dict):
            raise UpyunBackendError(message=f"invalid listing payload for {key}", key=key)
        return payload

    def _signed_headers(
        self, method: str, uri: str, headers: Mapping[str, str] | None
    ) -> dict[str, str]:
        date = format_datetime(self._clock(), usegmt=True)
        return {
            "Date": date,
            "Authorization": self._authorization(method, uri, date),
            **(headers or {}),
        }

    @contextmanager
    def _mapped_errors(self, key: str) -> Iterator[None]:
        """Translate shared HTTP errors into backend errors for ``key``."""
        try:
            yield
        except HttpStatusError as exc:
            if exc.status_code == 404:
                raise ObjectNotFoundError(
                    message=f"object not found: {key}",
                    key=key,
                    status_code=exc.status_code,
                ) from exc
            detail = exc.message
            if exc.response_body:
                detail = f"{detail}: {exc.response_body}"
            raise UpyunBackendError(
                message=detail,
                key=key,
                retryable=exc.retryable,
                status_code=exc.status_code,
            ) from exc
        except HttpJsonDecodeError as exc:
            raise UpyunBackendError(
                message=f"invalid listing payload for {key}",
                key=key,
                status_code=exc.status_code,
            ) from exc
        except HttpClientError as exc:
            raise UpyunBackendError(
                message=exc.message,
                key=key,
                retryable=exc.retryable,
            ) from exc


def create_upyun_client(settings: UpyunDriverSettings) -> UpyunRestClient:
    """Construct a configured UpYun REST client."""
    logger.debug("Creating UpYun client for bucket %s at %s", settings.bucket, settings.base_url())
    return UpyunRestClient(settings=settings)


def _entry_info(entry: Mapping[str, Any]) -> ObjectInfo:
    """Translate one JSON listing entry; ``type`` is a MIME type or ``folder``."""
    file_type = FOLDER_TYPE if entry.get("type") == FOLDER_TYPE else FILE_TYPE
    return ObjectInfo(
        name=str(entry["name"]),
        file_type=file_type,
        size=int(entry.get("length") or 0),
        modified_at=_parse_timestamp(entry.get("last_modified")),
    )


def _parse_timestamp(value: object) -> datetime | None:
    """Parse a unix-seconds timestamp header or field."""
    if value in (None, ""):
        return None
    try:
        return datetime.fromtimestamp(int(str(value)), tz=UTC)
    except ValueError:
        return None
