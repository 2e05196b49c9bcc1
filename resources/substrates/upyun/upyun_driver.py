"""UpYun-backed storage driver facade."""

from __future__ import annotations

import io
import logging
import time
from collections.abc import Mapping
from functools import partial
from typing import BinaryIO

from packages.regstore_shared.logging import driver_api_logged
from packages.regstore_shared.storage_driver import (
    FileInfo,
    InvalidOffsetError,
    InvalidPathError,
    PathNotFoundError,
    StorageDriver,
    UnsupportedMethodError,
)
from resources.substrates.upyun.client import create_upyun_client
from resources.substrates.upyun.config import UpyunDriverSettings
from resources.substrates.upyun.consistency import Clock, ConsistencyPoller, Sleeper
from resources.substrates.upyun.paths import full_path, parent_key
from resources.substrates.upyun.substrate import (
    ObjectInfo,
    ObjectNotFoundError,
    UpyunBackendError,
    UpyunObjectClient,
)
from resources.substrates.upyun.tree import UpyunTree
from resources.substrates.upyun.writer import UpyunFileWriter

DRIVER_NAME = "upyun"

logger = logging.getLogger(__name__)


class UpyunStorageDriver(StorageDriver):
    """Hierarchical storage driver over one UpYun bucket.

    Every call runs synchronously on the caller's thread and may block while
    the backend converges. No per-path locking is done; concurrent writers to
    one path race.
    """

    def __init__(
        self,
        *,
        settings: UpyunDriverSettings,
        client: UpyunObjectClient | None = None,
        sleep: Sleeper = time.sleep,
        clock: Clock = time.monotonic,
    ) -> None:
        self._settings = settings
        self._root = settings.root_directory
        self._client = client if client is not None else create_upyun_client(settings)
        self._poller = ConsistencyPoller(
            policy=settings.convergence_policy(),
            driver_name=DRIVER_NAME,
            sleep=sleep,
            clock=clock,
        )
        self._tree = UpyunTree(
            driver=self,
            client=self._client,
            poller=self._poller,
            key_for=self._full_path,
            driver_name=DRIVER_NAME,
        )

    def name(self) -> str:
        """Return the registered driver name."""
        return DRIVER_NAME

    def close(self) -> None:
        """Release backend client resources."""
        self._client.close()

    def __enter__(self) -> UpyunStorageDriver:
        return self

    def __exit__(self, *_: object) -> None:
        self.close()

    @driver_api_logged(logger=logger, driver=DRIVER_NAME, id_fields=("path",))
    def get_content(self, path: str) -> bytes:
        """Probe metadata, then read the whole object into memory."""
        key = self._full_path(path)
        self._info(path, key)
        return self._fetch(path, key)

    @driver_api_logged(logger=logger, driver=DRIVER_NAME, id_fields=("path",))
    def put_content(self, path: str, content: bytes) -> None:
        """Upload ``content`` and wait until its size is observable."""
        self._store(path, bytes(content))

    @driver_api_logged(logger=logger, driver=DRIVER_NAME, id_fields=("path", "offset"))
    def reader(self, path: str, offset: int = 0) -> BinaryIO:
        """Fetch the whole object and return a stream over its tail.

        The backend is never asked for a byte range; the full object is held
        in memory.
        """
        key = self._full_path(path)
        content = self._fetch(path, key)
        if offset < 0 or offset > len(content):
            raise InvalidOffsetError(driver_name=DRIVER_NAME, path=path, offset=offset)
        return io.BytesIO(content[offset:])

    @driver_api_logged(logger=logger, driver=DRIVER_NAME, id_fields=("path", "append"))
    def writer(self, path: str, append: bool = False) -> UpyunFileWriter:
        """Return a buffered writer, seeded with existing content on append."""
        key = self._full_path(path)
        initial = b""
        if append:
            info = self._info(path, key)
            if info.size > 0:
                initial = self._fetch(path, key)
        return UpyunFileWriter(
            driver_name=DRIVER_NAME,
            path=path,
            flush=partial(self._store, path),
            initial=initial,
        )

    @driver_api_logged(logger=logger, driver=DRIVER_NAME, id_fields=("path",))
    def stat(self, path: str) -> FileInfo:
        """Translate backend metadata into ``FileInfo``."""
        info = self._info(path, self._full_path(path))
        return FileInfo(
            path=path,
            size=info.size,
            is_dir=info.is_dir,
            modified_at=info.modified_at,
        )

    @driver_api_logged(logger=logger, driver=DRIVER_NAME, id_fields=("path",))
    def list(self, path: str) -> list[str]:
        """Return the child paths of ``path``."""
        return self._tree.list(path)

    @driver_api_logged(
        logger=logger, driver=DRIVER_NAME, id_fields=("source_path", "dest_path")
    )
    def move(self, source_path: str, dest_path: str) -> None:
        """Copy ``source_path`` to ``dest_path`` then drop the source."""
        self._tree.move(source_path, dest_path)

    @driver_api_logged(logger=logger, driver=DRIVER_NAME, id_fields=("path",))
    def delete(self, path: str) -> None:
        """Delete ``path`` and, for directories, everything below it."""
        self._tree.delete(path)

    @driver_api_logged(logger=logger, driver=DRIVER_NAME, id_fields=("path",))
    def url_for(self, path: str, options: Mapping[str, object] | None = None) -> str:
        """Direct URLs are not offered by this driver."""
        raise UnsupportedMethodError(driver_name=DRIVER_NAME)

    def _full_path(self, path: str) -> str:
        return full_path(self._root, path)

    def _info(self, path: str, key: str) -> ObjectInfo:
        try:
            return self._client.get_info(key)
        except UpyunBackendError as exc:
            raise PathNotFoundError(driver_name=DRIVER_NAME, path=path) from exc

    def _fetch(self, path: str, key: str) -> bytes:
        try:
            return self._client.get(key)
        except UpyunBackendError as exc:
            raise PathNotFoundError(driver_name=DRIVER_NAME, path=path) from exc

    def _store(self, path: str, content: bytes) -> None:
        """Create the parent folder, upload, and poll until the size matches.

        Folder-creation and upload failures surface at once as
        ``InvalidPathError``; only the metadata check is retried.
        """
        key = self._full_path(path)
        folder = parent_key(key)
        if folder != "/":
            try:
                self._client.mkdir(folder)
            except UpyunBackendError as exc:
                raise InvalidPathError(driver_name=DRIVER_NAME, path=path) from exc

        def upload_and_check() -> bool:
            try:
                self._client.put(key, content)
            except UpyunBackendError as exc:
                raise InvalidPathError(driver_name=DRIVER_NAME, path=path) from exc
            return self._observed_size(key) == len(content)

        self._poller.wait_until(
            upload_and_check, path=path, retry_on=(UpyunBackendError,)
        )

    def _observed_size(self, key: str) -> int | None:
        try:
            return self._client.get_info(key).size
        except ObjectNotFoundError:
            return None
