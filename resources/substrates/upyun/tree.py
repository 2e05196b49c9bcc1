"""Directory emulation over flat object listings.

A directory is any key that has objects under its prefix. List, Move and
Delete are built from one-level listings plus per-object calls, recursing
into child directories one entry at a time.
"""

from __future__ import annotations

import logging
import posixpath
from collections.abc import Callable

from packages.regstore_shared.logging import fields, log_context
from packages.regstore_shared.storage_driver import (
    PathNotFoundError,
    StorageDriver,
    StorageDriverError,
)
from resources.substrates.upyun.consistency import ConsistencyPoller
from resources.substrates.upyun.paths import child_path
from resources.substrates.upyun.substrate import (
    ObjectNotFoundError,
    UpyunBackendError,
    UpyunObjectClient,
)

logger = logging.getLogger(__name__)


class UpyunTree:
    """Recursive list/move/delete for one driver.

    Stat and content calls go back through the driver facade; raw deletes go
    straight to the client under the convergence poller.
    """

    def __init__(
        self,
        *,
        driver: StorageDriver,
        client: UpyunObjectClient,
        poller: ConsistencyPoller,
        key_for: Callable[[str], str],
        driver_name: str,
    ) -> None:
        self._driver = driver
        self._client = client
        self._poller = poller
        self._key_for = key_for
        self._driver_name = driver_name

    def list(self, path: str) -> list[str]:
        """Return child paths of ``path``.

        Items and failures come from one iterator, so entries read before a
        failure are kept and attached to the raised ``PathNotFoundError``.

        A folder the backend reports as absent, before any entry was read,
        lists as empty instead of raising, so a deleted directory lists empty.
        Callers that need an existence check should use ``stat``.
        """
        key = self._key_for(path)
        children: list[str] = []
        try:
            for entry in self._client.list(key):
                children.append(child_path(path, entry.name))
        except ObjectNotFoundError as exc:
            if not children:
                return []
            raise self._listing_failed(path, children, exc) from exc
        except UpyunBackendError as exc:
            raise self._listing_failed(path, children, exc) from exc
        return children

    def delete(self, path: str) -> None:
        """Delete a file, or a directory and everything below it.

        Children are removed depth-first. The first child failure aborts the
        walk; re-running the delete resumes from what is left.
        """
        info = self._driver.stat(path)
        if info.is_dir:
            for child in self.list(path):
                try:
                    self.delete(child)
                except StorageDriverError as exc:
                    with log_context({fields.PATH: path, "child": child}):
                        logger.warning("Child delete failed; aborting tree delete: %s", exc)
                    raise
        self._delete_object(path)

    def move(self, source_path: str, dest_path: str) -> None:
        """Move a file, or every file below a directory, to ``dest_path``.

        Files are copied, verified by size, then the source is deleted
        asynchronously. Both copies may exist if the process stops in
        between; running the move again completes it.
        Moving a path onto itself leaves it untouched.
        """
        info = self._driver.stat(source_path)
        if self._key_for(source_path) == self._key_for(dest_path):
            return
        if info.is_dir:
            for child in self.list(source_path):
                name = posixpath.basename(child)
                self.move(child, child_path(dest_path, name))
            return

        content = self._driver.get_content(source_path)
        self._driver.put_content(dest_path, content)
        self._request_async_delete(source_path)

    def _delete_object(self, path: str) -> None:
        """Delete one key, retrying until the backend accepts and forgets it."""
        key = self._key_for(path)

        def delete_once() -> None:
            try:
                self._client.delete(key)
            except ObjectNotFoundError:
                return

        self._poller.retry(delete_once, path=path, retry_on=(UpyunBackendError,))
        self._poller.wait_until(
            lambda: self._is_absent(key), path=path, retry_on=(UpyunBackendError,)
        )

    def _is_absent(self, key: str) -> bool:
        try:
            self._client.get_info(key)
        except ObjectNotFoundError:
            return True
        return False

    def _request_async_delete(self, path: str) -> None:
        """Fire-and-forget removal of a move source; failures are only logged."""
        key = self._key_for(path)
        try:
            self._client.async_delete(key)
        except UpyunBackendError as exc:
            with log_context({fields.PATH: path, fields.OBJECT_KEY: key}):
                logger.warning("Async delete of moved source failed: %s", exc)
            return
        with log_context({fields.PATH: path, fields.OBJECT_KEY: key}):
            logger.info("Requested async delete of moved source")

    def _listing_failed(
        self, path: str, children: list[str], exc: Exception
    ) -> PathNotFoundError:
        with log_context({fields.PATH: path, "entries_read": len(children)}):
            logger.warning("Listing failed part-way: %s", exc)
        return PathNotFoundError(
            driver_name=self._driver_name,
            path=path,
            partial=tuple(children),
        )
