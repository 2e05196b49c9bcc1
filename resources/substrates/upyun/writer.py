"""Fully buffered file writer with a one-way terminal state machine."""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum
from types import TracebackType

from packages.regstore_shared.storage_driver import AlreadyFinalizedError, FileWriter


class WriterState(str, Enum):
    """Writer lifecycle states; everything but OPEN is terminal."""

    OPEN = "open"
    CLOSED = "closed"
    COMMITTED = "committed"
    CANCELLED = "cancelled"


class UpyunFileWriter(FileWriter):
    """Accumulate bytes in memory and upload them once on close or commit.

    ``flush`` performs the whole upload: parent folder creation, the object
    put, and the convergence wait. ``write`` never touches the backend.
    """

    def __init__(
        self,
        *,
        driver_name: str,
        path: str,
        flush: Callable[[bytes], None],
        initial: bytes = b"",
    ) -> None:
        self._driver_name = driver_name
        self._path = path
        self._flush = flush
        self._buffer = bytearray(initial)
        self._size = len(initial)
        self._state = WriterState.OPEN

    @property
    def path(self) -> str:
        return self._path

    @property
    def state(self) -> WriterState:
        return self._state

    def write(self, data: bytes) -> int:
        """Append ``data`` to the buffer and return its length."""
        self._require_open()
        self._buffer.extend(data)
        self._size += len(data)
        return len(data)

    def size(self) -> int:
        """Return buffered size; zero once cancelled."""
        return self._size

    def close(self) -> None:
        """Upload the buffer without committing.

        A writer that was already committed or cancelled stays in that state,
        so a deferred close after commit is harmless.
        """
        if self._state is WriterState.CLOSED:
            raise self._finalized()
        if self._state is not WriterState.OPEN:
            return
        self._flush(bytes(self._buffer))
        self._state = WriterState.CLOSED

    def commit(self) -> None:
        """Upload the buffer and mark the writer committed.

        A failed upload leaves the writer open so the caller may retry or
        cancel.
        """
        self._require_open()
        self._flush(bytes(self._buffer))
        self._state = WriterState.COMMITTED

    def cancel(self) -> None:
        """Discard buffered bytes; content already in the backend is untouched."""
        self._require_open()
        self._buffer.clear()
        self._size = 0
        self._state = WriterState.CANCELLED

    def __enter__(self) -> UpyunFileWriter:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if exc_type is not None:
            if self._state is WriterState.OPEN:
                self.cancel()
            return
        if self._state is not WriterState.CLOSED:
            self.close()

    def _require_open(self) -> None:
        if self._state is not WriterState.OPEN:
            raise self._finalized()

    def _finalized(self) -> AlreadyFinalizedError:
        return AlreadyFinalizedError(
            driver_name=self._driver_name,
            path=self._path,
            state=self._state.value,
        )
