"""State-machine tests for the buffered UpYun file writer."""

from __future__ import annotations

import pytest

from packages.regstore_shared.storage_driver import AlreadyFinalizedError
from resources.substrates.upyun.writer import UpyunFileWriter, WriterState


class _Recorder:
    """Flush callback recording every uploaded payload."""

    def __init__(self, *, fail_times: int = 0) -> None:
        self.uploads: list[bytes] = []
        self.fail_times = fail_times

    def __call__(self, content: bytes) -> None:
        if self.fail_times > 0:
            self.fail_times -= 1
            raise OSError("upload failed")
        self.uploads.append(content)


def _writer(flush: _Recorder, *, initial: bytes = b"") -> UpyunFileWriter:
    return UpyunFileWriter(driver_name="upyun", path="/a/b", flush=flush, initial=initial)


def test_write_buffers_without_uploading() -> None:
    """Writes should only grow the buffer and report accepted bytes."""
    flush = _Recorder()
    writer = _writer(flush)

    assert writer.write(b"hello ") == 6
    assert writer.write(b"world") == 5

    assert writer.size() == 11
    assert flush.uploads == []
    assert writer.state is WriterState.OPEN


def test_commit_uploads_buffer_once() -> None:
    """Commit should upload the whole buffer and finalize the writer."""
    flush = _Recorder()
    writer = _writer(flush, initial=b"abc")
    writer.write(b"def")

    writer.commit()

    assert flush.uploads == [b"abcdef"]
    assert writer.state is WriterState.COMMITTED
    assert writer.size() == 6


def test_close_uploads_and_second_close_fails() -> None:
    """Close should upload; a repeated close reports the closed state."""
    flush = _Recorder()
    writer = _writer(flush)
    writer.write(b"x")

    writer.close()

    assert flush.uploads == [b"x"]
    with pytest.raises(AlreadyFinalizedError, match="already closed"):
        writer.close()


def test_close_after_commit_is_a_no_op() -> None:
    """Deferred close after commit should keep the committed state."""
    flush = _Recorder()
    writer = _writer(flush)
    writer.commit()

    writer.close()

    assert writer.state is WriterState.COMMITTED
    assert flush.uploads == [b""]


def test_cancel_discards_buffer() -> None:
    """Cancel should drop buffered bytes without uploading anything."""
    flush = _Recorder()
    writer = _writer(flush, initial=b"seed")
    writer.write(b"more")

    writer.cancel()

    assert writer.size() == 0
    assert writer.state is WriterState.CANCELLED
    assert flush.uploads == []
    writer.close()
    assert flush.uploads == []


@pytest.mark.parametrize(
    ("finish", "state"),
    [("close", "closed"), ("commit", "committed"), ("cancel", "cancelled")],
)
def test_calls_after_terminal_state_fail(finish: str, state: str) -> None:
    """Write, commit, and cancel should all refuse a finalized writer."""
    writer = _writer(_Recorder())
    getattr(writer, finish)()

    with pytest.raises(AlreadyFinalizedError, match=f"upyun: already {state}"):
        writer.write(b"late")
    with pytest.raises(AlreadyFinalizedError):
        writer.commit()
    with pytest.raises(AlreadyFinalizedError):
        writer.cancel()


def test_failed_commit_leaves_writer_open() -> None:
    """An upload failure should let the caller retry the commit."""
    flush = _Recorder(fail_times=1)
    writer = _writer(flush)
    writer.write(b"data")

    with pytest.raises(OSError):
        writer.commit()
    assert writer.state is WriterState.OPEN

    writer.commit()
    assert flush.uploads == [b"data"]


def test_context_manager_closes_on_success() -> None:
    """Leaving the block normally should upload via close."""
    flush = _Recorder()

    with _writer(flush) as writer:
        writer.write(b"payload")

    assert writer.state is WriterState.CLOSED
    assert flush.uploads == [b"payload"]


def test_context_manager_cancels_on_error() -> None:
    """An exception inside the block should discard the buffer."""
    flush = _Recorder()

    with pytest.raises(RuntimeError):
        with _writer(flush) as writer:
            writer.write(b"partial")
            raise RuntimeError("boom")

    assert writer.state is WriterState.CANCELLED
    assert flush.uploads == []
