"""
Archive sinks.

The streamer only ever calls ``write`` on its sink. This module holds the
concrete sinks used by the delivery endpoints: a digest accumulator for
``/hash`` and a bounded pipe that hands chunks from a producer thread to
an HTTP streaming response for ``/download``.
"""

import hashlib
import queue
import threading
from dataclasses import dataclass
from typing import Iterator, Protocol

from drivethru.core.exceptions import SinkClosedError


class ArchiveSink(Protocol):
    """Anything that accepts a sequential byte stream."""

    def write(self, data: bytes, /) -> object: ...


class CountingWriter:
    """Pass-through writer that counts bytes delivered to the wrapped sink."""

    def __init__(self, sink: ArchiveSink):
        self._sink = sink
        self.bytes_written = 0

    def write(self, data: bytes) -> int:
        self._sink.write(data)
        self.bytes_written += len(data)
        return len(data)

    def flush(self) -> None:
        flush = getattr(self._sink, "flush", None)
        if flush is not None:
            flush()


class DigestSink:
    """
    Sink that feeds every byte into a hashlib digest.

    Args:
        algorithm: Any name accepted by ``hashlib.new`` (default: md5)
    """

    def __init__(self, algorithm: str = "md5"):
        self._hash = hashlib.new(algorithm)
        self.algorithm = algorithm

    def write(self, data: bytes) -> int:
        self._hash.update(data)
        return len(data)

    def hexdigest(self) -> str:
        """Return the lowercase hex digest of everything written so far."""
        return self._hash.hexdigest()


@dataclass(frozen=True)
class _EndOfStream:
    error: BaseException | None = None


class StreamPipe:
    """
    Bounded hand-off between a producing thread and a consuming iterator.

    The producer calls ``write`` and finally ``finish``. The consumer calls
    ``read`` (or iterates) and ``close`` when it stops early. Once closed,
    the producer's next ``write`` raises SinkClosedError so an in-flight
    archive walk aborts instead of blocking forever.

    Args:
        max_chunks: Chunks buffered before ``write`` blocks
        poll_interval: Seconds between checks for a closed consumer
    """

    def __init__(self, max_chunks: int = 16, poll_interval: float = 0.1):
        self._queue: queue.Queue = queue.Queue(maxsize=max_chunks)
        self._closed = threading.Event()
        self._finished = False
        self._poll_interval = poll_interval

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    def _put(self, item: object) -> None:
        while True:
            if self._closed.is_set():
                raise SinkClosedError("stream consumer closed")
            try:
                self._queue.put(item, timeout=self._poll_interval)
                return
            except queue.Full:
                continue

    def write(self, data: bytes) -> int:
        if not data:
            return 0
        self._put(bytes(data))
        return len(data)

    def finish(self, error: BaseException | None = None) -> None:
        """Mark the end of the stream, optionally with the producer's error."""
        try:
            self._put(_EndOfStream(error))
        except SinkClosedError:
            # Nobody is left to read the marker
            pass

    def read(self, timeout: float | None = None) -> bytes:
        """
        Return the next chunk, or ``b""`` at the end of the stream.

        Raises:
            BaseException: The error the producer finished with
            queue.Empty: If ``timeout`` expires first
        """
        if self._finished:
            return b""
        item = self._queue.get(timeout=timeout)
        if isinstance(item, _EndOfStream):
            self._finished = True
            if item.error is not None:
                raise item.error
            return b""
        return item

    def __iter__(self) -> Iterator[bytes]:
        while True:
            chunk = self.read()
            if not chunk:
                return
            yield chunk

    def close(self) -> None:
        """Stop consuming and release a producer blocked on a full queue."""
        self._closed.set()
        while True:
            try:
                self._queue.get_nowait()
            except queue.Empty:
                break
