"""Thread-safe stream of listing entries.

An EntryStream is a bounded multi-producer queue that a single consumer
iterates. Producers run in background threads started with ``start`` and
write through an EntrySink; the stream ends either with a completion sentinel
or with the exception that stopped the producer, which is re-raised from the
consumer's iteration.

Producers only ever hold the sink, never the stream itself. A stream the
consumer drops without closing is therefore garbage collected, and collecting
it closes the sink so blocked producers give up their budget slots.

Example:
    with lister.list_all(["s3://bucket/a/", "s3://bucket/b/"]) as entries:
        for entry in entries:
            print(entry.full_uri)
"""

import queue
import threading
import weakref
from typing import Any, Callable, Iterator, Optional

from s3mini.core import get_logger
from s3mini.core.exceptions import ValidationError
from s3mini.objectstorage.listing.entries import ListingEntry

logger = get_logger(__name__)

DEFAULT_BUFFER_SIZE = 10000

# How long a blocked producer waits before re-checking for cancellation
_PUT_POLL_SECONDS = 0.1


class _Done:
    pass


class _Failure:
    def __init__(self, error: BaseException):
        self.error = error


_DONE = _Done()


class EntrySink:
    """Producer side of an EntryStream."""

    def __init__(self, buffer_size: int):
        if buffer_size < 1:
            raise ValidationError(f"buffer_size must be at least 1, got: {buffer_size}")
        self._queue: queue.Queue = queue.Queue(maxsize=buffer_size)
        self._closed = threading.Event()

    @property
    def closed(self) -> bool:
        """True once the consumer has closed or dropped the stream."""
        return self._closed.is_set()

    def put(self, entry: ListingEntry) -> bool:
        """Publish an entry, blocking while the buffer is full.

        Returns:
            False if the consumer closed the stream; the producer should stop
        """
        return self._offer(entry)

    def _offer(self, item: Any) -> bool:
        while not self._closed.is_set():
            try:
                self._queue.put(item, timeout=_PUT_POLL_SECONDS)
                return True
            except queue.Full:
                continue
        return False

    def _take(self) -> Any:
        return self._queue.get()

    def close(self) -> None:
        """Refuse further entries and unblock waiting producers."""
        if self._closed.is_set():
            return
        self._closed.set()
        while True:
            try:
                self._queue.get_nowait()
            except queue.Empty:
                break


class EntryStream:
    """Unordered stream of ListingEntry values fed by background producers."""

    def __init__(self, buffer_size: int = DEFAULT_BUFFER_SIZE):
        self._sink = EntrySink(buffer_size)
        self._finished = False
        self._thread: Optional[threading.Thread] = None
        self._finalizer = weakref.finalize(self, self._sink.close)

    @property
    def closed(self) -> bool:
        """True once the consumer has closed the stream."""
        return self._sink.closed

    def start(
        self, producer: Callable[..., None], *args: Any, name: str = "s3mini-stream"
    ) -> "EntryStream":
        """Run ``producer(sink, *args)`` in a background thread.

        Whatever the producer raises becomes the stream's terminal error.
        """
        sink = self._sink

        def run():
            try:
                producer(sink, *args)
            except Exception as e:
                logger.debug("Stream producer failed", error=str(e))
                sink._offer(_Failure(e))
            else:
                sink._offer(_DONE)

        self._thread = threading.Thread(target=run, name=name, daemon=True)
        self._thread.start()
        return self

    def close(self) -> None:
        """Stop consuming; producers notice on their next put."""
        self._finalizer()

    def __iter__(self) -> Iterator[ListingEntry]:
        return self

    def __next__(self) -> ListingEntry:
        if self._finished or self._sink.closed:
            raise StopIteration

        item = self._sink._take()
        if item is _DONE:
            self._finished = True
            raise StopIteration
        if isinstance(item, _Failure):
            self._finished = True
            raise item.error
        return item

    def __enter__(self) -> "EntryStream":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
