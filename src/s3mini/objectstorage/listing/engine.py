"""Bounded, concurrent listing of S3 addresses.

S3Lister issues one paginated ListObjectsV2 session per address. A session
holds one slot of the lister's concurrency budget from its first page fetch
until its last, so at most ``max_parallel`` addresses are being paginated at
any moment, however many addresses are queued.

Listing many addresses fans out over a fixed worker pool and merges every
address's entries into a single EntryStream:

    lister = S3Lister(client, max_parallel=10)
    with lister.list_all(["s3://bucket/a/", "s3://bucket/b/"]) as entries:
        for entry in entries:
            ...
"""

import re
import threading
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from contextlib import closing
from typing import Iterable, Iterator, Optional, Pattern
from urllib.parse import unquote_plus

from botocore.exceptions import BotoCoreError, ClientError

from s3mini.core import get_logger, get_tracer, settings
from s3mini.core.exceptions import ValidationError
from s3mini.objectstorage.address import parse_s3_uri
from s3mini.objectstorage.errors import translate_client_error
from s3mini.objectstorage.listing.entries import ListingEntry
from s3mini.objectstorage.listing.stream import EntrySink, EntryStream

logger = get_logger(__name__)
tracer = get_tracer(__name__)

# A "%" not followed by two hex digits
_INVALID_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


class ConcurrencyBudget:
    """Counting semaphore bounding concurrent pagination sessions."""

    def __init__(self, capacity: int):
        if capacity < 1:
            raise ValidationError(f"max_parallel must be at least 1, got: {capacity}")
        self.capacity = capacity
        self._semaphore = threading.BoundedSemaphore(capacity)
        self._lock = threading.Lock()
        self._in_use = 0

    @property
    def in_use(self) -> int:
        return self._in_use

    def __enter__(self) -> "ConcurrencyBudget":
        self._semaphore.acquire()
        with self._lock:
            self._in_use += 1
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        with self._lock:
            self._in_use -= 1
        self._semaphore.release()


def compile_key_regex(key_regex: Optional[str]) -> Optional[Pattern[str]]:
    """Compile a key filter, rejecting invalid patterns up front."""
    if not key_regex:
        return None
    try:
        return re.compile(key_regex)
    except re.error as e:
        raise ValidationError(f"Invalid key regex '{key_regex}': {e}")


def unescape_key(key: str) -> str:
    """Undo S3's url encoding of a key, keeping the raw key if it is invalid."""
    if _INVALID_ESCAPE.search(key):
        return key
    try:
        return unquote_plus(key, errors="strict")
    except UnicodeDecodeError:
        return key


class S3Lister:
    """Lists S3 addresses concurrently under a shared concurrency budget."""

    def __init__(
        self,
        client,
        max_parallel: Optional[int] = None,
        page_size: Optional[int] = None,
        buffer_size: Optional[int] = None,
        fanout_workers: Optional[int] = None,
    ):
        """Initialize S3 lister.

        Args:
            client: boto3 S3 client used for every listing call
            max_parallel: Maximum number of concurrent pagination sessions
            page_size: Keys requested per ListObjectsV2 page
            buffer_size: Entries buffered per stream before producers block
            fanout_workers: Worker threads per fan-out, defaults to max_parallel
        """
        self.client = client
        self._budget = ConcurrencyBudget(
            settings.max_parallel if max_parallel is None else max_parallel
        )
        self.page_size = settings.page_size if page_size is None else page_size
        self.buffer_size = (
            settings.stream_buffer_size if buffer_size is None else buffer_size
        )
        self.fanout_workers = (
            self._budget.capacity if fanout_workers is None else fanout_workers
        )
        for name in ("page_size", "buffer_size", "fanout_workers"):
            if getattr(self, name) < 1:
                raise ValidationError(
                    f"{name} must be at least 1, got: {getattr(self, name)}"
                )
        logger.info(
            "S3 lister initialized",
            max_parallel=self._budget.capacity,
            fanout_workers=self.fanout_workers,
        )

    @property
    def max_parallel(self) -> int:
        return self._budget.capacity

    def list_uri(
        self,
        s3_uri: str,
        recursive: bool = False,
        delimiter: str = "/",
        key_regex: Optional[str] = None,
    ) -> EntryStream:
        """List a single address.

        Args:
            s3_uri: S3 address in format s3://bucket/prefix
            recursive: Return every key under the prefix instead of grouping
                nested keys into prefixes
            delimiter: Character used to group keys into prefixes
            key_regex: Regex searched against each object's full address;
                prefixes are never filtered

        Returns:
            EntryStream of prefixes and objects directly under the address

        Raises:
            ValidationError: If key_regex is invalid
        """
        return self.list_all([s3_uri], recursive, delimiter, key_regex)

    def list_all(
        self,
        s3_uris: Iterable[str],
        recursive: bool = False,
        delimiter: str = "/",
        key_regex: Optional[str] = None,
    ) -> EntryStream:
        """List many addresses concurrently into one merged stream.

        The stream ends once every address has been fully paginated. If any
        address fails, the remaining ones are abandoned and the translated
        error is raised from the stream.

        Raises:
            ValidationError: If key_regex is invalid
        """
        s3_uris = list(s3_uris)
        key_filter = compile_key_regex(key_regex)
        stream = EntryStream(self.buffer_size)
        return stream.start(
            self._fan_out,
            s3_uris,
            recursive,
            delimiter,
            key_filter,
            name="s3mini-fanout",
        )

    def _fan_out(
        self,
        sink: EntrySink,
        s3_uris: list[str],
        recursive: bool,
        delimiter: str,
        key_filter: Optional[Pattern[str]],
    ) -> None:
        if not s3_uris:
            return

        abort = threading.Event()
        workers = min(self.fanout_workers, len(s3_uris))
        logger.debug("Fanning out listing", uri_count=len(s3_uris), workers=workers)

        with ThreadPoolExecutor(
            max_workers=workers, thread_name_prefix="s3mini-list"
        ) as pool:
            futures = [
                pool.submit(
                    self._drain,
                    sink,
                    s3_uri,
                    recursive,
                    delimiter,
                    key_filter,
                    abort,
                )
                for s3_uri in s3_uris
            ]
            done, _ = wait(futures, return_when=FIRST_EXCEPTION)
            for future in done:
                if future.exception() is not None:
                    abort.set()
                    for pending in futures:
                        pending.cancel()
                    raise future.exception()

    def _drain(
        self,
        sink: EntrySink,
        s3_uri: str,
        recursive: bool,
        delimiter: str,
        key_filter: Optional[Pattern[str]],
        abort: threading.Event,
    ) -> None:
        if abort.is_set() or sink.closed:
            return
        with closing(self._paginate(s3_uri, recursive, delimiter, key_filter)) as entries:
            for entry in entries:
                if abort.is_set() or not sink.put(entry):
                    return

    def _paginate(
        self,
        s3_uri: str,
        recursive: bool,
        delimiter: str,
        key_filter: Optional[Pattern[str]],
    ) -> Iterator[ListingEntry]:
        bucket, prefix = parse_s3_uri(s3_uri)
        if recursive:
            delimiter = ""

        params = {
            "Bucket": bucket,
            "Prefix": prefix,
            "EncodingType": "url",
            "FetchOwner": False,
            "PaginationConfig": {"PageSize": self.page_size},
        }
        if delimiter:
            params["Delimiter"] = delimiter

        with self._budget:
            span = tracer.start_span(
                "s3.list_objects_v2",
                attributes={"s3.bucket": bucket, "s3.prefix": prefix},
            )
            prefix_count = 0
            object_count = 0
            try:
                paginator = self.client.get_paginator("list_objects_v2")
                for page in paginator.paginate(**params):
                    for common_prefix in page.get("CommonPrefixes", []):
                        if common_prefix["Prefix"] == delimiter:
                            continue
                        prefix_count += 1
                        yield ListingEntry.for_prefix(
                            bucket, unescape_key(common_prefix["Prefix"])
                        )

                    for obj in page.get("Contents", []):
                        entry = ListingEntry.for_object(
                            bucket,
                            unescape_key(obj["Key"]),
                            size=obj.get("Size", 0),
                            last_modified=obj.get("LastModified"),
                        )
                        if key_filter is not None and not key_filter.search(
                            entry.full_uri
                        ):
                            continue
                        object_count += 1
                        yield entry

            except (BotoCoreError, ClientError) as e:
                error = translate_client_error(e, s3_uri)
                span.record_exception(error)
                logger.error("S3 listing failed", s3_uri=s3_uri, error=str(error))
                raise error from e
            finally:
                span.set_attribute("s3.prefix_count", prefix_count)
                span.set_attribute("s3.object_count", object_count)
                span.end()

            logger.debug(
                "S3 listing completed",
                s3_uri=s3_uri,
                prefix_count=prefix_count,
                object_count=object_count,
            )
