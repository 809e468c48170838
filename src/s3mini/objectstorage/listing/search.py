"""Depth-limited, breadth-first listing across S3 addresses.

A plain recursive listing of a huge, flat keyspace is a single pagination
session that cannot be spread over connections. ``search_depth`` first walks
that many prefix levels breadth-first, one round per level. Each round lists
the whole frontier in parallel. The prefixes it finds become the next
frontier. The objects it finds are final results. A last pass then lists the
final frontier, recursively if asked.
"""

from typing import Iterable, Optional

from s3mini.core import get_logger, settings
from s3mini.core.exceptions import ValidationError
from s3mini.objectstorage.address import validate_s3_uri
from s3mini.objectstorage.clients import S3ClientConfig, S3ClientManager
from s3mini.objectstorage.listing.buckets import BucketResolver
from s3mini.objectstorage.listing.engine import S3Lister, compile_key_regex
from s3mini.objectstorage.listing.entries import ListingEntry
from s3mini.objectstorage.listing.stream import EntrySink, EntryStream

logger = get_logger(__name__)


class S3Search:
    """Runs depth-limited prefix expansion followed by a final listing."""

    def __init__(self, lister: S3Lister, resolver: Optional[BucketResolver] = None):
        self.lister = lister
        self.resolver = resolver or BucketResolver(lister.client)

    def search(
        self,
        s3_uris: Iterable[str],
        recursive: bool = False,
        delimiter: str = "/",
        search_depth: int = 0,
        key_regex: Optional[str] = None,
    ) -> EntryStream:
        """List addresses, expanding prefixes for ``search_depth`` rounds.

        Bucket-only addresses are resolved before this returns, so bucket
        listing errors raise immediately; listing errors raise from the
        returned stream.

        Args:
            s3_uris: S3 addresses, full or bucket-only
            recursive: Whether the final pass lists every nested key
            delimiter: Character used to group keys into prefixes
            search_depth: Number of prefix expansion rounds before the
                final pass
            key_regex: Regex filter applied to object addresses

        Returns:
            EntryStream of every entry found

        Raises:
            ValidationError: If an address, search_depth or key_regex is invalid
            ListingError: If bucket resolution fails
        """
        s3_uris = [validate_s3_uri(s3_uri) for s3_uri in s3_uris]
        if search_depth < 0:
            raise ValidationError(f"search_depth must be >= 0, got: {search_depth}")
        compile_key_regex(key_regex)

        logger.info(
            "Starting S3 search",
            uri_count=len(s3_uris),
            recursive=recursive,
            search_depth=search_depth,
        )
        frontier, bucket_entries = self.resolver.resolve(
            s3_uris, recursive=recursive, search_depth=search_depth
        )

        stream = EntryStream(self.lister.buffer_size)
        return stream.start(
            self._expand,
            bucket_entries,
            frontier,
            recursive,
            delimiter,
            search_depth,
            key_regex,
            name="s3mini-search",
        )

    def _expand(
        self,
        sink: EntrySink,
        bucket_entries: list[ListingEntry],
        frontier: list[str],
        recursive: bool,
        delimiter: str,
        search_depth: int,
        key_regex: Optional[str],
    ) -> None:
        for entry in bucket_entries:
            if not sink.put(entry):
                return

        for round_number in range(1, search_depth + 1):
            next_frontier: list[str] = []
            with self.lister.list_all(
                frontier, recursive=False, delimiter=delimiter, key_regex=key_regex
            ) as entries:
                for entry in entries:
                    if sink.closed:
                        return
                    if entry.is_prefix:
                        # Raw key keeps repeated delimiters the address form collapses
                        next_frontier.append(f"s3://{entry.bucket}/{entry.key}")
                    elif not sink.put(entry):
                        return

            logger.info(
                "Search round completed",
                round=round_number,
                listed=len(frontier),
                discovered=len(next_frontier),
            )
            frontier = next_frontier

        with self.lister.list_all(
            frontier, recursive=recursive, delimiter=delimiter, key_regex=key_regex
        ) as entries:
            for entry in entries:
                if not sink.put(entry):
                    return


def ls(
    client,
    s3_uris: Iterable[str],
    recursive: bool = False,
    delimiter: Optional[str] = None,
    search_depth: Optional[int] = None,
    key_regex: Optional[str] = None,
    max_parallel: Optional[int] = None,
) -> EntryStream:
    """List S3 keys and prefixes with an explicit client.

    Args:
        client: boto3 S3 client
        s3_uris: S3 addresses to list
        recursive: Whether to list everything under each address
        delimiter: Prefix grouping character, defaults to settings
        search_depth: Prefix levels to expand before the final listing
        key_regex: Regex filter applied to object addresses
        max_parallel: Maximum concurrent pagination sessions

    Returns:
        EntryStream of listing entries
    """
    lister = S3Lister(client, max_parallel=max_parallel)
    return S3Search(lister).search(
        s3_uris,
        recursive=recursive,
        delimiter=settings.delimiter if delimiter is None else delimiter,
        search_depth=settings.search_depth if search_depth is None else search_depth,
        key_regex=key_regex,
    )


def list_s3_uris(
    s3_uris: Iterable[str],
    recursive: bool = False,
    delimiter: Optional[str] = None,
    search_depth: Optional[int] = None,
    key_regex: Optional[str] = None,
    max_parallel: Optional[int] = None,
    access_key_id: Optional[str] = None,
    secret_access_key: Optional[str] = None,
    session_token: Optional[str] = None,
    region_name: Optional[str] = None,
    endpoint_url: Optional[str] = None,
    aws_profile: Optional[str] = None,
) -> list[ListingEntry]:
    """Convenience function to list S3 addresses into a list.

    Args:
        s3_uris: S3 addresses to list
        recursive: Whether to list everything under each address
        delimiter: Prefix grouping character
        search_depth: Prefix levels to expand before the final listing
        key_regex: Regex filter applied to object addresses
        max_parallel: Maximum concurrent pagination sessions
        access_key_id: AWS access key ID
        secret_access_key: AWS secret access key
        session_token: AWS session token for temporary credentials
        region_name: AWS region name
        endpoint_url: Custom S3 endpoint URL
        aws_profile: AWS CLI profile name

    Returns:
        Every entry found, in no particular order
    """
    parallel = settings.max_parallel if max_parallel is None else max_parallel
    if parallel < 1:
        raise ValidationError(f"max_parallel must be at least 1, got: {parallel}")
    config = S3ClientConfig(
        access_key_id=access_key_id,
        secret_access_key=secret_access_key,
        session_token=session_token,
        region_name=region_name,
        endpoint_url=endpoint_url,
        aws_profile=aws_profile,
        max_pool_connections=parallel,
    )
    client = S3ClientManager(config).client

    with ls(
        client,
        s3_uris,
        recursive=recursive,
        delimiter=delimiter,
        search_depth=search_depth,
        key_regex=key_regex,
        max_parallel=parallel,
    ) as entries:
        return list(entries)
