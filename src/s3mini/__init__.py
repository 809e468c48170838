"""Fast, concurrent listing of S3 keys and prefixes.

s3mini lists one or more ``s3://`` addresses at once, bounding how many
pagination sessions run in parallel, and can walk a number of prefix levels
breadth-first before a final (optionally recursive) listing.

Recommended Usage:
    >>> from s3mini import list_s3_uris
    >>> entries = list_s3_uris(["s3://bucket/logs/"], search_depth=2)

Streaming Usage:
    Use an explicit client and consume entries as they arrive:

    >>> import boto3
    >>> from s3mini import ls
    >>> with ls(boto3.client("s3"), ["s3://bucket/"], recursive=True) as entries:
    ...     for entry in entries:
    ...         print(entry.full_uri)
"""

__version__ = "0.1.0"

from .core.exceptions import (
    AuthorizationRegionError,
    BucketRegionError,
    ListingError,
    MissingRegionError,
    RegionError,
    S3MiniError,
    ValidationError,
)
from .objectstorage import (
    BucketResolver,
    EntryStream,
    ListingEntry,
    S3Address,
    S3ClientConfig,
    S3ClientManager,
    S3Downloader,
    S3Lister,
    S3Search,
    format_s3_uri,
    list_s3_uris,
    ls,
    parse_s3_uri,
)

__all__ = [
    # Listing
    "BucketResolver",
    "EntryStream",
    "ListingEntry",
    "S3Lister",
    "S3Search",
    "list_s3_uris",
    "ls",
    # Addresses
    "S3Address",
    "format_s3_uri",
    "parse_s3_uri",
    # Clients and downloads
    "S3ClientConfig",
    "S3ClientManager",
    "S3Downloader",
    # Errors
    "AuthorizationRegionError",
    "BucketRegionError",
    "ListingError",
    "MissingRegionError",
    "RegionError",
    "S3MiniError",
    "ValidationError",
]
