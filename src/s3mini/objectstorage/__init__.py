"""Object storage operations for S3-compatible services."""

from .address import S3Address, format_s3_uri, parse_s3_uri
from .clients import S3ClientConfig, S3ClientManager
from .download import S3Downloader
from .listing import (
    BucketResolver,
    EntryStream,
    ListingEntry,
    S3Lister,
    S3Search,
    list_s3_uris,
    ls,
)

__all__ = [
    "BucketResolver",
    "EntryStream",
    "ListingEntry",
    "S3Address",
    "S3ClientConfig",
    "S3ClientManager",
    "S3Downloader",
    "S3Lister",
    "S3Search",
    "format_s3_uri",
    "list_s3_uris",
    "ls",
    "parse_s3_uri",
]
