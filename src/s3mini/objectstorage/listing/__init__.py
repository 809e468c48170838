"""Object storage listing operations."""

from .buckets import BucketResolver
from .engine import S3Lister
from .entries import ListingEntry
from .search import S3Search, list_s3_uris, ls
from .stream import EntryStream

__all__ = [
    "BucketResolver",
    "EntryStream",
    "ListingEntry",
    "S3Lister",
    "S3Search",
    "list_s3_uris",
    "ls",
]
