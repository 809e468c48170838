"""Normalized listing entries produced by the listing engine."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from s3mini.objectstorage.address import format_s3_uri


@dataclass(frozen=True)
class ListingEntry:
    """A single prefix or object found while listing.

    Attributes:
        is_prefix: True for common prefixes (and bare bucket roots)
        key: Unescaped key or prefix, relative to the bucket
        full_uri: Canonical S3 address of the entry, including the bucket
        size: Object size in bytes, always 0 for prefixes
        last_modified: Object modification time, always None for prefixes
        bucket: Bucket the entry belongs to
    """

    is_prefix: bool
    key: str
    full_uri: str
    size: int = 0
    last_modified: Optional[datetime] = None
    bucket: str = ""

    def __post_init__(self):
        if self.is_prefix and (self.size or self.last_modified is not None):
            raise ValueError(
                f"Prefix entry {self.full_uri} cannot carry size or timestamp"
            )

    @classmethod
    def for_prefix(cls, bucket: str, key: str) -> "ListingEntry":
        return cls(
            is_prefix=True,
            key=key,
            full_uri=format_s3_uri(bucket, key),
            bucket=bucket,
        )

    @classmethod
    def for_object(
        cls,
        bucket: str,
        key: str,
        size: int,
        last_modified: Optional[datetime],
    ) -> "ListingEntry":
        return cls(
            is_prefix=False,
            key=key,
            full_uri=format_s3_uri(bucket, key),
            size=size,
            last_modified=last_modified,
            bucket=bucket,
        )
