"""S3 address parsing and formatting.

Addresses take the form ``s3://bucket/key-prefix``. An address with exactly
two slashes (``s3://`` or ``s3://<bucket-prefix>``) names buckets rather than
keys; anything with three or more carries a key path.
"""

import posixpath
from dataclasses import dataclass

from s3mini.core.exceptions import ValidationError

SCHEME = "s3"
SCHEME_PREFIX = f"{SCHEME}://"


def parse_s3_uri(s3_uri: str) -> tuple[str, str]:
    """Split an S3 address into its bucket and key prefix.

    The bucket is the third ``/``-delimited segment and the key is every
    segment after it. Callers classify bucket-only addresses with
    ``is_bucket_only`` first; addresses with fewer than three segments
    produce an empty bucket.

    Args:
        s3_uri: Address in format s3://bucket/prefix

    Returns:
        Tuple of (bucket, key_prefix)
    """
    parts = s3_uri.split("/")
    bucket = parts[2] if len(parts) > 2 else ""
    return bucket, "/".join(parts[3:])


def format_s3_uri(bucket: str, key: str = "") -> str:
    """Join a bucket and key into a canonical S3 address.

    Path segments are joined and cleaned, so duplicate separators collapse
    and trailing separators are dropped: ``format_s3_uri("b", "x//y/")``
    is ``s3://b/x/y``.
    """
    joined = "/".join(part for part in (bucket, key) if part)
    if not joined:
        return SCHEME_PREFIX
    return SCHEME_PREFIX + posixpath.normpath(joined).lstrip("/")


def is_bucket_only(s3_uri: str) -> bool:
    """Return True when the address names a bucket prefix and no key."""
    return s3_uri.count("/") == 2


def validate_s3_uri(s3_uri: str) -> str:
    """Reject anything that is not an ``s3://`` address."""
    if not s3_uri.startswith(SCHEME_PREFIX):
        raise ValidationError(
            f"{s3_uri} not a valid S3 uri, Please enter a valid S3 uri. "
            "Ex: s3://mary/had/a/little/lamb"
        )
    return s3_uri


@dataclass(frozen=True)
class S3Address:
    """A parsed S3 address.

    Attributes:
        bucket: Bucket name (or bucket prefix for bucket-only addresses)
        key: Key or key prefix, empty for the bucket root
    """

    bucket: str
    key: str = ""

    @classmethod
    def parse(cls, s3_uri: str) -> "S3Address":
        bucket, key = parse_s3_uri(validate_s3_uri(s3_uri))
        return cls(bucket=bucket, key=key)

    @property
    def uri(self) -> str:
        return format_s3_uri(self.bucket, self.key)

    def __str__(self) -> str:
        return self.uri
