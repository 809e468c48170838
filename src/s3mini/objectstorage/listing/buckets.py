"""Expansion of bucket-only addresses into concrete buckets."""

from typing import Iterable, Optional

from botocore.exceptions import BotoCoreError, ClientError

from s3mini.core import get_logger
from s3mini.objectstorage.address import format_s3_uri, is_bucket_only, parse_s3_uri
from s3mini.objectstorage.errors import translate_client_error
from s3mini.objectstorage.listing.entries import ListingEntry

logger = get_logger(__name__)


class BucketResolver:
    """Resolves ``s3://<bucket-prefix>`` addresses against the visible buckets."""

    def __init__(self, client, region: Optional[str] = None):
        """Initialize bucket resolver.

        Args:
            client: boto3 S3 client
            region: Region buckets must live in to be listed beyond their
                root, defaults to the client's region
        """
        self.client = client
        self.region = region if region is not None else client.meta.region_name

    def list_buckets(self, s3_uri: str) -> list[str]:
        """Return bucket names starting with the address's bucket prefix.

        Args:
            s3_uri: Bucket-only address such as ``s3://`` or ``s3://logs-``

        Returns:
            Matching bucket names in the order the store returned them

        Raises:
            ListingError: If the buckets cannot be listed
        """
        bucket_prefix, _ = parse_s3_uri(s3_uri)
        try:
            response = self.client.list_buckets()
        except (BotoCoreError, ClientError) as e:
            raise translate_client_error(e, s3_uri) from e

        buckets = [
            bucket["Name"]
            for bucket in response.get("Buckets", [])
            if bucket.get("Name") and bucket["Name"].startswith(bucket_prefix)
        ]
        logger.info(
            "Buckets listed", bucket_prefix=bucket_prefix, bucket_count=len(buckets)
        )
        return buckets

    def bucket_in_region(self, bucket: str) -> bool:
        """Check whether a bucket can be listed with the configured region.

        Buckets without a location constraint count as in-region whatever
        the configured region is.
        """
        try:
            response = self.client.get_bucket_location(Bucket=bucket)
        except (BotoCoreError, ClientError) as e:
            raise translate_client_error(e, format_s3_uri(bucket)) from e

        constraint = response.get("LocationConstraint")
        return not constraint or constraint == self.region

    def resolve(
        self,
        s3_uris: Iterable[str],
        recursive: bool = False,
        search_depth: int = 0,
    ) -> tuple[list[str], list[ListingEntry]]:
        """Expand bucket-only addresses.

        When the caller will list beyond the bucket root (``recursive`` or
        ``search_depth > 0``), every matching bucket in the configured region
        becomes a listable address; buckets elsewhere are dropped, since
        listing them would fail. Otherwise each matching bucket is itself a
        final result and is returned as a bare prefix entry, with no region
        lookup.

        Args:
            s3_uris: Addresses as given by the user
            recursive: Whether the listing will be recursive
            search_depth: Number of prefix expansion rounds

        Returns:
            Tuple of (addresses to list, bucket entries to emit as-is)
        """
        expand = recursive or search_depth > 0
        resolved: list[str] = []
        bucket_entries: list[ListingEntry] = []

        for s3_uri in s3_uris:
            if not is_bucket_only(s3_uri):
                resolved.append(s3_uri)
                continue

            for bucket in self.list_buckets(s3_uri):
                if not expand:
                    bucket_entries.append(ListingEntry.for_prefix(bucket, ""))
                elif self.bucket_in_region(bucket):
                    resolved.append(format_s3_uri(bucket))
                else:
                    logger.info(
                        "Skipping bucket outside configured region",
                        bucket=bucket,
                        region=self.region,
                    )

        return resolved, bucket_entries
