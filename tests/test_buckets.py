"""Tests for expanding bucket-only addresses."""

import boto3
import pytest
from botocore.exceptions import ClientError

from s3mini.core.exceptions import ListingError
from s3mini.objectstorage.listing import BucketResolver, ls


@pytest.fixture
def regional_buckets(s3_client):
    """Buckets in us-east-1 plus one constrained to eu-west-1."""
    s3_client.create_bucket(Bucket="my-alpha")
    s3_client.create_bucket(Bucket="my-beta")
    s3_client.create_bucket(Bucket="other")
    eu_client = boto3.client("s3", region_name="eu-west-1")
    eu_client.create_bucket(
        Bucket="my-eu",
        CreateBucketConfiguration={"LocationConstraint": "eu-west-1"},
    )
    s3_client.put_object(Bucket="my-alpha", Key="logs/a.txt", Body=b"a")
    eu_client.put_object(Bucket="my-eu", Key="logs/eu.txt", Body=b"eu")
    return s3_client


class TestBucketResolverWithMoto:
    """Test bucket resolution against mocked S3."""

    def test_list_buckets_by_prefix(self, regional_buckets):
        resolver = BucketResolver(regional_buckets)

        assert sorted(resolver.list_buckets("s3://my-")) == [
            "my-alpha",
            "my-beta",
            "my-eu",
        ]

    def test_empty_prefix_matches_all(self, regional_buckets):
        resolver = BucketResolver(regional_buckets)

        assert sorted(resolver.list_buckets("s3://")) == [
            "my-alpha",
            "my-beta",
            "my-eu",
            "other",
            "test-bucket",
        ]

    def test_bucket_in_region(self, regional_buckets):
        resolver = BucketResolver(regional_buckets)

        assert resolver.bucket_in_region("my-alpha") is True
        assert resolver.bucket_in_region("my-eu") is False

    def test_resolve_recursive_drops_other_regions(self, regional_buckets):
        resolver = BucketResolver(regional_buckets)
        frontier, bucket_entries = resolver.resolve(["s3://my-"], recursive=True)

        assert sorted(frontier) == ["s3://my-alpha", "s3://my-beta"]
        assert bucket_entries == []

    def test_resolve_without_expansion_emits_buckets(self, regional_buckets):
        resolver = BucketResolver(regional_buckets)
        frontier, bucket_entries = resolver.resolve(["s3://my-"])

        assert frontier == []
        assert sorted(e.full_uri for e in bucket_entries) == [
            "s3://my-alpha",
            "s3://my-beta",
            "s3://my-eu",
        ]
        assert all(e.is_prefix and e.key == "" for e in bucket_entries)

    def test_recursive_search_skips_out_of_region_bucket(self, regional_buckets):
        entries = list(ls(regional_buckets, ["s3://my-"], recursive=True))

        assert [e.full_uri for e in entries] == ["s3://my-alpha/logs/a.txt"]

    def test_full_addresses_pass_through(self, regional_buckets):
        resolver = BucketResolver(regional_buckets)
        frontier, _ = resolver.resolve(["s3://my-eu/logs/"], recursive=True)

        assert frontier == ["s3://my-eu/logs/"]


class TestBucketResolverWithFakeClient:
    """Test resolution details that moto cannot express."""

    def test_bucket_only_search_has_no_region_lookups(self, fake_client_factory):
        client = fake_client_factory(
            buckets=["my-a", "my-b", "yours"],
            locations={"my-b": "ap-south-1"},
        )

        entries = list(ls(client, ["s3://my-"]))

        assert sorted(e.full_uri for e in entries) == ["s3://my-a", "s3://my-b"]
        assert all(e.is_prefix and e.size == 0 for e in entries)
        assert client.location_calls == []
        assert client.sessions == []

    def test_search_depth_triggers_region_filter(self, fake_client_factory):
        client = fake_client_factory(
            {"my-a": {"k": 1}, "my-b": {"k": 1}},
            locations={"my-b": "ap-south-1"},
        )

        entries = list(ls(client, ["s3://my-"], search_depth=1))

        assert sorted(client.location_calls) == ["my-a", "my-b"]
        assert [e.full_uri for e in entries] == ["s3://my-a/k"]

    def test_empty_bucket_names_are_skipped(self, fake_client_factory):
        client = fake_client_factory(buckets=["", "alpha"])

        assert BucketResolver(client).list_buckets("s3://") == ["alpha"]

    def test_unconstrained_bucket_counts_as_any_region(self, fake_client_factory):
        """Buckets without a location constraint are kept in every region."""
        client = fake_client_factory(
            buckets=["legacy", "local", "remote"],
            region="eu-west-1",
            locations={"local": "eu-west-1", "remote": "us-west-2"},
        )
        resolver = BucketResolver(client)

        frontier, _ = resolver.resolve(["s3://"], recursive=True)

        assert frontier == ["s3://legacy", "s3://local"]

    def test_explicit_region_overrides_client(self, fake_client_factory):
        client = fake_client_factory(buckets=["b"], locations={"b": "us-west-2"})

        assert BucketResolver(client, region="us-west-2").bucket_in_region("b")

    def test_bucket_listing_errors_are_translated(self, fake_client_factory):
        client = fake_client_factory()

        def denied():
            raise ClientError(
                {"Error": {"Code": "AccessDenied", "Message": "Access Denied"}},
                "ListBuckets",
            )

        client.list_buckets = denied

        with pytest.raises(ListingError, match="Access Denied"):
            ls(client, ["s3://"], recursive=True)
