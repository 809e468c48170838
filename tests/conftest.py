"""Test configuration and fixtures for s3mini."""

import threading
import time
from datetime import datetime, timezone
from types import SimpleNamespace

import boto3
import pytest
from moto import mock_aws

SAMPLE_OBJECTS = {
    "data/2023/file1.txt": b"content1",
    "data/2023/q1/report.txt": b"quarterly",
    "data/2024/file2.txt": b"content2",
    "data/archive/file3.log": b"content3",
    "data/file4.txt": b"content4",
    "data/debug.log": b"log",
    "top.txt": b"top",
}

FIXED_TIME = datetime(2024, 5, 17, 12, 30, 45, tzinfo=timezone.utc)


@pytest.fixture
def aws_credentials(monkeypatch):
    """Point boto3 at fake credentials so nothing can reach AWS."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "test_key")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "test_secret")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")


@pytest.fixture
def s3_client(aws_credentials):
    """Mocked S3 client with a populated ``test-bucket``."""
    with mock_aws():
        client = boto3.client("s3", region_name="us-east-1")
        client.create_bucket(Bucket="test-bucket")
        for key, body in SAMPLE_OBJECTS.items():
            client.put_object(Bucket="test-bucket", Key=key, Body=body)
        yield client


class FakePaginator:
    def __init__(self, client):
        self.client = client

    def paginate(self, **params):
        return self.client._paginate(params)


class FakeS3Client:
    """In-memory stand-in for a boto3 S3 client.

    Records every pagination session and the peak number of sessions open at
    once. Each session yields pages of at most ``page_items`` entries,
    sleeping ``page_delay`` seconds before each page.
    """

    def __init__(
        self,
        objects=None,
        region="us-east-1",
        buckets=None,
        locations=None,
        errors=None,
        page_items=2,
        page_delay=0.0,
    ):
        self.objects = objects or {}
        self.meta = SimpleNamespace(region_name=region)
        self.buckets = buckets if buckets is not None else list(self.objects)
        self.locations = locations or {}
        self.errors = errors or {}
        self.page_items = page_items
        self.page_delay = page_delay

        self.sessions = []
        self.location_calls = []
        self.active = 0
        self.max_active = 0
        self._lock = threading.Lock()

    def get_paginator(self, operation_name):
        assert operation_name == "list_objects_v2"
        return FakePaginator(self)

    def list_buckets(self):
        return {"Buckets": [{"Name": name} for name in self.buckets]}

    def get_bucket_location(self, Bucket):
        self.location_calls.append(Bucket)
        return {"LocationConstraint": self.locations.get(Bucket)}

    def _paginate(self, params):
        with self._lock:
            self.sessions.append(params)
            self.active += 1
            self.max_active = max(self.max_active, self.active)
        try:
            error = self.errors.get((params["Bucket"], params["Prefix"]))
            if error is not None:
                raise error
            for page in self._pages(params):
                if self.page_delay:
                    time.sleep(self.page_delay)
                yield page
        finally:
            with self._lock:
                self.active -= 1

    def _pages(self, params):
        prefix = params["Prefix"]
        delimiter = params.get("Delimiter", "")
        common_prefixes = []
        contents = []
        for key in sorted(self.objects.get(params["Bucket"], {})):
            if not key.startswith(prefix):
                continue
            rest = key[len(prefix):]
            if delimiter and delimiter in rest:
                common = prefix + rest.split(delimiter, 1)[0] + delimiter
                if {"Prefix": common} not in common_prefixes:
                    common_prefixes.append({"Prefix": common})
                continue
            contents.append(
                {
                    "Key": key,
                    "Size": self.objects[params["Bucket"]][key],
                    "LastModified": FIXED_TIME,
                }
            )

        items = [("CommonPrefixes", p) for p in common_prefixes]
        items += [("Contents", c) for c in contents]
        if not items:
            yield {"KeyCount": 0}
            return
        for start in range(0, len(items), self.page_items):
            page = {"CommonPrefixes": [], "Contents": []}
            for field, item in items[start:start + self.page_items]:
                page[field].append(item)
            yield page


@pytest.fixture
def fake_client_factory():
    """Build FakeS3Client instances; objects map bucket -> {key: size}."""
    return FakeS3Client
