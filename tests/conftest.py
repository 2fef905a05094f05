"""Test configuration and fixtures for bucketfs."""

import boto3
import pytest
from moto import mock_aws

from bucketfs.filesystem import S3FileSystem
from bucketfs.schemas import S3StorageConfig

BUCKET = "mybucket"


class RecordingEventSink:
    """Event sink that keeps every emitted event for assertions."""

    def __init__(self):
        self.events = []

    def emit(self, event, level="info", **fields):
        self.events.append((event, level, fields))

    def names(self):
        return [event for event, _, _ in self.events]

    def errors(self):
        return [
            (event, fields) for event, level, fields in self.events if level == "error"
        ]


@pytest.fixture
def aws_credentials(monkeypatch):
    """Point boto3 at fake credentials so nothing reaches real AWS."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "test_key")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "test_secret")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")
    monkeypatch.delenv("AWS_PROFILE", raising=False)


@pytest.fixture
def s3(aws_credentials):
    """Create a mocked S3 client with an empty bucket."""
    with mock_aws():
        client = boto3.client("s3", region_name="us-east-1")
        client.create_bucket(Bucket=BUCKET)
        yield client


@pytest.fixture
def events():
    return RecordingEventSink()


@pytest.fixture
def config():
    return S3StorageConfig(
        bucket_name=BUCKET,
        region="us-east-1",
        media_root="media",
        access_key_id="test_key",
        secret_access_key="test_secret",
    )


@pytest.fixture
def filesystem(s3, config, events):
    """File system over the mocked bucket with small pages and batches."""
    return S3FileSystem(config, client=s3, events=events, page_size=2, batch_size=2)


def put_objects(client, *keys, body=b"content"):
    """Store each key in the test bucket."""
    for key in keys:
        client.put_object(Bucket=BUCKET, Key=key, Body=body)


def bucket_keys(client):
    """Return every key currently in the test bucket."""
    paginator = client.get_paginator("list_objects_v2")
    return sorted(
        obj["Key"]
        for page in paginator.paginate(Bucket=BUCKET)
        for obj in page.get("Contents", [])
    )
