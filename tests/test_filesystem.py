"""Tests for the S3-backed file system against a mocked bucket."""

import io
from datetime import datetime
from unittest.mock import patch

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError

from bucketfs.core.exceptions import (
    FileConflictError,
    PathNotFoundError,
    StorageOperationError,
    ValidationError,
)
from bucketfs.filesystem import MIN_TIMESTAMP, HierarchicalFileSystem, S3FileSystem
from bucketfs.schemas import S3StorageConfig
from conftest import BUCKET, bucket_keys, put_objects


def server_error(operation):
    return ClientError(
        {"Error": {"Code": "InternalError", "Message": "boom"}}, operation
    )


class TestDirectories:
    """Test simulated directory operations."""

    def test_directory_exists(self, filesystem, s3):
        """Test a directory exists iff some key has its prefix."""
        put_objects(s3, "media/123/a.jpg")

        assert filesystem.directory_exists("123") is True
        assert filesystem.directory_exists("media/123") is True
        assert filesystem.directory_exists("12") is False
        assert filesystem.directory_exists("456") is False

    def test_delete_directory(self, filesystem, s3):
        """Test deleting a directory removes its files and its existence."""
        put_objects(s3, "media/123/a.jpg", "media/123/b.jpg", "media/1234/c.jpg")

        filesystem.delete_directory("media/123", recursive=True)

        assert filesystem.directory_exists("media/123") is False
        assert bucket_keys(s3) == ["media/1234/c.jpg"]

    def test_delete_directory_is_always_full_depth(self, filesystem, s3):
        """Test nested files are deleted even when recursive is False."""
        put_objects(s3, "media/123/a.jpg", "media/123/sub/b.jpg")

        filesystem.delete_directory("123")

        assert bucket_keys(s3) == []

    def test_delete_directory_with_many_keys(self, filesystem, s3, events):
        """Test a directory larger than one batch is fully deleted."""
        put_objects(s3, *[f"media/big/{i:02d}.bin" for i in range(7)])

        with patch.object(s3, "delete_objects", wraps=s3.delete_objects) as spy:
            filesystem.delete_directory("big")

        assert spy.call_count == 4
        assert bucket_keys(s3) == []
        deleted = [
            fields for event, _, fields in events.events if event == "prefix_deleted"
        ]
        assert deleted[0]["key_count"] == 7

    def test_delete_missing_directory_is_noop(self, filesystem, s3):
        """Test no delete request is sent for a missing directory."""
        with patch.object(s3, "delete_objects") as delete_objects:
            filesystem.delete_directory("nothing")

        delete_objects.assert_not_called()

    def test_absolute_host_path_under_media_root(self, filesystem, s3):
        """Test "/media/..." paths address the same keys as relative ones."""
        put_objects(s3, "media/1001/img.jpg")

        assert filesystem.directory_exists("/media/1001") is True
        assert filesystem.file_exists("/media/1001/img.jpg") is True
        assert (
            filesystem.get_url("/media/1001/img.jpg")
            == "https://mybucket.s3.amazonaws.com/media/1001/img.jpg"
        )

        filesystem.delete_directory("/media/1001")

        assert bucket_keys(s3) == []

    @pytest.mark.parametrize("path", ["", None, "/", "media", "/media/"])
    def test_delete_media_root_is_refused(self, filesystem, s3, path):
        """Test an empty path or the media root itself deletes nothing."""
        put_objects(s3, "media/a/1.txt", "media/top.txt")

        with patch.object(s3, "delete_objects") as delete_objects:
            filesystem.delete_directory(path, recursive=True)

        delete_objects.assert_not_called()
        assert bucket_keys(s3) == ["media/a/1.txt", "media/top.txt"]

    @pytest.mark.parametrize("path", ["", None, "/"])
    def test_delete_bucket_root_is_refused(self, s3, events, path):
        """Test the whole bucket is never emptied when no media root is set."""
        put_objects(s3, "a/1.txt", "b/2.txt", "top.txt")
        filesystem = S3FileSystem(
            S3StorageConfig(bucket_name=BUCKET), client=s3, events=events
        )

        filesystem.delete_directory(path)

        assert bucket_keys(s3) == ["a/1.txt", "b/2.txt", "top.txt"]
        assert "prefix_deleted" not in events.names()

    def test_get_directories(self, filesystem, s3):
        """Test immediate subdirectories are listed as full keys."""
        put_objects(
            s3, "media/a/1.txt", "media/b/2.txt", "media/b/c/3.txt", "media/4.txt"
        )

        assert filesystem.get_directories("") == ["media/a", "media/b"]
        assert filesystem.get_directories("b") == ["media/b/c"]

    def test_get_files(self, filesystem, s3):
        """Test file names under a directory include nested files."""
        put_objects(s3, "media/a/1.txt", "media/a/sub/2.txt", "media/ab/3.txt")

        assert filesystem.get_files("a") == ["1.txt", "2.txt"]
        assert filesystem.get_files("a", filter="*.jpg") == ["1.txt", "2.txt"]

    def test_get_directories_failure_returns_empty(self, filesystem, s3, events):
        """Test a failing listing degrades to an empty result."""
        error = server_error("ListObjectsV2")
        with patch.object(s3, "get_paginator", side_effect=error):
            assert filesystem.get_directories("") == []

        assert events.names() == ["listing_failed"]


class TestFiles:
    """Test single-object file operations."""

    def test_add_and_open_file(self, filesystem, s3):
        """Test an uploaded file is stored under the media root and read back."""
        filesystem.add_file("123/img.jpg", b"image-bytes")

        assert bucket_keys(s3) == ["media/123/img.jpg"]
        assert filesystem.open_file("123/img.jpg").read() == b"image-bytes"

    def test_add_file_from_stream(self, filesystem):
        """Test binary file objects are buffered and uploaded."""
        filesystem.add_file("doc.txt", io.BytesIO(b"streamed"))

        stream = filesystem.open_file("media/doc.txt")
        assert isinstance(stream, io.BytesIO)
        assert stream.read() == b"streamed"

    def test_add_file_without_overwrite_conflicts(self, filesystem):
        """Test writing onto an existing key without overwrite fails."""
        filesystem.add_file("a.txt", b"first")

        with pytest.raises(FileConflictError, match="already exists"):
            filesystem.add_file("a.txt", b"second", overwrite=False)

        assert filesystem.open_file("a.txt").read() == b"first"

    def test_add_file_with_overwrite_replaces(self, filesystem):
        """Test overwrite replaces the content."""
        filesystem.add_file("a.txt", b"first")
        filesystem.add_file("a.txt", b"second", overwrite=True)

        assert filesystem.open_file("a.txt").read() == b"second"

    def test_add_new_file_without_overwrite(self, filesystem):
        """Test overwrite=False is fine for new keys."""
        filesystem.add_file("new.txt", b"data", overwrite=False)

        assert filesystem.file_exists("new.txt") is True

    def test_add_file_applies_acl(self, filesystem, s3):
        """Test uploads carry the configured canned ACL."""
        with patch.object(s3, "put_object", wraps=s3.put_object) as spy:
            filesystem.add_file("a.txt", b"data")

        assert spy.call_args.kwargs["ACL"] == "public-read"

    def test_add_file_rejects_text(self, filesystem):
        """Test text content is rejected."""
        with pytest.raises(ValidationError, match="bytes or a binary file"):
            filesystem.add_file("a.txt", io.StringIO("text"))

    def test_add_file_store_failure_is_swallowed(self, filesystem, s3, events):
        """Test an upload failure is reported but not raised."""
        with patch.object(s3, "put_object", side_effect=server_error("PutObject")):
            filesystem.add_file("a.txt", b"data")

        assert events.errors()[0][1]["operation"] == "add_file"
        assert bucket_keys(s3) == []

    def test_file_exists_is_exact(self, filesystem, s3):
        """Test file existence checks the exact key, not a prefix."""
        put_objects(s3, "media/123/img.jpg")

        assert filesystem.file_exists("123/img.jpg") is True
        assert filesystem.file_exists("123/img") is False
        assert filesystem.file_exists("123") is False

    def test_file_exists_store_failure(self, filesystem, s3, events):
        """Test a failing lookup reports a missing file."""
        put_objects(s3, "media/a.txt")

        with patch.object(s3, "head_object", side_effect=server_error("HeadObject")):
            assert filesystem.file_exists("a.txt") is False

        assert events.names() == ["store_call_failed"]

    def test_open_missing_file(self, filesystem):
        """Test reading a missing file raises PathNotFoundError."""
        with pytest.raises(PathNotFoundError, match="media/missing.txt"):
            filesystem.open_file("missing.txt")

    def test_open_file_store_failure(self, filesystem, s3):
        """Test transport failures during a read raise StorageOperationError."""
        error = EndpointConnectionError(endpoint_url="https://s3.amazonaws.com")
        with patch.object(s3, "get_object", side_effect=error):
            with pytest.raises(StorageOperationError, match="Failed to read"):
                filesystem.open_file("a.txt")

    def test_delete_file(self, filesystem, s3, events):
        """Test deleting a file removes only that key."""
        put_objects(s3, "media/a.txt", "media/b.txt")

        filesystem.delete_file("a.txt")

        assert bucket_keys(s3) == ["media/b.txt"]
        assert "file_deleted" in events.names()

    def test_delete_missing_file_is_noop(self, filesystem, s3):
        """Test deleting a missing file sends no delete request."""
        with patch.object(s3, "delete_object") as delete_object:
            filesystem.delete_file("missing.txt")

        delete_object.assert_not_called()


class TestTimestamps:
    """Test last-modified and created lookups."""

    def test_last_modified(self, filesystem, s3):
        """Test the store's timestamp is returned."""
        put_objects(s3, "media/a.txt")

        modified = filesystem.get_last_modified("a.txt")

        assert isinstance(modified, datetime)
        assert modified > MIN_TIMESTAMP

    def test_created_matches_last_modified(self, filesystem, s3):
        """Test created time delegates to last-modified."""
        put_objects(s3, "media/a.txt")

        assert filesystem.get_created("a.txt") == filesystem.get_last_modified("a.txt")

    def test_missing_file_returns_min_timestamp(self, filesystem, events):
        """Test a missing key yields the minimum timestamp instead of an error."""
        assert filesystem.get_last_modified("missing.txt") == MIN_TIMESTAMP
        assert filesystem.get_created("missing.txt") == MIN_TIMESTAMP
        assert events.errors()[0][1]["operation"] == "get_last_modified"


class TestPathsAndUrls:
    """Test relative path, full path and URL conversions."""

    def test_get_url(self, filesystem):
        """Test the documented URL example."""
        assert (
            filesystem.get_url("123/img.jpg")
            == "https://mybucket.s3.amazonaws.com/media/123/img.jpg"
        )

    def test_get_full_path(self, filesystem):
        """Test full paths carry the media root once."""
        assert filesystem.get_full_path("123/img.jpg") == "media/123/img.jpg"
        assert filesystem.get_full_path("media/123/img.jpg") == "media/123/img.jpg"

    def test_get_relative_path_from_url(self, filesystem):
        """Test URLs of this bucket are turned back into keys."""
        url = filesystem.get_url("123/img.jpg")

        assert filesystem.get_relative_path(url) == "media/123/img.jpg"
        assert filesystem.get_relative_path("123/img.jpg") == "media/123/img.jpg"
        assert filesystem.get_relative_path("") == ""
        assert filesystem.get_relative_path(None) == ""

    def test_url_round_trip_through_file(self, filesystem):
        """Test a file can be opened through its own URL's relative path."""
        filesystem.add_file("123/img.jpg", b"data")

        key = filesystem.get_relative_path(filesystem.get_url("123/img.jpg"))

        assert filesystem.open_file(key).read() == b"data"


class TestConstruction:
    """Test file system construction and bucket probing."""

    def test_satisfies_file_system_contract(self, filesystem):
        """Test the implementation provides every contract operation."""
        for name in [
            name for name in dir(HierarchicalFileSystem) if not name.startswith("_")
        ]:
            assert callable(getattr(filesystem, name))

    def test_bucket_exists(self, filesystem):
        """Test the bucket probe finds the configured bucket."""
        assert filesystem.bucket_exists() is True

    def test_bucket_missing(self, s3):
        """Test the bucket probe reports unknown buckets."""
        config = S3StorageConfig(bucket_name="unknown-bucket")
        assert S3FileSystem(config, client=s3).bucket_exists() is False

    def test_client_created_from_config(self, s3, config):
        """Test a boto3 client is created lazily when none is injected."""
        filesystem = S3FileSystem(config)
        filesystem.add_file("a.txt", b"data")

        assert bucket_keys(s3) == ["media/a.txt"]
        assert filesystem.client.meta.region_name == "us-east-1"

    def test_no_acl(self, s3):
        """Test uploads omit the ACL when none is configured."""
        config = S3StorageConfig(bucket_name=BUCKET, object_acl=None)
        filesystem = S3FileSystem(config, client=s3)

        with patch.object(s3, "put_object", wraps=s3.put_object) as spy:
            filesystem.add_file("a.txt", b"data")

        assert "ACL" not in spy.call_args.kwargs
        assert bucket_keys(s3) == ["a.txt"]
