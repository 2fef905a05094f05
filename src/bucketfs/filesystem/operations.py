"""File-system operations backed by an S3 bucket.

This module maps the hierarchical file-system contract onto flat object
keys. Directory operations are built from prefix listings and batched
deletes; file operations address single keys.

Store failures are reported through the event sink and turned into fallback
results (empty lists, ``False``, :data:`MIN_TIMESTAMP` or a silent no-op),
so callers cannot tell "absent" from "lookup failed". Reading a file is the
one exception and raises instead.

Known limitations:
    - ``delete_directory`` always deletes at full depth, whatever the
      ``recursive`` flag says, because the key listing does not distinguish
      depth.
    - File bodies are buffered in memory on read and on write.
    - A directory delete racing a concurrent write into the same prefix may
      or may not remove the new key.
"""

import io
import os
import posixpath
from datetime import datetime, timezone
from typing import Any, BinaryIO, Optional

from botocore.exceptions import BotoCoreError, ClientError

from bucketfs.core import EventSink, StructlogEventSink, get_logger
from bucketfs.core.exceptions import (
    FileConflictError,
    PathNotFoundError,
    StorageOperationError,
    ValidationError,
)
from bucketfs.filesystem.base import FileData
from bucketfs.objectstorage.clients import S3ClientManager
from bucketfs.objectstorage.deletion import S3BulkDeleter
from bucketfs.objectstorage.listing import S3PrefixLister
from bucketfs.path import PathNormalizer, UrlBuilder
from bucketfs.schemas import S3StorageConfig

logger = get_logger(__name__)

# Returned when a timestamp lookup fails
MIN_TIMESTAMP = datetime.min.replace(tzinfo=timezone.utc)

_MISSING_KEY_CODES = frozenset({"404", "NoSuchKey", "NotFound"})


def _is_missing_key(error: ClientError) -> bool:
    return error.response.get("Error", {}).get("Code") in _MISSING_KEY_CODES


def _read_all(data: FileData) -> bytes:
    """Buffer the whole payload in memory."""
    if isinstance(data, (bytes, bytearray)):
        return bytes(data)
    if hasattr(data, "read"):
        content = data.read()
        if isinstance(content, (bytes, bytearray)):
            return bytes(content)
    raise ValidationError(
        "File data must be bytes or a binary file object, "
        f"got: {type(data).__name__}"
    )


class S3FileSystem:
    """A hierarchical file system stored in a single S3 bucket."""

    def __init__(
        self,
        config: S3StorageConfig,
        client: Optional[Any] = None,
        events: Optional[EventSink] = None,
        page_size: Optional[int] = None,
        batch_size: Optional[int] = None,
        separator: str = os.sep,
    ):
        """Initialize the file system.

        Args:
            config: Bucket, region, credentials and key layout
            client: Pre-built boto3 S3 client, created lazily when omitted
            events: Sink receiving operational events and swallowed errors
            page_size: Keys per listing page
            batch_size: Keys per multi-object delete request
            separator: Native directory separator of host paths
        """
        self.config = config
        self.bucket_name = config.bucket_name
        self.client_manager = S3ClientManager(config, client=client)
        self.events = events if events is not None else StructlogEventSink(logger)

        self.paths = PathNormalizer(config.media_root, separator=separator)
        self.urls = UrlBuilder(config.bucket_name, self.paths, config.use_https)
        self._page_size = page_size
        self._batch_size = batch_size
        self._lister: Optional[S3PrefixLister] = None
        self._deleter: Optional[S3BulkDeleter] = None

        logger.info(
            "S3 file system initialized",
            bucket=self.bucket_name,
            region=config.region.value,
            media_root=self.paths.media_root,
        )

    @property
    def client(self) -> Any:
        return self.client_manager.client

    @property
    def lister(self) -> S3PrefixLister:
        if self._lister is None:
            self._lister = S3PrefixLister(
                self.client, self.bucket_name, self._page_size, self.events
            )
        return self._lister

    @property
    def deleter(self) -> S3BulkDeleter:
        if self._deleter is None:
            self._deleter = S3BulkDeleter(self.lister, self._batch_size, self.events)
        return self._deleter

    def _store_failed(self, operation: str, key: str, error: Exception) -> None:
        self.events.emit(
            "store_call_failed",
            level="error",
            operation=operation,
            bucket=self.bucket_name,
            key=key,
            error=str(error),
        )

    def bucket_exists(self) -> bool:
        """Check whether the configured bucket is visible to the credentials."""
        return self.client_manager.bucket_exists(self.bucket_name)

    # Directories

    def get_directories(self, path: Optional[str]) -> list[str]:
        """List the immediate subdirectories of ``path`` as full keys."""
        prefix = self.paths.to_directory_prefix(path)
        return self.lister.list_common_prefixes(prefix)

    def get_files(self, path: Optional[str], filter: str = "*.*") -> list[str]:
        """List file names of every object under ``path``.

        Objects in nested directories are included. ``filter`` is accepted
        for compatibility only; no wildcard matching is applied.
        """
        prefix = self.paths.to_directory_prefix(path)
        keys = self.lister.list_all_keys(prefix)
        return [name for name in map(posixpath.basename, keys) if name]

    def directory_exists(self, path: Optional[str]) -> bool:
        """Check whether any object is stored under ``path``."""
        prefix = self.paths.to_directory_prefix(path)
        return self.lister.has_objects(prefix)

    def delete_directory(self, path: Optional[str], recursive: bool = False) -> None:
        """Delete every object under ``path``.

        ``recursive`` is accepted for compatibility; nested objects are
        always deleted too. An empty path, or one naming the media root
        itself, deletes nothing.
        """
        prefix = self.paths.to_directory_prefix(path)
        logger.debug("Deleting directory", prefix=prefix, recursive=recursive)
        if self.paths.is_root(path):
            logger.warning("Refusing to delete the media root", path=path)
            return
        if not self.lister.has_objects(prefix):
            return
        self.deleter.delete_prefix(prefix)

    # Files

    def file_exists(self, path: str) -> bool:
        """Check whether an object exists at exactly this key."""
        key = self.paths.to_key(path)
        try:
            self.client.head_object(Bucket=self.bucket_name, Key=key)
        except ClientError as e:
            if not _is_missing_key(e):
                self._store_failed("file_exists", key, e)
            return False
        except BotoCoreError as e:
            self._store_failed("file_exists", key, e)
            return False
        return True

    def open_file(self, path: str) -> BinaryIO:
        """Download the whole object into an in-memory stream.

        Raises:
            PathNotFoundError: If no object exists at the key
            StorageOperationError: If the download fails
        """
        key = self.paths.to_key(path)
        try:
            response = self.client.get_object(Bucket=self.bucket_name, Key=key)
            content = response["Body"].read()
        except ClientError as e:
            if _is_missing_key(e):
                raise PathNotFoundError(f"File not found: {key}") from e
            self._store_failed("open_file", key, e)
            raise StorageOperationError(f"Failed to read '{key}': {e}") from e
        except BotoCoreError as e:
            self._store_failed("open_file", key, e)
            raise StorageOperationError(f"Failed to read '{key}': {e}") from e

        return io.BytesIO(content)

    def add_file(self, path: str, data: FileData, overwrite: bool = True) -> None:
        """Upload a file.

        Raises:
            FileConflictError: If the file exists and ``overwrite`` is False
            ValidationError: If ``data`` is not binary content
        """
        key = self.paths.to_key(path)
        if not overwrite and self.file_exists(path):
            raise FileConflictError(f"A file at path '{key}' already exists")

        kwargs: dict[str, Any] = {
            "Bucket": self.bucket_name,
            "Key": key,
            "Body": _read_all(data),
        }
        if self.config.object_acl:
            kwargs["ACL"] = self.config.object_acl

        try:
            self.client.put_object(**kwargs)
        except (BotoCoreError, ClientError) as e:
            self._store_failed("add_file", key, e)
            return

        self.events.emit("file_added", bucket=self.bucket_name, key=key)

    def delete_file(self, path: str) -> None:
        """Delete a single file; missing files are ignored."""
        if not self.file_exists(path):
            return

        key = self.paths.to_key(path)
        try:
            self.client.delete_object(Bucket=self.bucket_name, Key=key)
        except (BotoCoreError, ClientError) as e:
            self._store_failed("delete_file", key, e)
            return

        self.events.emit("file_deleted", bucket=self.bucket_name, key=key)

    def get_last_modified(self, path: str) -> datetime:
        """Return the object's last-modified time, or MIN_TIMESTAMP on failure."""
        key = self.paths.to_key(path)
        try:
            response = self.client.head_object(Bucket=self.bucket_name, Key=key)
        except (BotoCoreError, ClientError) as e:
            self._store_failed("get_last_modified", key, e)
            return MIN_TIMESTAMP
        return response["LastModified"]

    def get_created(self, path: str) -> datetime:
        # S3 does not track creation time separately
        return self.get_last_modified(path)

    # Paths and URLs

    def get_relative_path(self, full_path_or_url: Optional[str]) -> str:
        """Turn a bucket URL or path into its key."""
        if not full_path_or_url:
            return full_path_or_url or ""
        return self.urls.strip_url(full_path_or_url)

    def get_full_path(self, path: Optional[str]) -> str:
        return self.paths.to_key(path)

    def get_url(self, path: Optional[str]) -> str:
        return self.urls.build_url(path)
