"""An S3 bucket exposed as a hierarchical file system.

Object stores only know flat keys. This package simulates directories on top
of them with a ``/`` delimiter, an optional media root prefix, paginated
prefix listings and batched deletes, and offers the operations a host
application expects from a file system: list, read, write, delete, stat and
URL resolution.

Recommended Usage:
    >>> from bucketfs import S3FileSystem, S3StorageConfig
    >>> config = S3StorageConfig(
    ...     bucket_name="mybucket", region="eu-west-1", media_root="media"
    ... )
    >>> fs = S3FileSystem(config)
    >>> fs.get_url("123/img.jpg")
    'https://mybucket.s3.amazonaws.com/media/123/img.jpg'

Advanced Usage:
    Import specific modules for lower-level operations:

    >>> from bucketfs.path import PathNormalizer, UrlBuilder
    >>> from bucketfs.objectstorage import S3PrefixLister, S3BulkDeleter
"""

__version__ = "0.1.0"

from .core.exceptions import (
    BucketFSError,
    FileConflictError,
    PathNotFoundError,
    StorageOperationError,
    ValidationError,
)
from .filesystem import MIN_TIMESTAMP, HierarchicalFileSystem, S3FileSystem
from .objectstorage import (
    DeleteSummary,
    ListingPage,
    S3BulkDeleter,
    S3ClientConfig,
    S3PrefixLister,
    S3Region,
)
from .path import DELIMITER, PathNormalizer, UrlBuilder
from .schemas import S3StorageConfig

__all__ = [
    # Configuration
    "S3ClientConfig",
    "S3Region",
    "S3StorageConfig",
    # File system
    "HierarchicalFileSystem",
    "MIN_TIMESTAMP",
    "S3FileSystem",
    # Keys and URLs
    "DELIMITER",
    "PathNormalizer",
    "UrlBuilder",
    # Object storage
    "DeleteSummary",
    "ListingPage",
    "S3BulkDeleter",
    "S3PrefixLister",
    # Errors
    "BucketFSError",
    "FileConflictError",
    "PathNotFoundError",
    "StorageOperationError",
    "ValidationError",
]
