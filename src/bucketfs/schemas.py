"""Storage configuration schemas for bucketfs."""

from typing import Optional

from pydantic import Field

from .objectstorage.clients import S3ClientConfig


class S3StorageConfig(S3ClientConfig):
    """Configuration for a bucket exposed as a file system.

    All values are fixed for the lifetime of the file system built from it.
    """

    bucket_name: str = Field(..., min_length=1, description="S3 bucket name")
    media_root: Optional[str] = Field(
        None, description="Key prefix under which all files are stored"
    )
    use_https: bool = Field(True, description="Build https:// URLs (http:// if off)")
    object_acl: Optional[str] = Field(
        "public-read", description="Canned ACL applied to uploaded files"
    )
