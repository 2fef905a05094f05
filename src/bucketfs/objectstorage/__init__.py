"""Object storage operations for S3-compatible services."""

from .clients import S3ClientConfig, S3ClientManager, S3Region
from .deletion import DeleteSummary, S3BulkDeleter
from .listing import ListingPage, S3PrefixLister

__all__ = [
    "DeleteSummary",
    "ListingPage",
    "S3BulkDeleter",
    "S3ClientConfig",
    "S3ClientManager",
    "S3PrefixLister",
    "S3Region",
]
