"""Object storage bulk deletion."""

from .bulk_delete import S3_MAX_DELETE_BATCH, DeleteSummary, S3BulkDeleter, chunked

__all__ = ["S3_MAX_DELETE_BATCH", "DeleteSummary", "S3BulkDeleter", "chunked"]
