"""Batched deletion of every object under a prefix."""

from dataclasses import dataclass
from typing import Any, Iterator, Optional, Sequence

from botocore.exceptions import BotoCoreError, ClientError

from bucketfs.core import EventSink, StructlogEventSink, get_logger, settings
from bucketfs.core.exceptions import ValidationError
from bucketfs.core.observability import get_tracer
from bucketfs.objectstorage.listing import S3PrefixLister

logger = get_logger(__name__)
tracer = get_tracer(__name__)

# DeleteObjects rejects requests with more keys than this
S3_MAX_DELETE_BATCH = 1000


@dataclass(frozen=True)
class DeleteSummary:
    """Outcome of a prefix deletion.

    Attributes:
        prefix: Prefix whose objects were deleted
        key_count: Keys found under the prefix
        batch_count: DeleteObjects requests issued
        failed_keys: Keys the store reported as not deleted, including every
            key of a batch whose request failed outright
    """

    prefix: str
    key_count: int
    batch_count: int
    failed_keys: tuple[str, ...] = ()

    @property
    def deleted_count(self) -> int:
        return self.key_count - len(self.failed_keys)


def chunked(keys: Sequence[str], size: int) -> Iterator[Sequence[str]]:
    """Split keys into consecutive batches of at most ``size``."""
    for start in range(0, len(keys), size):
        yield keys[start : start + size]


class S3BulkDeleter:
    """Deletes all keys under a prefix with multi-object delete requests.

    Deletion is not transactional: a failing batch is reported through the
    event sink and the remaining batches are still submitted.
    """

    def __init__(
        self,
        lister: S3PrefixLister,
        batch_size: Optional[int] = None,
        events: Optional[EventSink] = None,
    ):
        batch_size = batch_size or settings.max_delete_batch_size
        if not 0 < batch_size <= S3_MAX_DELETE_BATCH:
            raise ValidationError(
                f"Delete batch size must be between 1 and {S3_MAX_DELETE_BATCH}, "
                f"got: {batch_size}"
            )

        self.lister = lister
        self.batch_size = batch_size
        self.events = events if events is not None else StructlogEventSink(logger)

    @property
    def client(self) -> Any:
        return self.lister.client

    @property
    def bucket_name(self) -> str:
        return self.lister.bucket_name

    def delete_prefix(self, prefix: str) -> DeleteSummary:
        """Delete every object whose key starts with ``prefix``.

        Args:
            prefix: Key prefix, normally a directory prefix ending in "/"

        Returns:
            DeleteSummary describing the requests issued
        """
        with tracer.start_as_current_span("delete_prefix"):
            keys = self.lister.list_all_keys(prefix)
            if not keys:
                logger.debug(
                    "Nothing to delete", bucket=self.bucket_name, prefix=prefix
                )
                return DeleteSummary(prefix=prefix, key_count=0, batch_count=0)

            failed: list[str] = []
            batch_count = 0
            for batch in chunked(keys, self.batch_size):
                batch_count += 1
                failed.extend(self._delete_batch(batch, prefix))

        summary = DeleteSummary(
            prefix=prefix,
            key_count=len(keys),
            batch_count=batch_count,
            failed_keys=tuple(failed),
        )
        self.events.emit(
            "prefix_deleted",
            bucket=self.bucket_name,
            prefix=prefix,
            key_count=summary.key_count,
            batch_count=summary.batch_count,
            failed_count=len(summary.failed_keys),
        )
        return summary

    def _delete_batch(self, batch: Sequence[str], prefix: str) -> list[str]:
        """Submit one DeleteObjects request and return the keys it failed on."""
        try:
            response = self.client.delete_objects(
                Bucket=self.bucket_name,
                Delete={"Objects": [{"Key": key} for key in batch], "Quiet": True},
            )
        except (BotoCoreError, ClientError) as e:
            self.events.emit(
                "delete_batch_failed",
                level="error",
                bucket=self.bucket_name,
                prefix=prefix,
                batch_size=len(batch),
                error=str(e),
            )
            return list(batch)

        errors = response.get("Errors", [])
        if errors:
            self.events.emit(
                "delete_batch_partial",
                level="error",
                bucket=self.bucket_name,
                prefix=prefix,
                batch_size=len(batch),
                failed_count=len(errors),
                codes=sorted({error.get("Code", "") for error in errors}),
            )
        return [error["Key"] for error in errors]
