"""S3 prefix listing for simulated directories.

Listings are driven through the boto3 ``list_objects_v2`` paginator, which
keeps requesting pages with the previous page's continuation token until a
non-truncated page arrives. For example, with objects:

- media/2023/file1.txt
- media/2024/file2.txt
- media/file3.txt

``list_common_prefixes("media/")`` returns ``["media/2023", "media/2024"]``
and ``list_all_keys("media/")`` returns all three keys.
"""

from dataclasses import dataclass
from typing import Any, Iterator, Optional

from botocore.exceptions import BotoCoreError, ClientError

from bucketfs.core import EventSink, StructlogEventSink, get_logger, settings
from bucketfs.core.observability import get_tracer
from bucketfs.path import DELIMITER

logger = get_logger(__name__)
tracer = get_tracer(__name__)


@dataclass(frozen=True)
class ListingPage:
    """One page of a prefix listing.

    Attributes:
        keys: Object keys on this page, in store order
        common_prefixes: Grouped prefixes (only with a delimiter), each still
            ending in the delimiter
        truncated: Whether more pages follow
        next_marker: Continuation token for the next page, if truncated
    """

    keys: tuple[str, ...]
    common_prefixes: tuple[str, ...]
    truncated: bool
    next_marker: Optional[str] = None

    @classmethod
    def from_response(cls, response: dict) -> "ListingPage":
        return cls(
            keys=tuple(obj["Key"] for obj in response.get("Contents", [])),
            common_prefixes=tuple(
                info["Prefix"] for info in response.get("CommonPrefixes", [])
            ),
            truncated=response.get("IsTruncated", False),
            next_marker=response.get("NextContinuationToken"),
        )


class S3PrefixLister:
    """Lists keys and common prefixes (subdirectory equivalents) in a bucket.

    Store errors never propagate: they are emitted as ``listing_failed``
    events and whatever was collected before the failure is returned.
    """

    def __init__(
        self,
        client: Any,
        bucket_name: str,
        page_size: Optional[int] = None,
        events: Optional[EventSink] = None,
    ):
        """Initialize S3 prefix lister.

        Args:
            client: boto3 S3 client
            bucket_name: Bucket to list
            page_size: Keys requested per page (store maximum is 1000)
            events: Sink for listing failures
        """
        self.client = client
        self.bucket_name = bucket_name
        self.page_size = page_size or settings.list_page_size
        self.events = events if events is not None else StructlogEventSink(logger)

    def iter_pages(
        self, prefix: str, delimiter: Optional[str] = None
    ) -> Iterator[ListingPage]:
        """Yield listing pages for ``prefix`` until the listing is exhausted.

        Raises:
            botocore.exceptions.ClientError: If a page request fails
            botocore.exceptions.BotoCoreError: On transport failures
        """
        kwargs: dict[str, Any] = {"Bucket": self.bucket_name, "Prefix": prefix}
        if delimiter:
            kwargs["Delimiter"] = delimiter

        paginator = self.client.get_paginator("list_objects_v2")
        page_iterator = paginator.paginate(
            **kwargs, PaginationConfig={"PageSize": self.page_size}
        )
        for response in page_iterator:
            yield ListingPage.from_response(response)

    def list_common_prefixes(self, prefix: str) -> list[str]:
        """List immediate subdirectories of a directory prefix.

        Args:
            prefix: Directory prefix; a delimiter is appended when missing

        Returns:
            Common prefixes with the trailing delimiter stripped
        """
        if prefix and not prefix.endswith(DELIMITER):
            prefix += DELIMITER

        directories: list[str] = []
        with tracer.start_as_current_span("list_common_prefixes"):
            try:
                for page in self.iter_pages(prefix, delimiter=DELIMITER):
                    directories.extend(
                        p.rstrip(DELIMITER) for p in page.common_prefixes
                    )
            except (BotoCoreError, ClientError) as e:
                self.events.emit(
                    "listing_failed",
                    level="error",
                    operation="list_common_prefixes",
                    bucket=self.bucket_name,
                    prefix=prefix,
                    collected=len(directories),
                    error=str(e),
                )
                return directories

        logger.debug(
            "S3 common prefixes listed",
            bucket=self.bucket_name,
            prefix=prefix,
            prefix_count=len(directories),
        )
        return directories

    def list_all_keys(self, prefix: str) -> list[str]:
        """List every key under ``prefix`` regardless of depth.

        Returns:
            Keys in store-native lexicographic order, accumulated across all
            pages
        """
        keys: list[str] = []
        pages = 0
        with tracer.start_as_current_span("list_all_keys"):
            try:
                for page in self.iter_pages(prefix):
                    pages += 1
                    keys.extend(page.keys)
            except (BotoCoreError, ClientError) as e:
                self.events.emit(
                    "listing_failed",
                    level="error",
                    operation="list_all_keys",
                    bucket=self.bucket_name,
                    prefix=prefix,
                    collected=len(keys),
                    error=str(e),
                )
                return keys

        logger.debug(
            "S3 objects listed",
            bucket=self.bucket_name,
            prefix=prefix,
            object_count=len(keys),
            page_count=pages,
        )
        return keys

    def has_objects(self, prefix: str) -> bool:
        """Check whether any object lives under a directory prefix.

        A single delimiter listing is issued. Nested common prefixes count as
        well, so a directory holding only subdirectories exists.

        Returns:
            True if at least one key or subdirectory was found, False when
            none was found or the request failed
        """
        if prefix and not prefix.endswith(DELIMITER):
            prefix += DELIMITER

        try:
            response = self.client.list_objects_v2(
                Bucket=self.bucket_name,
                Prefix=prefix,
                Delimiter=DELIMITER,
                MaxKeys=1,
            )
        except (BotoCoreError, ClientError) as e:
            self.events.emit(
                "listing_failed",
                level="error",
                operation="has_objects",
                bucket=self.bucket_name,
                prefix=prefix,
                error=str(e),
            )
            return False

        page = ListingPage.from_response(response)
        return bool(page.keys or page.common_prefixes)
