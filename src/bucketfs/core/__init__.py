"""Core utilities and shared components for bucketfs."""

from .config import settings
from .exceptions import BucketFSError, ValidationError
from .observability import EventSink, StructlogEventSink, get_logger

__all__ = [
    "settings",
    "BucketFSError",
    "ValidationError",
    "EventSink",
    "StructlogEventSink",
    "get_logger",
]
