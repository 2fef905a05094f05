"""Hierarchical file-system operations over object storage.

This module provides the file-system contract and its S3 implementation.
"""

from .base import FileData, HierarchicalFileSystem
from .operations import MIN_TIMESTAMP, S3FileSystem

__all__ = [
    "FileData",
    "HierarchicalFileSystem",
    "MIN_TIMESTAMP",
    "S3FileSystem",
]
