"""Hierarchical file-system contract implemented by bucket-backed storage."""

from datetime import datetime
from typing import BinaryIO, Optional, Protocol, Union

FileData = Union[bytes, bytearray, BinaryIO]


class HierarchicalFileSystem(Protocol):
    """Operations a host application needs from a file system.

    Paths are relative to the file system's root unless they already carry
    the root or are absolute URLs produced by :meth:`get_url`.
    """

    def get_directories(self, path: Optional[str]) -> list[str]: ...

    def get_files(self, path: Optional[str], filter: str = "*.*") -> list[str]: ...

    def directory_exists(self, path: Optional[str]) -> bool: ...

    def delete_directory(self, path: Optional[str], recursive: bool = False) -> None:
        ...

    def add_file(self, path: str, data: FileData, overwrite: bool = True) -> None:
        ...

    def open_file(self, path: str) -> BinaryIO: ...

    def delete_file(self, path: str) -> None: ...

    def file_exists(self, path: str) -> bool: ...

    def get_relative_path(self, full_path_or_url: Optional[str]) -> str: ...

    def get_full_path(self, path: Optional[str]) -> str: ...

    def get_url(self, path: Optional[str]) -> str: ...

    def get_last_modified(self, path: str) -> datetime: ...

    def get_created(self, path: str) -> datetime: ...
