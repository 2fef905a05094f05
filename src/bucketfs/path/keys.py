"""Translation between host file-system paths and S3 object keys.

Object stores have no directories, only flat keys. A hierarchy is simulated
by joining path segments with ``/`` and grouping keys on that delimiter when
listing. Every key this package produces is rooted under an optional media
root prefix, e.g. with ``media_root="media"``:

    >>> normalizer = PathNormalizer("media")
    >>> normalizer.to_key("123/img.jpg")
    'media/123/img.jpg'
    >>> normalizer.to_key("media/123/img.jpg")
    'media/123/img.jpg'
"""

import os
from typing import Optional

DELIMITER = "/"
URL_SCHEMES = ("http://", "https://")


def is_absolute_url(path: str) -> bool:
    """Return True if the path already carries an http(s) scheme."""
    return path.startswith(URL_SCHEMES)


class PathNormalizer:
    """Derives canonical object keys from host paths."""

    def __init__(self, media_root: Optional[str] = None, separator: str = os.sep):
        """Initialize the normalizer.

        Args:
            media_root: Prefix prepended to every key. Surrounding delimiters
                are dropped, so "media", "/media/" and "media/" are equivalent.
            separator: Native directory separator of the host paths. It is
                always translated to the key delimiter.
        """
        self.separator = separator
        self.media_root = self.to_url_path(media_root or "").strip(DELIMITER)

    @property
    def root_prefix(self) -> str:
        """Prefix that lists the whole media root ("" for the bucket root)."""
        return f"{self.media_root}{DELIMITER}" if self.media_root else ""

    def to_url_path(self, path: Optional[str]) -> str:
        """Replace the native separator with the key delimiter."""
        if not path:
            return ""
        if path == DELIMITER:
            return DELIMITER
        return path.replace(self.separator, DELIMITER)

    def _has_media_root(self, path: str) -> bool:
        return path == self.media_root or path.startswith(self.root_prefix)

    def to_key(self, path: Optional[str]) -> str:
        """Convert a host path into an object key under the media root.

        Absolute URLs are returned unchanged; callers strip the domain first
        (see :class:`bucketfs.path.urls.UrlBuilder`).
        """
        if not path:
            return ""
        if is_absolute_url(path):
            return path

        url_path = self.to_url_path(path)
        if not self.media_root:
            return url_path
        if url_path == DELIMITER:
            return self.root_prefix

        relative = url_path.lstrip(DELIMITER)
        if self._has_media_root(relative):
            return relative
        return f"{self.media_root}{DELIMITER}{relative}"

    def to_directory_prefix(self, path: Optional[str]) -> str:
        """Convert a directory path into a listing prefix ending in "/".

        An empty path maps to the media root itself.
        """
        key = self.to_key(path) if path else self.root_prefix
        if key == DELIMITER:
            return ""
        if key and not key.endswith(DELIMITER):
            key += DELIMITER
        return key

    def is_root(self, path: Optional[str]) -> bool:
        """Return True if the path is empty or names the media root itself."""
        return not path or self.to_directory_prefix(path) == self.root_prefix

    def to_relative_path(self, key: Optional[str]) -> str:
        """Remove the media root from a key.

        Inverse of :meth:`to_key` for paths under the root. The file system
        hands keys to callers with the root included, so this is what turns
        them back into host-relative paths (see the ``stat`` command).
        """
        if not key:
            return ""
        if is_absolute_url(key):
            return key

        url_path = self.to_url_path(key)
        if not self.media_root:
            return url_path
        url_path = url_path.lstrip(DELIMITER)
        if url_path == self.media_root:
            return ""
        if url_path.startswith(self.root_prefix):
            return url_path[len(self.root_prefix):]
        return url_path
