"""Path, key and URL translation for bucket-backed file systems."""

from .keys import DELIMITER, PathNormalizer, is_absolute_url
from .urls import UrlBuilder

__all__ = [
    "DELIMITER",
    "PathNormalizer",
    "UrlBuilder",
    "is_absolute_url",
]
