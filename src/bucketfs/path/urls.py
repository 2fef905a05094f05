"""Public URL construction for objects in an S3 bucket."""

from typing import Optional

from .keys import PathNormalizer, is_absolute_url


class UrlBuilder:
    """Builds and strips ``<scheme>://<bucket>.s3.amazonaws.com/`` URLs."""

    def __init__(
        self, bucket_name: str, normalizer: PathNormalizer, use_https: bool = True
    ):
        self.bucket_name = bucket_name
        self.normalizer = normalizer
        self.use_https = use_https

    @property
    def scheme(self) -> str:
        return "https" if self.use_https else "http"

    @property
    def domain(self) -> str:
        return f"{self.bucket_name}.s3.amazonaws.com"

    @property
    def base_url(self) -> str:
        """Scheme and domain, followed by the path delimiter."""
        return f"{self.scheme}://{self.domain}/"

    def build_url(self, path: Optional[str]) -> str:
        """Return the absolute URL of the object behind ``path``.

        Already absolute URLs are returned unchanged.
        """
        if not path:
            return ""
        if is_absolute_url(path):
            return path
        return f"{self.base_url}{self.normalizer.to_key(path)}"

    def strip_url(self, url_or_path: Optional[str]) -> str:
        """Remove this bucket's scheme and domain and return the object key.

        Input without the prefix is treated as an already relative path.
        """
        if not url_or_path:
            return ""
        base_url = self.base_url
        if url_or_path.startswith(base_url):
            url_or_path = url_or_path[len(base_url):]
        return self.normalizer.to_key(url_or_path)
