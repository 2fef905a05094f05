"""Exception hierarchy for bucketfs."""


class BucketFSError(Exception):
    """Base exception for all bucketfs errors."""

    pass


class ValidationError(BucketFSError):
    """Raised when validation fails."""

    pass


class FileConflictError(BucketFSError):
    """Raised when a write would replace an existing file without overwrite."""

    pass


class PathNotFoundError(BucketFSError):
    """Raised when a path is not found."""

    pass


class StorageOperationError(BucketFSError):
    """Raised when an object store call fails and no fallback result exists."""

    pass
