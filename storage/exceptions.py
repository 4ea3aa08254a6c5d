"""Exceptions raised by the object store client."""

from typing import Optional


class ObjectStoreError(RuntimeError):
    """Base error for a failed object store round trip."""

    action = "request"

    def __init__(self, bucket: str, key: str, cause: Optional[BaseException] = None):
        self.bucket = bucket
        self.key = key
        self.cause = cause
        message = f"S3 {self.action} failed for s3://{bucket}/{key}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)


class UploadError(ObjectStoreError):
    """Raised when uploading an object fails."""

    action = "upload"


class DownloadError(ObjectStoreError):
    """Raised when reading an object fails, including malformed response bodies."""

    action = "download"


class DateKeyError(ValueError):
    """Raised when a key does not follow the ``name_YYYY-MM-DD.ext`` convention."""

    def __init__(self, key: str, reason: str):
        self.key = key
        self.reason = reason
        super().__init__(f"Cannot extract date from key '{key}': {reason}")
