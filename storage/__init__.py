"""Storage module for S3-compatible object storage."""

from .exceptions import DateKeyError, DownloadError, ObjectStoreError, UploadError
from .dated_keys import extract_key_date, select_most_recent
from .object_store import (
    ListingEntry,
    ObjectStoreClient,
    UploadResult,
    create_object_store_client,
    uri_for,
)
from .payloads import BinaryPayload, Payload, TextPayload, as_payload

__all__ = [
    "ObjectStoreClient",
    "create_object_store_client",
    "uri_for",
    "UploadResult",
    "ListingEntry",
    "TextPayload",
    "BinaryPayload",
    "Payload",
    "as_payload",
    "extract_key_date",
    "select_most_recent",
    "ObjectStoreError",
    "UploadError",
    "DownloadError",
    "DateKeyError",
]
