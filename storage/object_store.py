"""
Object store client for S3-compatible storage (AWS S3 and MinIO).

ObjectStoreClient wraps a pre-configured boto3 S3 client and a region. Every
operation is a fresh round trip: nothing is cached between calls. The blocking
boto3 calls run in the default thread-pool executor so callers can await them
and issue several concurrently; boto3 clients are safe to share across threads.

Retries, timeouts and signing are left to the botocore client configuration
(see config.storage_config).
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime
from functools import partial
from typing import Any, AsyncIterator, Callable, Dict, List, Mapping, Optional, TypeVar, Union

from botocore.client import BaseClient
from botocore.exceptions import ClientError

from config.storage_config import ObjectStoreConfig, build_s3_client, get_s3_client, load_storage_config
from storage.dated_keys import select_most_recent
from storage.exceptions import DownloadError, UploadError
from storage.payloads import Payload, as_payload

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_CHUNK_SIZE = 1024 * 1024

_NOT_FOUND_CODES = {"404", "NoSuchKey", "NotFound"}


@dataclass(frozen=True)
class UploadResult:
    bucket: str
    key: str
    uri: str
    etag: Optional[str] = None
    version_id: Optional[str] = None
    response: Dict[str, Any] = field(default_factory=dict, repr=False)


@dataclass(frozen=True)
class ListingEntry:
    key: str
    last_modified: Optional[datetime] = None
    size: Optional[int] = None


def uri_for(bucket: str, key: str) -> str:
    """
    Generate a full URI for an object in object storage.

    Uses the s3:// scheme for both AWS S3 and MinIO (S3-compatible).
    The actual endpoint is determined by configuration, not the URI.
    """
    return f"s3://{bucket}/{key}"


def _require_name(value: str, name: str) -> None:
    if not isinstance(value, str) or not value:
        raise ValueError(f"{name} must be a non-empty string")


def _readable_body(response: Any) -> Any:
    """Return the response body if it is a readable byte stream."""
    body = response.get("Body") if isinstance(response, Mapping) else None
    if body is None or not callable(getattr(body, "read", None)):
        raise TypeError(f"Unexpected response body type: {type(body).__name__}")
    return body


def _close_quietly(body: Any) -> None:
    close = getattr(body, "close", None)
    if callable(close):
        close()


def _drain(body: Any) -> bytes:
    try:
        data = body.read()
    finally:
        _close_quietly(body)
    if not isinstance(data, (bytes, bytearray)):
        raise TypeError(f"Unexpected response body type: read() returned {type(data).__name__}")
    return bytes(data)


class ObjectStoreClient:
    """Async request/response operations against an S3-compatible bucket.

    Attributes:
        region: Region the client handle was configured for
    """

    def __init__(self, s3_client: BaseClient, region: str) -> None:
        self._client = s3_client
        self._region = region

    @property
    def region(self) -> str:
        return self._region

    async def _run(self, func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, partial(func, *args, **kwargs))

    async def upload(
        self,
        bucket: str,
        key: str,
        payload: Union[Payload, str, bytes],
        content_type: str,
    ) -> UploadResult:
        """
        Upload an object, creating or overwriting it.

        Args:
            bucket: Bucket name
            key: Object key (path)
            payload: TextPayload / BinaryPayload, or raw str / bytes
            content_type: MIME type (e.g., "application/pdf")

        Returns:
            UploadResult carrying the store-assigned metadata

        Raises:
            ValueError: If bucket or key is empty
            TypeError: If the payload type is unsupported
            UploadError: If the upload fails
        """
        _require_name(bucket, "bucket")
        _require_name(key, "key")
        body = as_payload(payload).to_bytes()

        try:
            response = await self._run(
                self._client.put_object,
                Bucket=bucket,
                Key=key,
                Body=body,
                ContentType=content_type,
            )
        except Exception as exc:
            logger.exception("Failed to upload object to s3://%s/%s: %s", bucket, key, exc)
            raise UploadError(bucket, key, exc) from exc

        response = dict(response or {})
        etag = response.get("ETag")
        result = UploadResult(
            bucket=bucket,
            key=key,
            uri=uri_for(bucket, key),
            etag=etag.strip('"') if etag else None,
            version_id=response.get("VersionId"),
            response=response,
        )
        logger.debug("Uploaded %d bytes to %s", len(body), result.uri)
        return result

    async def download_binary(self, bucket: str, key: str) -> bytes:
        """
        Download an object, buffering the whole body in memory.

        Raises:
            DownloadError: If the object is missing, the transport fails, or
                the response body is not a readable byte stream
        """
        _require_name(bucket, "bucket")
        _require_name(key, "key")

        try:
            response = await self._run(self._client.get_object, Bucket=bucket, Key=key)
            data = await self._run(_drain, _readable_body(response))
        except Exception as exc:
            logger.exception("Failed to download object from s3://%s/%s: %s", bucket, key, exc)
            raise DownloadError(bucket, key, exc) from exc

        logger.debug("Downloaded %d bytes from %s", len(data), uri_for(bucket, key))
        return data

    async def download_text(self, bucket: str, key: str) -> str:
        """
        Download an object and decode it as UTF-8.

        Raises:
            DownloadError: If the download fails or the body is not valid UTF-8
        """
        data = await self.download_binary(bucket, key)
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError as exc:
            logger.error("Object s3://%s/%s is not valid UTF-8: %s", bucket, key, exc)
            raise DownloadError(bucket, key, exc) from exc

    async def stream_binary(
        self, bucket: str, key: str, chunk_size: int = DEFAULT_CHUNK_SIZE
    ) -> AsyncIterator[bytes]:
        """
        Yield an object's body in chunks instead of buffering it.

        The body is closed when iteration finishes or is abandoned.

        Raises:
            DownloadError: If the request fails or the body is not a byte stream
        """
        _require_name(bucket, "bucket")
        _require_name(key, "key")
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")

        try:
            response = await self._run(self._client.get_object, Bucket=bucket, Key=key)
            body = _readable_body(response)
        except Exception as exc:
            logger.exception("Failed to open s3://%s/%s for streaming: %s", bucket, key, exc)
            raise DownloadError(bucket, key, exc) from exc

        try:
            while True:
                try:
                    chunk = await self._run(body.read, chunk_size)
                except Exception as exc:
                    logger.exception("Failed reading s3://%s/%s: %s", bucket, key, exc)
                    raise DownloadError(bucket, key, exc) from exc
                if not chunk:
                    break
                if not isinstance(chunk, (bytes, bytearray)):
                    raise DownloadError(
                        bucket,
                        key,
                        TypeError(f"Unexpected response body type: read() returned {type(chunk).__name__}"),
                    )
                yield bytes(chunk)
        finally:
            _close_quietly(body)

    async def object_exists(self, bucket: str, key: str) -> bool:
        """
        Check if an object exists.

        Raises:
            DownloadError: If the check fails for a reason other than not-found
        """
        _require_name(bucket, "bucket")
        _require_name(key, "key")

        try:
            await self._run(self._client.head_object, Bucket=bucket, Key=key)
            return True
        except ClientError as exc:
            if exc.response.get("Error", {}).get("Code") in _NOT_FOUND_CODES:
                return False
            logger.exception("Error checking object existence s3://%s/%s: %s", bucket, key, exc)
            raise DownloadError(bucket, key, exc) from exc

    def _list_all(self, bucket: str, prefix: str) -> List[ListingEntry]:
        paginator = self._client.get_paginator("list_objects_v2")
        entries: List[ListingEntry] = []
        for page in paginator.paginate(Bucket=bucket, Prefix=prefix):
            for item in page.get("Contents", []):
                entries.append(
                    ListingEntry(
                        key=item["Key"],
                        last_modified=item.get("LastModified"),
                        size=item.get("Size"),
                    )
                )
        return entries

    async def list_objects(self, bucket: str, prefix: str = "") -> List[ListingEntry]:
        """
        List every object under a prefix, following continuation tokens.

        Listing errors propagate unmodified.
        """
        _require_name(bucket, "bucket")
        return await self._run(self._list_all, bucket, prefix)

    async def find_most_recent_by_prefix(self, bucket: str, prefix: str) -> Optional[str]:
        """
        Find the most recently dated key under a prefix.

        Only keys shaped like ``<name>_<YYYY-MM-DD>.<ext>`` are considered;
        see storage.dated_keys.

        Args:
            bucket: Bucket name
            prefix: Key prefix to search under

        Returns:
            The key with the latest embedded date, or None if nothing matched
        """
        entries = await self.list_objects(bucket, prefix)
        if not entries:
            logger.info("No files found under s3://%s/%s", bucket, prefix)
            return None

        most_recent = select_most_recent(entry.key for entry in entries)
        if most_recent is None:
            logger.info("No dated files found under s3://%s/%s", bucket, prefix)
        return most_recent


def create_object_store_client(config: Optional[ObjectStoreConfig] = None) -> ObjectStoreClient:
    """
    Build an ObjectStoreClient from configuration.

    Args:
        config: Connection settings; loaded from the environment when omitted
    """
    if config is None:
        return ObjectStoreClient(get_s3_client(), load_storage_config().region)
    return ObjectStoreClient(build_s3_client(config), config.region)
