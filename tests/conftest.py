"""Shared test fixtures for object store tests."""

import io
import sys
from pathlib import Path

# Add project root to path so imports work without PYTHONPATH
PROJECT_ROOT = Path(__file__).parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from typing import Any, Dict, List
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError


def client_error(code: str, operation: str, message: str = "error") -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": message}}, operation)


class FakePaginator:
    def __init__(self, s3: "FakeS3") -> None:
        self._s3 = s3

    def paginate(self, Bucket: str, Prefix: str = "") -> List[Dict[str, Any]]:
        keys = sorted(
            key for (bucket, key) in self._s3.objects if bucket == Bucket and key.startswith(Prefix)
        )
        size = self._s3.page_size
        chunks = [keys[i:i + size] for i in range(0, len(keys), size)] or [[]]
        pages = []
        for chunk in chunks:
            page: Dict[str, Any] = {"KeyCount": len(chunk)}
            if chunk:
                page["Contents"] = [
                    {"Key": key, "Size": len(self._s3.objects[(Bucket, key)][0])} for key in chunk
                ]
            pages.append(page)
        return pages


class FakeS3:
    """In-memory stand-in for a boto3 S3 client.

    Each SDK method is a MagicMock so tests can assert on calls or swap in
    failures with side_effect.
    """

    def __init__(self, page_size: int = 1000) -> None:
        self.objects: Dict[tuple, tuple] = {}
        self.page_size = page_size
        self.put_object = MagicMock(side_effect=self._put_object)
        self.get_object = MagicMock(side_effect=self._get_object)
        self.head_object = MagicMock(side_effect=self._head_object)
        self.get_paginator = MagicMock(side_effect=lambda name: FakePaginator(self))

    def _put_object(self, Bucket: str, Key: str, Body: bytes, ContentType: str) -> Dict[str, Any]:
        self.objects[(Bucket, Key)] = (bytes(Body), ContentType)
        return {"ETag": '"etag-%d"' % len(self.objects), "ResponseMetadata": {"HTTPStatusCode": 200}}

    def _get_object(self, Bucket: str, Key: str) -> Dict[str, Any]:
        if (Bucket, Key) not in self.objects:
            raise client_error("NoSuchKey", "GetObject", "The specified key does not exist.")
        data, content_type = self.objects[(Bucket, Key)]
        return {"Body": io.BytesIO(data), "ContentType": content_type}

    def _head_object(self, Bucket: str, Key: str) -> Dict[str, Any]:
        if (Bucket, Key) not in self.objects:
            raise client_error("404", "HeadObject", "Not Found")
        return {"ContentLength": len(self.objects[(Bucket, Key)][0])}

    def seed(self, bucket: str, *keys: str) -> None:
        for key in keys:
            self.objects[(bucket, key)] = (b"", "application/octet-stream")


@pytest.fixture
def fake_s3() -> FakeS3:
    return FakeS3()


@pytest.fixture
def store(fake_s3: FakeS3):
    from storage.object_store import ObjectStoreClient

    return ObjectStoreClient(fake_s3, "us-east-1")


@pytest.fixture
def make_fake_s3():
    """Factory for fakes with a custom listing page size."""
    return FakeS3


@pytest.fixture
def make_client_error():
    return client_error
