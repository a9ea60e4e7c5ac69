"""
Storage abstraction for AWS S3 and in-memory testing.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

import boto3


def build_object_url(bucket: str, region: str, key: str) -> str:
    """Public virtual-hosted style URL; derived, never returned by S3."""
    return f"https://{bucket}.s3.{region}.amazonaws.com/{key}"


class StorageClient(Protocol):
    """Defines the operations the API needs from object storage."""

    def put_object(self, key: str, data: bytes, content_type: str | None) -> None:
        ...

    def object_url(self, key: str) -> str:
        ...


@dataclass
class InMemoryStorageClient:
    """Test double for storage interactions."""

    bucket: str = "timecapsule-test"
    region: str = "us-east-1"
    stored_objects: dict = field(default_factory=dict)

    def put_object(self, key: str, data: bytes, content_type: str | None) -> None:
        self.stored_objects[key] = (data, content_type)

    def object_url(self, key: str) -> str:
        return build_object_url(self.bucket, self.region, key)


@dataclass
class S3StorageClient:
    """
    AWS S3 storage client. The boto3 client is created once and shared
    across requests.
    """

    bucket: str
    region: str
    access_key_id: str
    secret_access_key: str

    def __post_init__(self):
        self._client = boto3.client(
            "s3",
            region_name=self.region,
            aws_access_key_id=self.access_key_id or None,
            aws_secret_access_key=self.secret_access_key or None,
        )

    def put_object(self, key: str, data: bytes, content_type: str | None) -> None:
        params = {"Bucket": self.bucket, "Key": key, "Body": data}
        if content_type:
            params["ContentType"] = content_type
        self._client.put_object(**params)

    def object_url(self, key: str) -> str:
        return build_object_url(self.bucket, self.region, key)
