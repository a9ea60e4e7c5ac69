"""
Image label detection via AWS Rekognition, with an in-memory fake.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

import boto3


class LabelDetector(Protocol):
    """Returns up to ``max_labels`` labels, each a dict with at least ``Name``."""

    def detect_labels(self, data: bytes, max_labels: int) -> list[dict]:
        ...


@dataclass
class InMemoryLabelDetector:
    """Returns canned labels and records every call."""

    labels: list[dict] = field(default_factory=list)
    calls: list[tuple[bytes, int]] = field(default_factory=list)

    def detect_labels(self, data: bytes, max_labels: int) -> list[dict]:
        self.calls.append((data, max_labels))
        return list(self.labels[:max_labels])


@dataclass
class RekognitionLabelDetector:
    region: str
    access_key_id: str
    secret_access_key: str

    def __post_init__(self):
        self._client = boto3.client(
            "rekognition",
            region_name=self.region,
            aws_access_key_id=self.access_key_id or None,
            aws_secret_access_key=self.secret_access_key or None,
        )

    def detect_labels(self, data: bytes, max_labels: int) -> list[dict]:
        response = self._client.detect_labels(
            Image={"Bytes": data}, MaxLabels=max_labels
        )
        return response.get("Labels", [])
