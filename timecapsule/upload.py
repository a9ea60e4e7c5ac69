"""
Media upload pipeline: store the bytes, label them, report both.

The steps run sequentially and any failure aborts the whole upload. An
object stored before a labeling failure is left in place.
"""

from __future__ import annotations

import logging
import os
import uuid
from dataclasses import dataclass

from timecapsule.errors import UploadFailed
from timecapsule.labels import LabelDetector
from timecapsule.storage import StorageClient

logger = logging.getLogger(__name__)

MAX_LABELS = 5


@dataclass
class UploadResult:
    file_url: str
    detected_labels: list[str]

    def as_dict(self) -> dict:
        return {"fileUrl": self.file_url, "detectedLabels": self.detected_labels}


def build_object_key(filename: str | None) -> str:
    # Extension is taken from the client filename as-is.
    _, extension = os.path.splitext(filename or "")
    return f"{uuid.uuid4()}{extension}"


def upload_media(
    filename: str | None,
    data: bytes,
    content_type: str | None,
    *,
    storage: StorageClient,
    detector: LabelDetector,
) -> UploadResult:
    key = build_object_key(filename)
    try:
        storage.put_object(key, data, content_type)
        file_url = storage.object_url(key)
        labels = detector.detect_labels(data, max_labels=MAX_LABELS)
        detected_labels = [label["Name"] for label in labels]
    except Exception as exc:
        logger.exception("Upload of %s failed: %s", key, exc)
        raise UploadFailed(error=str(exc)) from exc

    logger.info("Uploaded %s with %d labels", key, len(detected_labels))
    return UploadResult(file_url=file_url, detected_labels=detected_labels)
