"""
HTTP routes for the time capsule API.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile

from timecapsule.cache import ResultCache
from timecapsule.capsules import create_capsule, list_capsules
from timecapsule.db import CapsuleStore
from timecapsule.dependencies import (
    get_capsule_store,
    get_current_user,
    get_label_detector,
    get_result_cache,
    get_storage_client,
)
from timecapsule.errors import BadRequest
from timecapsule.labels import LabelDetector
from timecapsule.schemas import (
    CapsuleCreatePayload,
    HealthResponse,
    MessageResponse,
    UploadResponse,
)
from timecapsule.storage import StorageClient
from timecapsule.upload import upload_media

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
def health():
    return HealthResponse(status="ok")


@router.post("/upload", response_model=UploadResponse)
def upload(
    file: Optional[UploadFile] = File(None),
    user_id: str = Depends(get_current_user),
    storage: StorageClient = Depends(get_storage_client),
    detector: LabelDetector = Depends(get_label_detector),
):
    """
    Store one uploaded file and return its URL with up to five detected labels.
    """
    if file is None:
        raise BadRequest("No file uploaded")

    data = file.file.read()
    result = upload_media(
        file.filename,
        data,
        file.content_type,
        storage=storage,
        detector=detector,
    )
    return UploadResponse(**result.as_dict())


@router.post("/capsules/create", response_model=MessageResponse, status_code=201)
def create(
    payload: Optional[CapsuleCreatePayload] = None,
    user_id: str = Depends(get_current_user),
    store: CapsuleStore = Depends(get_capsule_store),
):
    create_capsule(store, user_id, payload or CapsuleCreatePayload())
    return MessageResponse(message="Capsule created successfully")


@router.get("/capsules")
def list_user_capsules(
    user_id: str = Depends(get_current_user),
    store: CapsuleStore = Depends(get_capsule_store),
    cache: ResultCache = Depends(get_result_cache),
):
    return list_capsules(store, cache, user_id)
