"""
Dependency wiring for the FastAPI app.

Each external client is a process-wide singleton created on first use.
Tests swap them through ``app.dependency_overrides``.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import Depends, Header

from timecapsule.auth import TokenVerifier
from timecapsule.cache import InMemoryResultCache, RedisResultCache, ResultCache
from timecapsule.config import get_settings
from timecapsule.db import CapsuleStore, InMemoryCapsuleStore, SqlCapsuleStore
from timecapsule.errors import ServerError
from timecapsule.labels import (
    InMemoryLabelDetector,
    LabelDetector,
    RekognitionLabelDetector,
)
from timecapsule.storage import InMemoryStorageClient, S3StorageClient, StorageClient

logger = logging.getLogger(__name__)

_capsule_store: CapsuleStore | None = None
_storage_client: StorageClient | None = None
_label_detector: LabelDetector | None = None
_result_cache: ResultCache | None = None
_token_verifier: TokenVerifier | None = None


def get_capsule_store() -> CapsuleStore:
    global _capsule_store
    if _capsule_store:
        return _capsule_store

    settings = get_settings()
    if settings.use_in_memory_backends or not settings.database_url:
        _capsule_store = InMemoryCapsuleStore()
    else:
        _capsule_store = SqlCapsuleStore(settings.database_url)
    logger.info("Capsule store: %s", _capsule_store.__class__.__name__)
    return _capsule_store


def get_storage_client() -> StorageClient:
    global _storage_client
    if _storage_client:
        return _storage_client

    settings = get_settings()
    if settings.use_in_memory_backends or not settings.aws_s3_bucket:
        _storage_client = InMemoryStorageClient()
    else:
        _storage_client = S3StorageClient(
            bucket=settings.aws_s3_bucket,
            region=settings.aws_region or "",
            access_key_id=settings.aws_access_key_id or "",
            secret_access_key=settings.aws_secret_access_key or "",
        )
    logger.info("Storage client: %s", _storage_client.__class__.__name__)
    return _storage_client


def get_label_detector() -> LabelDetector:
    global _label_detector
    if _label_detector:
        return _label_detector

    settings = get_settings()
    if settings.use_in_memory_backends or not settings.aws_region:
        _label_detector = InMemoryLabelDetector()
    else:
        _label_detector = RekognitionLabelDetector(
            region=settings.aws_region,
            access_key_id=settings.aws_access_key_id or "",
            secret_access_key=settings.aws_secret_access_key or "",
        )
    logger.info("Label detector: %s", _label_detector.__class__.__name__)
    return _label_detector


def get_result_cache() -> ResultCache:
    global _result_cache
    if _result_cache:
        return _result_cache

    settings = get_settings()
    if settings.use_in_memory_backends or not settings.redis_url:
        _result_cache = InMemoryResultCache()
    else:
        _result_cache = RedisResultCache(url=settings.redis_url)
    logger.info("Result cache: %s", _result_cache.__class__.__name__)
    return _result_cache


def get_token_verifier() -> TokenVerifier:
    global _token_verifier
    if _token_verifier:
        return _token_verifier

    secret = get_settings().jwt_secret
    if not secret:
        logger.error("JWT_SECRET is not configured; rejecting authenticated requests")
        raise ServerError()
    _token_verifier = TokenVerifier(secret)
    return _token_verifier


def get_current_user(
    authorization: Optional[str] = Header(default=None),
    verifier: TokenVerifier = Depends(get_token_verifier),
) -> str:
    """Auth gate: the raw ``Authorization`` header value is the token."""
    return verifier.verify(authorization)
