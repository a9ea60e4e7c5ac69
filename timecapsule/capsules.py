"""
Capsule creation and the cache-aside listing read path.
"""

from __future__ import annotations

import json
import logging

from timecapsule.cache import ResultCache
from timecapsule.db import CapsuleRecord, CapsuleStore
from timecapsule.errors import ServerError
from timecapsule.schemas import CapsuleCreatePayload

logger = logging.getLogger(__name__)

CACHE_KEY_PREFIX = "capsules_"
CACHE_TTL_SECONDS = 3600


def cache_key_for(user_id: str) -> str:
    return f"{CACHE_KEY_PREFIX}{user_id}"


def create_capsule(
    store: CapsuleStore, user_id: str, payload: CapsuleCreatePayload
) -> CapsuleRecord:
    """
    Persist a capsule owned by ``user_id``.

    Body fields are stored as sent. The cached listing for the owner is left
    untouched and expires on its own.
    """
    record = CapsuleRecord(
        user_id=user_id,
        title=payload.title,
        content=payload.content,
        media=payload.media,
        release_date=payload.releaseDate,
    )
    try:
        return store.create(record)
    except Exception as exc:
        logger.exception("Failed to create capsule for user %s: %s", user_id, exc)
        raise ServerError() from exc


def list_capsules(
    store: CapsuleStore, cache: ResultCache, user_id: str
) -> list[dict]:
    """
    Return the owner's capsules, preferring the cached snapshot.

    A cache hit is returned without consulting the store. On a miss the store
    is queried and the rendered result cached for ``CACHE_TTL_SECONDS``.
    """
    key = cache_key_for(user_id)
    try:
        cached = cache.get(key)
        if cached is not None:
            logger.debug("Cache hit for %s", key)
            return json.loads(cached)

        logger.debug("Cache miss for %s", key)
        capsules = [record.as_dict() for record in store.find_by_owner(user_id)]
        cache.set_with_expiry(key, json.dumps(capsules), CACHE_TTL_SECONDS)
        return capsules
    except Exception as exc:
        logger.exception("Failed to list capsules for user %s: %s", user_id, exc)
        raise ServerError() from exc
