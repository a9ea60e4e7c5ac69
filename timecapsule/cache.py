"""
Result cache abstraction.

Supports an in-memory fallback for tests/local runs and a Redis-backed
implementation for production. Values are opaque strings; callers handle
serialization.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Callable, Optional, Protocol

import redis


class ResultCache(Protocol):
    def get(self, key: str) -> Optional[str]:
        ...

    def set_with_expiry(self, key: str, value: str, ttl_seconds: int) -> None:
        ...


@dataclass
class InMemoryResultCache:
    """Dict-backed cache honoring per-key expiry."""

    clock: Callable[[], float] = time.time
    entries: dict[str, tuple[str, float]] = field(default_factory=dict)

    def get(self, key: str) -> Optional[str]:
        entry = self.entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if expires_at <= self.clock():
            del self.entries[key]
            return None
        return value

    def set_with_expiry(self, key: str, value: str, ttl_seconds: int) -> None:
        self.entries[key] = (value, self.clock() + ttl_seconds)

    def reset(self) -> None:
        self.entries.clear()


@dataclass
class RedisResultCache:
    """Redis-backed cache using GET / SETEX."""

    url: str

    def __post_init__(self):
        self.client = redis.Redis.from_url(self.url)

    def get(self, key: str) -> Optional[str]:
        value = self.client.get(key)
        if value is None:
            return None
        return value.decode("utf-8")

    def set_with_expiry(self, key: str, value: str, ttl_seconds: int) -> None:
        self.client.setex(key, ttl_seconds, value)
