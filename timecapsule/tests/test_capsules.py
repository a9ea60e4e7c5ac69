import json
import unittest

from timecapsule.cache import InMemoryResultCache
from timecapsule.capsules import (
    CACHE_TTL_SECONDS,
    cache_key_for,
    create_capsule,
    list_capsules,
)
from timecapsule.db import InMemoryCapsuleStore
from timecapsule.errors import ServerError
from timecapsule.schemas import CapsuleCreatePayload


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


class CountingStore(InMemoryCapsuleStore):
    def __init__(self):
        super().__init__()
        self.find_calls = 0

    def find_by_owner(self, user_id):
        self.find_calls += 1
        return super().find_by_owner(user_id)


class BrokenStore:
    def create(self, record):
        raise RuntimeError("connection refused")

    def find_by_owner(self, user_id):
        raise RuntimeError("connection refused")


class ReadOnlyCache(InMemoryResultCache):
    def set_with_expiry(self, key, value, ttl_seconds):
        raise RuntimeError("READONLY")


def _payload(**overrides) -> CapsuleCreatePayload:
    body = {"title": "T", "content": "C", "media": [], "releaseDate": "2030-01-01"}
    body.update(overrides)
    return CapsuleCreatePayload(**body)


class CreateCapsuleTests(unittest.TestCase):
    def test_owner_comes_from_caller(self):
        store = InMemoryCapsuleStore()
        record = create_capsule(store, "u1", CapsuleCreatePayload(
            title="T", content="C", media=[], releaseDate="2030-01-01", user="intruder"
        ))
        self.assertEqual(record.user_id, "u1")
        self.assertEqual(store.capsules[record.id].release_date, "2030-01-01")

    def test_identical_creates_are_not_deduplicated(self):
        store = InMemoryCapsuleStore()
        first = create_capsule(store, "u1", _payload())
        second = create_capsule(store, "u1", _payload())
        self.assertNotEqual(first.id, second.id)
        self.assertEqual(len(store.find_by_owner("u1")), 2)

    def test_unvalidated_fields_are_accepted(self):
        store = InMemoryCapsuleStore()
        record = create_capsule(
            store, "u1", _payload(title="", media="not-a-list", releaseDate="1999-01-01")
        )
        self.assertEqual(record.title, "")
        self.assertEqual(record.media, "not-a-list")

    def test_store_failure_is_server_error(self):
        with self.assertRaises(ServerError) as ctx:
            create_capsule(BrokenStore(), "u1", _payload())
        self.assertEqual(ctx.exception.as_dict(), {"message": "Server error"})


class ListCapsulesTests(unittest.TestCase):
    def setUp(self):
        self.clock = FakeClock()
        self.cache = InMemoryResultCache(clock=self.clock)
        self.store = CountingStore()

    def test_miss_populates_cache(self):
        create_capsule(self.store, "u1", _payload())
        result = list_capsules(self.store, self.cache, "u1")

        self.assertEqual(self.store.find_calls, 1)
        self.assertEqual([c["title"] for c in result], ["T"])
        self.assertEqual(result[0]["user"], "u1")
        cached = self.cache.get(cache_key_for("u1"))
        self.assertEqual(json.loads(cached), result)

    def test_hit_skips_store_and_may_be_stale(self):
        create_capsule(self.store, "u1", _payload(title="first"))
        first = list_capsules(self.store, self.cache, "u1")

        create_capsule(self.store, "u1", _payload(title="second"))
        self.clock.now += CACHE_TTL_SECONDS - 1
        second = list_capsules(self.store, self.cache, "u1")

        self.assertEqual(self.store.find_calls, 1)
        self.assertEqual(second, first)

    def test_store_queried_again_after_ttl(self):
        create_capsule(self.store, "u1", _payload(title="first"))
        list_capsules(self.store, self.cache, "u1")
        create_capsule(self.store, "u1", _payload(title="second"))

        self.clock.now += CACHE_TTL_SECONDS
        result = list_capsules(self.store, self.cache, "u1")

        self.assertEqual(self.store.find_calls, 2)
        self.assertEqual([c["title"] for c in result], ["first", "second"])

    def test_cache_is_partitioned_per_user(self):
        create_capsule(self.store, "u1", _payload(title="mine"))
        create_capsule(self.store, "u2", _payload(title="theirs"))
        self.assertEqual([c["title"] for c in list_capsules(self.store, self.cache, "u1")], ["mine"])
        self.assertEqual([c["title"] for c in list_capsules(self.store, self.cache, "u2")], ["theirs"])

    def test_store_failure_is_server_error(self):
        with self.assertRaises(ServerError):
            list_capsules(BrokenStore(), self.cache, "u1")

    def test_cache_write_failure_is_server_error(self):
        with self.assertRaises(ServerError):
            list_capsules(self.store, ReadOnlyCache(), "u1")


if __name__ == "__main__":
    unittest.main()
