import unittest
from unittest.mock import patch

from timecapsule.cache import InMemoryResultCache, RedisResultCache


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


class InMemoryResultCacheTests(unittest.TestCase):
    def test_entry_expires_after_ttl(self):
        clock = FakeClock()
        cache = InMemoryResultCache(clock=clock)
        cache.set_with_expiry("k", "v", 3600)

        clock.now += 3599
        self.assertEqual(cache.get("k"), "v")

        clock.now += 1
        self.assertIsNone(cache.get("k"))
        self.assertNotIn("k", cache.entries)

    def test_missing_key(self):
        self.assertIsNone(InMemoryResultCache().get("absent"))


class RedisResultCacheTests(unittest.TestCase):
    @patch("timecapsule.cache.redis.Redis.from_url")
    def test_get_and_setex(self, mock_from_url):
        client = mock_from_url.return_value
        client.get.return_value = b'[{"id": "1"}]'

        cache = RedisResultCache(url="redis://localhost:6379/0")
        self.assertEqual(cache.get("capsules_u1"), '[{"id": "1"}]')
        cache.set_with_expiry("capsules_u1", "[]", 3600)

        mock_from_url.assert_called_once_with("redis://localhost:6379/0")
        client.setex.assert_called_once_with("capsules_u1", 3600, "[]")

    @patch("timecapsule.cache.redis.Redis.from_url")
    def test_get_miss(self, mock_from_url):
        mock_from_url.return_value.get.return_value = None
        cache = RedisResultCache(url="redis://localhost:6379/0")
        self.assertIsNone(cache.get("capsules_u1"))


if __name__ == "__main__":
    unittest.main()
