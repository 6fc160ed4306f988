import json
import unittest
from unittest.mock import patch

import redis

from weather_agent.memory import InMemoryMemoryStore, RedisMemoryStore, build_memory_store


class FakeRedis:
    def __init__(self):
        self.store = {}
        self.expires = {}

    def setex(self, key, ttl, value):
        self.store[key] = value.encode("utf-8") if isinstance(value, str) else value
        self.expires[key] = ttl

    def get(self, key):
        return self.store.get(key)

    def expire(self, key, ttl):
        self.expires[key] = ttl

    def delete(self, *keys):
        for key in keys:
            self.store.pop(key, None)
            self.expires.pop(key, None)

    def scan_iter(self, match):
        prefix = match.rstrip("*")
        return [k for k in list(self.store) if k.startswith(prefix)]


MESSAGES = [{"role": "user", "content": "Hi"}, {"role": "assistant", "content": "Hello"}]


class TestInMemoryMemoryStore(unittest.TestCase):
    def test_save_load_roundtrip_returns_copy(self):
        store = InMemoryMemoryStore()
        store.save("t1", MESSAGES)
        loaded = store.load("t1")
        self.assertEqual(loaded, MESSAGES)
        loaded.append({"role": "user", "content": "mutated"})
        self.assertEqual(len(store.load("t1")), 2)

    def test_missing_thread_is_empty(self):
        self.assertEqual(InMemoryMemoryStore().load("nope"), [])

    def test_expiry(self):
        store = InMemoryMemoryStore(ttl_seconds=10)
        with patch("weather_agent.memory.in_memory.time.monotonic", return_value=100.0):
            store.save("t1", MESSAGES)
        with patch("weather_agent.memory.in_memory.time.monotonic", return_value=105.0):
            self.assertEqual(store.load("t1"), MESSAGES)
        with patch("weather_agent.memory.in_memory.time.monotonic", return_value=200.0):
            self.assertEqual(store.load("t1"), [])

    def test_delete_and_clear(self):
        store = InMemoryMemoryStore()
        store.save("a", MESSAGES)
        store.save("b", MESSAGES)
        store.delete("a")
        store.delete("missing")
        self.assertEqual(store.load("a"), [])
        store.clear()
        self.assertEqual(store.load("b"), [])

    def test_new_thread_ids_are_unique(self):
        store = InMemoryMemoryStore()
        self.assertNotEqual(store.new_thread_id(), store.new_thread_id())


class TestRedisMemoryStore(unittest.TestCase):
    def setUp(self):
        self.client = FakeRedis()
        self.store = RedisMemoryStore(self.client, ttl_seconds=60)

    def test_save_sets_ttl_and_json(self):
        self.store.save("t1", MESSAGES)
        key = "weather_agent:thread:t1"
        self.assertEqual(json.loads(self.client.store[key]), MESSAGES)
        self.assertEqual(self.client.expires[key], 60)

    def test_load_refreshes_ttl(self):
        self.store.save("t1", MESSAGES)
        self.client.expires["weather_agent:thread:t1"] = 1
        self.assertEqual(self.store.load("t1"), MESSAGES)
        self.assertEqual(self.client.expires["weather_agent:thread:t1"], 60)

    def test_corrupt_payload_reads_as_empty(self):
        self.client.store["weather_agent:thread:bad"] = b"{not json"
        self.assertEqual(self.store.load("bad"), [])

    def test_clear_only_touches_prefix(self):
        self.store.save("t1", MESSAGES)
        self.client.store["other:key"] = b"keep"
        self.store.clear()
        self.assertEqual(self.store.load("t1"), [])
        self.assertIn("other:key", self.client.store)


class DummySettings:
    def __init__(self, memory_redis_url=None, memory_ttl_seconds=120):
        self.memory_redis_url = memory_redis_url
        self.memory_ttl_seconds = memory_ttl_seconds


class TestBuildMemoryStore(unittest.TestCase):
    def test_defaults_to_in_memory(self):
        store = build_memory_store(DummySettings())
        self.assertIsInstance(store, InMemoryMemoryStore)
        self.assertEqual(store.ttl, 120)

    def test_uses_redis_when_reachable(self):
        fake = FakeRedis()
        fake.ping = lambda: True
        with patch("weather_agent.memory.redis.Redis.from_url", return_value=fake):
            store = build_memory_store(DummySettings(memory_redis_url="redis://localhost:6379/0"))
        self.assertIsInstance(store, RedisMemoryStore)
        self.assertIs(store.client, fake)

    def test_falls_back_when_redis_unreachable(self):
        def unreachable(url):
            raise redis.exceptions.ConnectionError("refused")

        with patch("weather_agent.memory.redis.Redis.from_url", side_effect=unreachable):
            store = build_memory_store(DummySettings(memory_redis_url="redis://nowhere:6379/0"))
        self.assertIsInstance(store, InMemoryMemoryStore)


if __name__ == "__main__":
    unittest.main()
