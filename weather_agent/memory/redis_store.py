"""Redis-backed conversation memory with TTL."""

import json
import uuid

from weather_agent.memory.base import Messages, MemoryStore
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="memory/redis_store")


class RedisMemoryStore(MemoryStore):
    """Threads stored as JSON message lists under `<prefix><thread_id>` with a TTL."""

    def __init__(self, client, ttl_seconds: int = 3600, prefix: str = "weather_agent:thread:") -> None:
        logger.debug("Initializing RedisMemoryStore")
        self.client = client
        self.ttl = ttl_seconds
        self.prefix = prefix

    def _key(self, thread_id: str) -> str:
        """Return the Redis key for a thread id."""
        return f"{self.prefix}{thread_id}"

    def new_thread_id(self) -> str:
        return str(uuid.uuid4())

    def load(self, thread_id: str) -> Messages:
        """Fetch and decode a thread, refreshing its TTL; unreadable payloads read as empty."""
        key = self._key(thread_id)
        raw = self.client.get(key)
        if raw is None:
            return []
        try:
            if isinstance(raw, bytes):
                raw = raw.decode("utf-8")
            messages = json.loads(raw)
        except (UnicodeDecodeError, ValueError) as exc:
            logger.error("Failed to decode thread %s: %s", thread_id, exc)
            return []
        self.client.expire(key, self.ttl)
        return messages if isinstance(messages, list) else []

    def save(self, thread_id: str, messages: Messages) -> None:
        self.client.setex(self._key(thread_id), self.ttl, json.dumps(messages))

    def delete(self, thread_id: str) -> None:
        self.client.delete(self._key(thread_id))

    def clear(self) -> None:
        """Delete every thread key under this store's prefix."""
        keys = list(self.client.scan_iter(match=f"{self.prefix}*"))
        if keys:
            self.client.delete(*keys)
