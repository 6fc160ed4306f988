"""Conversation memory backends and the factory that picks one from settings."""

import redis

from weather_agent import config
from .base import Messages, MemoryStore
from .in_memory import InMemoryMemoryStore
from .redis_store import RedisMemoryStore
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="memory")

__all__ = [
    "Messages",
    "MemoryStore",
    "InMemoryMemoryStore",
    "RedisMemoryStore",
    "build_memory_store",
]


def build_memory_store(settings: config.Settings | None = None) -> MemoryStore:
    """Use Redis when configured and reachable, otherwise an in-memory store."""
    settings = settings or config.settings
    if settings.memory_redis_url:
        try:
            client = redis.Redis.from_url(settings.memory_redis_url)
            client.ping()
            logger.info("Using RedisMemoryStore")
            return RedisMemoryStore(client, ttl_seconds=settings.memory_ttl_seconds)
        except redis.exceptions.RedisError as exc:
            logger.warning("Falling back to InMemoryMemoryStore (Redis unavailable): %s", exc)
    return InMemoryMemoryStore(ttl_seconds=settings.memory_ttl_seconds)
