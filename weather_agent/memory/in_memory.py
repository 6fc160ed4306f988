"""In-memory conversation memory with TTL, intended for development and tests."""

import threading
import time
import uuid
from typing import Any

from weather_agent.memory.base import Messages, MemoryStore
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="memory/in_memory")


class InMemoryMemoryStore(MemoryStore):
    """Thread-safe, TTL-aware in-memory store (dev/test)."""

    def __init__(self, ttl_seconds: int = 3600) -> None:
        logger.debug("Initializing InMemoryMemoryStore")
        self.ttl = ttl_seconds
        self._threads: dict[str, dict[str, Any]] = {}
        self._lock = threading.Lock()

    def new_thread_id(self) -> str:
        return str(uuid.uuid4())

    def load(self, thread_id: str) -> Messages:
        """Return a copy of the thread's messages, refreshing its TTL."""
        with self._lock:
            data = self._threads.get(thread_id)
            if not data:
                return []
            if data["exp"] < time.monotonic():
                self._threads.pop(thread_id, None)
                return []
            data["exp"] = time.monotonic() + self.ttl
            return list(data["messages"])

    def save(self, thread_id: str, messages: Messages) -> None:
        with self._lock:
            self._threads[thread_id] = {
                "messages": list(messages),
                "exp": time.monotonic() + self.ttl,
            }

    def delete(self, thread_id: str) -> None:
        with self._lock:
            self._threads.pop(thread_id, None)

    def clear(self) -> None:
        with self._lock:
            self._threads.clear()
