"""Shared protocol for conversation memory backends."""

from typing import Any, Dict, List, Protocol

Messages = List[Dict[str, Any]]


class MemoryStore(Protocol):
    """Protocol for per-thread conversation memory."""

    def new_thread_id(self) -> str:
        """Return a fresh thread id."""

    def load(self, thread_id: str) -> Messages:
        """Return stored messages for a thread; empty if missing or expired."""

    def save(self, thread_id: str, messages: Messages) -> None:
        """Replace the stored messages for a thread and refresh its TTL."""

    def delete(self, thread_id: str) -> None:
        """Delete a thread without raising if it is absent."""

    def clear(self) -> None:
        """Clear all stored threads."""
