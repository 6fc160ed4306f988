"""Thin client for calling the Ollama chat API (tool calling and structured output)."""

import os
import time
from typing import Any, Dict, List, Optional

import requests

from .config import settings
from utils.logging_utils import setup_logging, get_tagged_logger

setup_logging(level=os.getenv("LOG_LEVEL", "INFO"))
logger = get_tagged_logger(__name__, tag="ollama_client")


def _base_url() -> str:
    """Return Ollama base URL without a trailing slash."""
    return str(settings.ollama_base_url).rstrip("/")


class OllamaClient:
    """Minimal client for the Ollama /api/chat endpoint."""
    def __init__(self, model: Optional[str] = None):
        """Initialize client configuration from settings."""
        self.url = f"{_base_url()}/api/chat"
        self.model = model or settings.ollama_model
        self.options = settings.ollama_options
        self.max_retries = int(os.getenv("WEATHER_AGENT_OLLAMA_RETRIES", "1"))
        self.retry_backoff_sec = float(os.getenv("WEATHER_AGENT_OLLAMA_RETRY_BACKOFF_SEC", "0.5"))

    def chat_message(
        self,
        messages: List[Dict[str, Any]],
        *,
        tools: Optional[List[Dict[str, Any]]] = None,
        format: Optional[Dict[str, Any] | str] = None,
    ) -> Dict[str, Any]:
        """Send a chat request and return the assistant message (content and tool_calls)."""
        payload: Dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "stream": False,
            "options": self.options,
        }
        if tools:
            payload["tools"] = tools
        if format is not None:
            payload["format"] = format

        last_error = None
        for attempt in range(self.max_retries + 1):
            try:
                logger.debug("Ollama POST payload: %s", payload)
                r = requests.post(self.url, json=payload, timeout=180)
                logger.info(
                    "Ollama POST took %.2fs, response: %s",
                    r.elapsed.total_seconds(),
                    r.text[:200],
                )
            except requests.exceptions.RequestException as exc:
                last_error = exc
                logger.exception("Ollama POST failed on attempt %d: %s", attempt + 1, exc)
                if attempt < self.max_retries:
                    time.sleep(self.retry_backoff_sec)
                    continue
                raise

            if r.status_code == 200:
                break

            error_text = (r.text or "")[:200]
            if "EOF" in error_text and attempt < self.max_retries:
                logger.warning("Ollama returned EOF; retrying (attempt %d/%d).", attempt + 1, self.max_retries + 1)
                time.sleep(self.retry_backoff_sec)
                continue
            raise RuntimeError(
                f"Ollama POST failed with status {r.status_code}: {error_text} "
                f"(model={self.model}, url={self.url})"
            )
        else:
            if last_error is not None:
                raise RuntimeError(f"Ollama POST failed after retries: {last_error}") from last_error

        try:
            data = r.json()
        except ValueError as exc:
            raise RuntimeError(f"Ollama returned non-JSON response: {r.text[:200]}") from exc

        message = data.get("message") or {}
        content = message.get("content", "")
        # Normalize non-string content to string
        if isinstance(content, (dict, list)):
            content = str(content)
        return {
            "role": message.get("role", "assistant"),
            "content": content or "",
            "tool_calls": message.get("tool_calls") or [],
        }

    def chat(self, messages: List[Dict[str, Any]], *, format: Optional[Dict[str, Any] | str] = None) -> str:
        """Send a chat request and return only the assistant content."""
        return self.chat_message(messages, format=format)["content"]
