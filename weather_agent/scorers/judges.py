"""Judge implementations backed by the Ollama chat API."""

from __future__ import annotations

from typing import Any, Dict, Optional

from weather_agent.config import settings
from weather_agent.ollama_client import OllamaClient


class OllamaJudge:
    """Ask an Ollama model for JSON constrained to the scorer's schema."""

    def __init__(self, client: Optional[OllamaClient] = None) -> None:
        self.client = client or OllamaClient(model=settings.judge_model)

    def evaluate(self, *, instructions: str, prompt: str, schema: Dict[str, Any]) -> Any:
        """Return the raw JSON text; the calling scorer validates it."""
        messages = [
            {"role": "system", "content": instructions},
            {"role": "user", "content": prompt},
        ]
        return self.client.chat(messages, format=schema)
