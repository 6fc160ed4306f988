"""
Agent definition and a thin tool-calling runner.

The LLM decides which weather tool to call; every number it reports comes from
a tool result. The runner only shuttles messages between Ollama, the tool
surface and conversation memory, and records each tool call so the offline
scorers can grade the interaction.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence

from .config import settings
from .domain import AgentRun, ChatMessage, ToolCallRecord
from .errors import WeatherAgentError
from .memory import MemoryStore, build_memory_store
from .ollama_client import OllamaClient
from .tools import Tool, build_tools, find_tool
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="agent")


WEATHER_AGENT_INSTRUCTIONS = """You are a comprehensive weather and activity planning assistant that provides accurate weather information and helps users plan their activities based on weather conditions.

Your capabilities include:
- Current weather conditions and forecasts
- Multi-day weather forecasts (up to 7 days)
- Weather alerts and severe weather warnings
- Activity recommendations based on weather
- Clothing suggestions for current conditions
- Travel planning with weather considerations

When responding:
- Always ask for location if none is provided
- Translate non-English location names to English
- For locations with multiple parts, use the most relevant part
- Include relevant details: temperature, humidity, wind, precipitation, UV index
- Provide activity suggestions when requested or appropriate
- Offer clothing recommendations based on conditions
- Alert users to severe weather conditions
- Keep responses informative but concise

Use the appropriate tools based on user requests:
- weatherTool: for current weather
- forecastTool: for multi-day forecasts
- activityTool: for activity recommendations
- alertTool: for weather alerts
- clothingTool: for clothing suggestions"""


@dataclass(frozen=True)
class AgentDefinition:
    """Static binding of prompt, model, tools and scorers for one agent."""
    name: str = "Enhanced Weather Agent"
    instructions: str = WEATHER_AGENT_INSTRUCTIONS
    model: str = field(default_factory=lambda: settings.ollama_model)
    tools: Mapping[str, Tool] = field(default_factory=build_tools)
    scorers: tuple[str, ...] = ("tool_call_appropriateness", "completeness", "translation")
    max_tool_rounds: int = field(default_factory=lambda: settings.max_tool_rounds)


def _parse_arguments(raw: Any) -> Dict[str, Any]:
    """Ollama sends arguments as an object; some models send a JSON string."""
    if isinstance(raw, Mapping):
        return dict(raw)
    if isinstance(raw, str) and raw.strip():
        try:
            parsed = json.loads(raw)
        except ValueError:
            return {}
        return parsed if isinstance(parsed, dict) else {}
    return {}


class WeatherAgent:
    """Runs one conversational turn: LLM, tool calls, LLM, reply."""

    def __init__(
        self,
        definition: AgentDefinition | None = None,
        *,
        client: OllamaClient | None = None,
        memory: MemoryStore | None = None,
    ) -> None:
        self.definition = definition or AgentDefinition()
        self.client = client or OllamaClient(model=self.definition.model)
        self.memory = memory or build_memory_store()

    @property
    def tool_schemas(self) -> List[Dict[str, Any]]:
        return [tool.function_schema() for tool in self.definition.tools.values()]

    def _run_tool(self, name: str, arguments: Dict[str, Any]) -> ToolCallRecord:
        """Invoke one tool; failures are recorded and reported back to the model."""
        tool = find_tool(self.definition.tools, name)
        if tool is None:
            logger.warning("Model requested unknown tool %r", name)
            return ToolCallRecord(tool_name=name, input=arguments, error=f"Unknown tool '{name}'")
        try:
            output = tool.invoke(arguments)
        except WeatherAgentError as exc:
            logger.warning("Tool %s failed: %s", tool.name, exc)
            return ToolCallRecord(tool_name=tool.name, input=arguments, error=str(exc))
        return ToolCallRecord(tool_name=tool.name, input=arguments, output=output)

    def generate(self, messages: Sequence[Mapping[str, Any]], *, thread_id: Optional[str] = None) -> AgentRun:
        """Answer the latest user message, calling tools as the model requests."""
        incoming = [ChatMessage.model_validate(m) for m in messages]
        history = self.memory.load(thread_id) if thread_id else []

        conversation: List[Dict[str, Any]] = [
            {"role": "system", "content": self.definition.instructions},
            *history,
            *(m.model_dump() for m in incoming),
        ]
        records: List[ToolCallRecord] = []

        reply = self.client.chat_message(conversation, tools=self.tool_schemas)
        rounds = 0
        while reply["tool_calls"] and rounds < self.definition.max_tool_rounds:
            rounds += 1
            conversation.append(
                {"role": "assistant", "content": reply["content"], "tool_calls": reply["tool_calls"]}
            )
            for call in reply["tool_calls"]:
                function = call.get("function") or {}
                record = self._run_tool(function.get("name", ""), _parse_arguments(function.get("arguments")))
                records.append(record)
                result = record.output if record.error is None else {"error": record.error}
                conversation.append(
                    {"role": "tool", "content": json.dumps(result), "tool_name": record.tool_name}
                )
            reply = self.client.chat_message(conversation, tools=self.tool_schemas)

        if reply["tool_calls"]:
            logger.warning("Tool round limit (%d) reached; asking for a final answer", self.definition.max_tool_rounds)
            reply = self.client.chat_message(conversation)

        text = reply["content"]
        if thread_id:
            self.memory.save(
                thread_id,
                [*history, *(m.model_dump() for m in incoming), {"role": "assistant", "content": text}],
            )

        logger.info("Agent turn finished with %d tool call(s)", len(records))
        return AgentRun(input_messages=incoming, text=text, tool_calls=records, thread_id=thread_id)
