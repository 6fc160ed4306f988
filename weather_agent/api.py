"""HTTP API exposing the weather agent and its tools."""

import hmac
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, Header, HTTPException, status
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .agent import WeatherAgent
from .config import settings
from .data_sources import build_data_source
from .domain import ChatMessage, ToolCallRecord
from .errors import LocationNotFound, ToolInputError, UpstreamUnavailable
from .tools import build_tools, find_tool
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="api")


def require_api_key(x_api_key: str | None = Header(default=None)):
    """Validate the X-API-Key header against the configured static key, if any."""
    if not settings.api_key:
        logger.debug("No API key configured; allowing all requests")
        return

    if not x_api_key:
        logger.debug("No API key provided")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing API key")

    if hmac.compare_digest(str(x_api_key), str(settings.api_key)):
        return

    logger.debug("Invalid API key provided")
    raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid API key")


router = APIRouter(dependencies=[Depends(require_api_key)])
DATA_SOURCE = build_data_source(settings)
TOOLS = build_tools(DATA_SOURCE)

_agent: WeatherAgent | None = None


def get_agent() -> WeatherAgent:
    """Build the agent on first use so importing the API never contacts Ollama or Redis."""
    global _agent
    if _agent is None:
        _agent = WeatherAgent()
    return _agent


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class GenerateRequest(_CamelModel):
    """Incoming conversation turn."""
    messages: List[ChatMessage] = Field(min_length=1)
    thread_id: Optional[str] = None


class GenerateResponse(_CamelModel):
    """Agent reply plus the tool calls made while producing it."""
    text: str
    tool_calls: List[ToolCallRecord] = Field(default_factory=list)
    thread_id: Optional[str] = None


class ToolInfo(_CamelModel):
    """Public description of one tool."""
    id: str
    name: str
    description: str
    input_schema: Dict[str, Any]


def _raise_for_tool_error(exc: Exception) -> None:
    """Map domain errors to HTTP responses."""
    if isinstance(exc, ToolInputError):
        raise HTTPException(status_code=422, detail=exc.errors) from exc
    if isinstance(exc, LocationNotFound):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    if isinstance(exc, UpstreamUnavailable):
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc
    raise exc


@router.get("/tools", response_model=List[ToolInfo])
def list_tools():
    """List the tools and their input schemas."""
    return [
        ToolInfo(id=t.id, name=t.name, description=t.description, input_schema=t.input_model.model_json_schema())
        for t in TOOLS.values()
    ]


@router.post("/tools/{tool_id}")
def invoke_tool(tool_id: str, arguments: Optional[Dict[str, Any]] = Body(default=None)):
    """Invoke one tool directly with JSON arguments."""
    tool = find_tool(TOOLS, tool_id)
    if tool is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Unknown tool '{tool_id}'")
    try:
        return tool.invoke(arguments)
    except (ToolInputError, LocationNotFound, UpstreamUnavailable) as exc:
        _raise_for_tool_error(exc)


@router.post("/agents/weather/generate", response_model=GenerateResponse)
def generate(req: GenerateRequest):
    """Run one agent turn over the given messages."""
    latest = req.messages[-1].content
    if len(latest) > settings.max_user_message_chars:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST,
                            detail=f"Message too long; limit {settings.max_user_message_chars} characters.")

    agent = get_agent()
    thread_id = req.thread_id or agent.memory.new_thread_id()
    logger.info(f"Generating reply for thread {thread_id}")
    run = agent.generate([m.model_dump() for m in req.messages], thread_id=thread_id)
    return GenerateResponse(text=run.text, tool_calls=list(run.tool_calls), thread_id=run.thread_id)
