"""Schema-validated tool surface handed to the agent runtime.

Each tool pairs a pydantic input model, a pydantic output model and a handler.
Validation happens in `Tool.invoke` before the handler runs, so the handlers
below only ever see well-formed input.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Generic, List, Mapping, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from weather_agent.activities import get_activity_recommendations
from weather_agent.alerts import get_weather_alerts
from weather_agent.clothing import get_clothing_recommendations
from weather_agent.config import settings
from weather_agent.data_sources import WeatherDataSource
from weather_agent.domain import ActivityReport, AlertReport, ClothingReport, Forecast, WeatherRecord
from weather_agent.errors import ToolInputError
from weather_agent.weather_service import (
    MAX_FORECAST_DAYS,
    MIN_FORECAST_DAYS,
    get_current_weather,
    get_weather_forecast,
)
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="tools")

InputT = TypeVar("InputT", bound=BaseModel)
OutputT = TypeVar("OutputT", bound=BaseModel)


class _ToolInput(BaseModel):
    """Tool arguments; unknown keys from the model are dropped."""
    model_config = ConfigDict(extra="ignore")


class LocationInput(_ToolInput):
    location: str = Field(min_length=1, description="City name or location")


class ForecastInput(LocationInput):
    days: int = Field(
        default_factory=lambda: settings.default_forecast_days,
        ge=MIN_FORECAST_DAYS,
        le=MAX_FORECAST_DAYS,
        description="Number of days to forecast",
    )


class ActivityInput(LocationInput):
    interests: Optional[List[str]] = Field(
        default=None,
        description="User interests (hiking, beach, dining, etc.)",
    )


class ClothingInput(LocationInput):
    activity: Optional[str] = Field(default=None, description="Planned activity")


@dataclass(frozen=True)
class Tool(Generic[InputT, OutputT]):
    """A named operation with typed input/output, invocable by the agent runtime."""
    id: str
    name: str
    description: str
    input_model: type[InputT]
    output_model: type[OutputT]
    handler: Callable[[InputT], OutputT]

    def validate_input(self, arguments: Mapping[str, Any] | None) -> InputT:
        """Parse raw arguments, raising ToolInputError on schema violations."""
        try:
            return self.input_model.model_validate(dict(arguments or {}))
        except ValidationError as exc:
            errors = exc.errors(include_url=False, include_context=False)
            logger.warning("Rejected input for %s: %s", self.id, errors)
            raise ToolInputError(self.id, errors) from exc

    def invoke(self, arguments: Mapping[str, Any] | None) -> Dict[str, Any]:
        """Validate, run the handler and return the camelCase output dict."""
        parsed = self.validate_input(arguments)
        logger.info("Invoking tool %s", self.id, extra={"arguments": parsed.model_dump()})
        result = self.handler(parsed)
        if not isinstance(result, self.output_model):
            result = self.output_model.model_validate(result)
        return result.to_wire()

    def function_schema(self) -> Dict[str, Any]:
        """Function-calling schema in the shape Ollama's /api/chat expects."""
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.input_model.model_json_schema(),
            },
        }


def build_tools(data_source: WeatherDataSource | None = None) -> Dict[str, Tool]:
    """Build the five weather tools, keyed by their agent binding name."""
    tools: List[Tool] = [
        Tool(
            id="get-current-weather",
            name="weatherTool",
            description="Get current weather conditions for a location",
            input_model=LocationInput,
            output_model=WeatherRecord,
            handler=lambda args: get_current_weather(args.location, data_source=data_source),
        ),
        Tool(
            id="get-weather-forecast",
            name="forecastTool",
            description="Get multi-day weather forecast for a location",
            input_model=ForecastInput,
            output_model=Forecast,
            handler=lambda args: get_weather_forecast(args.location, args.days, data_source=data_source),
        ),
        Tool(
            id="get-activity-recommendations",
            name="activityTool",
            description="Get activity recommendations based on weather conditions",
            input_model=ActivityInput,
            output_model=ActivityReport,
            handler=lambda args: get_activity_recommendations(
                args.location, args.interests, data_source=data_source
            ),
        ),
        Tool(
            id="get-weather-alerts",
            name="alertTool",
            description="Get severe weather alerts for a location",
            input_model=LocationInput,
            output_model=AlertReport,
            handler=lambda args: get_weather_alerts(args.location, data_source=data_source),
        ),
        Tool(
            id="get-clothing-recommendations",
            name="clothingTool",
            description="Get clothing recommendations based on weather conditions",
            input_model=ClothingInput,
            output_model=ClothingReport,
            handler=lambda args: get_clothing_recommendations(
                args.location, args.activity, data_source=data_source
            ),
        ),
    ]
    return {tool.name: tool for tool in tools}


def find_tool(tools: Mapping[str, Tool], key: str) -> Tool | None:
    """Look a tool up by binding name or by id."""
    if key in tools:
        return tools[key]
    return next((t for t in tools.values() if t.id == key), None)
