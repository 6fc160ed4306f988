"""Domain vocabulary and strict schemas for weather records and recommendations.

This module is the contract between the Open-Meteo fetchers, the deterministic
recommendation engines, the tool surface and the evaluation scorers. Models
are frozen and serialize with camelCase aliases, which is the shape the agent
runtime sees in tool results. No interpretation logic lives here.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _StrictBaseModel(BaseModel):
    """Base model: frozen, no extra keys, camelCase on the wire."""

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_wire(self) -> Dict[str, Any]:
        """Dump to the JSON-safe camelCase dict handed to the agent runtime."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class Suitability(str, Enum):
    """Ordinal judgment of how well conditions fit an activity."""
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"


class AlertSeverity(str, Enum):
    """Severity levels used for weather alerts."""
    EXTREME = "extreme"
    SEVERE = "severe"
    MODERATE = "moderate"
    MINOR = "minor"


class Location(_StrictBaseModel):
    """A geocoded place: first provider match for a free-text name."""
    name: str
    country: str = ""
    latitude: float
    longitude: float


class WeatherRecord(_StrictBaseModel):
    """Normalized current conditions for a location."""
    temperature: float
    feels_like: float
    humidity: float
    wind_speed: float
    wind_gust: float
    precipitation: float
    uv_index: float | None = None
    conditions: str
    location: str
    country: str


class ForecastDay(_StrictBaseModel):
    """One day of a multi-day forecast."""
    date: str
    high: float
    low: float
    conditions: str
    precipitation_chance: float
    wind_speed: float
    uv_index: float


class Forecast(_StrictBaseModel):
    """Daily forecast ordered by date ascending."""
    location: str
    country: str
    forecast: List[ForecastDay] = Field(default_factory=list)


class ActivityRecommendation(_StrictBaseModel):
    """A catalog activity that survived the temperature/condition filter."""
    activity: str
    suitability: Suitability
    reason: str
    indoor_alternative: str | None = None


class ActivityReport(_StrictBaseModel):
    """Activity recommendations for the current conditions at a location."""
    location: str
    current_conditions: str
    temperature: float
    recommendations: List[ActivityRecommendation] = Field(default_factory=list, max_length=5)


class ClothingRecommendation(_StrictBaseModel):
    """Layers, accessories and footwear for the current conditions."""
    layers: List[str] = Field(default_factory=list)
    accessories: List[str] = Field(default_factory=list)
    footwear: str
    notes: str


class ClothingReport(_StrictBaseModel):
    """Clothing recommendation plus the reading it was derived from."""
    location: str
    temperature: float
    conditions: str
    recommendations: ClothingRecommendation


class AlertRecord(_StrictBaseModel):
    """A synthesized weather alert."""
    severity: AlertSeverity
    event: str
    description: str
    instructions: str


class AlertReport(_StrictBaseModel):
    """Alerts derived from the current reading at a location."""
    location: str
    country: str
    alerts: List[AlertRecord] = Field(default_factory=list)
    has_alerts: bool


class ChatMessage(_StrictBaseModel):
    """A single conversational turn."""
    role: Literal["system", "user", "assistant", "tool"]
    content: str = ""


class ToolCallRecord(_StrictBaseModel):
    """One tool invocation made by the agent, as recorded in a transcript."""
    tool_name: str
    input: Dict[str, Any] = Field(default_factory=dict)
    output: Dict[str, Any] | None = None
    error: str | None = None


class AgentRun(_StrictBaseModel):
    """Transcript of one agent interaction: what scorers grade offline."""
    input_messages: List[ChatMessage] = Field(default_factory=list)
    text: str = ""
    tool_calls: List[ToolCallRecord] = Field(default_factory=list)
    thread_id: str | None = None


class ScoreResult(_StrictBaseModel):
    """Numeric grade and explanation produced by one scorer."""
    scorer: str
    score: float = Field(ge=0.0, le=1.0)
    reason: str
