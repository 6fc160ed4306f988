"""Deterministic activity recommendations from a current weather record.

A fixed catalog of activities is filtered by temperature range (inclusive on
both ends) and by an allow-list of condition labels, then each survivor gets a
suitability grade:

- ``excellent`` when the temperature sits at least 5 degrees inside both
  bounds of the activity's range,
- otherwise ``fair`` when more than 5 mm of precipitation is falling,
- otherwise ``good``.

At most five recommendations are returned, in catalog order.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Mapping, Optional, Sequence

from weather_agent.data_sources import WeatherDataSource
from weather_agent.domain import ActivityRecommendation, ActivityReport, Suitability, WeatherRecord
from weather_agent.weather_service import get_current_weather
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="activities")

MAX_RECOMMENDATIONS = 5
EXCELLENT_MARGIN = 5.0
FAIR_PRECIPITATION_MM = 5.0
ALL_CONDITIONS = "All"

_OUTDOOR_SKIES = ("Clear sky", "Mainly clear", "Partly cloudy")


@dataclass(frozen=True)
class CatalogActivity:
    """An activity with its comfortable temperature range and accepted conditions."""
    name: str
    min_temp: float
    max_temp: float
    conditions: tuple[str, ...]

    def accepts(self, weather: WeatherRecord) -> bool:
        """True when the reading's temperature and condition label both fit."""
        in_range = self.min_temp <= weather.temperature <= self.max_temp
        condition_ok = ALL_CONDITIONS in self.conditions or weather.conditions in self.conditions
        return in_range and condition_ok


ACTIVITY_CATALOG: tuple[CatalogActivity, ...] = (
    CatalogActivity("Hiking", 10, 30, _OUTDOOR_SKIES),
    CatalogActivity("Beach", 20, 35, ("Clear sky", "Mainly clear")),
    CatalogActivity("Cycling", 5, 30, _OUTDOOR_SKIES),
    CatalogActivity("Picnic", 15, 28, _OUTDOOR_SKIES),
    CatalogActivity("Museum", -10, 40, (ALL_CONDITIONS,)),
    CatalogActivity("Shopping", -10, 40, (ALL_CONDITIONS,)),
    CatalogActivity("Restaurant", -10, 40, (ALL_CONDITIONS,)),
)

_REASONS: Mapping[str, Callable[[WeatherRecord], str]] = MappingProxyType({
    "Hiking": lambda w: f"Perfect temperature of {w.temperature:g}°C and {w.conditions.lower()} for hiking",
    "Beach": lambda w: f"Warm {w.temperature:g}°C and clear skies ideal for beach activities",
    "Cycling": lambda w: "Comfortable conditions for cycling with mild temperatures",
    "Picnic": lambda w: "Pleasant weather for outdoor dining and relaxation",
    "Museum": lambda w: "Great indoor activity regardless of weather conditions",
    "Shopping": lambda w: "Comfortable indoor activity suitable for any weather",
    "Restaurant": lambda w: "Enjoy dining in climate-controlled comfort",
})
DEFAULT_REASON = "Suitable activity for current conditions"

# Indoor activities have no alternative; the field is left out for them.
INDOOR_ALTERNATIVES: Mapping[str, str] = MappingProxyType({
    "Hiking": "Visit a nature museum or indoor botanical garden",
    "Beach": "Visit an indoor pool or aquatic center",
    "Cycling": "Try a stationary bike at a gym",
    "Picnic": "Have an indoor picnic or visit a food hall",
})


def activity_reason(activity: str, weather: WeatherRecord) -> str:
    """Fixed explanation text for an activity under the given reading."""
    build = _REASONS.get(activity)
    return build(weather) if build else DEFAULT_REASON


def grade_suitability(activity: CatalogActivity, weather: WeatherRecord) -> Suitability:
    """Grade an accepted activity: excellent inside the margin, fair when wet, else good."""
    t = weather.temperature
    if activity.min_temp + EXCELLENT_MARGIN <= t <= activity.max_temp - EXCELLENT_MARGIN:
        return Suitability.EXCELLENT
    if weather.precipitation > FAIR_PRECIPITATION_MM:
        return Suitability.FAIR
    return Suitability.GOOD


def recommend_activities(
    weather: WeatherRecord,
    interests: Optional[Sequence[str]] = None,
    *,
    catalog: Sequence[CatalogActivity] = ACTIVITY_CATALOG,
) -> ActivityReport:
    """Filter and grade the catalog against a weather record.

    `interests` is accepted for the tool schema but does not filter or reorder
    the catalog.
    """
    if interests:
        logger.debug("Activity interests received (not used for ranking): %s", list(interests))

    recommendations = [
        ActivityRecommendation(
            activity=act.name,
            suitability=grade_suitability(act, weather),
            reason=activity_reason(act.name, weather),
            indoor_alternative=INDOOR_ALTERNATIVES.get(act.name),
        )
        for act in catalog
        if act.accepts(weather)
    ]

    return ActivityReport(
        location=weather.location,
        current_conditions=weather.conditions,
        temperature=weather.temperature,
        recommendations=recommendations[:MAX_RECOMMENDATIONS],
    )


def get_activity_recommendations(
    location: str,
    interests: Optional[Sequence[str]] = None,
    *,
    data_source: WeatherDataSource | None = None,
) -> ActivityReport:
    """Fetch current conditions for `location` and recommend activities."""
    weather = get_current_weather(location, data_source=data_source)
    return recommend_activities(weather, interests)
