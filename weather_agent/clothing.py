"""Clothing recommendations from a current weather record.

A temperature ladder picks the base outfit (first matching `<` threshold
wins, so a reading exactly on a boundary gets the tier of the next threshold
up). Rain and hiking adjustments are applied on top.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from weather_agent.data_sources import WeatherDataSource
from weather_agent.domain import ClothingRecommendation, ClothingReport, WeatherRecord
from weather_agent.weather_service import get_current_weather


@dataclass(frozen=True)
class ClothingTier:
    below: float | None  # None marks the catch-all tier
    layers: tuple[str, ...]
    accessories: tuple[str, ...]
    footwear: str


CLOTHING_TIERS: tuple[ClothingTier, ...] = (
    ClothingTier(
        below=0,
        layers=("Thermal base layer", "Insulated mid-layer", "Waterproof jacket"),
        accessories=("Warm hat", "Gloves", "Scarf"),
        footwear="Insulated waterproof boots",
    ),
    ClothingTier(
        below=10,
        layers=("Long-sleeve shirt", "Fleece or sweater", "Light jacket"),
        accessories=("Light hat", "Gloves if windy"),
        footwear="Closed shoes or boots",
    ),
    ClothingTier(
        below=20,
        layers=("T-shirt", "Light jacket or hoodie"),
        accessories=(),
        footwear="Sneakers or comfortable shoes",
    ),
    ClothingTier(
        below=None,
        layers=("T-shirt or light top",),
        accessories=("Sunglasses", "Hat for sun protection"),
        footwear="Sandals or breathable shoes",
    ),
)

RAIN_PRECIPITATION_MM = 5.0
RAIN_ACCESSORIES = ("Umbrella", "Waterproof jacket")
RAIN_NOTES = "Expect rain, bring waterproof gear"
DEFAULT_NOTES = "Dress comfortably for the conditions"

HIKING_FOOTWEAR = "Hiking boots"
HIKING_ACCESSORIES = ("Backpack", "Water bottle")


def select_tier(temperature: float) -> ClothingTier:
    """Return the first tier whose threshold the temperature is strictly below."""
    for tier in CLOTHING_TIERS:
        if tier.below is None or temperature < tier.below:
            return tier
    return CLOTHING_TIERS[-1]


def recommend_clothing(weather: WeatherRecord, activity: Optional[str] = None) -> ClothingReport:
    """Build the outfit for a reading, optionally tuned for a planned activity."""
    tier = select_tier(weather.temperature)
    accessories = list(tier.accessories)
    footwear = tier.footwear
    notes = ""

    if weather.precipitation > RAIN_PRECIPITATION_MM:
        accessories.extend(RAIN_ACCESSORIES)
        notes = RAIN_NOTES

    if activity and "hiking" in activity.lower():
        footwear = HIKING_FOOTWEAR
        accessories.extend(HIKING_ACCESSORIES)

    return ClothingReport(
        location=weather.location,
        temperature=weather.temperature,
        conditions=weather.conditions,
        recommendations=ClothingRecommendation(
            layers=list(tier.layers),
            accessories=accessories,
            footwear=footwear,
            notes=notes or DEFAULT_NOTES,
        ),
    )


def get_clothing_recommendations(
    location: str,
    activity: Optional[str] = None,
    *,
    data_source: WeatherDataSource | None = None,
) -> ClothingReport:
    """Fetch current conditions for `location` and recommend clothing."""
    return recommend_clothing(get_current_weather(location, data_source=data_source), activity)
