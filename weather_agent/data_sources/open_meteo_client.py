"""Helpers for geocoding and fetching weather data from the Open-Meteo APIs."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Mapping, Optional

import requests

from weather_agent.config import settings
from weather_agent.domain import Location
from weather_agent.errors import LocationNotFound, UpstreamUnavailable
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="open_meteo_client")

# Readings are requested fresh for every tool call; no response cache, no retries.
session = requests.Session()

CURRENT_VARS = [
    "temperature_2m",
    "apparent_temperature",
    "relative_humidity_2m",
    "wind_speed_10m",
    "wind_gusts_10m",
    "weather_code",
    "precipitation",
    "uv_index",
]

DAILY_VARS = [
    "temperature_2m_max",
    "temperature_2m_min",
    "weather_code",
    "precipitation_probability_max",
    "wind_speed_10m_max",
    "uv_index_max",
]

EXPECTED_UNITS = {
    "temperature_2m": "°C",
    "apparent_temperature": "°C",
    "relative_humidity_2m": "%",
    "wind_speed_10m": "km/h",
    "wind_gusts_10m": "km/h",
    "precipitation": "mm",
    "temperature_2m_max": "°C",
    "temperature_2m_min": "°C",
    "precipitation_probability_max": "%",
    "wind_speed_10m_max": "km/h",
}

# Alternative spellings the API has been seen to return for the same unit.
ALLOWED_UNIT_SYNONYMS = {
    "relative_humidity_2m": {"%", "percent"},
    "precipitation_probability_max": {"%", "percent"},
    "wind_speed_10m": {"km/h", "kmh"},
    "wind_gusts_10m": {"km/h", "kmh"},
    "wind_speed_10m_max": {"km/h", "kmh"},
}


@dataclass
class CurrentReading:
    """Instantaneous observation returned by the forecast API's `current` block."""
    temperature: float
    apparent_temperature: float
    relative_humidity: float
    wind_speed: float
    wind_gusts: float
    weather_code: int
    precipitation: float
    uv_index: Optional[float]


@dataclass
class DailyReading:
    """One index of the forecast API's parallel `daily` arrays."""
    date: str
    temperature_max: float
    temperature_min: float
    weather_code: int
    precipitation_probability_max: float
    wind_speed_max: float
    uv_index_max: float


def _warn_on_unexpected_units(units: Mapping[str, Any] | None, *, context: str) -> None:
    """Log a warning if Open-Meteo returns units we did not request/expect."""
    if not units:
        return
    for field, expected in EXPECTED_UNITS.items():
        actual = units.get(field)
        if not actual or actual == expected:
            continue
        allowed = ALLOWED_UNIT_SYNONYMS.get(field, set())
        if actual not in allowed:
            logger.warning(
                "Unexpected Open-Meteo unit",
                extra={"context": context, "field": field, "unit": actual, "expected": expected},
            )


def _get_json(url: str, params: Mapping[str, Any], *, service: str) -> dict:
    """GET a JSON document, turning transport and decode failures into UpstreamUnavailable."""
    try:
        resp = session.get(url, params=params, timeout=settings.http_timeout_seconds)
        resp.raise_for_status()
        data = resp.json()
    except requests.exceptions.RequestException as exc:
        logger.error("%s request failed: %s", service, exc)
        raise UpstreamUnavailable(service, str(exc)) from exc
    except ValueError as exc:
        logger.error("%s returned non-JSON response: %s", service, exc)
        raise UpstreamUnavailable(service, "response was not JSON") from exc

    if not isinstance(data, dict):
        raise UpstreamUnavailable(service, f"unexpected payload type {type(data).__name__}")
    return data


def geocode_location(name: str) -> Location:
    """Resolve a free-text place name to the provider's first match."""
    params = {"name": name, "count": 1}
    logger.debug("Geocoding location", extra={"location": name})
    data = _get_json(settings.geocoding_url, params, service="geocoding")

    results = data.get("results") or []
    if not results:
        logger.info("No geocoding results for %r", name)
        raise LocationNotFound(name)

    first = results[0]
    try:
        return Location(
            name=first["name"],
            country=first.get("country") or "",
            latitude=first["latitude"],
            longitude=first["longitude"],
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise UpstreamUnavailable("geocoding", f"malformed result: {exc}") from exc


def fetch_weather_current(latitude: float, longitude: float) -> CurrentReading:
    """Fetch the latest observation for the given coordinates."""
    params = {
        "latitude": latitude,
        "longitude": longitude,
        "current": ",".join(CURRENT_VARS),
    }
    data = _get_json(settings.forecast_url, params, service="forecast")

    try:
        current = data["current"]
        _warn_on_unexpected_units(data.get("current_units"), context="weather_current")
        return CurrentReading(
            temperature=current["temperature_2m"],
            apparent_temperature=current["apparent_temperature"],
            relative_humidity=current["relative_humidity_2m"],
            wind_speed=current["wind_speed_10m"],
            wind_gusts=current["wind_gusts_10m"],
            weather_code=current["weather_code"],
            precipitation=current["precipitation"],
            uv_index=current.get("uv_index"),
        )
    except (KeyError, TypeError, AttributeError) as exc:
        raise UpstreamUnavailable("forecast", f"malformed current block: {exc}") from exc


def fetch_weather_daily(
    latitude: float,
    longitude: float,
    *,
    forecast_days: int = 3,
    timezone: str = "auto",
) -> List[DailyReading]:
    """Fetch `forecast_days` of daily aggregates, one DailyReading per date."""
    params = {
        "latitude": latitude,
        "longitude": longitude,
        "daily": ",".join(DAILY_VARS),
        "timezone": timezone,
        "forecast_days": forecast_days,
    }
    data = _get_json(settings.forecast_url, params, service="forecast")

    try:
        daily = data["daily"]
        _warn_on_unexpected_units(data.get("daily_units"), context="weather_daily")
        times = daily["time"]
        highs = daily["temperature_2m_max"]
        lows = daily["temperature_2m_min"]
        codes = daily["weather_code"]
        precip_chance = daily["precipitation_probability_max"]
        wind = daily["wind_speed_10m_max"]
        uv = daily["uv_index_max"]

        # The provider's arrays are index-aligned; `time` drives the iteration.
        out: List[DailyReading] = []
        for i, date in enumerate(times):
            out.append(
                DailyReading(
                    date=date,
                    temperature_max=highs[i],
                    temperature_min=lows[i],
                    weather_code=codes[i],
                    precipitation_probability_max=precip_chance[i],
                    wind_speed_max=wind[i],
                    uv_index_max=uv[i],
                )
            )
        return out
    except (KeyError, TypeError, IndexError) as exc:
        raise UpstreamUnavailable("forecast", f"malformed daily block: {exc}") from exc
