"""Turn geocoded Open-Meteo readings into normalized weather records and forecasts."""
from __future__ import annotations

from typing import List, Optional

from pydantic import ValidationError

from weather_agent.conditions import describe_weather_code
from weather_agent.config import settings
from weather_agent.data_sources import WeatherDataSource, build_data_source
from weather_agent.data_sources.open_meteo_client import CurrentReading, DailyReading
from weather_agent.domain import Forecast, ForecastDay, Location, WeatherRecord
from weather_agent.errors import UpstreamUnavailable
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="weather_service")

MIN_FORECAST_DAYS = 1
MAX_FORECAST_DAYS = 7


def _source(data_source: Optional[WeatherDataSource]) -> WeatherDataSource:
    """Use the given data source, or build the configured one."""
    return data_source or build_data_source()


def to_weather_record(reading: CurrentReading, location: Location) -> WeatherRecord:
    """Map a raw current reading plus its location into a WeatherRecord."""
    return WeatherRecord(
        temperature=reading.temperature,
        feels_like=reading.apparent_temperature,
        humidity=reading.relative_humidity,
        wind_speed=reading.wind_speed,
        wind_gust=reading.wind_gusts,
        precipitation=reading.precipitation,
        uv_index=reading.uv_index,
        conditions=describe_weather_code(reading.weather_code),
        location=location.name,
        country=location.country,
    )


def to_forecast_days(readings: List[DailyReading]) -> List[ForecastDay]:
    """Map daily readings to ForecastDay entries, preserving provider (date) order."""
    return [
        ForecastDay(
            date=r.date,
            high=r.temperature_max,
            low=r.temperature_min,
            conditions=describe_weather_code(r.weather_code),
            precipitation_chance=r.precipitation_probability_max,
            wind_speed=r.wind_speed_max,
            uv_index=r.uv_index_max,
        )
        for r in readings
    ]


def get_current_weather(location: str, *, data_source: WeatherDataSource | None = None) -> WeatherRecord:
    """Geocode `location` and return its current conditions."""
    source = _source(data_source)
    place = source.geocode(location)
    logger.info(
        "Fetching current weather for %s, %s (%.4f, %.4f)",
        place.name, place.country, place.latitude, place.longitude,
    )
    reading = source.fetch_current(place.latitude, place.longitude)
    try:
        record = to_weather_record(reading, place)
    except ValidationError as exc:
        logger.error("Current reading for %s failed validation: %s", place.name, exc)
        raise UpstreamUnavailable(
            "forecast", f"malformed current reading: {exc.error_count()} invalid field(s)"
        ) from exc
    logger.debug(f"Current weather record: {record}")
    return record


def get_weather_forecast(
    location: str,
    days: Optional[int] = None,
    *,
    data_source: WeatherDataSource | None = None,
) -> Forecast:
    """Geocode `location` and return a `days`-long daily forecast (1-7 days).

    `days` defaults to `settings.default_forecast_days`.
    """
    if days is None:
        days = settings.default_forecast_days
    if not MIN_FORECAST_DAYS <= days <= MAX_FORECAST_DAYS:
        raise ValueError(f"days must be between {MIN_FORECAST_DAYS} and {MAX_FORECAST_DAYS}, got {days}")

    source = _source(data_source)
    place = source.geocode(location)
    logger.info("Fetching %d-day forecast for %s, %s", days, place.name, place.country)
    readings = source.fetch_daily(place.latitude, place.longitude, forecast_days=days)
    try:
        forecast_days = to_forecast_days(readings)
    except ValidationError as exc:
        logger.error("Daily readings for %s failed validation: %s", place.name, exc)
        raise UpstreamUnavailable(
            "forecast", f"malformed daily reading: {exc.error_count()} invalid field(s)"
        ) from exc
    return Forecast(location=place.name, country=place.country, forecast=forecast_days)
