"""Weather data sources: the Open-Meteo client and the pluggable source interface."""

from .base import CallableWeatherDataSource, WeatherDataSource
from .factory import build_data_source
from .open_meteo_client import (
    CurrentReading,
    DailyReading,
    fetch_weather_current,
    fetch_weather_daily,
    geocode_location,
)

__all__ = [
    "build_data_source",
    "WeatherDataSource",
    "CallableWeatherDataSource",
    "CurrentReading",
    "DailyReading",
    "fetch_weather_current",
    "fetch_weather_daily",
    "geocode_location",
]
