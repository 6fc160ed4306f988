"""Interfaces and helpers for weather data sources."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Protocol

from weather_agent.data_sources.open_meteo_client import CurrentReading, DailyReading
from weather_agent.domain import Location


class WeatherDataSource(Protocol):
    """Interface for anything that can geocode and provide weather readings."""

    def geocode(self, name: str) -> Location:
        """Resolve a place name to its first match; raise LocationNotFound if none."""
        ...

    def fetch_current(self, latitude: float, longitude: float) -> CurrentReading:
        """Return the current observation."""
        ...

    def fetch_daily(self, latitude: float, longitude: float, *, forecast_days: int = 3) -> List[DailyReading]:
        """Return daily aggregates, one per date, ascending."""
        ...


@dataclass
class CallableWeatherDataSource(WeatherDataSource):
    """Wrap three callables so they can be swapped for different backends or stubs."""

    geocoder: Callable[..., Location]
    current: Callable[..., CurrentReading]
    daily: Callable[..., List[DailyReading]]

    def geocode(self, name: str) -> Location:
        """Delegate to the configured geocoding callable."""
        return self.geocoder(name)

    def fetch_current(self, latitude: float, longitude: float) -> CurrentReading:
        """Delegate to the configured current-weather callable."""
        return self.current(latitude, longitude)

    def fetch_daily(self, latitude: float, longitude: float, *, forecast_days: int = 3) -> List[DailyReading]:
        """Delegate to the configured daily-forecast callable."""
        return self.daily(latitude, longitude, forecast_days=forecast_days)
