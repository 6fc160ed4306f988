"""Synthesized weather alerts derived from a single current reading.

Open-Meteo has no alert feed, so alerts are raised from fixed thresholds on
the instantaneous observation. Checks run in a fixed order (precipitation,
then wind) and both thresholds are strict.
"""

from __future__ import annotations

from typing import List

from weather_agent.data_sources import WeatherDataSource
from weather_agent.domain import AlertRecord, AlertReport, AlertSeverity, WeatherRecord
from weather_agent.weather_service import get_current_weather
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="alerts")

HEAVY_RAIN_PRECIPITATION = 20.0
HIGH_WIND_SPEED = 30.0

HEAVY_RAIN_ALERT = AlertRecord(
    severity=AlertSeverity.MODERATE,
    event="Heavy Rain",
    description="Heavy rainfall expected in the area",
    instructions="Avoid low-lying areas and drive carefully",
)

HIGH_WINDS_ALERT = AlertRecord(
    severity=AlertSeverity.SEVERE,
    event="High Winds",
    description="Strong winds expected",
    instructions="Secure outdoor objects and avoid wooded areas",
)


def synthesize_alerts(weather: WeatherRecord) -> AlertReport:
    """Raise alerts for the reading; zero, one or two records."""
    alerts: List[AlertRecord] = []
    if weather.precipitation > HEAVY_RAIN_PRECIPITATION:
        alerts.append(HEAVY_RAIN_ALERT)
    if weather.wind_speed > HIGH_WIND_SPEED:
        alerts.append(HIGH_WINDS_ALERT)

    if alerts:
        logger.info(
            "Raised %d alert(s) for %s: %s",
            len(alerts), weather.location, ", ".join(a.event for a in alerts),
        )
    return AlertReport(
        location=weather.location,
        country=weather.country,
        alerts=alerts,
        has_alerts=bool(alerts),
    )


def get_weather_alerts(location: str, *, data_source: WeatherDataSource | None = None) -> AlertReport:
    """Fetch current conditions for `location` and synthesize alerts."""
    return synthesize_alerts(get_current_weather(location, data_source=data_source))
