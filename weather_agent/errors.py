"""Error kinds raised along the tool and evaluation paths."""

from __future__ import annotations


class WeatherAgentError(Exception):
    """Base class for all errors raised by this package."""


class LocationNotFound(WeatherAgentError):
    """The geocoding provider returned no results for a place name."""

    def __init__(self, location: str) -> None:
        super().__init__(f"Location '{location}' not found")
        self.location = location


class UpstreamUnavailable(WeatherAgentError):
    """A provider call failed or returned a payload we cannot read."""

    def __init__(self, service: str, detail: str) -> None:
        super().__init__(f"{service} unavailable: {detail}")
        self.service = service
        self.detail = detail


class ToolInputError(WeatherAgentError):
    """Tool arguments failed schema validation; the handler never ran."""

    def __init__(self, tool_id: str, errors: list[dict]) -> None:
        super().__init__(f"Invalid input for tool '{tool_id}': {errors}")
        self.tool_id = tool_id
        self.errors = errors


class MalformedJudgeOutput(WeatherAgentError):
    """A scorer's judge returned output that does not match its schema."""

    def __init__(self, scorer: str, detail: str) -> None:
        super().__init__(f"Judge output for '{scorer}' is malformed: {detail}")
        self.scorer = scorer
        self.detail = detail
