"""Error taxonomy shared by the aggregation services and the API layer."""

from __future__ import annotations

from typing import Optional


class TrafficStatsError(Exception):
    """Base class for failures surfaced to callers of the service."""

    kind = "TrafficStatsError"


class ValidationError(TrafficStatsError):
    """A request parameter is missing or malformed."""

    kind = "ValidationError"

    def __init__(self, message: str, parameter: Optional[str] = None) -> None:
        super().__init__(message)
        self.parameter = parameter


class ConfigurationError(TrafficStatsError):
    """A required external resource identifier is not configured."""

    kind = "ConfigurationError"


class StoreQueryError(TrafficStatsError):
    """The paginated range fetch against the store failed."""

    kind = "StoreQueryError"
