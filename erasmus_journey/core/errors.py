"""Erasmus Journey — Aggregation Error Taxonomy."""


class AggregationError(Exception):
    """Base class for aggregation engine errors."""


class NoSubmissionsFound(AggregationError):
    """Raised when a location has zero eligible submissions."""

    def __init__(self, city: str, country: str):
        self.city = city
        self.country = country
        super().__init__(f"No submissions found for {city}, {country}")


class DestinationNotFound(AggregationError):
    """Raised when a destination id/slug does not resolve."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Destination not found: {key}")


class ExtractionAnomaly(AggregationError):
    """A single value in a submission blob could not be used.

    Local and non-fatal: the extractor drops the value and moves on.
    """

    def __init__(self, path: str, value: object, reason: str):
        self.path = path
        self.value = value
        self.reason = reason
        super().__init__(f"{path}={value!r}: {reason}")


class RefreshFailure(AggregationError):
    """A stale-refresh attempt failed. Logged and swallowed on the read path."""

    def __init__(self, destination_id: str, reason: str):
        self.destination_id = destination_id
        super().__init__(f"Refresh failed for destination {destination_id}: {reason}")
