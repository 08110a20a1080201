"""Error types raised by the persistence and aggregation layers.

Callers at the HTTP boundary translate these into generic responses;
the underlying cause is kept on `__cause__` for server-side logs only.
"""


class ClockReadError(Exception):
    """Base class for service errors."""


class SchemaInitError(ClockReadError):
    """Schema could not be created; the process must not serve requests."""


class ExperimentWriteError(ClockReadError):
    """An experiment submission could not be stored."""


class StatisticsError(ClockReadError):
    """Aggregate statistics could not be computed."""
