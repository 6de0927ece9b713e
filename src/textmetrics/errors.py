# src/textmetrics/errors.py
"""Exception types raised by textmetrics."""


class TextMetricsError(Exception):
    """Base class for all textmetrics errors."""


class InvalidArgumentError(TextMetricsError, ValueError):
    """A numeric or named argument is outside the range a query accepts."""


class FontLoadError(TextMetricsError):
    """A font file could not be turned into a metrics table."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Could not load metrics from {path}: {reason}")
