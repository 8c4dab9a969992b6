"""Exceptions raised by the metrics layer."""

from __future__ import annotations


class MetricsError(Exception):
    """Base class for metric registration and update failures."""


class DuplicateMetricError(MetricsError):
    """Raised when a metric name is already taken in a registry."""


class InvalidAmountError(MetricsError, ValueError):
    """Raised when a counter is asked to decrease."""

    def __init__(self, amount: float) -> None:
        self.amount = amount
        super().__init__(f"Counters can only be incremented by non-negative amounts, got {amount!r}")
