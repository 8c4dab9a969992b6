"""Flask service exporting a root request counter to Prometheus."""

from metrics_app.app import build_registry, count_root_requests, create_app
from metrics_app.errors import DuplicateMetricError, InvalidAmountError, MetricsError
from metrics_app.metrics import Counter, MetricsRegistry

__all__ = [
    "Counter",
    "DuplicateMetricError",
    "InvalidAmountError",
    "MetricsError",
    "MetricsRegistry",
    "build_registry",
    "count_root_requests",
    "create_app",
]
