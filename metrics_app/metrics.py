"""Prometheus registry with registry-wide default labels.

Wraps :class:`prometheus_client.CollectorRegistry` so that the set of metrics
lives in an explicitly constructed object handed to the web layer, instead
of the process-global ``REGISTRY``. Default process metrics are plain
prometheus_client collectors and are sampled when the registry is rendered.
"""

from __future__ import annotations

import copy
import re
import threading
from collections.abc import Iterable, Iterator, Mapping

import prometheus_client
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    GCCollector,
    PlatformCollector,
    ProcessCollector,
    generate_latest,
)
from prometheus_client.metrics_core import Metric
from prometheus_client.registry import Collector

from metrics_app.errors import DuplicateMetricError, InvalidAmountError, MetricsError

_LABEL_NAME_RE = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")


def _family_names(metric: Collector) -> set[str]:
    # Stock collectors have no describe(); fall back to a live collection.
    describe = getattr(metric, "describe", None)
    families = list(describe()) if describe is not None else []
    if not families:
        families = list(metric.collect())
    return {family.name for family in families}


class Counter(Collector):
    """Unlabelled monotonic counter.

    Backed by :class:`prometheus_client.Counter`, whose value is guarded by a
    lock, so concurrent ``inc`` calls never lose updates.
    """

    def __init__(self, name: str, documentation: str) -> None:
        self.name = name
        self._counter = prometheus_client.Counter(name, documentation, registry=None)

    def inc(self, amount: float = 1) -> None:
        if not amount >= 0:
            raise InvalidAmountError(amount)
        self._counter.inc(amount)

    def value(self) -> float:
        """Return the accumulated total."""

        for metric in self._counter.collect():
            for sample in metric.samples:
                if sample.name.endswith("_total"):
                    return sample.value
        return 0.0

    def describe(self) -> Iterable[Metric]:
        return self._counter.describe()

    def collect(self) -> Iterable[Metric]:
        return self._counter.collect()


class MetricsRegistry(Collector):
    """Ordered set of collectors rendered in the text exposition format."""

    content_type = CONTENT_TYPE_LATEST

    def __init__(self) -> None:
        self._registry = CollectorRegistry(auto_describe=True)
        self._lock = threading.Lock()
        self._names: dict[Collector, set[str]] = {}
        self._default_labels: dict[str, str] = {}

    @property
    def default_labels(self) -> dict[str, str]:
        return dict(self._default_labels)

    def names(self) -> list[str]:
        """Return registered metric family names in registration order."""

        with self._lock:
            return [name for names in self._names.values() for name in sorted(names)]

    def register(self, metric: Collector) -> None:
        """Add ``metric``; fails without side effects if any of its names is taken."""

        names = _family_names(metric)
        with self._lock:
            taken = set().union(*self._names.values()) & names
            if taken:
                raise DuplicateMetricError(
                    f"Metric name(s) already registered: {', '.join(sorted(taken))}"
                )
            try:
                self._registry.register(metric)
            except ValueError as exc:
                raise DuplicateMetricError(str(exc)) from exc
            self._names[metric] = names

    def unregister(self, metric: Collector) -> None:
        with self._lock:
            self._registry.unregister(metric)
            del self._names[metric]

    def set_default_labels(self, labels: Mapping[str, str]) -> None:
        """Attach ``labels`` to every sample produced by this registry."""

        for name in labels:
            if not _LABEL_NAME_RE.match(name) or name.startswith("__"):
                raise MetricsError(f"Invalid label name: {name!r}")
        self._default_labels = {name: str(value) for name, value in labels.items()}

    def collect_default_metrics(self) -> None:
        """Register process, platform and garbage-collector metrics.

        None of these collectors poll in the background; each reads its
        source (``/proc``, ``platform``, ``gc.get_stats``) on collection.
        """

        self.register(ProcessCollector(registry=None))
        self.register(PlatformCollector(registry=None))
        # GCCollector registers itself unconditionally, so give it a scratch registry.
        self.register(GCCollector(registry=CollectorRegistry()))

    def collect(self) -> Iterator[Metric]:
        """Yield metric families in registration order with default labels applied."""

        defaults = self._default_labels
        for family in self._registry.collect():
            if not defaults:
                yield family
                continue
            labelled = copy.copy(family)
            labelled.samples = [
                sample._replace(labels={**defaults, **sample.labels}) for sample in family.samples
            ]
            yield labelled

    def render(self) -> Iterator[str]:
        """Yield exposition-format lines, each ending in a newline.

        Every call re-samples the registered collectors.
        """

        yield from generate_latest(self).decode("utf-8").splitlines(keepends=True)

    def restricted_registry(self, names: Iterable[str]) -> Collector:
        """Return a view limited to samples named in ``names``.

        prometheus_client exporters call this for ``?name[]=`` scrapes.
        """

        return _RestrictedRegistry(self, frozenset(names))

    def get_sample_value(self, name: str, labels: Mapping[str, str] | None = None) -> float | None:
        """Return the value of sample ``name`` whose labels match exactly, or ``None``."""

        wanted = {**self._default_labels, **(labels or {})}
        for family in self.collect():
            for sample in family.samples:
                if sample.name == name and sample.labels == wanted:
                    return sample.value
        return None


class _RestrictedRegistry(Collector):
    def __init__(self, registry: MetricsRegistry, names: frozenset[str]) -> None:
        self._registry = registry
        self._names = names

    def collect(self) -> Iterator[Metric]:
        for family in self._registry.collect():
            samples = [sample for sample in family.samples if sample.name in self._names]
            if samples:
                restricted = copy.copy(family)
                restricted.samples = samples
                yield restricted
