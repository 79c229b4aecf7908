"""
Request and outcome metrics.

Thread-safe in-process counters and histograms, exported in Prometheus
text exposition format for the /metrics endpoint.

Example output:
    # HELP http_requests_total Total number of HTTP requests by endpoint and status
    # TYPE http_requests_total counter
    http_requests_total{endpoint="/api/convert",status="200"} 12
"""

import threading
from typing import Dict, List, Optional, Tuple

LabelKey = Tuple[Tuple[str, str], ...]

# Default latency buckets in seconds
DEFAULT_BUCKETS: Tuple[float, ...] = (
    0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0,
)


def _label_key(labels: Dict[str, str]) -> LabelKey:
    return tuple(sorted((k, str(v)) for k, v in labels.items()))


def _format_labels(key: LabelKey, extra: Optional[Tuple[str, str]] = None) -> str:
    pairs = list(key)
    if extra:
        pairs.append(extra)
    if not pairs:
        return ""
    body = ",".join(f'{name}="{value}"' for name, value in pairs)
    return "{" + body + "}"


class Metric:
    """Base class for a named metric with fixed label names."""

    type_name = "untyped"

    def __init__(self, name: str, description: str, label_names: Tuple[str, ...] = ()):
        self.name = name
        self.description = description
        self.label_names = label_names
        self._lock = threading.Lock()

    def _key(self, labels: Dict[str, str]) -> LabelKey:
        if set(labels) != set(self.label_names):
            raise ValueError(
                f"Metric {self.name} expects labels {sorted(self.label_names)}, got {sorted(labels)}"
            )
        return _label_key(labels)

    def export_lines(self) -> List[str]:
        raise NotImplementedError

    def reset(self) -> None:
        raise NotImplementedError


class Counter(Metric):
    """Monotonically increasing value."""

    type_name = "counter"

    def __init__(self, name: str, description: str, label_names: Tuple[str, ...] = ()):
        super().__init__(name, description, label_names)
        self._values: Dict[LabelKey, float] = {}

    def inc(self, value: float = 1.0, **labels: str) -> None:
        if value < 0:
            raise ValueError("Counter can only increase")
        key = self._key(labels)
        with self._lock:
            self._values[key] = self._values.get(key, 0.0) + value

    def get(self, **labels: str) -> float:
        with self._lock:
            return self._values.get(self._key(labels), 0.0)

    def export_lines(self) -> List[str]:
        with self._lock:
            items = sorted(self._values.items())
        if not items and not self.label_names:
            items = [((), 0.0)]
        return [f"{self.name}{_format_labels(key)} {value}" for key, value in items]

    def reset(self) -> None:
        with self._lock:
            self._values.clear()


class Histogram(Metric):
    """Distribution of observed values with cumulative buckets."""

    type_name = "histogram"

    def __init__(
        self,
        name: str,
        description: str,
        label_names: Tuple[str, ...] = (),
        buckets: Tuple[float, ...] = DEFAULT_BUCKETS,
    ):
        super().__init__(name, description, label_names)
        self.buckets = tuple(sorted(buckets))
        # key -> (bucket counts, sum, count)
        self._data: Dict[LabelKey, Tuple[List[int], float, int]] = {}

    def observe(self, value: float, **labels: str) -> None:
        key = self._key(labels)
        with self._lock:
            counts, total, count = self._data.get(key, ([0] * len(self.buckets), 0.0, 0))
            for i, bound in enumerate(self.buckets):
                if value <= bound:
                    counts[i] += 1
            self._data[key] = (counts, total + value, count + 1)

    def get_count(self, **labels: str) -> int:
        with self._lock:
            data = self._data.get(self._key(labels))
        return data[2] if data else 0

    def export_lines(self) -> List[str]:
        lines = []
        with self._lock:
            items = sorted((key, (list(c), s, n)) for key, (c, s, n) in self._data.items())
        for key, (counts, total, count) in items:
            for bound, bucket_count in zip(self.buckets, counts):
                lines.append(f"{self.name}_bucket{_format_labels(key, ('le', str(bound)))} {bucket_count}")
            lines.append(f"{self.name}_bucket{_format_labels(key, ('le', '+Inf'))} {count}")
            lines.append(f"{self.name}_sum{_format_labels(key)} {total}")
            lines.append(f"{self.name}_count{_format_labels(key)} {count}")
        return lines

    def reset(self) -> None:
        with self._lock:
            self._data.clear()


class MetricsRegistry:
    """Holds metrics by name and renders them for Prometheus."""

    def __init__(self):
        self._metrics: Dict[str, Metric] = {}
        self._lock = threading.Lock()

    def register(self, metric: Metric) -> Metric:
        with self._lock:
            if metric.name in self._metrics:
                raise ValueError(f"Metric already registered: {metric.name}")
            self._metrics[metric.name] = metric
        return metric

    def get(self, name: str) -> Optional[Metric]:
        return self._metrics.get(name)

    def export(self) -> str:
        """Render all metrics in Prometheus text exposition format."""
        lines = []
        with self._lock:
            metrics = list(self._metrics.values())
        for metric in metrics:
            lines.append(f"# HELP {metric.name} {metric.description}")
            lines.append(f"# TYPE {metric.name} {metric.type_name}")
            lines.extend(metric.export_lines())
        return "\n".join(lines) + "\n"

    def reset(self) -> None:
        """Zero every metric. Used by tests."""
        with self._lock:
            for metric in self._metrics.values():
                metric.reset()


# =============================================================================
# Application metrics
# =============================================================================

REGISTRY = MetricsRegistry()

http_requests_total = REGISTRY.register(Counter(
    "http_requests_total",
    "Total number of HTTP requests by endpoint and status",
    ("endpoint", "status"),
))

http_request_duration_seconds = REGISTRY.register(Histogram(
    "http_request_duration_seconds",
    "Duration of HTTP requests in seconds",
    ("endpoint",),
))

cron_expressions_total = REGISTRY.register(Counter(
    "cron_expressions_total",
    "Total number of cron expressions stored",
))

invalid_cron_expressions_total = REGISTRY.register(Counter(
    "invalid_cron_expressions_total",
    "Total number of invalid cron expressions submitted",
))

db_connection_errors_total = REGISTRY.register(Counter(
    "db_connection_errors_total",
    "Total number of database connection errors",
))
