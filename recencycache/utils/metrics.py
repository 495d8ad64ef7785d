"""
Metrics collection for recencycache.

Counters and gauges that cache instances publish their hit, miss, eviction
and size figures to, collected in a process-wide registry. A metric is
identified by its name together with its labels, so caches sharing a name
still report separate series as long as their labels differ.
"""
import logging
from datetime import datetime, timezone
from threading import Lock
from typing import Any, Dict, Optional


def series_key(name: str, labels: Optional[Dict[str, str]] = None) -> str:
    """
    Build the registry key for a metric series.

    Args:
        name: Metric name
        labels: Optional labels

    Returns:
        ``name`` alone, or ``name{k="v",...}`` with labels sorted by key
    """
    if not labels:
        return name
    rendered = ",".join(f'{key}="{value}"' for key, value in sorted(labels.items()))
    return f"{name}{{{rendered}}}"


class Counter:
    """
    A simple counter metric.

    Counters only increase and are used to track cumulative values
    like total hits, misses and evictions.
    """

    def __init__(self, name: str, description: str = "", labels: Optional[Dict[str, str]] = None):
        """
        Initialize a counter.

        Args:
            name: Counter name
            description: Counter description
            labels: Optional labels for the counter
        """
        self.name = name
        self.description = description
        self.labels = labels or {}
        self._value = 0
        self._lock = Lock()

    def increment(self, value: int = 1):
        """
        Increment the counter.

        Args:
            value: Value to increment by (default: 1)
        """
        if value < 0:
            raise ValueError("Counters can only be incremented by non-negative values")
        with self._lock:
            self._value += value

    def get_value(self) -> int:
        with self._lock:
            return self._value

    def reset(self):
        """Reset the counter to zero."""
        with self._lock:
            self._value = 0


class Gauge:
    """
    A gauge metric that can go up and down.

    Used for current values such as the number of cached entries.
    """

    def __init__(self, name: str, description: str = "", labels: Optional[Dict[str, str]] = None):
        self.name = name
        self.description = description
        self.labels = labels or {}
        self._value = 0.0
        self._lock = Lock()

    def set(self, value: float):
        with self._lock:
            self._value = value

    def increment(self, value: float = 1.0):
        with self._lock:
            self._value += value

    def decrement(self, value: float = 1.0):
        with self._lock:
            self._value -= value

    def get_value(self) -> float:
        with self._lock:
            return self._value


class MetricsRegistry:
    """
    Central registry for all metrics.

    Metrics are created on first request and shared afterwards by
    name plus labels (see :func:`series_key`).
    """

    def __init__(self):
        self._counters: Dict[str, Counter] = {}
        self._gauges: Dict[str, Gauge] = {}
        self._lock = Lock()

    def counter(self, name: str, description: str = "", labels: Optional[Dict[str, str]] = None) -> Counter:
        """
        Get or create a counter.

        Args:
            name: Counter name
            description: Counter description
            labels: Optional labels

        Returns:
            Counter instance
        """
        key = series_key(name, labels)
        with self._lock:
            if key not in self._counters:
                self._counters[key] = Counter(name, description, labels)
            return self._counters[key]

    def gauge(self, name: str, description: str = "", labels: Optional[Dict[str, str]] = None) -> Gauge:
        """
        Get or create a gauge.

        Args:
            name: Gauge name
            description: Gauge description
            labels: Optional labels

        Returns:
            Gauge instance
        """
        key = series_key(name, labels)
        with self._lock:
            if key not in self._gauges:
                self._gauges[key] = Gauge(name, description, labels)
            return self._gauges[key]

    def collect_metrics(self) -> Dict[str, Any]:
        """
        Collect all current metric values.

        Returns:
            Dictionary containing all metric data, keyed by series key
        """
        with self._lock:
            metrics = {
                'timestamp': datetime.now(timezone.utc).isoformat(),
                'counters': {},
                'gauges': {},
            }

            for key, counter in self._counters.items():
                metrics['counters'][key] = {
                    'name': counter.name,
                    'value': counter.get_value(),
                    'description': counter.description,
                    'labels': counter.labels
                }

            for key, gauge in self._gauges.items():
                metrics['gauges'][key] = {
                    'name': gauge.name,
                    'value': gauge.get_value(),
                    'description': gauge.description,
                    'labels': gauge.labels
                }

            return metrics

    def reset_all(self):
        """Reset all counters. Gauges keep their value as they represent current state."""
        with self._lock:
            for counter in self._counters.values():
                counter.reset()

    def log_metrics(self, level: str = "INFO"):
        """
        Log current metrics through the ``recencycache.metrics`` logger.

        Only emits a record; handler setup is left to the application.

        Args:
            level: Log level to use
        """
        metrics = self.collect_metrics()
        log_method = getattr(logging.getLogger("recencycache.metrics"), level.lower())
        log_method("Current metrics: %s", metrics)


# Global metrics registry
_metrics_registry: Optional[MetricsRegistry] = None
_metrics_registry_lock = Lock()


def get_metrics_registry() -> MetricsRegistry:
    """
    Get the global metrics registry.

    Returns:
        Metrics registry instance
    """
    global _metrics_registry
    with _metrics_registry_lock:
        if _metrics_registry is None:
            _metrics_registry = MetricsRegistry()
        return _metrics_registry


def collect_metrics() -> Dict[str, Any]:
    """Collect all current metric values from the global registry."""
    return get_metrics_registry().collect_metrics()


def reset_metrics():
    """Reset all counters in the global registry."""
    get_metrics_registry().reset_all()
