"""
Collecteur de metriques en memoire, thread-safe.

Les etiquettes sont aplaties dans le nom de la serie :
    metrics.increment("source.rate_limited", source="omdb")
    -> "source.rate_limited{source=omdb}"
"""

import threading
from typing import Any

from ratings_wrapper.core.ports.metrics import IMetricsSink


def _series_name(name: str, labels: dict[str, str]) -> str:
    if not labels:
        return name
    rendered = ",".join(f"{key}={labels[key]}" for key in sorted(labels))
    return f"{name}{{{rendered}}}"


class InMemoryMetrics(IMetricsSink):
    """Compteurs et jauges conserves pour la duree du processus."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._counters: dict[str, int] = {}
        self._gauges: dict[str, float] = {}

    def increment(self, name: str, value: int = 1, **labels: str) -> None:
        key = _series_name(name, labels)
        with self._lock:
            self._counters[key] = self._counters.get(key, 0) + int(value)

    def gauge(self, name: str, value: float, **labels: str) -> None:
        key = _series_name(name, labels)
        with self._lock:
            self._gauges[key] = float(value)

    def counter(self, name: str, **labels: str) -> int:
        """Valeur courante d'un compteur (0 si jamais incremente)."""
        with self._lock:
            return self._counters.get(_series_name(name, labels), 0)

    def snapshot(self) -> dict[str, Any]:
        with self._lock:
            return {"counters": dict(self._counters), "gauges": dict(self._gauges)}

    def reset(self) -> None:
        with self._lock:
            self._counters.clear()
            self._gauges.clear()
