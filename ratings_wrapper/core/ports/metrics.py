"""
Interface port pour la remontee de metriques.
"""

from abc import ABC, abstractmethod


class IMetricsSink(ABC):
    """Collecteur de compteurs et jauges etiquetes."""

    @abstractmethod
    def increment(self, name: str, value: int = 1, **labels: str) -> None:
        ...

    @abstractmethod
    def gauge(self, name: str, value: float, **labels: str) -> None:
        ...
