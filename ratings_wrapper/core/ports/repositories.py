"""
Interfaces ports pour les repositories.
"""

from abc import ABC, abstractmethod
from typing import Optional

from ratings_wrapper.core.entities import ScrapeRecord


class IScrapeRecordRepository(ABC):
    """Stockage des historiques de scraping."""

    @abstractmethod
    def get(self, imdb_id: str, source: str) -> Optional[ScrapeRecord]:
        ...

    @abstractmethod
    def record_failure(self, imdb_id: str, source: str) -> ScrapeRecord:
        """Incremente de 1 le compteur d'echecs et retourne l'historique."""
        ...

    @abstractmethod
    def record_success(
        self, imdb_id: str, source: str, url: str, score: float
    ) -> ScrapeRecord:
        """Remet le compteur a zero et memorise la note trouvee."""
        ...
