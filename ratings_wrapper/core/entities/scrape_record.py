"""
Suivi persistant des tentatives de scraping par serie et par site.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass
class ScrapeRecord:
    """
    Historique de scraping d'une serie sur un site.

    Le compteur d'echecs est informatif : il n'est incremente que sur
    une absence confirmee et remis a zero sur un succes.

    Attributs :
        imdb_id : Identifiant IMDb de la serie
        source : Site scrape ("rottenTomatoes" ou "metacritic")
        failed_count : Echecs definitifs consecutifs
        last_attempt_at : Derniere tentative conclusive
        last_success_at : Dernier succes
        last_url : URL de la derniere page trouvee
        last_score : Derniere note trouvee (echelle native)
    """

    imdb_id: str
    source: str
    failed_count: int = 0
    last_attempt_at: Optional[datetime] = None
    last_success_at: Optional[datetime] = None
    last_url: Optional[str] = None
    last_score: Optional[float] = None
