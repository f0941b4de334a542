"""
Repositories SQLModel.
"""

from ratings_wrapper.infrastructure.persistence.repositories.scrape_record_repository import (
    SQLModelScrapeRecordRepository,
)

__all__ = ["SQLModelScrapeRecordRepository"]
