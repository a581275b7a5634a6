"""
Storage layer exports.
"""

from app.scraping.storage.base import CompanyStorage, FollowerStorage, ReviewStorage
from app.scraping.storage.sqlalchemy_storage import (
    SQLAlchemyFollowerStorage,
    SQLAlchemyReviewStorage,
)

__all__ = [
    "CompanyStorage",
    "FollowerStorage",
    "ReviewStorage",
    "SQLAlchemyFollowerStorage",
    "SQLAlchemyReviewStorage",
]
