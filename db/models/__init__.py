"""
Model package exports.

Import all SQLAlchemy models here so metadata registration and Alembic
autogeneration work without extra imports.
"""

from db.models.company import Company
from db.models.company_review import CompanyReview
from db.models.competitor import Competitor
from db.models.social_followers import SocialFollowers

__all__ = [
    "Company",
    "CompanyReview",
    "Competitor",
    "SocialFollowers",
]
