"""
app/domain package marker.
"""

from app.domain.social_scraping import (
    CompanyProfile,
    FollowerRefreshSummary,
    FollowerSnapshot,
    ProfileLookup,
    ReviewSummary,
    Sentiment,
    StoredReview,
)

__all__ = [
    "CompanyProfile",
    "FollowerRefreshSummary",
    "FollowerSnapshot",
    "ProfileLookup",
    "ReviewSummary",
    "Sentiment",
    "StoredReview",
]
