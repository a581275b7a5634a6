"""
app/services package marker.
"""

from app.services.follower_scraping_service import (
    FollowerScrapingService,
    get_follower_scraping_service,
)
from app.services.google_reviews_service import (
    GoogleReviewsService,
    get_google_reviews_service,
)

__all__ = [
    "FollowerScrapingService",
    "get_follower_scraping_service",
    "GoogleReviewsService",
    "get_google_reviews_service",
]
