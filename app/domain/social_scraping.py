"""
app/domain/social_scraping.py

Domain models exchanged between scraping services and storage.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from app.scraping.types import TargetLaunchResults


@dataclass(frozen=True)
class ProfileLookup:
    """
    Social profile URL for one competitor on one platform.
    """

    target_id: str
    company_id: str | None
    profile_url: str


@dataclass(frozen=True)
class CompanyProfile:
    """
    Company fields the review collector needs.
    """

    company_id: str
    name: str
    address: str | None = None
    google_review_url: str | None = None


@dataclass(frozen=True)
class FollowerSnapshot:
    """
    Latest stored follower counts for one competitor.
    """

    competitor_id: str
    facebook_followers: int | None
    instagram_followers: int | None
    linkedin_followers: int | None
    facebook_url: str | None
    instagram_url: str | None
    linkedin_url: str | None
    last_updated: datetime | None


@dataclass(frozen=True)
class Sentiment:
    label: str
    polarity: float


@dataclass(frozen=True)
class StoredReview:
    """
    One review as persisted, or about to be persisted.
    """

    reviewer_name: str
    rating: float | None
    review_text: str
    review_date: datetime | None = None
    sentiment: str | None = None
    polarity: float | None = None
    source: str = "GOOGLE"


@dataclass(frozen=True)
class ReviewSummary:
    """
    Review aggregate handed to report generation.
    """

    average_rating: float | None
    total_reviews: int
    top_reviews: list[dict[str, object]] = field(default_factory=list)

    @classmethod
    def empty(cls) -> "ReviewSummary":
        return cls(average_rating=None, total_reviews=0, top_reviews=[])


@dataclass(frozen=True)
class FollowerRefreshSummary:
    """
    Outcome of a follower refresh for one company.
    """

    company_id: str | None
    message: str
    total_competitors: int
    total_success: int
    total_failed: int
    results: list[TargetLaunchResults] = field(default_factory=list)
