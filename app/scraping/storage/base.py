"""
Storage layer interfaces for scraped follower counts and reviews.

Scrapers never talk to storage; job scripts and services do the lookups and
writes around them.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence

from app.domain.social_scraping import (
    CompanyProfile,
    FollowerSnapshot,
    ProfileLookup,
    StoredReview,
)
from app.scraping.types import Platform


class CompanyStorage(ABC):
    """
    Company lookups shared by follower and review storage.
    """

    @abstractmethod
    def get_company(self, *, company_id: str) -> CompanyProfile | None:
        """
        Return the company, or None when it does not exist.
        """


class FollowerStorage(CompanyStorage):
    """
    Storage abstraction for competitor profile URLs and follower counts.
    """

    @abstractmethod
    def get_profile(self, *, platform: Platform, target_id: str) -> ProfileLookup | None:
        """
        Return the competitor's profile URL for a platform, or None when unset.
        """

    @abstractmethod
    def save_follower_count(
        self,
        *,
        platform: Platform,
        profile: ProfileLookup,
        follower_count: int,
    ) -> None:
        """
        Upsert the latest follower count for one competitor and platform.
        """

    @abstractmethod
    def competitor_ids(self, *, company_id: str) -> list[str]:
        """
        Return the competitor ids registered for a company.
        """

    @abstractmethod
    def company_ids(self) -> list[str]:
        """
        Return every company id that has at least one competitor.
        """

    @abstractmethod
    def follower_snapshots(self, *, company_id: str) -> list[FollowerSnapshot]:
        """
        Return the latest stored counts for each competitor of a company.
        """


class ReviewStorage(CompanyStorage):
    """
    Storage abstraction for scraped company reviews.
    """

    @abstractmethod
    def get_stored_reviews(self, *, company_id: str, limit: int = 50) -> list[StoredReview]:
        """
        Return the most recently stored reviews for a company.
        """

    @abstractmethod
    def store_reviews(self, *, company_id: str, reviews: Sequence[StoredReview]) -> int:
        """
        Persist reviews not already stored (same reviewer and text) and return
        the inserted count.
        """
