"""
SQLAlchemy-backed storage for follower counts and reviews.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.domain.social_scraping import (
    CompanyProfile,
    FollowerSnapshot,
    ProfileLookup,
    StoredReview,
)
from app.scraping.logging_utils import log_event
from app.scraping.storage.base import FollowerStorage, ReviewStorage
from app.scraping.types import Platform
from db.models.company import Company
from db.models.company_review import CompanyReview
from db.models.competitor import Competitor
from db.models.social_followers import SocialFollowers

logger = logging.getLogger(__name__)

_URL_COLUMNS = {
    Platform.FACEBOOK: Competitor.facebook_url,
    Platform.INSTAGRAM: Competitor.instagram_url,
    Platform.LINKEDIN: Competitor.linkedin_url,
}
_COUNT_FIELDS = {
    Platform.FACEBOOK: ("facebook_follower_count", "facebook_page_url"),
    Platform.INSTAGRAM: ("instagram_follower_count", "instagram_page_url"),
    Platform.LINKEDIN: ("linkedin_follower_count", "linkedin_page_url"),
}


def _parse_id(value: str) -> int | None:
    try:
        return int(str(value).strip())
    except ValueError:
        return None


class _SQLAlchemyCompanyLookup:
    def __init__(self, *, session: Session) -> None:
        self._session = session

    def get_company(self, *, company_id: str) -> CompanyProfile | None:
        parsed = _parse_id(company_id)
        if parsed is None:
            return None
        company = self._session.get(Company, parsed)
        if company is None:
            return None
        return CompanyProfile(
            company_id=str(company.company_id),
            name=company.name,
            address=company.address,
            google_review_url=company.google_review_url,
        )


class SQLAlchemyFollowerStorage(_SQLAlchemyCompanyLookup, FollowerStorage):
    """
    Read profile URLs from compa_competitors and upsert smp_followers.
    """

    def get_profile(self, *, platform: Platform, target_id: str) -> ProfileLookup | None:
        competitor_id = _parse_id(target_id)
        if competitor_id is None:
            return None

        url_column = _URL_COLUMNS[platform]
        row = self._session.execute(
            select(url_column, Competitor.company_id)
            .where(
                Competitor.compet_company_id == competitor_id,
                url_column.is_not(None),
                url_column != "",
            )
            .limit(1)
        ).first()
        if row is None:
            return None
        return ProfileLookup(
            target_id=str(competitor_id),
            company_id=str(row[1]) if row[1] is not None else None,
            profile_url=row[0],
        )

    def save_follower_count(
        self,
        *,
        platform: Platform,
        profile: ProfileLookup,
        follower_count: int,
    ) -> None:
        competitor_id = _parse_id(profile.target_id)
        if competitor_id is None:
            raise ValueError(f"Invalid competitor id '{profile.target_id}'.")

        count_field, url_field = _COUNT_FIELDS[platform]
        try:
            record = self._session.execute(
                select(SocialFollowers).where(SocialFollowers.compet_company_id == competitor_id)
            ).scalar_one_or_none()
            if record is None:
                record = SocialFollowers(
                    company_id=_parse_id(profile.company_id) if profile.company_id else None,
                    compet_company_id=competitor_id,
                    status="ACTIVE",
                )
                self._session.add(record)
            setattr(record, count_field, follower_count)
            setattr(record, url_field, profile.profile_url)
            self._session.commit()
        except SQLAlchemyError:
            self._session.rollback()
            raise

        log_event(
            logger,
            logging.INFO,
            "follower_count_stored",
            platform=platform.value,
            target_id=profile.target_id,
            follower_count=follower_count,
        )

    def competitor_ids(self, *, company_id: str) -> list[str]:
        parsed = _parse_id(company_id)
        if parsed is None:
            return []
        rows = self._session.execute(
            select(Competitor.compet_company_id)
            .where(Competitor.company_id == parsed)
            .order_by(Competitor.id)
        ).scalars()
        return [str(value) for value in rows]

    def company_ids(self) -> list[str]:
        rows = self._session.execute(
            select(Competitor.company_id).distinct().order_by(Competitor.company_id)
        ).scalars()
        return [str(value) for value in rows]

    def follower_snapshots(self, *, company_id: str) -> list[FollowerSnapshot]:
        parsed = _parse_id(company_id)
        if parsed is None:
            return []
        rows = self._session.execute(
            select(SocialFollowers)
            .where(SocialFollowers.company_id == parsed)
            .order_by(SocialFollowers.updated_at.desc())
        ).scalars()
        return [
            FollowerSnapshot(
                competitor_id=str(row.compet_company_id),
                facebook_followers=row.facebook_follower_count,
                instagram_followers=row.instagram_follower_count,
                linkedin_followers=row.linkedin_follower_count,
                facebook_url=row.facebook_page_url,
                instagram_url=row.instagram_page_url,
                linkedin_url=row.linkedin_page_url,
                last_updated=row.updated_at,
            )
            for row in rows
        ]


class SQLAlchemyReviewStorage(_SQLAlchemyCompanyLookup, ReviewStorage):
    """
    Read and persist reviews in company_reviews.
    """

    def get_stored_reviews(self, *, company_id: str, limit: int = 50) -> list[StoredReview]:
        parsed = _parse_id(company_id)
        if parsed is None:
            return []
        rows = self._session.execute(
            select(CompanyReview)
            .where(CompanyReview.company_id == parsed)
            .order_by(CompanyReview.created_at.desc())
            .limit(limit)
        ).scalars()
        return [
            StoredReview(
                reviewer_name=row.reviewer_name,
                rating=row.rating,
                review_text=row.review_text,
                review_date=row.review_date,
                sentiment=row.sentiment,
                polarity=row.polarity,
                source=row.source,
            )
            for row in rows
        ]

    def store_reviews(self, *, company_id: str, reviews: Sequence[StoredReview]) -> int:
        parsed = _parse_id(company_id)
        if parsed is None or not reviews:
            return 0

        inserted = 0
        try:
            for review in reviews:
                exists = self._session.execute(
                    select(CompanyReview.review_id)
                    .where(
                        CompanyReview.company_id == parsed,
                        CompanyReview.reviewer_name == review.reviewer_name,
                        CompanyReview.review_text == review.review_text,
                    )
                    .limit(1)
                ).first()
                if exists is not None:
                    continue
                self._session.add(
                    CompanyReview(
                        company_id=parsed,
                        reviewer_name=review.reviewer_name,
                        rating=review.rating,
                        review_text=review.review_text,
                        review_date=review.review_date,
                        sentiment=review.sentiment,
                        polarity=review.polarity,
                        source=review.source,
                    )
                )
                inserted += 1
            self._session.commit()
        except SQLAlchemyError:
            self._session.rollback()
            raise
        return inserted
