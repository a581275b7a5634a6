"""
app/services/google_reviews_service.py

Service orchestration for Google review collection, storage and summaries.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Sequence
from datetime import datetime
from functools import lru_cache

from sqlalchemy.orm import Session

from app.domain.social_scraping import CompanyProfile, ReviewSummary, Sentiment, StoredReview
from app.scraping.browser.base import BrowserBackend
from app.scraping.config import ScraperSettings, get_scraper_settings
from app.scraping.logging_utils import log_event
from app.scraping.reviews import GoogleReviewsCollector
from app.scraping.storage.base import ReviewStorage
from app.scraping.storage.sqlalchemy_storage import SQLAlchemyReviewStorage
from app.scraping.types import (
    ANONYMOUS_REVIEWER,
    ExistingReview,
    ReviewRecord,
    ReviewScrapeOptions,
    ReviewTarget,
)

logger = logging.getLogger(__name__)

TOP_REVIEWS_LIMIT = 10
STORED_REVIEWS_LIMIT = 50

POSITIVE_WORDS = ("great", "excellent", "amazing", "wonderful", "fantastic", "love", "best", "perfect")
NEGATIVE_WORDS = ("bad", "terrible", "awful", "worst", "hate", "poor", "disappointing")


def _default_storage(session: Session) -> ReviewStorage:
    return SQLAlchemyReviewStorage(session=session)


def _default_browser() -> BrowserBackend:
    from app.scraping.browser.playwright_backend import PlaywrightBrowserBackend

    return PlaywrightBrowserBackend()


class GoogleReviewsService:
    """
    Serves stored review summaries and refreshes them from Google Maps.
    """

    def __init__(
        self,
        *,
        settings: ScraperSettings | None = None,
        storage_factory: Callable[[Session], ReviewStorage] = _default_storage,
        browser_factory: Callable[[], BrowserBackend] = _default_browser,
    ) -> None:
        self._settings = settings or get_scraper_settings()
        self._storage_factory = storage_factory
        self._browser_factory = browser_factory

    def find_company(self, *, db: Session, company_id: str) -> CompanyProfile | None:
        return self._storage_factory(db).get_company(company_id=company_id)

    def get_company_reviews(
        self,
        *,
        db: Session,
        company: CompanyProfile,
        force_refresh: bool = False,
    ) -> ReviewSummary:
        """
        Return the cached review summary, scraping only when nothing is stored
        or a refresh is forced.
        """

        try:
            if not force_refresh:
                stored = self._storage_factory(db).get_stored_reviews(
                    company_id=company.company_id,
                    limit=STORED_REVIEWS_LIMIT,
                )
                if stored:
                    log_event(
                        logger,
                        logging.INFO,
                        "reviews_cache_hit",
                        company_id=company.company_id,
                        count=len(stored),
                    )
                    return self.format_reviews_for_llm(stored)
            return self.scrape_and_store_reviews(db=db, company=company)
        except Exception as exc:
            log_event(
                logger,
                logging.ERROR,
                "reviews_lookup_failed",
                company_id=company.company_id,
                error=str(exc),
            )
            return ReviewSummary.empty()

    def scrape_and_store_reviews(self, *, db: Session, company: CompanyProfile) -> ReviewSummary:
        target = ReviewTarget(
            name=company.name,
            address=company.address,
            review_url=company.google_review_url,
            target_id=company.company_id,
        )
        if target.direct_review_url is None:
            log_event(
                logger,
                logging.INFO,
                "review_url_missing",
                company_id=company.company_id,
            )
            return ReviewSummary.empty()

        storage = self._storage_factory(db)
        stored = storage.get_stored_reviews(
            company_id=company.company_id,
            limit=STORED_REVIEWS_LIMIT,
        )
        options = ReviewScrapeOptions(
            max_reviews=self._settings.review_max_reviews,
            include_metadata=True,
            existing_reviews=[
                ExistingReview(reviewer=review.reviewer_name, text=review.review_text)
                for review in stored
            ],
            is_first_time=not stored,
            scroll_pause_seconds=self._settings.review_scroll_pause_seconds,
            max_stagnant=self._settings.review_max_stagnant,
        )
        collector = GoogleReviewsCollector(browser=self._browser_factory(), settings=self._settings)
        result = asyncio.run(collector.collect(target, options))

        if not result.reviews:
            log_event(logger, logging.INFO, "reviews_not_found", company_id=company.company_id)
            return ReviewSummary.empty()

        reviews = [self._to_stored_review(record) for record in result.reviews]
        inserted = storage.store_reviews(company_id=company.company_id, reviews=reviews)
        log_event(
            logger,
            logging.INFO,
            "reviews_stored",
            company_id=company.company_id,
            scraped=len(reviews),
            inserted=inserted,
            total_available=result.total_available,
        )
        return self.format_reviews_for_llm(reviews)

    @staticmethod
    def analyze_sentiment(text: str | None, rating: float | None) -> Sentiment:
        """
        Label a review from its star rating, falling back to keyword counts.
        """

        if not text and rating is None:
            return Sentiment(label="NEUTRAL", polarity=0.0)

        if rating is not None:
            if rating >= 4:
                return Sentiment(label="POSITIVE", polarity=0.7)
            if rating <= 2:
                return Sentiment(label="NEGATIVE", polarity=-0.7)
            return Sentiment(label="NEUTRAL", polarity=0.0)

        lowered = (text or "").lower()
        score = sum(1 for word in POSITIVE_WORDS if word in lowered)
        score -= sum(1 for word in NEGATIVE_WORDS if word in lowered)
        if score > 0:
            return Sentiment(label="POSITIVE", polarity=round(min(score * 0.3, 1.0), 2))
        if score < 0:
            return Sentiment(label="NEGATIVE", polarity=round(max(score * 0.3, -1.0), 2))
        return Sentiment(label="NEUTRAL", polarity=0.0)

    @staticmethod
    def format_reviews_for_llm(reviews: Sequence[StoredReview]) -> ReviewSummary:
        if not reviews:
            return ReviewSummary.empty()

        ratings = [review.rating for review in reviews if review.rating]
        average = round(sum(ratings) / len(ratings), 1) if ratings else None
        top_reviews = [
            {
                "reviewer": review.reviewer_name or ANONYMOUS_REVIEWER,
                "rating": review.rating or None,
                "text": review.review_text or "",
                "date": review.review_date.isoformat() if review.review_date else None,
                "sentiment": review.sentiment,
            }
            for review in reviews[:TOP_REVIEWS_LIMIT]
        ]
        return ReviewSummary(
            average_rating=average,
            total_reviews=len(reviews),
            top_reviews=top_reviews,
        )

    def get_reviews_for_companies(
        self,
        *,
        db: Session,
        companies: Sequence[CompanyProfile],
    ) -> dict[str, ReviewSummary]:
        return {
            company.company_id: self.get_company_reviews(db=db, company=company)
            for company in companies
        }

    def _to_stored_review(self, record: ReviewRecord) -> StoredReview:
        sentiment = self.analyze_sentiment(record.text, record.rating_value)
        return StoredReview(
            reviewer_name=record.reviewer_name or ANONYMOUS_REVIEWER,
            rating=record.rating_value or None,
            review_text=record.text or "",
            review_date=_parse_published_at(record.published_at),
            sentiment=sentiment.label,
            polarity=sentiment.polarity,
            source="GOOGLE",
        )


def _parse_published_at(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        return None


@lru_cache(maxsize=1)
def get_google_reviews_service() -> GoogleReviewsService:
    """
    Build and cache Google reviews service.
    """

    return GoogleReviewsService()
