"""
tests/test_services.py

Pytest unit tests for FollowerScrapingService and GoogleReviewsService.

No database and no real browser: storage and browsers are in-memory fakes,
and scraper processes are answered by a stub runner.
"""

from __future__ import annotations

import subprocess
from datetime import datetime, timezone

import pytest

from app.domain.social_scraping import CompanyProfile, StoredReview
from app.scraping.launcher import ScraperProcessLauncher
from app.services.follower_scraping_service import NO_COMPETITORS_MESSAGE, FollowerScrapingService
from app.services.google_reviews_service import GoogleReviewsService
from tests.fakes import (
    ACME,
    FakeBrowserBackend,
    FakeElement,
    FakePage,
    InMemoryFollowerStorage,
    InMemoryReviewStorage,
    make_settings,
    review_card,
)


def _ok_runner(command: list[str], **kwargs: object) -> subprocess.CompletedProcess:
    return subprocess.CompletedProcess(command, 0)


def _review_page() -> FakePage:
    return FakePage(
        elements={
            "button": [FakeElement("Reviews")],
            'div.m6QErb[role="feed"]': [FakeElement("feed")],
        },
        body="Acme Bakery 42 reviews",
        card_batches=[
            [
                review_card("Ann", "Lovely bread", stars="5 stars"),
                review_card("Bob", "Terrible queue", stars="1 star"),
            ]
        ],
    )


# ---------------------------------------------------------------------------
# FollowerScrapingService
# ---------------------------------------------------------------------------


@pytest.fixture()
def follower_storage() -> InMemoryFollowerStorage:
    return InMemoryFollowerStorage(
        companies={"1": ACME},
        competitors={"1": ["7", "8"]},
    )


@pytest.fixture()
def follower_service(follower_storage: InMemoryFollowerStorage) -> FollowerScrapingService:
    return FollowerScrapingService(
        settings=make_settings(),
        launcher=ScraperProcessLauncher(runner=_ok_runner),
        storage_factory=lambda session: follower_storage,
    )


class TestFollowerScrapingService:
    def test_no_competitors(self, follower_service: FollowerScrapingService) -> None:
        summary = follower_service.ensure_follower_data("1", [])

        assert summary.message == NO_COMPETITORS_MESSAGE
        assert summary.total_competitors == 0
        assert summary.total_success == 0
        assert summary.total_failed == 0

    def test_refresh_company_runs_all_platforms(self, follower_service: FollowerScrapingService) -> None:
        summary = follower_service.refresh_company(db=None, company_id="1")

        assert summary is not None
        assert summary.total_competitors == 2
        assert summary.total_success == 6
        assert [target.target_id for target in summary.results] == ["7", "8"]

    def test_refresh_unknown_company(self, follower_service: FollowerScrapingService) -> None:
        assert follower_service.refresh_company(db=None, company_id="404") is None

    def test_latest_followers_without_rows(self, follower_service: FollowerScrapingService) -> None:
        company, snapshot = follower_service.latest_followers(db=None, company_id="1")

        assert company == ACME
        assert snapshot is None

    def test_refresh_all_covers_every_company(self) -> None:
        storage = InMemoryFollowerStorage(
            companies={"1": ACME},
            competitors={"1": ["7"], "2": []},
        )
        service = FollowerScrapingService(
            settings=make_settings(),
            launcher=ScraperProcessLauncher(runner=_ok_runner),
            storage_factory=lambda session: storage,
        )

        summaries = service.refresh_all(db=None)

        assert [summary.company_id for summary in summaries] == ["1", "2"]
        assert summaries[1].message == NO_COMPETITORS_MESSAGE


# ---------------------------------------------------------------------------
# GoogleReviewsService: sentiment and formatting
# ---------------------------------------------------------------------------


class TestAnalyzeSentiment:
    @pytest.mark.parametrize(
        ("text", "rating", "label", "polarity"),
        [
            (None, 5.0, "POSITIVE", 0.7),
            ("", 2.0, "NEGATIVE", -0.7),
            ("Fine", 3.0, "NEUTRAL", 0.0),
            ("Great and excellent", None, "POSITIVE", 0.6),
            ("Bad, terrible, awful, the worst", None, "NEGATIVE", -1.0),
            ("Came in on a Tuesday", None, "NEUTRAL", 0.0),
            (None, None, "NEUTRAL", 0.0),
        ],
    )
    def test_labels(self, text: str | None, rating: float | None, label: str, polarity: float) -> None:
        sentiment = GoogleReviewsService.analyze_sentiment(text, rating)

        assert sentiment.label == label
        assert sentiment.polarity == pytest.approx(polarity)


class TestFormatReviews:
    def test_empty(self) -> None:
        summary = GoogleReviewsService.format_reviews_for_llm([])

        assert summary.average_rating is None
        assert summary.total_reviews == 0
        assert summary.top_reviews == []

    def test_average_ignores_missing_ratings(self) -> None:
        reviews = [
            StoredReview(reviewer_name="Ann", rating=5.0, review_text="Great"),
            StoredReview(reviewer_name="Bob", rating=4.0, review_text="Good"),
            StoredReview(reviewer_name="Cy", rating=None, review_text="Hmm"),
        ]

        summary = GoogleReviewsService.format_reviews_for_llm(reviews)

        assert summary.average_rating == 4.5
        assert summary.total_reviews == 3

    def test_top_reviews_capped_at_ten(self) -> None:
        reviews = [
            StoredReview(
                reviewer_name=f"R{index}",
                rating=4.0,
                review_text=f"Text {index}",
                review_date=datetime(2024, 1, 1, tzinfo=timezone.utc),
                sentiment="POSITIVE",
            )
            for index in range(12)
        ]

        summary = GoogleReviewsService.format_reviews_for_llm(reviews)

        assert summary.total_reviews == 12
        assert len(summary.top_reviews) == 10
        assert summary.top_reviews[0] == {
            "reviewer": "R0",
            "rating": 4.0,
            "text": "Text 0",
            "date": "2024-01-01T00:00:00+00:00",
            "sentiment": "POSITIVE",
        }


# ---------------------------------------------------------------------------
# GoogleReviewsService: cache and scrape
# ---------------------------------------------------------------------------


class TestGoogleReviewsService:
    def test_uses_stored_reviews_when_present(self) -> None:
        storage = InMemoryReviewStorage(
            [StoredReview(reviewer_name="Ann", rating=5.0, review_text="Great")]
        )
        backend = FakeBrowserBackend()
        service = GoogleReviewsService(
            settings=make_settings(),
            storage_factory=lambda session: storage,
            browser_factory=lambda: backend,
        )

        summary = service.get_company_reviews(db=None, company=ACME)

        assert summary.total_reviews == 1
        assert backend.opened == []

    def test_skips_scrape_without_review_url(self) -> None:
        backend = FakeBrowserBackend()
        service = GoogleReviewsService(
            settings=make_settings(),
            storage_factory=lambda session: InMemoryReviewStorage(),
            browser_factory=lambda: backend,
        )
        company = CompanyProfile(company_id="1", name="Acme Bakery", google_review_url="Not Available")

        summary = service.get_company_reviews(db=None, company=company)

        assert summary.total_reviews == 0
        assert backend.opened == []

    def test_scrapes_and_stores_with_sentiment(self) -> None:
        storage = InMemoryReviewStorage()
        service = GoogleReviewsService(
            settings=make_settings(),
            storage_factory=lambda session: storage,
            browser_factory=lambda: FakeBrowserBackend(_review_page()),
        )

        summary = service.get_company_reviews(db=None, company=ACME, force_refresh=True)

        assert summary.total_reviews == 2
        assert summary.average_rating == 3.0
        assert [review.sentiment for review in storage.stored] == ["POSITIVE", "NEGATIVE"]
        assert all(review.source == "GOOGLE" for review in storage.stored)
        assert storage.stored[0].review_date is not None

    def test_storage_errors_degrade_to_empty_summary(self) -> None:
        class BrokenStorage(InMemoryReviewStorage):
            def get_stored_reviews(self, *, company_id: str, limit: int = 50) -> list[StoredReview]:
                raise RuntimeError("database unavailable")

        service = GoogleReviewsService(
            settings=make_settings(),
            storage_factory=lambda session: BrokenStorage(),
            browser_factory=FakeBrowserBackend,
        )

        summary = service.get_company_reviews(db=None, company=ACME)

        assert summary.total_reviews == 0
        assert summary.average_rating is None

    def test_reviews_for_companies_keyed_by_id(self) -> None:
        storage = InMemoryReviewStorage(
            [StoredReview(reviewer_name="Ann", rating=5.0, review_text="Great")]
        )
        service = GoogleReviewsService(
            settings=make_settings(),
            storage_factory=lambda session: storage,
            browser_factory=FakeBrowserBackend,
        )

        results = service.get_reviews_for_companies(db=None, companies=[ACME])

        assert list(results) == ["1"]
        assert results["1"].average_rating == 5.0
