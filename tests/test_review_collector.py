"""
tests/test_review_collector.py

Pytest unit tests for GoogleReviewsCollector against in-memory fake pages.
"""

from __future__ import annotations

import asyncio

from app.scraping.errors import BrowserLaunchError
from app.scraping.reviews import GoogleReviewsCollector
from app.scraping.types import (
    CollectionSession,
    ExistingReview,
    ReviewScrapeOptions,
    ReviewTarget,
)
from tests.fakes import FakeBrowserBackend, FakeElement, FakePage, make_settings, review_card

FEED_SELECTOR = 'div.m6QErb[role="feed"]'
REVIEW_URL = "https://maps.google.com/?cid=123"


def _review_page(*batches: list[FakeElement], body: str = "Acme Bakery 4.5 123 reviews") -> FakePage:
    return FakePage(
        elements={
            "button": [FakeElement("Overview"), FakeElement("Reviews")],
            FEED_SELECTOR: [FakeElement("feed")],
        },
        body=body,
        card_batches=list(batches),
    )


def _collect(page: FakePage, target: ReviewTarget, options: ReviewScrapeOptions):
    collector = GoogleReviewsCollector(browser=FakeBrowserBackend(page), settings=make_settings())
    return asyncio.run(collector.collect(target, options))


# ---------------------------------------------------------------------------
# Incremental mode
# ---------------------------------------------------------------------------


class TestIncremental:
    def test_stops_at_first_stored_review(self) -> None:
        page = _review_page([review_card("Jane", "Great service"), review_card("Bob", "Okay")])
        options = ReviewScrapeOptions(
            existing_reviews=[ExistingReview(reviewer="Jane", text="Great service")],
            is_first_time=False,
            scroll_pause_seconds=0.0,
        )

        result = _collect(page, ReviewTarget("Acme Bakery", review_url=REVIEW_URL), options)

        assert result.reviews == []
        assert result.duplicate_detected is True
        assert result.total_available == 123
        assert result.is_first_time is False

    def test_keeps_reviews_newer_than_the_stored_one(self) -> None:
        page = _review_page(
            [
                review_card("Ann", "Lovely bread"),
                review_card("Jane", "Great service"),
                review_card("Bob", "Okay"),
            ]
        )
        options = ReviewScrapeOptions(
            existing_reviews=[ExistingReview(reviewer="JANE", text="great service")],
            is_first_time=False,
            scroll_pause_seconds=0.0,
        )

        result = _collect(page, ReviewTarget("Acme Bakery", review_url=REVIEW_URL), options)

        assert [review.reviewer_name for review in result.reviews] == ["Ann"]
        assert result.duplicate_detected is True

    def test_anonymous_stored_review_matches_card_without_reviewer(self) -> None:
        page = _review_page([review_card(None, "Great service"), review_card("Bob", "Okay")])
        options = ReviewScrapeOptions(
            existing_reviews=[ExistingReview(reviewer="Anonymous", text="Great service")],
            is_first_time=False,
            scroll_pause_seconds=0.0,
        )

        result = _collect(page, ReviewTarget("Acme Bakery", review_url=REVIEW_URL), options)

        assert result.reviews == []
        assert result.duplicate_detected is True


# ---------------------------------------------------------------------------
# First-time mode
# ---------------------------------------------------------------------------


class TestFirstTime:
    def test_reads_card_fields(self) -> None:
        page = _review_page([review_card("Ann", "Lovely *bread*", stars="4 stars")])
        options = ReviewScrapeOptions(is_first_time=True, scroll_pause_seconds=0.0, max_stagnant=1)

        result = _collect(page, ReviewTarget("Acme Bakery", review_url=REVIEW_URL), options)

        review = result.reviews[0]
        assert review.reviewer_name == "Ann"
        assert review.text == "Lovely bread"
        assert review.rating_value == 4.0
        assert review.published_at is not None

    def test_stops_when_feed_stagnates(self) -> None:
        page = _review_page(
            [review_card("Ann", "One"), review_card("Bob", "Two")],
            [review_card("Cy", "Three")],
        )
        collector = GoogleReviewsCollector(browser=FakeBrowserBackend(page), settings=make_settings())
        options = ReviewScrapeOptions(is_first_time=True, scroll_pause_seconds=0.0, max_stagnant=2)
        session = CollectionSession(company_name="Acme", search_term="Acme", is_first_run=True)

        asyncio.run(collector.collect_from_feed(page, FakeElement("feed"), options, session))

        assert [record.text for record in session.records] == ["One", "Two", "Three"]
        assert session.duplicate_found is False

    def test_result_is_truncated_to_max_reviews(self) -> None:
        page = _review_page([review_card(f"R{index}", f"Text {index}") for index in range(5)])
        options = ReviewScrapeOptions(max_reviews=3, is_first_time=True, scroll_pause_seconds=0.0)

        result = _collect(page, ReviewTarget("Acme Bakery", review_url=REVIEW_URL), options)

        assert len(result.reviews) == 3
        assert result.scraped_count == 3

    def test_identical_markup_is_harvested_once(self) -> None:
        twin = "<div>same card</div>"
        page = FakePage(
            card_batches=[
                [
                    review_card("Ann", "Same", html=twin),
                    review_card("Ann", "Same", html=twin),
                ]
            ]
        )
        collector = GoogleReviewsCollector(browser=FakeBrowserBackend(page), settings=make_settings())
        seen: set[int] = set()

        first = asyncio.run(collector.harvest_cards(page, True, seen))
        second = asyncio.run(collector.harvest_cards(page, True, seen))

        assert len(first) == 1
        assert second == []

    def test_expanded_card_is_not_harvested_again(self) -> None:
        card = review_card("Ann", "Long review fully expanded", html="<div>Long review...</div>")

        def expand() -> None:
            card.html = "<div>Long review fully expanded</div>"

        card.children["button"] = [FakeElement("More", on_click=expand)]
        page = _review_page([card])
        collector = GoogleReviewsCollector(browser=FakeBrowserBackend(page), settings=make_settings())
        options = ReviewScrapeOptions(is_first_time=True, scroll_pause_seconds=0.0, max_stagnant=2)
        session = CollectionSession(company_name="Acme", search_term="Acme", is_first_run=True)

        asyncio.run(collector.collect_from_feed(page, FakeElement("feed"), options, session))

        assert [record.text for record in session.records] == ["Long review fully expanded"]
        assert card.children["button"][0].clicks == 1


# ---------------------------------------------------------------------------
# Degraded paths
# ---------------------------------------------------------------------------


class TestDegraded:
    def test_short_search_term_skips_browser(self) -> None:
        backend = FakeBrowserBackend()
        collector = GoogleReviewsCollector(browser=backend, settings=make_settings())

        result = asyncio.run(collector.collect(ReviewTarget("A"), ReviewScrapeOptions()))

        assert result.reviews == []
        assert backend.opened == []

    def test_search_url_used_without_review_link(self) -> None:
        page = FakePage()
        target = ReviewTarget("Acme Bakery", address="1 Main St", review_url="Not Available")

        result = _collect(page, target, ReviewScrapeOptions(is_first_time=True))

        assert page.visited == [
            "https://www.google.com/maps/search/?api=1&query=Acme%20Bakery%2C%201%20Main%20St"
        ]
        assert result.reviews == []

    def test_launch_failure_returns_empty_result(self) -> None:
        collector = GoogleReviewsCollector(
            browser=FakeBrowserBackend(launch_error=BrowserLaunchError("no chrome")),
            settings=make_settings(),
        )

        result = asyncio.run(
            collector.collect(ReviewTarget("Acme Bakery"), ReviewScrapeOptions(is_first_time=True))
        )

        assert result.reviews == []
        assert result.duplicate_detected is False
