"""
tests/fakes.py

In-memory browser and storage doubles for scrapers, services and routes.

Selectors are matched literally; a comma-separated selector matches the union
of its parts, in part order.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Callable, Sequence
from contextlib import asynccontextmanager

from app.domain.social_scraping import (
    CompanyProfile,
    FollowerSnapshot,
    ProfileLookup,
    StoredReview,
)
from app.scraping.browser.base import BrowserBackend, BrowserPage, PageElement
from app.scraping.config.models import BrowserOptions, ScraperSettings
from app.scraping.storage.base import FollowerStorage, ReviewStorage
from app.scraping.types import Platform


def _split(selector: str) -> list[str]:
    return [part.strip() for part in selector.split(",") if part.strip()]


def make_settings(**overrides: object) -> ScraperSettings:
    values: dict[str, object] = {
        "headless": True,
        "browser_executable_path": None,
        "viewport_width": 1920,
        "viewport_height": 1080,
        "page_load_timeout_seconds": 30.0,
        "element_wait_timeout_seconds": 10.0,
        "max_workers": 1,
        "process_timeout_seconds": None,
        "review_max_reviews": 10,
        "review_scroll_pause_seconds": 0.0,
        "review_max_stagnant": 6,
        "follower_refresh_hour": 4,
    }
    values.update(overrides)
    return ScraperSettings(**values)  # type: ignore[arg-type]


class FakeElement(PageElement):
    def __init__(
        self,
        text: str = "",
        *,
        attributes: dict[str, str] | None = None,
        html: str | None = None,
        children: dict[str, list["FakeElement"]] | None = None,
        on_click: Callable[[], None] | None = None,
    ) -> None:
        self._text = text
        self.attributes = attributes or {}
        self.html = html if html is not None else text
        self.children = children or {}
        self.clicks = 0
        self.on_click = on_click

    async def text(self) -> str:
        return self._text.strip()

    async def get_attribute(self, name: str) -> str | None:
        return self.attributes.get(name)

    async def inner_html(self) -> str:
        return self.html

    async def query_selector(self, selector: str) -> "FakeElement | None":
        found = await self.query_selector_all(selector)
        return found[0] if found else None

    async def query_selector_all(self, selector: str) -> list["FakeElement"]:
        found: list[FakeElement] = []
        for part in _split(selector):
            found.extend(self.children.get(part, []))
        return found

    async def click(self) -> None:
        self.clicks += 1
        if self.on_click is not None:
            self.on_click()


def review_card(
    reviewer: str | None,
    text: str,
    *,
    stars: str | None = "5 stars",
    when: str | None = "2 weeks ago",
    html: str | None = None,
) -> FakeElement:
    children: dict[str, list[FakeElement]] = {".wiI7pd": [FakeElement(text)]}
    if reviewer is not None:
        children[".d4r55"] = [FakeElement(reviewer)]
    if stars is not None:
        children[".kvMYJc"] = [FakeElement(attributes={"aria-label": stars})]
    if when is not None:
        children[".rsqaWe"] = [FakeElement(when)]
    return FakeElement(
        text,
        html=html if html is not None else f"<div>{reviewer}|{text}|{stars}|{when}</div>",
        children=children,
    )


class FakePage(BrowserPage):
    """
    ``card_batches`` model a lazily loading review feed: batch N becomes
    visible after the Nth scroll to the bottom.
    """

    def __init__(
        self,
        *,
        elements: dict[str, list[FakeElement]] | None = None,
        source: str = "",
        body: str = "",
        card_selector: str = ".jftiEf",
        card_batches: list[list[FakeElement]] | None = None,
        goto_error: Exception | None = None,
    ) -> None:
        self.elements = elements or {}
        self.source = source
        self.body = body
        self.card_selector = card_selector
        self.card_batches = card_batches or []
        self.revealed = 1
        self.goto_error = goto_error
        self.visited: list[str] = []
        self.slept: list[float] = []
        self.bottom_scrolls = 0

    @property
    def rendered_cards(self) -> list[FakeElement]:
        cards: list[FakeElement] = []
        for batch in self.card_batches[: self.revealed]:
            cards.extend(batch)
        return cards

    def _lookup(self, selector: str) -> list[FakeElement]:
        found: list[FakeElement] = []
        for part in _split(selector):
            if part == self.card_selector:
                found.extend(self.rendered_cards)
            found.extend(self.elements.get(part, []))
        return found

    async def goto(self, url: str, *, wait_until: str = "domcontentloaded") -> None:
        self.visited.append(url)
        if self.goto_error is not None:
            raise self.goto_error

    async def wait_for_selector(
        self,
        selector: str,
        *,
        timeout_seconds: float | None = None,
    ) -> FakeElement | None:
        found = self._lookup(selector)
        return found[0] if found else None

    async def query_selector(self, selector: str) -> FakeElement | None:
        found = self._lookup(selector)
        return found[0] if found else None

    async def query_selector_all(self, selector: str) -> list[FakeElement]:
        return self._lookup(selector)

    async def content(self) -> str:
        return self.source

    async def body_text(self) -> str:
        return self.body

    async def is_scrollable(self, element: PageElement) -> bool:
        return True

    async def scrollable_ancestor(self, element: PageElement) -> PageElement | None:
        return element

    async def scroll_to_top(self, element: PageElement) -> None:
        return None

    async def scroll_to_bottom(self, element: PageElement) -> None:
        self.bottom_scrolls += 1
        if self.revealed < len(self.card_batches):
            self.revealed += 1

    async def sleep(self, seconds: float) -> None:
        self.slept.append(seconds)


class FakeBrowserBackend(BrowserBackend):
    def __init__(self, page: FakePage | None = None, *, launch_error: Exception | None = None) -> None:
        self.page = page or FakePage()
        self.launch_error = launch_error
        self.opened: list[BrowserOptions] = []
        self.closed = 0

    @asynccontextmanager
    async def _session(self, options: BrowserOptions) -> AsyncIterator[FakePage]:
        if self.launch_error is not None:
            raise self.launch_error
        self.opened.append(options)
        try:
            yield self.page
        finally:
            self.closed += 1

    def open_page(self, options: BrowserOptions):  # type: ignore[override]
        return self._session(options)


ACME = CompanyProfile(
    company_id="1",
    name="Acme Bakery",
    address="1 Main St",
    google_review_url="https://maps.google.com/?cid=123",
)


class InMemoryFollowerStorage(FollowerStorage):
    def __init__(
        self,
        companies: dict[str, CompanyProfile],
        competitors: dict[str, list[str]],
        snapshots: dict[str, list[FollowerSnapshot]] | None = None,
    ) -> None:
        self.companies = companies
        self.competitors = competitors
        self.snapshots = snapshots or {}

    def get_company(self, *, company_id: str) -> CompanyProfile | None:
        return self.companies.get(company_id)

    def get_profile(self, *, platform: Platform, target_id: str) -> ProfileLookup | None:
        return None

    def save_follower_count(
        self,
        *,
        platform: Platform,
        profile: ProfileLookup,
        follower_count: int,
    ) -> None:
        raise AssertionError("services never store counts directly")

    def competitor_ids(self, *, company_id: str) -> list[str]:
        return list(self.competitors.get(company_id, []))

    def company_ids(self) -> list[str]:
        return sorted(self.competitors)

    def follower_snapshots(self, *, company_id: str) -> list[FollowerSnapshot]:
        return list(self.snapshots.get(company_id, []))


class InMemoryReviewStorage(ReviewStorage):
    def __init__(self, reviews: list[StoredReview] | None = None) -> None:
        self.reviews = list(reviews or [])
        self.stored: list[StoredReview] = []

    def get_company(self, *, company_id: str) -> CompanyProfile | None:
        return ACME if company_id == ACME.company_id else None

    def get_stored_reviews(self, *, company_id: str, limit: int = 50) -> list[StoredReview]:
        return self.reviews[:limit]

    def store_reviews(self, *, company_id: str, reviews: Sequence[StoredReview]) -> int:
        self.stored.extend(reviews)
        return len(reviews)
