"""
Google Maps review collector.

First-time mode scrolls the review feed until it stops producing new cards.
Incremental mode stops at the first card that matches a previously stored
(reviewer, text) pair, so re-scrapes only pick up what is new.
"""

from __future__ import annotations

import logging
from urllib.parse import quote

from app.scraping.browser.base import BrowserBackend, BrowserPage, PageElement
from app.scraping.config.models import ScraperSettings
from app.scraping.logging_utils import log_event
from app.scraping.platforms import DESKTOP_CHROME_USER_AGENT
from app.scraping.text_extraction import (
    hash_content,
    is_relative_date_text,
    parse_rating,
    parse_relative_date,
    parse_total_reviews,
)
from app.scraping.types import (
    CollectionSession,
    ReviewRecord,
    ReviewScrapeOptions,
    ReviewScrapeResult,
    ReviewTarget,
)

logger = logging.getLogger(__name__)

MAPS_SEARCH_URL = "https://www.google.com/maps/search/?api=1&query={query}"
REVIEW_VIEWPORT = (1366, 768)
REVIEW_LAUNCH_ARGS = (
    "--disable-setuid-sandbox",
    "--disable-accelerated-2d-canvas",
    "--no-first-run",
    "--no-zygote",
    "--disable-software-rasterizer",
    "--disable-extensions",
)

CONSENT_SELECTOR = 'button[aria-label*="Accept"]'
REVIEWS_TAB_SELECTORS = ("button", '[role="tab"]', 'div[role="tab"]', "div button", "div")
MORE_REVIEWS_SELECTORS = ("button", "div button", "div")
CARD_SELECTOR = ".jftiEf, .gws-localreviews__google-review"
CARD_WAIT_SELECTOR = '.jftiEf, .gws-localreviews__google-review, [data-review-id], div[role="article"]'
FEED_SELECTORS = (
    'div.m6QErb[role="feed"]',
    "div.m6QErb.DxyBCb.kA9KIf.dS8AEf",
    'div[role="main"] div.m6QErb',
    "div.review-dialog-list",
)
FALLBACK_CARD_SELECTOR = ".jftiEf, [data-review-id]"
TEXT_SELECTOR = ".wiI7pd, .review-full-text"
RATING_SELECTOR = ".kvMYJc"
REVIEWER_SELECTOR = ".d4r55"
DATE_SELECTORS = (".PuaHbe", ".rsqaWe", ".dehysf", ".gxMdQe", "span")

TAB_CLICK_ATTEMPTS = 3
TAB_RETRY_BACKOFF_SECONDS = 2.0
TAB_WAIT_SECONDS = 4.0
CONSENT_WAIT_SECONDS = 3.0
CARD_WAIT_SECONDS = 10.0


class GoogleReviewsCollector:
    """
    Collect Google reviews for one place per call; owns one browser per call.
    """

    def __init__(self, *, browser: BrowserBackend, settings: ScraperSettings) -> None:
        self.browser = browser
        self.settings = settings

    async def collect(
        self,
        target: ReviewTarget,
        options: ReviewScrapeOptions | None = None,
    ) -> ReviewScrapeResult:
        """
        Run one collection. Never raises; failures return what was collected.
        """

        options = options or ReviewScrapeOptions()
        search_term = target.search_term
        if len(search_term.strip()) < 2:
            log_event(
                logger,
                logging.WARNING,
                "review_search_term_invalid",
                target_id=target.target_id,
                search_term=search_term,
            )
            return ReviewScrapeResult.empty(is_first_time=options.is_first_time)

        session = CollectionSession(
            company_name=target.name,
            search_term=search_term,
            is_first_run=options.is_first_time,
            existing_keys={review.key for review in options.existing_reviews},
        )
        browser_options = self.settings.browser_options(
            user_agent=DESKTOP_CHROME_USER_AGENT,
            viewport=REVIEW_VIEWPORT,
            extra_args=REVIEW_LAUNCH_ARGS,
        )

        try:
            async with self.browser.open_page(browser_options) as page:
                await self._run(page, target, options, session)
        except Exception as exc:
            log_event(
                logger,
                logging.ERROR,
                "review_scrape_failed",
                company=session.company_name,
                collected=len(session.records),
                error=str(exc),
            )

        reviews = session.records
        if options.max_reviews is not None:
            reviews = reviews[: options.max_reviews]
        log_event(
            logger,
            logging.INFO,
            "review_scrape_finished",
            company=session.company_name,
            collected=len(reviews),
            total_available=session.total_available,
            is_first_time=session.is_first_run,
            duplicate_detected=session.duplicate_found,
        )
        return ReviewScrapeResult(
            reviews=list(reviews),
            total_available=session.total_available,
            scraped_count=len(reviews),
            is_first_time=options.is_first_time,
            duplicate_detected=session.duplicate_found,
        )

    async def _run(
        self,
        page: BrowserPage,
        target: ReviewTarget,
        options: ReviewScrapeOptions,
        session: CollectionSession,
    ) -> None:
        direct_url = target.direct_review_url
        if direct_url:
            log_event(logger, logging.INFO, "review_page_loading", url=direct_url)
            await page.goto(direct_url, wait_until="networkidle")
        else:
            url = MAPS_SEARCH_URL.format(query=quote(session.search_term, safe=""))
            log_event(logger, logging.INFO, "review_search_loading", url=url)
            await page.goto(url, wait_until="networkidle")
            await self._accept_consent(page)

        clicked = await self._open_reviews_tab(page, session)
        if not clicked:
            cards_rendered = False
            if direct_url:
                rendered = await page.wait_for_selector(
                    CARD_WAIT_SELECTOR,
                    timeout_seconds=TAB_WAIT_SECONDS,
                )
                cards_rendered = rendered is not None
            if not cards_rendered:
                log_event(
                    logger,
                    logging.INFO,
                    "reviews_tab_not_found",
                    company=session.company_name,
                    attempts=TAB_CLICK_ATTEMPTS,
                )
                return

        if await self._click_element_by_text(page, MORE_REVIEWS_SELECTORS, "more reviews", 2.0):
            await page.sleep(2.0)

        container = await self.find_reviews_container(page)
        if container is None:
            log_event(
                logger,
                logging.INFO,
                "review_container_not_found",
                company=session.company_name,
            )
            return

        await self.collect_from_feed(page, container, options, session)

    async def collect_from_feed(
        self,
        page: BrowserPage,
        container: PageElement,
        options: ReviewScrapeOptions,
        session: CollectionSession,
    ) -> None:
        """
        Scroll/harvest loop over an already located review feed.
        """

        mode = "first_time" if session.is_first_run else "incremental"
        log_event(
            logger,
            logging.INFO,
            "review_collection_started",
            company=session.company_name,
            mode=mode,
            existing_reviews=len(session.existing_keys),
            total_available=session.total_available,
        )

        while (
            not self._limit_reached(options, session)
            and session.consecutive_empty_passes < options.empty_pass_limit
            and not session.duplicate_found
        ):
            try:
                await page.scroll_to_top(container)
                await page.sleep(0.3)
            except Exception as exc:
                log_event(logger, logging.WARNING, "review_scroll_reset_failed", error=str(exc))

            added = await self._harvest_pass(page, options, session)
            if session.duplicate_found:
                log_event(
                    logger,
                    logging.INFO,
                    "review_duplicate_found",
                    company=session.company_name,
                    collected=len(session.records),
                )
                break

            if added == 0:
                session.stagnation_counter += 1
                session.consecutive_empty_passes += 1
            else:
                session.stagnation_counter = 0
                session.consecutive_empty_passes = 0

            log_event(
                logger,
                logging.INFO,
                "review_progress",
                company=session.company_name,
                collected=len(session.records),
                total_available=session.total_available,
                stagnant=session.stagnation_counter,
                max_stagnant=options.max_stagnant,
            )

            if session.stagnation_counter >= options.max_stagnant:
                if not await self._burst_scroll(page, container, options, session):
                    break

            try:
                await page.scroll_to_bottom(container)
                await page.sleep(options.scroll_pause_seconds)
            except Exception as exc:
                log_event(logger, logging.WARNING, "review_scroll_failed", error=str(exc))
                break

    async def _burst_scroll(
        self,
        page: BrowserPage,
        container: PageElement,
        options: ReviewScrapeOptions,
        session: CollectionSession,
    ) -> bool:
        """
        Last-effort top/bottom cycling; True when it surfaced new reviews.
        """

        for _ in range(options.burst_cycles):
            try:
                await page.scroll_to_top(container)
                await page.sleep(0.4)
                await page.scroll_to_bottom(container)
                await page.sleep(0.6)
            except Exception as exc:
                log_event(logger, logging.WARNING, "review_burst_scroll_failed", error=str(exc))
                break

        added = await self._harvest_pass(page, options, session)
        if added == 0 or session.duplicate_found:
            log_event(
                logger,
                logging.INFO,
                "review_feed_exhausted",
                company=session.company_name,
                collected=len(session.records),
            )
            return False

        session.stagnation_counter = 0
        session.consecutive_empty_passes = 0
        return True

    async def _harvest_pass(
        self,
        page: BrowserPage,
        options: ReviewScrapeOptions,
        session: CollectionSession,
    ) -> int:
        """
        Harvest rendered cards into the session; returns the number added.
        """

        harvested = await self.harvest_cards(page, options.include_metadata, session.seen_hashes)
        added = 0
        for record in harvested:
            if not session.is_first_run and record.key in session.existing_keys:
                session.duplicate_found = True
                break
            session.records.append(record)
            added += 1
        return added

    async def harvest_cards(
        self,
        page: BrowserPage,
        include_metadata: bool,
        seen_hashes: set[int],
    ) -> list[ReviewRecord]:
        """
        Read currently rendered review cards not seen before in this session.
        """

        records: list[ReviewRecord] = []
        try:
            cards = await page.query_selector_all(CARD_SELECTOR)
        except Exception as exc:
            log_event(logger, logging.WARNING, "review_cards_unavailable", error=str(exc))
            return records

        for card in cards:
            try:
                card_hash = hash_content(await card.inner_html())
                if card_hash in seen_hashes:
                    continue
                await self._expand_card(page, card)
                expanded_hash = hash_content(await card.inner_html())
                if expanded_hash != card_hash and expanded_hash in seen_hashes:
                    continue
                record = await self._read_card(card, include_metadata, card_hash)
            except Exception as exc:
                log_event(logger, logging.WARNING, "review_card_failed", error=str(exc))
                continue

            if record.text or include_metadata:
                records.append(record)
                seen_hashes.add(card_hash)
                # expanded markup hashes differently on later passes
                seen_hashes.add(expanded_hash)
        return records

    async def _read_card(
        self,
        card: PageElement,
        include_metadata: bool,
        card_hash: int,
    ) -> ReviewRecord:
        text = ""
        text_element = await card.query_selector(TEXT_SELECTOR)
        if text_element is not None:
            text = (await text_element.text()).replace("*", "").strip()

        rating: float | None = None
        reviewer: str | None = None
        published_at: str | None = None
        if include_metadata:
            rating = await self._read_rating(card)
            reviewer = await self._read_reviewer(card)
            published_at = await self._read_date(card)

        return ReviewRecord(
            reviewer_name=reviewer,
            rating_value=rating,
            text=text,
            published_at=published_at,
            content_hash=card_hash,
        )

    @staticmethod
    async def _read_rating(card: PageElement) -> float | None:
        try:
            star = await card.query_selector(RATING_SELECTOR)
            if star is None:
                return None
            return parse_rating(await star.get_attribute("aria-label"))
        except Exception as exc:
            log_event(logger, logging.WARNING, "review_rating_failed", error=str(exc))
            return None

    @staticmethod
    async def _read_reviewer(card: PageElement) -> str | None:
        try:
            element = await card.query_selector(REVIEWER_SELECTOR)
            if element is None:
                return None
            return (await element.text()) or None
        except Exception as exc:
            log_event(logger, logging.WARNING, "review_reviewer_failed", error=str(exc))
            return None

    @staticmethod
    async def _read_date(card: PageElement) -> str | None:
        for selector in DATE_SELECTORS:
            try:
                for element in await card.query_selector_all(selector):
                    text = await element.text()
                    if is_relative_date_text(text):
                        return parse_relative_date(text)
            except Exception:
                continue
        return None

    @staticmethod
    async def _expand_card(page: BrowserPage, card: PageElement) -> None:
        try:
            for button in await card.query_selector_all("button"):
                if "more" in (await button.text()).lower():
                    await button.click()
                    await page.sleep(0.1)
                    break
        except Exception as exc:
            log_event(logger, logging.WARNING, "review_expand_failed", error=str(exc))

    async def _accept_consent(self, page: BrowserPage) -> None:
        try:
            button = await page.wait_for_selector(
                CONSENT_SELECTOR,
                timeout_seconds=CONSENT_WAIT_SECONDS,
            )
            if button is not None:
                await button.click()
                await page.sleep(1.0)
        except Exception as exc:
            log_event(logger, logging.WARNING, "consent_dismiss_failed", error=str(exc))

    async def _open_reviews_tab(self, page: BrowserPage, session: CollectionSession) -> bool:
        for attempt in range(1, TAB_CLICK_ATTEMPTS + 1):
            try:
                total = parse_total_reviews(await page.body_text())
                if total > 0:
                    session.total_available = total
            except Exception as exc:
                log_event(logger, logging.WARNING, "review_total_unavailable", error=str(exc))

            if await self._click_element_by_text(page, REVIEWS_TAB_SELECTORS, "reviews", TAB_WAIT_SECONDS):
                log_event(logger, logging.INFO, "reviews_tab_clicked", attempt=attempt)
                await page.sleep(4.0)
                return True

            log_event(logger, logging.WARNING, "reviews_tab_click_failed", attempt=attempt)
            if attempt < TAB_CLICK_ATTEMPTS:
                await page.sleep(TAB_RETRY_BACKOFF_SECONDS)
        return False

    @staticmethod
    async def _click_element_by_text(
        page: BrowserPage,
        selectors: tuple[str, ...],
        text: str,
        timeout_seconds: float,
    ) -> bool:
        needle = text.lower()
        for selector in selectors:
            try:
                if await page.wait_for_selector(selector, timeout_seconds=timeout_seconds) is None:
                    continue
                for element in await page.query_selector_all(selector):
                    if needle in (await element.text()).lower():
                        await element.click()
                        return True
            except Exception:
                continue
        return False

    async def find_reviews_container(self, page: BrowserPage) -> PageElement | None:
        """
        Locate the scrollable element that holds the review feed.
        """

        try:
            if await page.wait_for_selector(CARD_WAIT_SELECTOR, timeout_seconds=CARD_WAIT_SECONDS) is None:
                return None

            for selector in FEED_SELECTORS:
                element = await page.query_selector(selector)
                if element is not None and await page.is_scrollable(element):
                    log_event(logger, logging.INFO, "review_container_found", selector=selector)
                    return element

            first_card = await page.query_selector(FALLBACK_CARD_SELECTOR)
            if first_card is None:
                return None
            return await page.scrollable_ancestor(first_card)
        except Exception as exc:
            log_event(logger, logging.WARNING, "review_container_lookup_failed", error=str(exc))
            return None

    @staticmethod
    def _limit_reached(options: ReviewScrapeOptions, session: CollectionSession) -> bool:
        return options.max_reviews is not None and len(session.records) >= options.max_reviews
