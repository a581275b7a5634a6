"""
Follower-count scraper driven by a per-platform strategy table.

navigate -> settle -> dismiss popups -> element selectors -> attribute probes
-> page-source patterns -> teardown. The first strategy that yields a count
wins; exhausting all of them is a normal "no count" outcome.
"""

from __future__ import annotations

import logging

from app.scraping.browser.base import BrowserBackend, BrowserPage
from app.scraping.config.models import ScraperSettings
from app.scraping.errors import ScrapingError
from app.scraping.logging_utils import log_event
from app.scraping.platforms import PlatformProfile
from app.scraping.text_extraction import parse_abbreviated_count
from app.scraping.types import ScrapeResult, ScrapeTarget

logger = logging.getLogger(__name__)


class FollowerCountScraper:
    """
    Scrape one public follower count per call; owns one browser per call.
    """

    def __init__(
        self,
        *,
        profile: PlatformProfile,
        browser: BrowserBackend,
        settings: ScraperSettings,
    ) -> None:
        self.profile = profile
        self.browser = browser
        self.settings = settings

    async def scrape(self, target: ScrapeTarget) -> ScrapeResult:
        """
        Return a ScrapeResult; hard failures are reported, never raised.
        """

        if target.platform != self.profile.platform:
            return self._failure(
                target,
                f"Target platform {target.platform.value} does not match "
                f"scraper platform {self.profile.platform.value}",
            )

        options = self.settings.browser_options(
            user_agent=self.profile.user_agent,
            extra_args=self.profile.extra_launch_args,
        )
        try:
            async with self.browser.open_page(options) as page:
                log_event(
                    logger,
                    logging.INFO,
                    "profile_loading",
                    platform=target.platform.value,
                    target_id=target.target_id,
                    profile_url=target.profile_url,
                )
                await page.goto(target.profile_url)
                await page.sleep(self.profile.settle_seconds)
                await self._dismiss_popups(page)
                count = await self.extract_count(page)
        except ScrapingError as exc:
            return self._failure(target, str(exc))
        except Exception as exc:
            return self._failure(target, f"Unexpected scraper error: {exc}")

        if count is None:
            log_event(
                logger,
                logging.INFO,
                "follower_count_not_found",
                platform=target.platform.value,
                target_id=target.target_id,
            )
        else:
            log_event(
                logger,
                logging.INFO,
                "follower_count_extracted",
                platform=target.platform.value,
                target_id=target.target_id,
                follower_count=count,
            )
        return ScrapeResult(
            platform=target.platform,
            target_id=target.target_id,
            success=True,
            follower_count=count,
        )

    async def extract_count(self, page: BrowserPage) -> int | None:
        count = await self._from_elements(page)
        if count is not None:
            return count
        count = await self._from_attribute_probes(page)
        if count is not None:
            return count
        return await self._from_page_source(page)

    async def _dismiss_popups(self, page: BrowserPage) -> None:
        for selector in self.profile.popup_dismiss_selectors:
            try:
                button = await page.query_selector(selector)
                if button is None:
                    continue
                await button.click()
                await page.sleep(2.0)
            except Exception as exc:
                log_event(
                    logger,
                    logging.WARNING,
                    "popup_dismiss_failed",
                    platform=self.profile.platform.value,
                    selector=selector,
                    error=str(exc),
                )

    async def _from_elements(self, page: BrowserPage) -> int | None:
        for selector in self.profile.element_selectors:
            try:
                elements = await page.query_selector_all(selector)
                for element in elements:
                    text = (await element.text()).strip()
                    if not self.profile.plausibility.search(text):
                        continue
                    count = parse_abbreviated_count(text)
                    if count is not None:
                        return count
            except Exception as exc:
                log_event(
                    logger,
                    logging.WARNING,
                    "selector_failed",
                    platform=self.profile.platform.value,
                    selector=selector,
                    error=str(exc),
                )
        return None

    async def _from_attribute_probes(self, page: BrowserPage) -> int | None:
        for probe in self.profile.attribute_probes:
            try:
                element = await page.wait_for_selector(probe.selector)
                if element is None:
                    continue
                value = await element.get_attribute(probe.attribute)
            except Exception as exc:
                log_event(
                    logger,
                    logging.WARNING,
                    "attribute_probe_failed",
                    platform=self.profile.platform.value,
                    selector=probe.selector,
                    error=str(exc),
                )
                continue
            if not value:
                continue
            match = probe.pattern.search(value)
            if match is None:
                continue
            count = parse_abbreviated_count(match.group(1))
            if count is not None:
                return count
        return None

    async def _from_page_source(self, page: BrowserPage) -> int | None:
        try:
            source = await page.content()
        except Exception as exc:
            log_event(
                logger,
                logging.WARNING,
                "page_source_unavailable",
                platform=self.profile.platform.value,
                error=str(exc),
            )
            return None

        for pattern in self.profile.source_patterns:
            match = pattern.search(source)
            if match is None:
                continue
            count = parse_abbreviated_count(match.group(1))
            if count is not None and count > 0:
                return count
        return None

    @staticmethod
    def _failure(target: ScrapeTarget, message: str) -> ScrapeResult:
        log_event(
            logger,
            logging.ERROR,
            "follower_scrape_failed",
            platform=target.platform.value,
            target_id=target.target_id,
            error=message,
        )
        return ScrapeResult(
            platform=target.platform,
            target_id=target.target_id,
            success=False,
            error_message=message,
        )
