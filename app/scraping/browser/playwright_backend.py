"""
Playwright (async API) implementation of the browser backend.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from playwright.async_api import ElementHandle, Page, async_playwright
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from app.scraping.browser.base import BrowserBackend, BrowserPage, PageElement
from app.scraping.config.models import BrowserOptions
from app.scraping.errors import BrowserLaunchError, ElementQueryError, NavigationError
from app.scraping.logging_utils import log_event

logger = logging.getLogger(__name__)

DEFAULT_LAUNCH_ARGS = (
    "--no-sandbox",
    "--disable-gpu",
    "--disable-dev-shm-usage",
)

_SCROLLABLE_ANCESTOR_JS = """
el => {
    let parent = el.parentElement;
    while (parent) {
        if (parent.scrollHeight > parent.clientHeight) {
            return parent;
        }
        parent = parent.parentElement;
    }
    return null;
}
"""


def _ms(seconds: float) -> float:
    return seconds * 1000.0


class PlaywrightElement(PageElement):
    def __init__(self, handle: ElementHandle) -> None:
        self.handle = handle

    async def text(self) -> str:
        try:
            value = await self.handle.text_content()
        except PlaywrightError as exc:
            raise ElementQueryError(f"Failed to read element text: {exc}") from exc
        return (value or "").strip()

    async def get_attribute(self, name: str) -> str | None:
        try:
            return await self.handle.get_attribute(name)
        except PlaywrightError as exc:
            raise ElementQueryError(f"Failed to read attribute '{name}': {exc}") from exc

    async def inner_html(self) -> str:
        try:
            return await self.handle.inner_html()
        except PlaywrightError as exc:
            raise ElementQueryError(f"Failed to read element markup: {exc}") from exc

    async def query_selector(self, selector: str) -> PageElement | None:
        try:
            found = await self.handle.query_selector(selector)
        except PlaywrightError as exc:
            raise ElementQueryError(f"Selector '{selector}' failed: {exc}") from exc
        return PlaywrightElement(found) if found is not None else None

    async def query_selector_all(self, selector: str) -> list[PageElement]:
        try:
            found = await self.handle.query_selector_all(selector)
        except PlaywrightError as exc:
            raise ElementQueryError(f"Selector '{selector}' failed: {exc}") from exc
        return [PlaywrightElement(item) for item in found]

    async def click(self) -> None:
        try:
            await self.handle.click()
        except PlaywrightError as exc:
            raise ElementQueryError(f"Click failed: {exc}") from exc


def _unwrap(element: PageElement) -> ElementHandle:
    if not isinstance(element, PlaywrightElement):
        raise TypeError("PlaywrightPage only accepts PlaywrightElement handles.")
    return element.handle


class PlaywrightPage(BrowserPage):
    def __init__(self, page: Page, options: BrowserOptions) -> None:
        self._page = page
        self._options = options

    async def goto(self, url: str, *, wait_until: str = "domcontentloaded") -> None:
        try:
            await self._page.goto(
                url,
                wait_until=wait_until,
                timeout=_ms(self._options.page_load_timeout_seconds),
            )
        except PlaywrightTimeoutError as exc:
            raise NavigationError(
                f"Page load timeout after {self._options.page_load_timeout_seconds}s: {url}"
            ) from exc
        except PlaywrightError as exc:
            raise NavigationError(f"Navigation to {url} failed: {exc}") from exc

    async def wait_for_selector(
        self,
        selector: str,
        *,
        timeout_seconds: float | None = None,
    ) -> PageElement | None:
        timeout = timeout_seconds or self._options.element_wait_timeout_seconds
        try:
            found = await self._page.wait_for_selector(
                selector,
                timeout=_ms(timeout),
                state="attached",
            )
        except PlaywrightTimeoutError:
            return None
        except PlaywrightError as exc:
            raise ElementQueryError(f"Waiting for '{selector}' failed: {exc}") from exc
        return PlaywrightElement(found) if found is not None else None

    async def query_selector(self, selector: str) -> PageElement | None:
        try:
            found = await self._page.query_selector(selector)
        except PlaywrightError as exc:
            raise ElementQueryError(f"Selector '{selector}' failed: {exc}") from exc
        return PlaywrightElement(found) if found is not None else None

    async def query_selector_all(self, selector: str) -> list[PageElement]:
        try:
            found = await self._page.query_selector_all(selector)
        except PlaywrightError as exc:
            raise ElementQueryError(f"Selector '{selector}' failed: {exc}") from exc
        return [PlaywrightElement(item) for item in found]

    async def content(self) -> str:
        try:
            return await self._page.content()
        except PlaywrightError as exc:
            raise ElementQueryError(f"Failed to read page source: {exc}") from exc

    async def body_text(self) -> str:
        try:
            return await self._page.inner_text("body")
        except PlaywrightError as exc:
            raise ElementQueryError(f"Failed to read body text: {exc}") from exc

    async def is_scrollable(self, element: PageElement) -> bool:
        try:
            return bool(
                await _unwrap(element).evaluate("el => el.scrollHeight > el.clientHeight")
            )
        except PlaywrightError as exc:
            raise ElementQueryError(f"Scroll check failed: {exc}") from exc

    async def scrollable_ancestor(self, element: PageElement) -> PageElement | None:
        try:
            handle = await _unwrap(element).evaluate_handle(_SCROLLABLE_ANCESTOR_JS)
        except PlaywrightError as exc:
            raise ElementQueryError(f"Scroll container lookup failed: {exc}") from exc
        ancestor = handle.as_element()
        return PlaywrightElement(ancestor) if ancestor is not None else None

    async def scroll_to_top(self, element: PageElement) -> None:
        try:
            await _unwrap(element).evaluate("el => el.scrollTo(0, 0)")
        except PlaywrightError as exc:
            raise ElementQueryError(f"Scroll to top failed: {exc}") from exc

    async def scroll_to_bottom(self, element: PageElement) -> None:
        try:
            await _unwrap(element).evaluate("el => el.scrollTo(0, el.scrollHeight)")
        except PlaywrightError as exc:
            raise ElementQueryError(f"Scroll to bottom failed: {exc}") from exc


class PlaywrightBrowserBackend(BrowserBackend):
    """
    Launches a fresh Chromium per page; nothing is pooled or shared.
    """

    @asynccontextmanager
    async def open_page(self, options: BrowserOptions) -> AsyncIterator[BrowserPage]:
        try:
            playwright = await async_playwright().start()
        except PlaywrightError as exc:
            raise BrowserLaunchError(f"Failed to start Playwright: {exc}") from exc

        browser = None
        try:
            try:
                browser = await playwright.chromium.launch(
                    headless=options.headless,
                    executable_path=options.executable_path,
                    args=[*DEFAULT_LAUNCH_ARGS, *options.extra_args],
                )
                context = await browser.new_context(
                    viewport={
                        "width": options.viewport_width,
                        "height": options.viewport_height,
                    },
                    user_agent=options.user_agent,
                )
                await context.add_init_script("window.open = function() { return null; };")
                page = await context.new_page()
            except PlaywrightError as exc:
                raise BrowserLaunchError(f"Failed to launch Chromium: {exc}") from exc

            page.set_default_timeout(_ms(options.element_wait_timeout_seconds))
            page.set_default_navigation_timeout(_ms(options.page_load_timeout_seconds))
            log_event(
                logger,
                logging.INFO,
                "browser_started",
                headless=options.headless,
                executable_path=options.executable_path,
            )
            yield PlaywrightPage(page, options)
        finally:
            if browser is not None:
                try:
                    await browser.close()
                except PlaywrightError as exc:
                    log_event(logger, logging.WARNING, "browser_close_failed", error=str(exc))
            await playwright.stop()
            log_event(logger, logging.INFO, "browser_closed")
