"""
Browser automation capability set used by the scrapers.

Any backend that can navigate, query by CSS selector, read element text,
attributes and markup, read the page source, scroll an element, click and tear
itself down can drive the follower scraper and the review collector.
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager

from app.scraping.config.models import BrowserOptions


class PageElement(ABC):
    """
    Handle to one element on a live page.
    """

    @abstractmethod
    async def text(self) -> str:
        """Return the element's text content, stripped."""

    @abstractmethod
    async def get_attribute(self, name: str) -> str | None:
        """Return one attribute value, or None when absent."""

    @abstractmethod
    async def inner_html(self) -> str:
        """Return the element's raw inner markup."""

    @abstractmethod
    async def query_selector(self, selector: str) -> "PageElement | None":
        """Return the first descendant matching a CSS selector."""

    @abstractmethod
    async def query_selector_all(self, selector: str) -> list["PageElement"]:
        """Return all descendants matching a CSS selector."""

    @abstractmethod
    async def click(self) -> None:
        """Click the element."""


class BrowserPage(ABC):
    """
    One open page owned by exactly one scraper invocation.
    """

    @abstractmethod
    async def goto(self, url: str, *, wait_until: str = "domcontentloaded") -> None:
        """
        Navigate to a URL. Raises NavigationError when loading fails or times out.
        """

    @abstractmethod
    async def wait_for_selector(
        self,
        selector: str,
        *,
        timeout_seconds: float | None = None,
    ) -> PageElement | None:
        """
        Wait for a selector to appear. Returns None when the wait times out.
        """

    @abstractmethod
    async def query_selector(self, selector: str) -> PageElement | None:
        """Return the first element matching a CSS selector."""

    @abstractmethod
    async def query_selector_all(self, selector: str) -> list[PageElement]:
        """Return all elements matching a CSS selector."""

    @abstractmethod
    async def content(self) -> str:
        """Return the full page source."""

    @abstractmethod
    async def body_text(self) -> str:
        """Return the rendered text of the document body."""

    @abstractmethod
    async def is_scrollable(self, element: PageElement) -> bool:
        """Return True when the element's content overflows vertically."""

    @abstractmethod
    async def scrollable_ancestor(self, element: PageElement) -> PageElement | None:
        """Return the nearest vertically scrollable ancestor of an element."""

    @abstractmethod
    async def scroll_to_top(self, element: PageElement) -> None:
        """Scroll an element to its top."""

    @abstractmethod
    async def scroll_to_bottom(self, element: PageElement) -> None:
        """Scroll an element to its bottom."""

    async def sleep(self, seconds: float) -> None:
        if seconds > 0:
            await asyncio.sleep(seconds)


class BrowserBackend(ABC):
    """
    Factory for isolated browser pages.
    """

    @abstractmethod
    def open_page(self, options: BrowserOptions) -> AbstractAsyncContextManager[BrowserPage]:
        """
        Launch a browser and yield one page; the browser is closed on exit.

        Raises BrowserLaunchError when the browser cannot be started.
        """
