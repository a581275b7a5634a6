"""
Scraping configuration models.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class BrowserOptions:
    """
    Launch options for one headless browser instance.
    """

    headless: bool = True
    executable_path: str | None = None
    viewport_width: int = 1920
    viewport_height: int = 1080
    user_agent: str | None = None
    page_load_timeout_seconds: float = 30.0
    element_wait_timeout_seconds: float = 10.0
    extra_args: tuple[str, ...] = ()


@dataclass(frozen=True)
class ScraperSettings:
    """
    Runtime settings for follower and review scraping.
    """

    headless: bool
    browser_executable_path: str | None
    viewport_width: int
    viewport_height: int
    page_load_timeout_seconds: float
    element_wait_timeout_seconds: float
    max_workers: int
    process_timeout_seconds: float | None
    review_max_reviews: int
    review_scroll_pause_seconds: float
    review_max_stagnant: int
    follower_refresh_hour: int

    def browser_options(
        self,
        *,
        user_agent: str | None = None,
        viewport: tuple[int, int] | None = None,
        extra_args: tuple[str, ...] = (),
    ) -> BrowserOptions:
        width, height = viewport or (self.viewport_width, self.viewport_height)
        return BrowserOptions(
            headless=self.headless,
            executable_path=self.browser_executable_path,
            viewport_width=width,
            viewport_height=height,
            user_agent=user_agent,
            page_load_timeout_seconds=self.page_load_timeout_seconds,
            element_wait_timeout_seconds=self.element_wait_timeout_seconds,
            extra_args=extra_args,
        )
