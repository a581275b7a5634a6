"""
Shared entry point for the per-platform follower scraper processes.

Exit codes: 0 when a count was stored, 1 on a hard failure, 2 when the
competitor has no profile URL or the page yielded no count.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
from collections.abc import Sequence

from app.scraping.browser.base import BrowserBackend
from app.scraping.config import ScraperSettings, get_scraper_settings
from app.scraping.followers import FollowerCountScraper
from app.scraping.logging_utils import configure_logging, log_event
from app.scraping.platforms import get_platform_profile
from app.scraping.storage.base import FollowerStorage
from app.scraping.types import Platform, ScrapeTarget

logger = logging.getLogger(__name__)

EXIT_STORED = 0
EXIT_FAILED = 1
EXIT_NO_DATA = 2


def scrape_and_store(
    *,
    platform: Platform,
    target_id: str,
    storage: FollowerStorage,
    browser: BrowserBackend,
    settings: ScraperSettings,
) -> int:
    """
    Look up the profile URL, scrape the count and persist it. Returns an exit code.
    """

    profile = storage.get_profile(platform=platform, target_id=target_id)
    if profile is None:
        log_event(
            logger,
            logging.WARNING,
            "profile_url_missing",
            platform=platform.value,
            target_id=target_id,
        )
        return EXIT_NO_DATA

    scraper = FollowerCountScraper(
        profile=get_platform_profile(platform),
        browser=browser,
        settings=settings,
    )
    result = asyncio.run(
        scraper.scrape(
            ScrapeTarget(platform=platform, target_id=target_id, profile_url=profile.profile_url)
        )
    )
    if not result.success:
        return EXIT_FAILED
    if result.follower_count is None:
        return EXIT_NO_DATA

    storage.save_follower_count(
        platform=platform,
        profile=profile,
        follower_count=result.follower_count,
    )
    return EXIT_STORED


def run_follower_job(platform: Platform, argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description=f"Scrape the {platform.value} follower count for one competitor."
    )
    parser.add_argument("target_id", help="Competitor id.")
    args = parser.parse_args(argv)

    configure_logging()

    from app.scraping.browser.playwright_backend import PlaywrightBrowserBackend
    from app.scraping.storage.sqlalchemy_storage import SQLAlchemyFollowerStorage
    from db.session import session_scope

    try:
        with session_scope() as session:
            return scrape_and_store(
                platform=platform,
                target_id=args.target_id,
                storage=SQLAlchemyFollowerStorage(session=session),
                browser=PlaywrightBrowserBackend(),
                settings=get_scraper_settings(),
            )
    except Exception as exc:
        log_event(
            logger,
            logging.ERROR,
            "follower_job_failed",
            platform=platform.value,
            target_id=args.target_id,
            error=str(exc),
        )
        return EXIT_FAILED
