"""
Environment-driven settings loader for scraping.
"""

from __future__ import annotations

import os
from functools import lru_cache

from db.config import load_env_files

from app.scraping.config.models import ScraperSettings


def _get_bool_env(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _get_int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _get_float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _get_optional_str_env(*names: str) -> str | None:
    for name in names:
        raw = os.getenv(name)
        if raw is not None and raw.strip():
            return raw.strip()
    return None


def _get_optional_float_env(name: str) -> float | None:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    try:
        value = float(raw)
    except ValueError:
        return None
    return value if value > 0 else None


@lru_cache(maxsize=1)
def get_scraper_settings() -> ScraperSettings:
    """
    Return cached scraper settings from environment variables.
    """

    load_env_files()
    return build_scraper_settings()


def build_scraper_settings() -> ScraperSettings:
    """
    Build scraper settings from the current environment without caching.
    """

    return ScraperSettings(
        headless=_get_bool_env("COMPA_BROWSER_HEADLESS", True),
        browser_executable_path=_get_optional_str_env(
            "COMPA_BROWSER_EXECUTABLE_PATH",
            "PUPPETEER_EXECUTABLE_PATH",
        ),
        viewport_width=max(320, _get_int_env("COMPA_BROWSER_VIEWPORT_WIDTH", 1920)),
        viewport_height=max(240, _get_int_env("COMPA_BROWSER_VIEWPORT_HEIGHT", 1080)),
        page_load_timeout_seconds=max(
            1.0,
            _get_float_env("COMPA_PAGE_LOAD_TIMEOUT_SECONDS", 30.0),
        ),
        element_wait_timeout_seconds=max(
            0.5,
            _get_float_env("COMPA_ELEMENT_WAIT_TIMEOUT_SECONDS", 10.0),
        ),
        max_workers=max(1, _get_int_env("COMPA_SCRAPER_MAX_WORKERS", 1)),
        process_timeout_seconds=_get_optional_float_env("COMPA_SCRAPER_PROCESS_TIMEOUT_SECONDS"),
        review_max_reviews=max(1, _get_int_env("COMPA_REVIEW_MAX_REVIEWS", 10)),
        review_scroll_pause_seconds=max(
            0.0,
            _get_float_env("COMPA_REVIEW_SCROLL_PAUSE_SECONDS", 1.5),
        ),
        review_max_stagnant=max(1, _get_int_env("COMPA_REVIEW_MAX_STAGNANT", 6)),
        follower_refresh_hour=min(23, max(0, _get_int_env("COMPA_FOLLOWER_REFRESH_HOUR", 4))),
    )
