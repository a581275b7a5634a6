"""
Config helpers for scraping.
"""

from app.scraping.config.loader import build_scraper_settings, get_scraper_settings
from app.scraping.config.models import BrowserOptions, ScraperSettings

__all__ = [
    "BrowserOptions",
    "ScraperSettings",
    "build_scraper_settings",
    "get_scraper_settings",
]
