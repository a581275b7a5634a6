"""
Scraping-layer exceptions.
"""

from __future__ import annotations


class ScrapingError(Exception):
    """Base exception for browser-driven scraping failures."""


class BrowserLaunchError(ScrapingError):
    """Raised when the headless browser cannot be started or connected to."""


class NavigationError(ScrapingError):
    """Raised when a page fails to load within the page-load timeout."""


class ElementQueryError(ScrapingError):
    """Raised when a single element lookup or read fails."""
