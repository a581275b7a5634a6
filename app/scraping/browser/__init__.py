"""
Browser backend exports.
"""

from app.scraping.browser.base import BrowserBackend, BrowserPage, PageElement

__all__ = ["BrowserBackend", "BrowserPage", "PageElement"]
