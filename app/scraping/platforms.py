"""
Per-platform follower extraction tables.

Each profile drives the same follower scraper; only the selectors, probes and
page-source patterns differ between platforms.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from app.scraping.types import Platform

DESKTOP_CHROME_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
)


@dataclass(frozen=True)
class AttributeProbe:
    """
    Read one attribute of one element and pull the count out with a regex.
    """

    selector: str
    attribute: str
    pattern: re.Pattern[str]


@dataclass(frozen=True)
class PlatformProfile:
    """
    Extraction strategy table for one platform.
    """

    platform: Platform
    element_selectors: tuple[str, ...]
    plausibility: re.Pattern[str]
    source_patterns: tuple[re.Pattern[str], ...]
    attribute_probes: tuple[AttributeProbe, ...] = ()
    popup_dismiss_selectors: tuple[str, ...] = ()
    settle_seconds: float = 3.0
    user_agent: str | None = None
    extra_launch_args: tuple[str, ...] = field(default_factory=tuple)


FACEBOOK = PlatformProfile(
    platform=Platform.FACEBOOK,
    element_selectors=(
        '[data-overviewsection="followers"] a',
        '[data-testid="standard_tab_followers"] a',
        'a[href*="followers"]',
        ".x9f619.x1n2onr6.x1ja2u2z span",
    ),
    plausibility=re.compile(r"follower|follow|people like", re.IGNORECASE),
    source_patterns=(
        re.compile(r'"followerCount":(\d+)'),
        re.compile(r'"followers_count":(\d+)'),
        re.compile(r"(\d+(?:\.\d+)?[KM]?)\s+(?:followers|people like)", re.IGNORECASE),
        re.compile(r'data-count="(\d+)"'),
    ),
    settle_seconds=3.0,
)

INSTAGRAM = PlatformProfile(
    platform=Platform.INSTAGRAM,
    element_selectors=(),
    plausibility=re.compile(r"follower", re.IGNORECASE),
    attribute_probes=(
        AttributeProbe(
            selector='meta[property="og:description"]',
            attribute="content",
            pattern=re.compile(r"([\d,.KM]+)\s+Followers"),
        ),
    ),
    source_patterns=(
        re.compile(r'"edge_followed_by":\{"count":(\d+)'),
        re.compile(r'"follower_count":(\d+)'),
        re.compile(r"(\d+(?:\.\d+)?[KM]?)\s+followers", re.IGNORECASE),
        re.compile(r'data-testid="followers"[^>]*>([^<]+)'),
    ),
    popup_dismiss_selectors=("button:has-text('Not Now')",),
    settle_seconds=10.0,
    user_agent=DESKTOP_CHROME_USER_AGENT,
)

LINKEDIN = PlatformProfile(
    platform=Platform.LINKEDIN,
    element_selectors=(
        ".org-top-card-summary-info-list__info-item",
        ".follower-count",
        '[data-test-id="follower-count"]',
        ".org-top-card__follower-count",
        ".top-card-layout__entity-info .follower-count",
    ),
    plausibility=re.compile(r"follower|employee", re.IGNORECASE),
    source_patterns=(
        re.compile(r'"followerCount":(\d+)'),
        re.compile(r"(\d+(?:\.\d+)?[KM]?)\s+followers", re.IGNORECASE),
        re.compile(r"(\d+(?:,\d{3})*)\s+followers", re.IGNORECASE),
        re.compile(r'"staffCount":(\d+)'),
    ),
    settle_seconds=10.0,
)

PLATFORM_PROFILES: dict[Platform, PlatformProfile] = {
    profile.platform: profile for profile in (FACEBOOK, INSTAGRAM, LINKEDIN)
}


def get_platform_profile(platform: Platform | str) -> PlatformProfile:
    resolved = platform if isinstance(platform, Platform) else Platform.parse(platform)
    return PLATFORM_PROFILES[resolved]
