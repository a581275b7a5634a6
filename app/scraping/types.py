"""
Shared scraping runtime data models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class Platform(str, Enum):
    """
    Social platforms with a follower-count scraper.
    """

    FACEBOOK = "facebook"
    INSTAGRAM = "instagram"
    LINKEDIN = "linkedin"

    @classmethod
    def parse(cls, value: str) -> "Platform":
        try:
            return cls(value.strip().lower())
        except ValueError as exc:
            allowed = ", ".join(item.value for item in cls)
            raise ValueError(f"Unknown platform '{value}'. Allowed: {allowed}.") from exc


@dataclass(frozen=True)
class ScrapeTarget:
    """
    One (platform, target id) pair with its resolved profile URL.
    """

    platform: Platform
    target_id: str
    profile_url: str


@dataclass(frozen=True)
class ScrapeResult:
    """
    Outcome for one follower scrape.

    ``success`` with ``follower_count=None`` means the page loaded but no count
    could be determined; ``success=False`` is a hard failure.
    """

    platform: Platform
    target_id: str
    success: bool
    follower_count: int | None = None
    error_message: str | None = None


@dataclass(frozen=True)
class ReviewTarget:
    """
    Place whose Google reviews are collected.
    """

    name: str
    address: str | None = None
    review_url: str | None = None
    target_id: str | None = None

    @property
    def search_term(self) -> str:
        name = (self.name or "").strip()
        address = (self.address or "").strip()
        if address:
            return f"{name}, {address}"
        return name

    @property
    def direct_review_url(self) -> str | None:
        url = (self.review_url or "").strip()
        if not url or url == "Not Available":
            return None
        return url


@dataclass(frozen=True)
class ExistingReview:
    """
    Previously stored review, used as an incremental-mode stop marker.
    """

    reviewer: str | None
    text: str | None

    @property
    def key(self) -> str:
        return review_key(self.reviewer, self.text)


ANONYMOUS_REVIEWER = "Anonymous"


def review_key(reviewer: str | None, text: str | None) -> str:
    name = (reviewer or "").strip()
    if name.lower() == ANONYMOUS_REVIEWER.lower():
        name = ""
    return f"{name}|{(text or '').strip()}".lower()


@dataclass(frozen=True)
class ReviewRecord:
    """
    One harvested review card.
    """

    reviewer_name: str | None
    rating_value: float | None
    text: str
    published_at: str | None
    content_hash: int

    @property
    def key(self) -> str:
        return review_key(self.reviewer_name, self.text)


@dataclass
class ReviewScrapeOptions:
    """
    Per-call options for the review collector.
    """

    max_reviews: int | None = None
    include_metadata: bool = True
    existing_reviews: list[ExistingReview] = field(default_factory=list)
    is_first_time: bool = False
    scroll_pause_seconds: float = 1.5
    max_stagnant: int = 6
    empty_pass_limit: int = 3
    burst_cycles: int = 5


@dataclass
class CollectionSession:
    """
    Mutable state for one review collection run.
    """

    company_name: str
    search_term: str
    is_first_run: bool
    existing_keys: set[str] = field(default_factory=set)
    seen_hashes: set[int] = field(default_factory=set)
    records: list[ReviewRecord] = field(default_factory=list)
    stagnation_counter: int = 0
    consecutive_empty_passes: int = 0
    duplicate_found: bool = False
    total_available: int = 0


@dataclass(frozen=True)
class ReviewScrapeResult:
    """
    Outcome for one review collection run.
    """

    reviews: list[ReviewRecord]
    total_available: int
    scraped_count: int
    is_first_time: bool
    duplicate_detected: bool

    @classmethod
    def empty(cls, *, is_first_time: bool, total_available: int = 0) -> "ReviewScrapeResult":
        return cls(
            reviews=[],
            total_available=total_available,
            scraped_count=0,
            is_first_time=is_first_time,
            duplicate_detected=False,
        )


@dataclass(frozen=True)
class LaunchResult:
    """
    Outcome for one scraper child process.
    """

    success: bool
    platform: str
    target_id: str
    error: str | None = None
    exit_code: int | None = None


@dataclass(frozen=True)
class TargetLaunchResults:
    """
    All platform results for one target, in platform order.
    """

    target_id: str
    platforms: list[LaunchResult]


@dataclass(frozen=True)
class BatchSummary:
    """
    Aggregate of one launcher batch.
    """

    total_targets: int
    total_success: int
    total_failed: int
    results: list[TargetLaunchResults] = field(default_factory=list)
