"""
app/services/follower_scraping_service.py

Service orchestration for competitor follower-count refreshes.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from functools import lru_cache

from sqlalchemy.orm import Session

from app.domain.social_scraping import CompanyProfile, FollowerRefreshSummary, FollowerSnapshot
from app.scraping.config import ScraperSettings, get_scraper_settings
from app.scraping.launcher import ScraperProcessLauncher
from app.scraping.logging_utils import log_event
from app.scraping.storage.base import FollowerStorage
from app.scraping.storage.sqlalchemy_storage import SQLAlchemyFollowerStorage

logger = logging.getLogger(__name__)

NO_COMPETITORS_MESSAGE = "No competitors to scrape"


def _default_storage(session: Session) -> FollowerStorage:
    return SQLAlchemyFollowerStorage(session=session)


class FollowerScrapingService:
    """
    Runs the per-platform scraper processes for a company's competitors.
    """

    def __init__(
        self,
        *,
        settings: ScraperSettings | None = None,
        launcher: ScraperProcessLauncher | None = None,
        storage_factory: Callable[[Session], FollowerStorage] = _default_storage,
    ) -> None:
        self._settings = settings or get_scraper_settings()
        self._launcher = launcher or ScraperProcessLauncher(
            max_workers=self._settings.max_workers,
            process_timeout_seconds=self._settings.process_timeout_seconds,
        )
        self._storage_factory = storage_factory

    def ensure_follower_data(
        self,
        company_id: str | None,
        competitor_ids: Sequence[str],
    ) -> FollowerRefreshSummary:
        """
        Scrape every platform for the given competitors.
        """

        if not competitor_ids:
            log_event(logger, logging.INFO, "follower_refresh_skipped", company_id=company_id)
            return FollowerRefreshSummary(
                company_id=company_id,
                message=NO_COMPETITORS_MESSAGE,
                total_competitors=0,
                total_success=0,
                total_failed=0,
            )

        batch = self._launcher.run_batch(list(competitor_ids))
        return FollowerRefreshSummary(
            company_id=company_id,
            message=(
                f"Scraped {batch.total_targets} competitors: "
                f"{batch.total_success} succeeded, {batch.total_failed} failed"
            ),
            total_competitors=batch.total_targets,
            total_success=batch.total_success,
            total_failed=batch.total_failed,
            results=batch.results,
        )

    def refresh_company(self, *, db: Session, company_id: str) -> FollowerRefreshSummary | None:
        """
        Refresh all competitors of a company. Returns None for an unknown company.
        """

        storage = self._storage_factory(db)
        if storage.get_company(company_id=company_id) is None:
            return None
        competitor_ids = storage.competitor_ids(company_id=company_id)
        return self.ensure_follower_data(company_id, competitor_ids)

    def refresh_all(self, *, db: Session) -> list[FollowerRefreshSummary]:
        storage = self._storage_factory(db)
        summaries: list[FollowerRefreshSummary] = []
        for company_id in storage.company_ids():
            competitor_ids = storage.competitor_ids(company_id=company_id)
            summaries.append(self.ensure_follower_data(company_id, competitor_ids))
        return summaries

    def latest_followers(
        self,
        *,
        db: Session,
        company_id: str,
    ) -> tuple[CompanyProfile, FollowerSnapshot | None] | None:
        """
        Return the company and its most recently updated follower row.
        """

        storage = self._storage_factory(db)
        company = storage.get_company(company_id=company_id)
        if company is None:
            return None
        snapshots = storage.follower_snapshots(company_id=company_id)
        return company, (snapshots[0] if snapshots else None)


@lru_cache(maxsize=1)
def get_follower_scraping_service() -> FollowerScrapingService:
    """
    Build and cache follower scraping service.
    """

    return FollowerScrapingService()
