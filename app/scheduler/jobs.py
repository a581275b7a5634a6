"""
app/scheduler/jobs.py

APScheduler-based scheduler for periodic follower-count refreshes.

Schedule (UTC)
--------------
  daily_follower_refresh - COMPA_FOLLOWER_REFRESH_HOUR:00 every day (default 04:00)

Lifecycle
---------
Call ``build_scheduler()`` once to get a configured ``BackgroundScheduler``.
The scheduler is wired into FastAPI via the ``lifespan`` context in main.py.
"""

from __future__ import annotations

import logging

from apscheduler.schedulers.background import BackgroundScheduler

from app.scraping.config import get_scraper_settings
from app.services.follower_scraping_service import get_follower_scraping_service
from db.session import session_scope

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Job: Daily follower refresh
# ---------------------------------------------------------------------------


def run_daily_follower_refresh() -> None:
    """
    Run the follower scrapers for every company that has competitors.
    """
    logger.info("Scheduler: daily_follower_refresh starting")
    service = get_follower_scraping_service()

    with session_scope() as db:
        try:
            summaries = service.refresh_all(db=db)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Scheduler: daily_follower_refresh failed: %s", exc)
            return

    for summary in summaries:
        logger.info(
            "Scheduler: daily_follower_refresh company=%s competitors=%d success=%d failed=%d",
            summary.company_id,
            summary.total_competitors,
            summary.total_success,
            summary.total_failed,
        )

    logger.info("Scheduler: daily_follower_refresh complete")


# ---------------------------------------------------------------------------
# Scheduler factory
# ---------------------------------------------------------------------------


def build_scheduler() -> BackgroundScheduler:
    """
    Build and register all periodic jobs.

    Returns a configured but *not yet started* ``BackgroundScheduler``.
    """
    settings = get_scraper_settings()
    scheduler = BackgroundScheduler(timezone="UTC")

    scheduler.add_job(
        run_daily_follower_refresh,
        trigger="cron",
        hour=settings.follower_refresh_hour,
        minute=0,
        id="daily_follower_refresh",
        name="Daily follower-count refresh",
        replace_existing=True,
        misfire_grace_time=3600,
        max_instances=1,
    )

    return scheduler
