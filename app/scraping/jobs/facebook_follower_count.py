"""
Scrape and store the Facebook follower count for one competitor.

Usage: python app/scraping/jobs/facebook_follower_count.py <competitor_id>
"""

from __future__ import annotations

from app.scraping.jobs.runner import run_follower_job
from app.scraping.types import Platform


def main() -> int:
    return run_follower_job(Platform.FACEBOOK)


if __name__ == "__main__":
    raise SystemExit(main())
