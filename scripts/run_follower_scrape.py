"""
Run follower-count scrapers from CLI.
"""

from __future__ import annotations

import argparse
import json
from dataclasses import asdict

from app.scraping.config import get_scraper_settings
from app.scraping.launcher import ScraperProcessLauncher
from app.scraping.logging_utils import configure_logging
from app.services.follower_scraping_service import FollowerScrapingService
from db.session import session_scope


def main() -> int:
    parser = argparse.ArgumentParser(description="Run follower-count scrapers.")
    parser.add_argument(
        "--competitor-id",
        dest="competitor_ids",
        action="append",
        default=[],
        help="Competitor id to scrape. Repeat for several competitors.",
    )
    parser.add_argument(
        "--company-id",
        dest="company_id",
        default=None,
        help="Scrape every competitor registered for this company.",
    )
    parser.add_argument(
        "--max-workers",
        dest="max_workers",
        type=int,
        default=None,
        help="Competitors scraped in parallel (defaults to COMPA_SCRAPER_MAX_WORKERS).",
    )
    args = parser.parse_args()
    if not args.competitor_ids and not args.company_id:
        parser.error("Provide --competitor-id or --company-id.")

    configure_logging()
    settings = get_scraper_settings()
    launcher = ScraperProcessLauncher(
        max_workers=args.max_workers or settings.max_workers,
        process_timeout_seconds=settings.process_timeout_seconds,
    )
    service = FollowerScrapingService(settings=settings, launcher=launcher)

    if args.company_id:
        with session_scope() as db:
            summary = service.refresh_company(db=db, company_id=args.company_id)
        if summary is None:
            print(json.dumps({"error": f"Company {args.company_id} not found"}))
            return 1
    else:
        summary = service.ensure_follower_data(None, args.competitor_ids)

    print(json.dumps(asdict(summary), indent=2))
    return 0 if summary.total_failed == 0 else 1


if __name__ == "__main__":
    raise SystemExit(main())
