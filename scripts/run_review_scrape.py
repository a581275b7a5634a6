"""
Collect Google reviews for one company from CLI.
"""

from __future__ import annotations

import argparse
import json
from dataclasses import asdict

from app.scraping.logging_utils import configure_logging
from app.services.google_reviews_service import GoogleReviewsService
from db.session import session_scope


def main() -> int:
    parser = argparse.ArgumentParser(description="Collect Google reviews for a company.")
    parser.add_argument("--company-id", dest="company_id", required=True, help="Company id.")
    parser.add_argument(
        "--force-refresh",
        dest="force_refresh",
        action="store_true",
        help="Scrape even when reviews are already stored.",
    )
    args = parser.parse_args()

    configure_logging()
    service = GoogleReviewsService()
    with session_scope() as db:
        company = service.find_company(db=db, company_id=args.company_id)
        if company is None:
            print(json.dumps({"error": f"Company {args.company_id} not found"}))
            return 1
        summary = service.get_company_reviews(
            db=db,
            company=company,
            force_refresh=args.force_refresh,
        )

    print(json.dumps({"company_id": company.company_id, **asdict(summary)}, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
