"""
app/api/routers/social_media.py

Follower-count and Google review endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.domain.social_scraping import FollowerRefreshSummary, ReviewSummary
from app.schemas.social_media import (
    FollowerRefreshResponse,
    PlatformLaunchResponse,
    ReviewItemResponse,
    ReviewSummaryResponse,
    SocialMediaFollowersResponse,
    TargetLaunchResponse,
)
from app.services.follower_scraping_service import (
    FollowerScrapingService,
    get_follower_scraping_service,
)
from app.services.google_reviews_service import (
    GoogleReviewsService,
    get_google_reviews_service,
)
from db.session import get_db

router = APIRouter(prefix="/api", tags=["social-media"])


def _company_not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Company not found")


@router.get("/social-media/{company_id}", response_model=SocialMediaFollowersResponse)
def get_social_media(
    company_id: str,
    db: Session = Depends(get_db),
    follower_service: FollowerScrapingService = Depends(get_follower_scraping_service),
) -> SocialMediaFollowersResponse:
    """
    Return the latest stored follower counts for a company.
    """

    found = follower_service.latest_followers(db=db, company_id=company_id)
    if found is None:
        raise _company_not_found()

    company, snapshot = found
    if snapshot is None:
        return SocialMediaFollowersResponse(
            company_id=company.company_id,
            company_name=company.name,
            status="no_data",
        )
    return SocialMediaFollowersResponse(
        company_id=company.company_id,
        company_name=company.name,
        facebook_followers=snapshot.facebook_followers or 0,
        instagram_followers=snapshot.instagram_followers or 0,
        linkedin_followers=snapshot.linkedin_followers or 0,
        facebook_url=snapshot.facebook_url or "",
        instagram_url=snapshot.instagram_url or "",
        linkedin_url=snapshot.linkedin_url or "",
        last_updated=snapshot.last_updated,
        status="success",
    )


@router.post("/social-media/update/{company_id}", response_model=FollowerRefreshResponse)
def update_social_media(
    company_id: str,
    db: Session = Depends(get_db),
    follower_service: FollowerScrapingService = Depends(get_follower_scraping_service),
) -> FollowerRefreshResponse:
    """
    Run the follower scrapers for every competitor of a company.
    """

    summary = follower_service.refresh_company(db=db, company_id=company_id)
    if summary is None:
        raise _company_not_found()
    return _refresh_response(summary)


@router.get("/reviews/{company_id}", response_model=ReviewSummaryResponse)
def get_reviews(
    company_id: str,
    force_refresh: bool = Query(default=False, description="Scrape even when reviews are stored"),
    db: Session = Depends(get_db),
    reviews_service: GoogleReviewsService = Depends(get_google_reviews_service),
) -> ReviewSummaryResponse:
    """
    Return the review summary for a company, scraping when nothing is stored.
    """

    company = reviews_service.find_company(db=db, company_id=company_id)
    if company is None:
        raise _company_not_found()
    summary = reviews_service.get_company_reviews(
        db=db,
        company=company,
        force_refresh=force_refresh,
    )
    return _review_response(company.company_id, summary)


def _refresh_response(summary: FollowerRefreshSummary) -> FollowerRefreshResponse:
    return FollowerRefreshResponse(
        company_id=summary.company_id,
        message=summary.message,
        total_competitors=summary.total_competitors,
        total_success=summary.total_success,
        total_failed=summary.total_failed,
        results=[
            TargetLaunchResponse(
                target_id=target.target_id,
                platforms=[
                    PlatformLaunchResponse(
                        success=result.success,
                        platform=result.platform,
                        target_id=result.target_id,
                        error=result.error,
                    )
                    for result in target.platforms
                ],
            )
            for target in summary.results
        ],
    )


def _review_response(company_id: str, summary: ReviewSummary) -> ReviewSummaryResponse:
    return ReviewSummaryResponse(
        company_id=company_id,
        average_rating=summary.average_rating,
        total_reviews=summary.total_reviews,
        top_reviews=[ReviewItemResponse(**item) for item in summary.top_reviews],
    )
