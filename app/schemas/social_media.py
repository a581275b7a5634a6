"""
app/schemas/social_media.py

Response schemas for follower counts, follower refreshes and review summaries.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class SocialMediaFollowersResponse(BaseModel):
    """
    Latest stored follower counts for a company.
    """

    company_id: str
    company_name: str
    facebook_followers: int = Field(default=0, ge=0)
    instagram_followers: int = Field(default=0, ge=0)
    linkedin_followers: int = Field(default=0, ge=0)
    facebook_url: str = ""
    instagram_url: str = ""
    linkedin_url: str = ""
    last_updated: datetime | None = None
    status: str


class PlatformLaunchResponse(BaseModel):
    success: bool
    platform: str
    target_id: str
    error: str | None = None


class TargetLaunchResponse(BaseModel):
    target_id: str
    platforms: list[PlatformLaunchResponse] = Field(default_factory=list)


class FollowerRefreshResponse(BaseModel):
    """
    API response model for one follower refresh batch.
    """

    company_id: str
    message: str
    total_competitors: int = Field(..., ge=0)
    total_success: int = Field(..., ge=0)
    total_failed: int = Field(..., ge=0)
    results: list[TargetLaunchResponse] = Field(default_factory=list)


class ReviewItemResponse(BaseModel):
    reviewer: str
    rating: float | None = None
    text: str
    date: str | None = None
    sentiment: str | None = None


class ReviewSummaryResponse(BaseModel):
    """
    API response model for a company's review summary.
    """

    company_id: str
    average_rating: float | None = None
    total_reviews: int = Field(..., ge=0)
    top_reviews: list[ReviewItemResponse] = Field(default_factory=list)
