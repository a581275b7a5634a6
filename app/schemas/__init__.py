"""
app/schemas package marker.
"""

from app.schemas.social_media import (
    FollowerRefreshResponse,
    PlatformLaunchResponse,
    ReviewItemResponse,
    ReviewSummaryResponse,
    SocialMediaFollowersResponse,
    TargetLaunchResponse,
)

__all__ = [
    "FollowerRefreshResponse",
    "PlatformLaunchResponse",
    "ReviewItemResponse",
    "ReviewSummaryResponse",
    "SocialMediaFollowersResponse",
    "TargetLaunchResponse",
]
