"""
app/api/routers package marker.
"""

from app.api.routers.social_media import router as social_media_router

__all__ = [
    "social_media_router",
]
