"""GiftGenie gift recommendation package."""

from .models import GiftRecommendation, UserProfile
from .services.recommendation_service import build_request, normalize_response

__all__ = [
    "GiftRecommendation",
    "UserProfile",
    "build_request",
    "normalize_response",
]
