"""Data models - Pure data structures with no business logic."""

from .profile import PROFILE_FIELDS, UserProfile
from .recommendation import REQUIRED_GIFT_FIELDS, GiftRecommendation, RecommendationRequest
from .state import AppState, FavoritesSet, ViewMode

__all__ = [
    "PROFILE_FIELDS",
    "UserProfile",
    "REQUIRED_GIFT_FIELDS",
    "GiftRecommendation",
    "RecommendationRequest",
    "AppState",
    "FavoritesSet",
    "ViewMode",
]
