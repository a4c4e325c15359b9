"""Service layer - Business logic modules.

Each service module has a clear interface and can be developed/tested independently.
"""

from .llm_service import LLMService, LLMServiceError
from .recommendation_service import RecommendationService, RecommendationServiceError
from .favorites_store import FavoritesStore
from .app_service import AppService

__all__ = [
    "LLMService",
    "LLMServiceError",
    "RecommendationService",
    "RecommendationServiceError",
    "FavoritesStore",
    "AppService",
]
