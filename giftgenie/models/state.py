"""Application state data models."""

from __future__ import annotations

from dataclasses import dataclass, field as dataclass_field
from enum import Enum
from typing import Any, Dict

from .recommendation import GiftRecommendation


# Favorites keyed by gift id, in insertion order
FavoritesSet = Dict[str, GiftRecommendation]


class ViewMode(Enum):
    """Which list the client is showing."""
    RESULTS = "results"
    FAVORITES = "favorites"


@dataclass
class AppState:
    """Snapshot of everything the client renders.

    ``request_seq`` is the sequence number of the most recently issued
    recommendation request; only that request may resolve the state.
    """
    loading: bool = False
    error: str | None = None
    recommendations: list[GiftRecommendation] = dataclass_field(default_factory=list)
    favorites: FavoritesSet = dataclass_field(default_factory=dict)
    view_mode: ViewMode = ViewMode.RESULTS
    request_seq: int = 0

    def displayed(self) -> list[GiftRecommendation]:
        """The list selected by the current view mode."""
        if self.view_mode is ViewMode.FAVORITES:
            return list(self.favorites.values())
        return list(self.recommendations)

    def is_favorite(self, gift_id: str) -> bool:
        return gift_id in self.favorites

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "loading": self.loading,
            "error": self.error,
            "recommendations": [r.to_dict() for r in self.recommendations],
            "favorites": [f.to_dict() for f in self.favorites.values()],
            "favorites_count": len(self.favorites),
            "view_mode": self.view_mode.value,
            "displayed": [
                {**gift.to_dict(), "favorited": self.is_favorite(gift.id)}
                for gift in self.displayed()
            ],
        }
