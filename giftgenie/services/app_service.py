"""App Service - Application state orchestration.

The state transitions are plain functions from AppState to AppState.
AppService owns the one live state for the process and applies them behind a
lock; the model call itself runs outside the lock.

Overlapping submissions are resolved by request sequence number: a response
only lands if no newer request has been issued since it started.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from threading import Lock

from giftgenie.models import AppState, GiftRecommendation, UserProfile, ViewMode
from giftgenie.services import favorites_store
from giftgenie.services.favorites_store import FavoritesStore, FavoritesStoreError
from giftgenie.services.recommendation_service import (
    RecommendationService,
    RecommendationServiceError,
)


logger = logging.getLogger(__name__)

FETCH_ERROR_MESSAGE = "Failed to fetch recommendations. Please try again."


def start_request(state: AppState) -> AppState:
    """Clear the error, show the results view and mark a new request in flight."""
    return replace(
        state,
        loading=True,
        error=None,
        view_mode=ViewMode.RESULTS,
        request_seq=state.request_seq + 1,
    )


def apply_result(
    state: AppState, request_seq: int, recommendations: list[GiftRecommendation]
) -> AppState:
    if request_seq != state.request_seq:
        return state
    return replace(
        state,
        loading=False,
        error=None,
        recommendations=list(recommendations),
    )


def apply_failure(state: AppState, request_seq: int, message: str = FETCH_ERROR_MESSAGE) -> AppState:
    """Record a failed request. Previous recommendations stay in place."""
    if request_seq != state.request_seq:
        return state
    return replace(state, loading=False, error=message)


def toggle_favorite(state: AppState, gift: GiftRecommendation) -> AppState:
    return replace(state, favorites=favorites_store.toggle(state.favorites, gift))


def set_view_mode(state: AppState, mode: ViewMode) -> AppState:
    return replace(state, view_mode=mode)


class AppService:
    """Single entry point for every state change the client can trigger."""

    def __init__(self, recommendation_service=None, store: FavoritesStore | None = None):
        """Initialize with optional dependencies.

        Args:
            recommendation_service: Fetches suggestions. If None, uses default.
            store: Favorites storage. If None, uses the DATA_DIR file.
        """
        self._recommendations = recommendation_service
        self._store = store if store is not None else FavoritesStore()
        self._lock = Lock()
        self._state = AppState(favorites=self._store.load())

    @property
    def recommendation_service(self):
        """Lazy load recommendation service."""
        if self._recommendations is None:
            self._recommendations = RecommendationService()
        return self._recommendations

    @property
    def state(self) -> AppState:
        """Snapshot of the current state."""
        with self._lock:
            return replace(
                self._state,
                recommendations=list(self._state.recommendations),
                favorites=dict(self._state.favorites),
            )

    def submit(self, profile: UserProfile) -> AppState:
        """Request recommendations for a profile and fold the outcome into state.

        Never raises for request failures; they end up in ``state.error``.
        """
        with self._lock:
            self._state = start_request(self._state)
            request_seq = self._state.request_seq

        try:
            recommendations = self.recommendation_service.fetch(profile)
        except RecommendationServiceError as e:
            logger.error("[submit] request=%d failed: %s", request_seq, e)
            with self._lock:
                self._state = apply_failure(self._state, request_seq)
        except Exception:
            logger.exception("[submit] request=%d failed unexpectedly", request_seq)
            with self._lock:
                self._state = apply_failure(self._state, request_seq)
        else:
            with self._lock:
                if request_seq != self._state.request_seq:
                    logger.info(
                        "[submit] request=%d superseded by request=%d, dropping result",
                        request_seq,
                        self._state.request_seq,
                    )
                self._state = apply_result(self._state, request_seq, recommendations)

        return self.state

    def toggle_favorite(self, gift: GiftRecommendation) -> bool:
        """Save or unsave a gift. Returns True if it is now a favorite."""
        with self._lock:
            self._state = toggle_favorite(self._state, gift)
            favorited = self._state.is_favorite(gift.id)
            try:
                self._store.persist(self._state.favorites)
            except FavoritesStoreError as e:
                logger.error("[favorites] persist failed: %s", e)
        return favorited

    def set_view_mode(self, mode: ViewMode) -> AppState:
        with self._lock:
            self._state = set_view_mode(self._state, mode)
        return self.state

    def toggle_view_mode(self) -> AppState:
        with self._lock:
            current = self._state.view_mode
            mode = ViewMode.RESULTS if current is ViewMode.FAVORITES else ViewMode.FAVORITES
            self._state = set_view_mode(self._state, mode)
        return self.state
