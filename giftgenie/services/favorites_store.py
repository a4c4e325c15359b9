"""Favorites Store - Saved gifts persisted to local disk.

The favorites list is a single key-value slot: the fixed key names a JSON
file under DATA_DIR holding an array of gift records. It is read once at
startup and rewritten in full after every change.

Interface Contract:
- FavoritesStore.load() -> FavoritesSet (never raises; corrupt data is logged)
- toggle(favorites, gift) -> FavoritesSet (pure)
- FavoritesStore.persist(favorites) raises FavoritesStoreError on OS failure
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path

from config import DATA_DIR, FAVORITES_KEY
from giftgenie.models import FavoritesSet, GiftRecommendation


logger = logging.getLogger(__name__)


class FavoritesStoreError(Exception):
    """Raised when favorites cannot be written."""
    pass


class FavoritesCorruptError(FavoritesStoreError):
    """Stored favorites could not be read back."""
    pass


def toggle(favorites: FavoritesSet, gift: GiftRecommendation) -> FavoritesSet:
    """Remove ``gift`` if its id is saved, otherwise add it.

    Returns a new mapping; ``favorites`` is left untouched.
    """
    updated = dict(favorites)
    if gift.id in updated:
        del updated[gift.id]
    else:
        updated[gift.id] = gift
    return updated


class FavoritesStore:
    """JSON-file backed favorites storage."""

    def __init__(self, path: str | Path | None = None):
        self.path = Path(path) if path is not None else DATA_DIR / f"{FAVORITES_KEY}.json"

    def load(self) -> FavoritesSet:
        """Read saved favorites; absent or corrupt storage yields an empty set."""
        if not self.path.exists():
            return {}
        try:
            favorites = self._read()
        except FavoritesCorruptError as e:
            logger.warning("[favorites] ignoring unreadable %s: %s", self.path, e)
            return {}
        logger.info("[favorites] loaded=%d path=%s", len(favorites), self.path)
        return favorites

    def persist(self, favorites: FavoritesSet) -> None:
        """Write the full favorites set, replacing what was stored."""
        payload = json.dumps(
            [gift.to_dict() for gift in favorites.values()],
            ensure_ascii=False,
            indent=2,
        )
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(payload)
                os.replace(tmp_path, self.path)
            finally:
                if os.path.exists(tmp_path):
                    os.unlink(tmp_path)
        except OSError as e:
            raise FavoritesStoreError(f"Failed to save favorites to {self.path}: {e}") from e

    def _read(self) -> FavoritesSet:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise FavoritesCorruptError(str(e)) from e

        if not isinstance(data, list):
            raise FavoritesCorruptError(f"expected a JSON array, got {type(data).__name__}")

        favorites: FavoritesSet = {}
        for item in data:
            try:
                gift = GiftRecommendation.from_dict(item)
            except ValueError as e:
                raise FavoritesCorruptError(str(e)) from e
            favorites[gift.id] = gift
        return favorites
