"""Food reference library."""

from dataclasses import dataclass
from typing import Protocol

from fitcoach.domain.nutrition import FoodItem
from fitcoach.services.cache import Cache


class FoodRepository(Protocol):
    """Persistence interface for food reference data."""

    def list_foods(self, limit: int) -> list[FoodItem]:
        """Return foods ordered by name."""

    def search_foods(self, query: str, limit: int) -> list[FoodItem]:
        """Return foods whose name matches the query, ordered by name."""


@dataclass
class FoodLibraryService:
    """Reads food reference data through a cache."""

    repository: FoodRepository
    cache: Cache
    ttl_seconds: int = 900

    def list_foods(self, query: str | None = None, limit: int = 200) -> list[FoodItem]:
        """Return foods, optionally filtered by a name query."""
        cleaned = (query or "").strip()
        cache_key = f"foods:{cleaned.lower()}:{limit}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, list):
            return cached

        if cleaned:
            foods = self.repository.search_foods(cleaned, limit)
        else:
            foods = self.repository.list_foods(limit)
        self.cache.set(cache_key, foods, ttl_seconds=self.ttl_seconds)
        return foods

    def refresh(self) -> None:
        """Forget cached food lists."""
        self.cache.invalidate("foods:")
