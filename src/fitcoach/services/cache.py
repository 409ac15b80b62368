"""Expiring cache for reference data."""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Protocol


class Cache(Protocol):
    """Key-value cache with per-entry expiry."""

    def get(self, key: str) -> object | None:
        """Return a live cached value, if any."""

    def set(self, key: str, value: object, ttl_seconds: int) -> None:
        """Store a value for ttl_seconds."""

    def invalidate(self, prefix: str = "") -> None:
        """Drop entries whose key starts with prefix."""


@dataclass
class _Entry:
    value: object
    expires_at: datetime


@dataclass
class TtlCache(Cache):
    """Process-local cache; entries expire lazily on read."""

    clock: Callable[[], datetime] = field(default=lambda: datetime.now(tz=UTC))
    _entries: dict[str, _Entry] = field(default_factory=dict)

    def get(self, key: str) -> object | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self.clock() >= entry.expires_at:
            del self._entries[key]
            return None
        return entry.value

    def set(self, key: str, value: object, ttl_seconds: int) -> None:
        expires_at = self.clock() + timedelta(seconds=ttl_seconds)
        self._entries[key] = _Entry(value=value, expires_at=expires_at)

    def invalidate(self, prefix: str = "") -> None:
        for key in [key for key in self._entries if key.startswith(prefix)]:
            del self._entries[key]
