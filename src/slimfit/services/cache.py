"""Expiring in-process cache for food lookups."""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Protocol


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


class Cache(Protocol):
    """Key-value cache with per-entry expiry."""

    def get(self, key: str) -> object | None:
        """Return the cached value, or ``None`` when missing or expired."""

    def set(self, key: str, value: object, ttl_seconds: int) -> None:
        """Store a value for ``ttl_seconds``."""


@dataclass
class _Slot:
    value: object
    expires_at: datetime


@dataclass
class InMemoryCache(Cache):
    """Dictionary-backed cache; the oldest entry is evicted when full."""

    max_entries: int = 1024
    clock: Callable[[], datetime] = _utcnow
    _slots: dict[str, _Slot] = field(default_factory=dict, init=False, repr=False)

    def get(self, key: str) -> object | None:
        slot = self._slots.get(key)
        if slot is None:
            return None
        if self.clock() >= slot.expires_at:
            del self._slots[key]
            return None
        return slot.value

    def set(self, key: str, value: object, ttl_seconds: int) -> None:
        self._slots.pop(key, None)
        if len(self._slots) >= self.max_entries:
            oldest = next(iter(self._slots))
            del self._slots[oldest]
        self._slots[key] = _Slot(
            value=value, expires_at=self.clock() + timedelta(seconds=ttl_seconds)
        )
