from __future__ import annotations

import os
import time
from collections.abc import Callable
from dataclasses import dataclass


@dataclass
class _Entry:
    is_admin: bool
    stored_at: float


class AdminStatusCache:
    """Memoizes "is this profile an admin" lookups.

    Entries expire after ``ttl_seconds`` and are dropped explicitly on sign-out, so a
    role change is picked up no later than one TTL after it happens.
    """

    def __init__(self, ttl_seconds: float, clock: Callable[[], float] = time.monotonic) -> None:
        self._ttl = ttl_seconds
        self._clock = clock
        self._entries: dict[str, _Entry] = {}

    def get(self, profile_id: str) -> bool | None:
        entry = self._entries.get(profile_id)
        if entry is None:
            return None
        if self._clock() - entry.stored_at >= self._ttl:
            del self._entries[profile_id]
            return None
        return entry.is_admin

    def set(self, profile_id: str, is_admin: bool) -> None:
        self._entries[profile_id] = _Entry(is_admin=is_admin, stored_at=self._clock())

    def invalidate(self, profile_id: str) -> None:
        self._entries.pop(profile_id, None)

    def clear(self) -> None:
        self._entries.clear()


def _default_ttl() -> float:
    raw = os.getenv("LUMIDUMI_ADMIN_CACHE_TTL_SECONDS", "300").strip()
    try:
        return max(0.0, float(raw))
    except ValueError:
        return 300.0


admin_cache = AdminStatusCache(ttl_seconds=_default_ttl())
