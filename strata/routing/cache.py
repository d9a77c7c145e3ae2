from __future__ import annotations

import threading
from collections.abc import Callable
from dataclasses import dataclass, field

from strata.types import RouteParams

CacheKey = tuple[str, str, str]


@dataclass(frozen=True, slots=True)
class MatchResult:
    matched: bool
    params: RouteParams = field(default_factory=dict)


NO_MATCH = MatchResult(matched=False)


class MatchCache:
    """
    Memoises match results per `(prefix, pattern, path)`.

    Entries are never invalidated: the same key always produces the same
    result. Writes are serialised with a lock; two dispatches racing on the
    same key may both compute it, and the first stored value is kept.
    """

    __slots__ = ("_entries", "_lock", "enabled")

    def __init__(self, enabled: bool = True) -> None:
        self._entries: dict[CacheKey, MatchResult] = {}
        self._lock = threading.Lock()
        self.enabled = enabled

    def get(self, key: CacheKey) -> MatchResult | None:
        return self._entries.get(key)

    def set(self, key: CacheKey, result: MatchResult) -> MatchResult:
        with self._lock:
            return self._entries.setdefault(key, result)

    def get_or_compute(self, key: CacheKey, compute: Callable[[], MatchResult]) -> MatchResult:
        if not self.enabled:
            return compute()

        cached = self.get(key)
        if cached is not None:
            return cached
        return self.set(key, compute())

    def __contains__(self, key: CacheKey) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)
