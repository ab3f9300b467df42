"""Per-emote sets of distinct chatters.

Sightings persist until the emote fires and `reset` consumes them. With
`window_seconds` set, a chatter's sighting older than the window stops
counting; each repeat use refreshes that chatter's timestamp.
"""

from __future__ import annotations

import time
from typing import Callable, Dict, FrozenSet, Optional


Clock = Callable[[], float]


class UsageTracker:
    def __init__(self, window_seconds: Optional[float] = None, clock: Clock = time.monotonic) -> None:
        self.window_seconds = window_seconds
        self._clock = clock
        # emote key -> {username: last seen}
        self._usage: Dict[str, Dict[str, float]] = {}

    def record(self, emote_key: str, username: str) -> int:
        """Add `username` to the set for `emote_key` and return the distinct count."""
        if not emote_key or emote_key != emote_key.lower():
            raise ValueError(f"emote key must be a non-empty case-folded name, got {emote_key!r}")
        if not username:
            raise ValueError("username must be non-empty")

        now = self._clock()
        users = self._usage.setdefault(emote_key, {})
        users[username] = now
        if self.window_seconds is not None:
            self._prune(emote_key, now)
        return len(users)

    def reset(self, emote_key: str) -> None:
        """Clear the set for `emote_key` only."""
        self._usage.pop(emote_key, None)

    def count(self, emote_key: str) -> int:
        if self.window_seconds is not None and emote_key in self._usage:
            self._prune(emote_key, self._clock())
        return len(self._usage.get(emote_key, ()))

    def users(self, emote_key: str) -> FrozenSet[str]:
        if self.window_seconds is not None and emote_key in self._usage:
            self._prune(emote_key, self._clock())
        return frozenset(self._usage.get(emote_key, ()))

    def keys(self) -> FrozenSet[str]:
        return frozenset(self._usage)

    def _prune(self, emote_key: str, now: float) -> None:
        users = self._usage[emote_key]
        cutoff = now - self.window_seconds
        for name in [u for u, seen in users.items() if seen < cutoff]:
            del users[name]
        if not users:
            del self._usage[emote_key]
