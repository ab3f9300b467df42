"""Cooldown and chance gate for emote echoes.

The gate owns one cooldown timestamp shared by every emote. On a fire the
timestamp is stamped immediately, before the delayed send runs, so triggers
evaluated during the send delay cannot pass the cooldown a second time.

If the send later fails, `rollback()` forgets the timestamp so the next
qualifying trigger may fire at once. The usage reset that accompanied the fire
is not restored; callers should not expect a failed send to give the emote
its chatters back.
"""

from __future__ import annotations

import enum
import random
import time
from typing import Callable, Optional

from ..config.settings import EngineConfig


Clock = Callable[[], float]
Uniform01 = Callable[[], float]


class GateDecision(enum.Enum):
    BELOW_THRESHOLD = "below_threshold"
    COOLDOWN = "cooldown"
    CHANCE_MISS = "chance_miss"
    FIRE = "fire"

    @property
    def fired(self) -> bool:
        return self is GateDecision.FIRE


class ResponseGate:
    """Decide whether a trigger with `distinct_count` chatters may fire now.

    Checks run in order: distinct-user threshold, cooldown, then a uniform
    draw against `response_chance`. Rejections leave the gate untouched.
    """

    def __init__(
        self,
        config: EngineConfig,
        clock: Clock = time.monotonic,
        uniform01: Uniform01 = random.random,
    ) -> None:
        self.config = config
        self._clock = clock
        self._uniform01 = uniform01
        self.last_response_at: Optional[float] = None

    def now(self) -> float:
        return self._clock()

    def uniform01(self) -> float:
        return self._uniform01()

    def cooldown_remaining(self) -> float:
        if self.last_response_at is None:
            return 0.0
        elapsed = self._clock() - self.last_response_at
        return max(0.0, self.config.cooldown_seconds - elapsed)

    def evaluate(self, distinct_count: int) -> GateDecision:
        if distinct_count < self.config.min_distinct_users:
            return GateDecision.BELOW_THRESHOLD

        now = self._clock()
        if self.last_response_at is not None and now - self.last_response_at < self.config.cooldown_seconds:
            return GateDecision.COOLDOWN

        if self._uniform01() >= self.config.response_chance:
            return GateDecision.CHANCE_MISS

        self.last_response_at = now
        return GateDecision.FIRE

    def rollback(self) -> None:
        """Treat the gate as never having responded."""
        self.last_response_at = None
