from __future__ import annotations

from typing import List

import pytest

from emote_echo.config.settings import EngineConfig
from emote_echo.emotes.catalog import Emote, EmoteCatalog
from emote_echo.emotes.engine import EmoteEngine
from emote_echo.emotes.gate import ResponseGate
from emote_echo.emotes.usage import UsageTracker


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeRandom:
    """Returns queued values, then repeats `default`."""

    def __init__(self, default: float = 0.0) -> None:
        self.default = default
        self.queue: List[float] = []

    def __call__(self) -> float:
        if self.queue:
            return self.queue.pop(0)
        return self.default


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def rng() -> FakeRandom:
    return FakeRandom(0.0)


@pytest.fixture
def config() -> EngineConfig:
    return EngineConfig(response_chance=0.5, cooldown_seconds=30)


@pytest.fixture
def engine(config, clock, rng) -> EmoteEngine:
    catalog = EmoteCatalog()
    catalog.refresh([
        Emote("KEKW", "1"),
        Emote("PogU", "2", animated=True),
        Emote("Sadge", "3"),
    ])
    eng = EmoteEngine(
        channel="somechannel",
        config=config,
        bot_name="EchoBot",
        catalog=catalog,
        tracker=UsageTracker(clock=clock),
        gate=ResponseGate(config, clock=clock, uniform01=rng),
    )
    eng.start()
    return eng
