"""Per-channel emote engine: match, count distinct chatters, gate, respond."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Optional

from loguru import logger

from ..config.settings import EngineConfig
from .catalog import Emote, EmoteCatalog
from .gate import GateDecision, ResponseGate
from .matcher import EmoteMatcher
from .usage import UsageTracker


@dataclass(frozen=True)
class ResponseIntent:
    """An echo the transport should send after `delay_seconds`."""

    channel: str
    text: str
    emote: Emote
    trigger_user: str
    trigger_message: str
    delay_seconds: float


class EmoteEngine:
    """Wires catalog, matcher, usage tracker and gate for one channel.

    Messages are handled one at a time. At most one emote per message fires;
    the rest of that message's matches are not recorded once it does.
    """

    def __init__(
        self,
        channel: str,
        config: Optional[EngineConfig] = None,
        bot_name: Optional[str] = None,
        catalog: Optional[EmoteCatalog] = None,
        tracker: Optional[UsageTracker] = None,
        gate: Optional[ResponseGate] = None,
    ) -> None:
        self.channel = channel
        self.config = config or EngineConfig()
        self.bot_name = (bot_name or "").lower()
        self.catalog = catalog or EmoteCatalog()
        self.matcher = EmoteMatcher(self.catalog)
        self.gate = gate or ResponseGate(self.config)
        self.tracker = tracker or UsageTracker(
            window_seconds=self.config.usage_window_seconds, clock=self.gate.now
        )
        self._active = False

    @property
    def active(self) -> bool:
        return self._active

    def start(self) -> None:
        self._active = True

    def stop(self) -> None:
        # Catalog and usage survive a stop so a restart resumes where it left off
        self._active = False

    def refresh_catalog(self, emotes: Iterable[Any]) -> bool:
        return self.catalog.refresh(emotes)

    def handle_message(self, username: str, text: str, is_self: bool = False) -> Optional[ResponseIntent]:
        """Process one chat line and return a response intent if an emote fired."""
        if not self._active or is_self:
            return None
        if self.bot_name and username.lower() == self.bot_name:
            return None

        for emote in self.matcher.match(text):
            count = self.tracker.record(emote.key, username)
            decision = self.gate.evaluate(count)
            if decision is GateDecision.BELOW_THRESHOLD:
                continue
            logger.log("HIT", f"[HIT] {emote.name} used by {count} chatters in #{self.channel}: {decision.value}")
            if decision.fired:
                self.tracker.reset(emote.key)
                return ResponseIntent(
                    channel=self.channel,
                    text=emote.name,
                    emote=emote,
                    trigger_user=username,
                    trigger_message=text,
                    delay_seconds=self._draw_delay(),
                )
        return None

    def send_failed(self, intent: ResponseIntent) -> None:
        """Re-open the cooldown after a failed send; the usage reset stays."""
        logger.warning(f"Send of {intent.text!r} to #{intent.channel} failed; cooldown rolled back")
        self.gate.rollback()

    def _draw_delay(self) -> float:
        lo, hi = self.config.send_delay_range
        return lo + (hi - lo) * self.gate.uniform01()
