"""Shared session state and notifications.

Holds the flags a transport or dashboard may want to observe (whether the
session is active, how many emotes are loaded, how many echoes were sent).
Listeners are called synchronously on every change.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, List

from loguru import logger


StateListener = Callable[[str, Any], None]


@dataclass
class SessionState:
    """Container for mutable session state with change notifications."""

    active: bool = False
    emote_count: int = 0
    responses_sent: int = 0
    send_failures: int = 0

    _listeners: List[StateListener] = field(default_factory=list)

    def add_listener(self, listener: StateListener) -> None:
        """Register a listener for state change notifications."""
        self._listeners.append(listener)

    def _notify(self, event: str, value: Any) -> None:
        for listener in list(self._listeners):
            try:
                listener(event, value)
            except Exception as exc:  # pragma: no cover - listener bugs must not stop chat handling
                logger.warning(f"State listener error: {exc}")

    def set_active(self, value: bool) -> None:
        prev = self.active
        self.active = bool(value)
        if prev != self.active:
            logger.info(f"active set to {self.active}")
            self._notify("active_changed", self.active)

    def set_emote_count(self, count: int) -> None:
        prev = self.emote_count
        self.emote_count = int(count)
        if prev != self.emote_count:
            logger.debug(f"emote_count set to {self.emote_count}")
            self._notify("emote_count_changed", self.emote_count)

    def record_sent(self) -> None:
        self.responses_sent += 1
        self._notify("response_sent", self.responses_sent)

    def record_send_failure(self) -> None:
        self.send_failures += 1
        self._notify("send_failed", self.send_failures)
