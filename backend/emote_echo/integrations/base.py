"""Interfaces the session expects from chat transports and emote providers."""

from __future__ import annotations

from typing import List, Optional, Protocol

from ..emotes.catalog import Emote


class ChatTransport(Protocol):
    """Sends chat lines. Return False (or raise) to report a failed send."""

    async def send(self, channel: str, text: str) -> Optional[bool]:  # pragma: no cover - interface
        ...


class EmoteSource(Protocol):
    """Supplies the current emote list for a channel."""

    async def fetch_emotes(self, channel: str) -> List[Emote]:  # pragma: no cover - interface
        ...
