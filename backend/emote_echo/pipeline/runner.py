"""Session runner: feeds chat into the engine, sends echoes, refreshes emotes."""

from __future__ import annotations

import asyncio
import contextlib
from typing import Optional, Set

from loguru import logger

from ..config.settings import EngineConfig, Settings
from ..core.errors import EmoteSourceError
from ..core.logging import setup_logging
from ..core.state import SessionState
from ..emotes.engine import EmoteEngine, ResponseIntent
from ..integrations.base import ChatTransport, EmoteSource
from ..integrations.seventv import SevenTVEmoteSource


class EmoteSession:
    """Coordinates one channel's engine with a chat transport and emote source.

    The transport calls `on_message` for every chat line and the liveness
    watcher calls `start()` / `stop()`. Echoes are sent after the intent's
    delay in their own task; the engine's cooldown was already stamped when
    the intent was produced.
    """

    def __init__(
        self,
        engine: EmoteEngine,
        transport: ChatTransport,
        source: EmoteSource,
        state: Optional[SessionState] = None,
        owns_source: bool = False,
    ) -> None:
        self.engine = engine
        self.transport = transport
        self.source = source
        self.owns_source = owns_source
        self.state = state or SessionState()
        self._refresh_task: Optional[asyncio.Task] = None
        self._send_tasks: Set[asyncio.Task] = set()

    @property
    def config(self) -> EngineConfig:
        return self.engine.config

    async def start(self) -> None:
        """Activate the engine, load emotes now, then refresh on an interval."""
        if self.engine.active:
            return
        self.engine.start()
        self.state.set_active(True)
        logger.info(f"Monitoring channel: {self.engine.channel}")
        await self.refresh_emotes()
        self._refresh_task = asyncio.create_task(self._refresh_loop())

    async def stop(self) -> None:
        if not self.engine.active:
            return
        self.engine.stop()
        self.state.set_active(False)
        task, self._refresh_task = self._refresh_task, None
        if task is not None:
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task

    async def aclose(self) -> None:
        """Stop the session and close the emote source if this session created it."""
        await self.stop()
        if self.owns_source:
            aclose = getattr(self.source, "aclose", None)
            if aclose is not None:
                await aclose()

    async def refresh_emotes(self) -> bool:
        """Fetch emotes and swap the catalog; failures keep the old one."""
        try:
            emotes = await self.source.fetch_emotes(self.engine.channel)
        except EmoteSourceError as exc:
            logger.error(f"Error fetching emotes: {exc}")
            return False
        replaced = self.engine.refresh_catalog(emotes)
        self.state.set_emote_count(len(self.engine.catalog))
        return replaced

    async def _refresh_loop(self) -> None:
        while True:
            await asyncio.sleep(self.config.refresh_interval_seconds)
            logger.debug("Refreshing emotes...")
            await self.refresh_emotes()

    def on_message(self, username: str, text: str, is_self: bool = False) -> Optional[ResponseIntent]:
        """Handle one chat line; schedules the delayed echo when an emote fires.

        Must be called from inside the running event loop. Without one the
        fired intent cannot be scheduled: the cooldown is rolled back and the
        RuntimeError propagates.
        """
        if is_self:
            return None
        logger.log("CHAT", f"[CHAT] [{self.engine.channel}] <{username}> {text}")
        intent = self.engine.handle_message(username, text, is_self=is_self)
        if intent is not None:
            delivery = self._deliver(intent)
            try:
                task = asyncio.create_task(delivery)
            except RuntimeError:
                delivery.close()
                self.engine.send_failed(intent)
                raise
            self._send_tasks.add(task)
            task.add_done_callback(self._send_tasks.discard)
        return intent

    async def wait_for_sends(self) -> None:
        """Wait until every scheduled echo has been attempted."""
        while self._send_tasks:
            await asyncio.gather(*list(self._send_tasks))

    async def _deliver(self, intent: ResponseIntent) -> None:
        await asyncio.sleep(intent.delay_seconds)
        try:
            ok = await self.transport.send(intent.channel, intent.text)
        except Exception as exc:
            logger.error(f"Error sending message: {exc}")
            ok = False
        if ok is False:
            self.engine.send_failed(intent)
            self.state.record_send_failure()
            return
        self.state.record_sent()
        logger.log("SEND", f'[SEND] {intent.trigger_user}: "{intent.trigger_message}" -> "{intent.text}"')


def create_session(settings: Settings, transport: ChatTransport, state: Optional[SessionState] = None) -> EmoteSession:
    """Build a session for `settings.channel` backed by the 7TV emote source."""
    setup_logging(debug=settings.debug)
    engine = EmoteEngine(
        channel=settings.channel,
        config=settings.engine_config(),
        bot_name=settings.username,
    )
    source = SevenTVEmoteSource(client_id=settings.client_id, oauth=settings.oauth)
    return EmoteSession(engine, transport, source, state=state, owns_source=True)
