"""7TV channel emote provider.

Resolves the channel's Twitch user id through Helix (when credentials are
configured), looks the user up on 7TV, and loads the active emote set. The
lookup tolerates the several response shapes 7TV has served for user objects:

- `emote_set.id` on the user,
- `emote_sets[0].id`,
- `connections[*].emote_set.id`,
- or no set at all, in which case `/users/{id}/emotes` is tried directly.

A 404 anywhere in the chain means the channel has no 7TV presence and yields an
empty list. Other HTTP or transport failures raise `EmoteSourceError`.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import httpx
from loguru import logger

from ..core.errors import EmoteSourceError
from ..emotes.catalog import Emote


SEVENTV_API = "https://7tv.io/v3"
HELIX_API = "https://api.twitch.tv/helix"


def parse_emote(entry: Dict[str, Any]) -> Optional[Emote]:
    """Turn a 7TV emote entry into an Emote, or None if it has no name."""
    data = entry.get("data") or {}
    name = entry.get("name") or data.get("name")
    if not name:
        return None
    return Emote(
        name=str(name),
        id=str(entry.get("id") or data.get("id") or ""),
        animated=bool(data.get("animated") or entry.get("animated") or False),
    )


def find_emote_set_id(user: Dict[str, Any]) -> Optional[str]:
    emote_set = user.get("emote_set") or {}
    if emote_set.get("id"):
        return str(emote_set["id"])
    sets = user.get("emote_sets") or []
    if sets and sets[0].get("id"):
        return str(sets[0]["id"])
    for connection in user.get("connections") or []:
        conn_set = (connection or {}).get("emote_set") or {}
        if conn_set.get("id"):
            return str(conn_set["id"])
    return None


class SevenTVEmoteSource:
    """Fetches a channel's 7TV emotes over httpx."""

    def __init__(
        self,
        client_id: Optional[str] = None,
        oauth: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 10.0,
    ) -> None:
        self.client_id = client_id
        self.bearer = oauth.replace("oauth:", "") if oauth else None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def fetch_emotes(self, channel: str) -> List[Emote]:
        login = channel.lower()
        logger.log("EMOTES", f"Fetching 7TV emotes for channel: {channel}...")
        try:
            return await self._fetch(login)
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            if status == 404:
                logger.warning(
                    f"Channel {channel} not found on 7TV or has no emotes "
                    f"(check https://7tv.io/users/{login})"
                )
                return []
            raise EmoteSourceError("7tv", f"HTTP {status} {exc.response.reason_phrase}", status) from exc
        except httpx.HTTPError as exc:
            raise EmoteSourceError("7tv", str(exc) or exc.__class__.__name__) from exc
        except ValueError as exc:
            raise EmoteSourceError("7tv", f"malformed response: {exc}") from exc

    async def _fetch(self, login: str) -> List[Emote]:
        twitch_id = await self.get_twitch_user_id(login)
        if twitch_id:
            logger.debug(f"Found Twitch ID for {login}: {twitch_id}")
            try:
                user = await self._get_json(f"{SEVENTV_API}/users/twitch/{twitch_id}")
            except httpx.HTTPError:
                user = await self._get_json(f"{SEVENTV_API}/users/twitch/{login}")
        else:
            user = await self._get_json(f"{SEVENTV_API}/users/twitch/{login}")

        if not isinstance(user, dict) or not user:
            return []

        set_id = find_emote_set_id(user)

        if not set_id and user.get("id"):
            try:
                direct = await self._get_json(f"{SEVENTV_API}/users/{user['id']}/emotes")
            except httpx.HTTPError as exc:
                logger.debug(f"Direct emotes fetch failed: {exc}")
            else:
                if isinstance(direct, list) and direct:
                    emotes = self._parse_all(direct)
                    logger.log("EMOTES", f"Loaded {len(emotes)} 7TV emotes for {login} (direct method)")
                    return emotes

        if set_id:
            body = await self._get_json(f"{SEVENTV_API}/emote-sets/{set_id}")
            entries = body.get("emotes") if isinstance(body, dict) else body
            if isinstance(entries, list) and entries:
                emotes = self._parse_all(entries)
                logger.log("EMOTES", f"Loaded {len(emotes)} 7TV emotes for {login}")
                return emotes

        logger.warning(f"No 7TV emotes found for {login}; make sure the channel has 7TV enabled")
        return []

    async def get_twitch_user_id(self, login: str) -> Optional[str]:
        """Resolve a login to a Twitch user id, or None when Helix is unavailable."""
        if not self.client_id:
            return None
        attempts = []
        if self.bearer:
            attempts.append({"Client-ID": self.client_id, "Authorization": f"Bearer {self.bearer}"})
        attempts.append({"Client-ID": self.client_id})

        for headers in attempts:
            try:
                r = await self._client.get(f"{HELIX_API}/users", params={"login": login}, headers=headers)
                r.raise_for_status()
                arr = r.json().get("data") or []
            except (httpx.HTTPError, ValueError) as exc:
                logger.debug(f"Helix user lookup failed ({', '.join(headers)}): {exc}")
                continue
            return str(arr[0]["id"]) if arr else None
        return None

    async def _get_json(self, url: str) -> Any:
        r = await self._client.get(url)
        r.raise_for_status()
        return r.json()

    @staticmethod
    def _parse_all(entries: List[Any]) -> List[Emote]:
        emotes = (parse_emote(e) for e in entries if isinstance(e, dict))
        return [e for e in emotes if e is not None]
