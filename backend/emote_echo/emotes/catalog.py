"""Channel emote catalog with exact-case and case-folded indices.

Both indices are built together into one immutable `_Index` and swapped in a
single assignment, so a lookup running alongside a refresh sees either the old
catalog or the new one, never a mix.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from loguru import logger


@dataclass(frozen=True)
class Emote:
    name: str
    id: str
    animated: bool = False

    @property
    def key(self) -> str:
        """Case-folded name used by the usage tracker."""
        return self.name.lower()

    @staticmethod
    def coerce(entry: Any) -> Optional["Emote"]:
        """Build an Emote from an Emote, a mapping or a `(name, id, animated)` tuple.

        Returns None for entries without a usable name or of any other shape.
        """
        if isinstance(entry, Emote):
            return entry
        if isinstance(entry, Mapping):
            name = entry.get("name")
            emote_id = entry.get("id")
            animated = entry.get("animated", False)
        elif isinstance(entry, (tuple, list)) and 1 <= len(entry) <= 3:
            name, emote_id, animated = (tuple(entry) + (None, False))[:3]
        else:
            return None
        if not name:
            return None
        return Emote(name=str(name), id=str(emote_id or ""), animated=bool(animated))


@dataclass(frozen=True)
class _Index:
    exact: Dict[str, Emote] = field(default_factory=dict)
    folded: Dict[str, Tuple[Emote, ...]] = field(default_factory=dict)


class EmoteCatalog:
    """Known emotes for one channel, replaced wholesale on every refresh."""

    def __init__(self) -> None:
        self._index = _Index()
        self.refreshed_at: Optional[float] = None

    def refresh(self, emotes: Iterable[Any]) -> bool:
        """Rebuild both indices from `emotes` and swap them in.

        An empty (or nameless) list leaves the current catalog untouched and
        returns False.
        """
        exact: Dict[str, Emote] = {}
        folded: Dict[str, List[Emote]] = {}
        for entry in emotes:
            emote = Emote.coerce(entry)
            if emote is None:
                continue
            exact[emote.name] = emote
            folded.setdefault(emote.key, []).append(emote)

        if not exact:
            logger.warning("No emotes found; keeping the previous catalog")
            return False

        self._index = _Index(
            exact=exact,
            folded={key: tuple(group) for key, group in folded.items()},
        )
        self.refreshed_at = time.time()
        logger.log("EMOTES", f"Catalog refreshed with {len(exact)} emotes")
        return True

    def lookup_exact(self, token: str) -> Optional[Emote]:
        return self._index.exact.get(token)

    def lookup_fold(self, token: str) -> Tuple[Emote, ...]:
        return self._index.folded.get(token.lower(), ())

    def names(self) -> List[str]:
        return list(self._index.exact)

    def __len__(self) -> int:
        return len(self._index.exact)

    def __contains__(self, name: object) -> bool:
        return name in self._index.exact
