"""Tokenize chat messages and resolve tokens against the emote catalog."""

from __future__ import annotations

from typing import List, Optional

from .catalog import Emote, EmoteCatalog


PUNCTUATION = ".,!?;:()[]{}'\""
_STRIP_TABLE = str.maketrans("", "", PUNCTUATION)


def clean_token(token: str) -> str:
    """Drop every punctuation character in `PUNCTUATION`, keeping case."""
    return token.translate(_STRIP_TABLE)


class EmoteMatcher:
    """Finds catalog emotes in a message, one result per matching token.

    Exact case wins. Otherwise the case-folded group is consulted: a single
    entry is used directly, several entries prefer the one spelled like the
    token and fall back to the first loaded.
    """

    def __init__(self, catalog: EmoteCatalog) -> None:
        self.catalog = catalog

    def match(self, message: str) -> List[Emote]:
        found: List[Emote] = []
        for word in message.split():
            token = clean_token(word)
            if not token:
                continue
            emote = self.resolve(token)
            if emote is not None:
                found.append(emote)
        return found

    def resolve(self, token: str) -> Optional[Emote]:
        exact = self.catalog.lookup_exact(token)
        if exact is not None:
            return exact

        candidates = self.catalog.lookup_fold(token)
        if not candidates:
            return None
        if len(candidates) == 1:
            return candidates[0]
        for emote in candidates:
            if emote.name == token:
                return emote
        return candidates[0]
