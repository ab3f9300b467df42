"""Emote trend detection and response gating.

Catalog -> matcher -> usage tracker -> response gate, composed by the engine.
"""

from .catalog import Emote, EmoteCatalog
from .engine import EmoteEngine, ResponseIntent
from .gate import GateDecision, ResponseGate
from .matcher import EmoteMatcher
from .usage import UsageTracker

__all__ = [
    "Emote",
    "EmoteCatalog",
    "EmoteEngine",
    "EmoteMatcher",
    "GateDecision",
    "ResponseGate",
    "ResponseIntent",
    "UsageTracker",
]
