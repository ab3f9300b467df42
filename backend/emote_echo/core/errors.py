"""Exception hierarchy shared across the backend."""

from __future__ import annotations


class EmoteEchoError(Exception):
    """Base class for all errors raised by this package."""


class ConfigError(EmoteEchoError):
    """Configuration is missing or holds values outside their allowed range."""


class EmoteSourceError(EmoteEchoError):
    """An emote provider could not be reached or returned an unusable body."""

    def __init__(self, provider: str, message: str, status_code: int | None = None) -> None:
        self.provider = provider
        self.status_code = status_code
        super().__init__(f"[{provider}] {message}")
