"""Application settings and configuration loading.

Responsibilities:
- Load environment variables (supports both repo root `.env` and `backend/.env`).
- Fall back to a YAML config file when the deployment env vars are absent.
- Provide the validated `EngineConfig` consumed by the emote engine.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml
from dotenv import load_dotenv
from loguru import logger

from ..core.errors import ConfigError


DEFAULT_RESPONSE_CHANCE = 0.1
DEFAULT_COOLDOWN_SECONDS = 30.0
MIN_USERS_FOR_RESPONSE = 3
DEFAULT_REFRESH_INTERVAL_SECONDS = 5 * 60


@dataclass(frozen=True)
class EngineConfig:
    """Tunable policy for matching, usage tracking and the response gate."""

    response_chance: float = DEFAULT_RESPONSE_CHANCE
    cooldown_seconds: float = DEFAULT_COOLDOWN_SECONDS
    min_distinct_users: int = MIN_USERS_FOR_RESPONSE
    # None keeps sightings until the emote fires; a number expires older ones
    usage_window_seconds: Optional[float] = None
    send_delay_range: Tuple[float, float] = (1.0, 2.0)
    refresh_interval_seconds: float = DEFAULT_REFRESH_INTERVAL_SECONDS

    def __post_init__(self) -> None:
        if not 0.0 <= self.response_chance <= 1.0:
            raise ConfigError(f"response_chance must be within [0, 1], got {self.response_chance}")
        if self.cooldown_seconds < 0:
            raise ConfigError(f"cooldown_seconds must be >= 0, got {self.cooldown_seconds}")
        if self.min_distinct_users < 1:
            raise ConfigError(f"min_distinct_users must be >= 1, got {self.min_distinct_users}")
        if self.usage_window_seconds is not None and self.usage_window_seconds <= 0:
            raise ConfigError(f"usage_window_seconds must be > 0, got {self.usage_window_seconds}")
        lo, hi = self.send_delay_range
        if lo < 0 or hi < lo:
            raise ConfigError(f"send_delay_range must be 0 <= low <= high, got {self.send_delay_range}")
        if self.refresh_interval_seconds <= 0:
            raise ConfigError(
                f"refresh_interval_seconds must be > 0, got {self.refresh_interval_seconds}"
            )


def _as_float(value: Any, default: float) -> float:
    """Parse a number from env/YAML, falling back to `default` when unusable."""
    if value is None or value == "":
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        logger.warning(f"Could not parse {value!r} as a number; using default {default}")
        return default


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value or "").strip().lower() in ("true", "1")


@dataclass
class Settings:
    """Runtime settings loaded from env or YAML config."""

    username: str
    oauth: str
    client_id: str
    channel: str
    response_chance: float = DEFAULT_RESPONSE_CHANCE
    cooldown_seconds: float = DEFAULT_COOLDOWN_SECONDS
    debug: bool = False
    source: str = field(default="env", compare=False)

    @property
    def bearer_token(self) -> str:
        """OAuth token without the IRC-style `oauth:` prefix."""
        return self.oauth.replace("oauth:", "")

    def engine_config(self) -> EngineConfig:
        return EngineConfig(
            response_chance=self.response_chance,
            cooldown_seconds=self.cooldown_seconds,
        )

    @staticmethod
    def load(config_path: Optional[Path] = None) -> "Settings":
        """Load settings from env, or from YAML when env is incomplete.

        Order of env loading:
        1) repo root `.env`
        2) `backend/.env`
        Existing env values take precedence over later files.

        Deployment env vars (`USERNAME`, `OAUTH`, `CLIENT_ID`) win when all
        three are set; otherwise a YAML file is read.
        """
        load_dotenv(Path(".env"))
        load_dotenv(Path("backend/.env"))

        if os.getenv("USERNAME") and os.getenv("OAUTH") and os.getenv("CLIENT_ID"):
            data: Dict[str, Any] = {
                "username": os.environ["USERNAME"],
                "oauth": os.environ["OAUTH"],
                "client_id": os.environ["CLIENT_ID"],
                "channel": os.getenv("CHANNEL"),
                "response_chance": os.getenv("RESPONSE_CHANCE"),
                "cooldown_seconds": os.getenv("COOLDOWN_SECONDS"),
                "debug": os.getenv("DEBUG"),
            }
            source = "env"
        else:
            path = Settings._find_config(config_path)
            data = Settings._read_yaml(path)
            source = str(path)

        return Settings.from_mapping(data, source=source)

    @staticmethod
    def from_mapping(data: Dict[str, Any], source: str = "mapping") -> "Settings":
        missing = [k for k in ("username", "oauth", "client_id") if not data.get(k)]
        if missing:
            raise ConfigError(f"Missing required field(s): {', '.join(missing)}")

        username = str(data["username"]).strip()
        settings = Settings(
            username=username,
            oauth=str(data["oauth"]).strip(),
            client_id=str(data["client_id"]).strip(),
            channel=str(data.get("channel") or username).strip(),
            response_chance=_as_float(data.get("response_chance"), DEFAULT_RESPONSE_CHANCE),
            cooldown_seconds=_as_float(data.get("cooldown_seconds"), DEFAULT_COOLDOWN_SECONDS),
            debug=_as_bool(data.get("debug")),
            source=source,
        )
        logger.info(
            f"Loaded settings from {source} (channel={settings.channel}, "
            f"chance={settings.response_chance}, cooldown={settings.cooldown_seconds}s)"
        )
        return settings

    @staticmethod
    def _find_config(config_path: Optional[Path]) -> Path:
        candidates: List[Path] = []
        if config_path is not None:
            candidates.append(Path(config_path))
        env_path = os.getenv("EMOTE_ECHO_CONFIG", "").strip()
        if env_path:
            candidates.append(Path(env_path).expanduser())
        candidates.extend([Path.cwd() / "config.yaml", Path.cwd() / "backend" / "config.yaml"])

        path = next((p for p in candidates if p.exists()), None)
        if path is None:
            logger.error("No configuration found. Checked: " + ", ".join(str(p) for p in candidates))
            raise ConfigError(
                "Either set USERNAME, OAUTH and CLIENT_ID environment variables or create config.yaml"
            )
        return path

    @staticmethod
    def _read_yaml(path: Path) -> Dict[str, Any]:
        try:
            with path.open("r", encoding="utf-8") as fp:
                data = yaml.safe_load(fp) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Failed to parse {path}: {exc}") from exc
        if not isinstance(data, dict):
            raise ConfigError(f"{path} must contain a mapping at the top level")
        return data
