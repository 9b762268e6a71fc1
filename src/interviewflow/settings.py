from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from .errors import ConfigurationError

DEFAULT_MODEL = "claude-3-5-haiku-latest"
_PLACEHOLDER_KEYS = {"", "your-key-here"}
_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True, slots=True)
class EngineSettings:
    api_key: str | None = None
    model: str = DEFAULT_MODEL
    offline_mode: bool = False
    request_timeout: float = 30.0
    max_tokens: int = 512

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key) and self.api_key not in _PLACEHOLDER_KEYS

    @classmethod
    def from_env(cls, env_file: Path | str | None = None) -> "EngineSettings":
        """Read settings from the environment, after loading ``env_file`` (or ./.env) if present."""
        if env_file is not None:
            load_dotenv(env_file)
        else:
            load_dotenv()

        api_key = os.environ.get("ANTHROPIC_API_KEY", "").strip()
        return cls(
            api_key=None if api_key in _PLACEHOLDER_KEYS else api_key,
            model=os.environ.get("INTERVIEWFLOW_MODEL", "").strip() or DEFAULT_MODEL,
            offline_mode=os.environ.get("INTERVIEWFLOW_OFFLINE", "").strip().lower() in _TRUTHY,
            request_timeout=_number_from_env("INTERVIEWFLOW_TIMEOUT", 30.0, float),
            max_tokens=_number_from_env("INTERVIEWFLOW_MAX_TOKENS", 512, int),
        )


def _number_from_env(name: str, default, cast):
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        value = cast(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from None
    if value <= 0:
        raise ConfigurationError(f"{name} must be positive, got {raw!r}")
    return value
