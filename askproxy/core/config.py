"""
Application configuration (env, settings, constants).

Responsibility: Centralize config loading, environment variables, and app-wide
constants. Keeps the rest of the app decoupled from how config is sourced.
Settings are read from the environment on each call to Settings.from_env(), so
the process environment is the single source and nothing here is mutated.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# Default model identifiers (override with VISION_MODEL_ID / TARGET_MODEL_ID)
VISION_MODEL_ID_DEFAULT: str = "google/gemini-2.0-flash-001"
TARGET_MODEL_ID_DEFAULT: str = "accounts/fireworks/models/deepseek-r1"

# Generation parameters per stage
VISION_MAX_TOKENS: int = 2048
VISION_TEMPERATURE: float = 0.2
REASONING_MAX_TOKENS: int = 3000
REASONING_TEMPERATURE: float = 0.6
DIRECT_MAX_TOKENS: int = 3000
DIRECT_TEMPERATURE: float = 0.7

# API timeouts (seconds)
AI_API_TIMEOUT: float = 60.0

# Profile store (relative to cwd unless absolute)
PROFILE_DB_PATH: str = "data/profiles.db"


def _env(name: str, default: str = "") -> str:
    return (os.getenv(name, default) or "").strip()


def _env_float(name: str, default: float) -> float:
    raw = _env(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


@dataclass(frozen=True)
class ModelParams:
    """Model id and generation parameters for one upstream call."""

    model: str
    max_tokens: int
    temperature: float


@dataclass(frozen=True)
class Settings:
    """Immutable per-process configuration injected into the pipeline."""

    ai_api_url: str = ""
    ai_api_key: str = ""
    worker_api_key: str = ""
    vision: ModelParams = field(
        default_factory=lambda: ModelParams(VISION_MODEL_ID_DEFAULT, VISION_MAX_TOKENS, VISION_TEMPERATURE)
    )
    reasoning: ModelParams = field(
        default_factory=lambda: ModelParams(TARGET_MODEL_ID_DEFAULT, REASONING_MAX_TOKENS, REASONING_TEMPERATURE)
    )
    direct: ModelParams = field(
        default_factory=lambda: ModelParams(TARGET_MODEL_ID_DEFAULT, DIRECT_MAX_TOKENS, DIRECT_TEMPERATURE)
    )
    timeout: float = AI_API_TIMEOUT
    host_os: str | None = None
    profile_db_path: Path = Path(PROFILE_DB_PATH)

    @property
    def provider_configured(self) -> bool:
        return bool(self.ai_api_url and self.ai_api_key)

    @classmethod
    def from_env(cls) -> "Settings":
        vision_model = _env("VISION_MODEL_ID") or VISION_MODEL_ID_DEFAULT
        target_model = _env("TARGET_MODEL_ID") or TARGET_MODEL_ID_DEFAULT
        return cls(
            ai_api_url=_env("CUSTOM_AI_API_URL"),
            ai_api_key=_env("CUSTOM_AI_API_KEY"),
            worker_api_key=_env("WORKER_API_KEY"),
            vision=ModelParams(vision_model, VISION_MAX_TOKENS, VISION_TEMPERATURE),
            reasoning=ModelParams(target_model, REASONING_MAX_TOKENS, REASONING_TEMPERATURE),
            direct=ModelParams(target_model, DIRECT_MAX_TOKENS, DIRECT_TEMPERATURE),
            timeout=_env_float("AI_API_TIMEOUT", AI_API_TIMEOUT),
            host_os=_env("HOST_OS_LABEL") or None,
            profile_db_path=Path(_env("PROFILE_DB_PATH") or PROFILE_DB_PATH),
        )


def get_settings() -> Settings:
    """FastAPI dependency: current settings from the environment."""
    return Settings.from_env()
