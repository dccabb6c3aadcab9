"""
Configuration - Runtime settings read from the environment.

Rule constants (hand size, deck size) live in engine_core.setup and are
not configurable.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import os


DEFAULT_AI_DELAY_SECONDS = 1.5
DEFAULT_SESSION_MAX_AGE_SECONDS = 3600


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}")


@dataclass
class Settings:
    """
    Settings for the engine, API and CLI.

    Usage:
        settings = Settings.from_env()
        loop = GameLoop(session, ai_delay=settings.ai_delay)
    """
    # Only "development" honors client-supplied deal seeds
    env: str = "production"
    # Seconds before the opponent acts, so its move reads as a decision
    ai_delay: float = DEFAULT_AI_DELAY_SECONDS
    log_level: str = "INFO"
    allowed_origins: list[str] = field(default_factory=lambda: ["*"])
    session_max_age: float = DEFAULT_SESSION_MAX_AGE_SECONDS

    @property
    def allows_client_seed(self) -> bool:
        return self.env == "development"

    @classmethod
    def from_env(cls) -> Settings:
        """Build settings from EIGHTS_* environment variables."""
        ai_delay = _float_env("EIGHTS_AI_DELAY", DEFAULT_AI_DELAY_SECONDS)
        if ai_delay < 0:
            raise ValueError("EIGHTS_AI_DELAY must not be negative")

        return cls(
            env=os.getenv("EIGHTS_ENV", "production"),
            ai_delay=ai_delay,
            log_level=os.getenv("EIGHTS_LOG_LEVEL", "INFO").upper(),
            allowed_origins=[
                origin.strip()
                for origin in os.getenv("ALLOWED_ORIGINS", "*").split(",")
                if origin.strip()
            ],
            session_max_age=_float_env(
                "EIGHTS_SESSION_MAX_AGE", DEFAULT_SESSION_MAX_AGE_SECONDS
            ),
        )
