"""
Configuration - Environment-driven settings.

    GRIMHAND_ENV              development | production
    GRIMHAND_LOG_LEVEL        logging level name (INFO)
    ALLOWED_ORIGINS           comma-separated CORS origins (*)
    GRIMHAND_DEFAULT_FORMULA  formula new sheets start with
"""

from __future__ import annotations
from dataclasses import dataclass, field
import os

from .engine_core.expression import DEFAULT_FORMULA


@dataclass(frozen=True)
class Settings:
    env: str = "development"
    log_level: str = "INFO"
    allowed_origins: list[str] = field(default_factory=lambda: ["*"])
    default_formula: str = DEFAULT_FORMULA

    @classmethod
    def from_env(cls) -> Settings:
        origins = os.getenv("ALLOWED_ORIGINS", "*")
        return cls(
            env=os.getenv("GRIMHAND_ENV", "development"),
            log_level=os.getenv("GRIMHAND_LOG_LEVEL", "INFO"),
            allowed_origins=[o.strip() for o in origins.split(",") if o.strip()],
            default_formula=os.getenv("GRIMHAND_DEFAULT_FORMULA", DEFAULT_FORMULA),
        )


settings = Settings.from_env()
