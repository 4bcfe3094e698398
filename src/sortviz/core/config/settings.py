from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Global application-level configuration.

    This class is the single source of truth for:
    - environment selection
    - logging behavior
    - session defaults (size, speed, algorithm)
    - pacing knobs
    """

    model_config = SettingsConfigDict(
        env_prefix="SORTVIZ_",
        env_file=".env",
        extra="ignore",
    )

    # ---- Environment -------------------------------------------------

    env: Literal["local", "staging", "prod"] = "local"

    # ---- Logging -----------------------------------------------------

    log_level: str = "INFO"

    # "console" renders aligned, human-readable lines for watching a run in a terminal
    log_format: Literal["json", "console"] = "json"

    # ---- Session defaults --------------------------------------------

    default_size: int = Field(default=30, ge=5, le=200)
    default_speed_level: int = Field(default=5, ge=1, le=10)
    default_algorithm: Literal["bubble", "selection", "insertion", "merge", "quick", "radix"] = "bubble"

    # Fixed seed for sequence generation (None -> fresh entropy per session)
    seed: int | None = Field(
        default=None,
        description="Optional RNG seed for reproducible sequences",
    )

    # ---- Pacing ------------------------------------------------------

    # Multiplier applied to every pacing delay; 0 disables waiting entirely
    pace_scale: float = Field(default=1.0, ge=0.0)

    pause_poll_ms: int = Field(
        default=50,
        gt=0,
        description="Poll interval while a run is paused",
    )

    final_sweep_delay_ms: int = Field(
        default=30,
        ge=0,
        description="Per-element delay of the completion sweep",
    )


# Singleton settings object
settings = AppSettings()
