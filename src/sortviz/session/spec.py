from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from sortviz.algorithms.registry import AlgorithmKind
from sortviz.core.config.settings import AppSettings
from sortviz.core.errors import InvalidConfiguration
from sortviz.sequence.emitter import delay_for_level

MIN_SIZE = 5
MAX_SIZE = 200


class SessionConfig(BaseModel):
    """
    Validated session configuration (what the presentation layer selects).
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    size: int = Field(default=30, ge=MIN_SIZE, le=MAX_SIZE, description="Number of elements to generate")
    speed_level: int = Field(default=5, ge=1, le=10, description="1 = slowest (500ms), 10 = fastest (5ms)")
    algorithm: AlgorithmKind = Field(default="bubble")

    @property
    def delay_ms(self) -> int:
        return delay_for_level(self.speed_level)

    @classmethod
    def from_settings(cls, settings: AppSettings) -> "SessionConfig":
        return cls(
            size=settings.default_size,
            speed_level=settings.default_speed_level,
            algorithm=settings.default_algorithm,
        )

    def updated(self, **changes: Any) -> "SessionConfig":
        """
        Return a validated copy with `changes` applied (None values ignored).
        """
        payload = self.model_dump()
        payload.update({k: v for k, v in changes.items() if v is not None})
        try:
            return SessionConfig.model_validate(payload)
        except ValidationError as exc:
            details = "; ".join(
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
            )
            raise InvalidConfiguration(f"invalid configuration: {details}") from exc
