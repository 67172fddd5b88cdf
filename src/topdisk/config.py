"""Dashboard configuration."""

from __future__ import annotations

from pydantic import BaseModel, Field, ValidationError

from topdisk.exceptions import ConfigError

DEFAULT_COUNT = 10
DEFAULT_INTERVAL_MS = 1000
# Roughly seven spinner frames per second
DEFAULT_PULSE_MS = 142


class DashboardConfig(BaseModel):
    """Settings fixed for the lifetime of a dashboard session."""
    model_config = {"frozen": True}

    count: int = Field(default=DEFAULT_COUNT, gt=0, description="Maximum rows shown")
    interval_ms: int = Field(
        default=DEFAULT_INTERVAL_MS,
        gt=0,
        description="Nominal sampling period used for all rate math",
    )
    pulse_ms: int = Field(default=DEFAULT_PULSE_MS, gt=0)

    @classmethod
    def build(cls, **values: object) -> DashboardConfig:
        """Validate settings, raising ConfigError instead of ValidationError."""
        try:
            return cls(**values)
        except ValidationError as exc:
            errors = "; ".join(
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
            )
            raise ConfigError(f"Invalid configuration: {errors}") from exc
