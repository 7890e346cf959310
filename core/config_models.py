"""Configuration models for the change filter runtime."""

from __future__ import annotations

from enum import StrEnum
from uuid import uuid4

from pydantic import BaseModel, Field, model_validator

FALLBACK_INTERVAL = 10
FALLBACK_DEADBAND = 0.1


class Environment(StrEnum):
    """Runtime environment modes."""

    DEVELOPMENT = "development"
    PRODUCTION = "production"


class LogLevel(StrEnum):
    """Supported logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


class SystemConfig(BaseModel):
    """Global system configuration."""

    run_id: str | None = None
    environment: Environment = Environment.DEVELOPMENT
    log_level: LogLevel = LogLevel.INFO
    log_dir: str = "./logs"

    @model_validator(mode="after")
    def ensure_run_id(self) -> SystemConfig:
        if not self.run_id:
            self.run_id = str(uuid4())
        return self


class StreamFilterConfig(BaseModel):
    """Per-stream interval and deadband defaults."""

    interval: float | None = Field(default=None, gt=0)
    deadband: float | None = Field(default=None, ge=0)


class FilterConfig(BaseModel):
    """Change filter settings.

    ``fallback_*`` apply when neither the message nor the stream state carries a
    value. ``default_*`` seed the state of every stream without its own entry
    under ``streams``.
    """

    fallback_interval: float = Field(default=FALLBACK_INTERVAL, gt=0)
    fallback_deadband: float = Field(default=FALLBACK_DEADBAND, ge=0)
    default_interval: float | None = Field(default=None, gt=0)
    default_deadband: float | None = Field(default=None, ge=0)
    streams: dict[str, StreamFilterConfig] = Field(default_factory=dict)

    def stream_defaults(self, stream_id: str) -> StreamFilterConfig:
        """Resolve the interval/deadband a new stream state starts with."""

        override = self.streams.get(stream_id)
        if override is None:
            return StreamFilterConfig(interval=self.default_interval, deadband=self.default_deadband)
        return StreamFilterConfig(
            interval=override.interval if override.interval is not None else self.default_interval,
            deadband=override.deadband if override.deadband is not None else self.default_deadband,
        )


class RootConfig(BaseModel):
    """Root merged configuration."""

    system: SystemConfig = Field(default_factory=SystemConfig)
    filter: FilterConfig = Field(default_factory=FilterConfig)


for model in (
    SystemConfig,
    StreamFilterConfig,
    FilterConfig,
    RootConfig,
):
    model.model_config = {"extra": "forbid"}
    model.model_rebuild(force=True)
