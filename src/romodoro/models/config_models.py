"""Configuration models for Romodoro.

The configuration is a single pydantic model persisted as JSON by
``ConfigService``.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator


class TimerConfig(BaseModel):
    """Timer loop configuration."""

    tick_interval: float = Field(
        default=1.0, gt=0, description="Wall-clock seconds between ticks"
    )
    refresh_per_second: int = Field(default=4, ge=1, le=30)
    bell: bool = Field(default=True, description="Ring the terminal bell on phase end")


class StorageConfig(BaseModel):
    """Session database configuration."""

    database_path: str | None = Field(
        default=None, description="SQLite file; defaults to the user data dir"
    )
    reconcile_on_startup: bool = Field(
        default=True,
        description="Close splits left in progress by an abnormal exit",
    )

    @field_validator("database_path")
    @classmethod
    def validate_database_path(cls, v: str | None) -> str | None:
        """Treat blank paths as unset."""
        if v is None or not v.strip():
            return None
        return v.strip()


class AppConfig(BaseModel):
    """Main Romodoro configuration."""

    timer: TimerConfig = Field(default_factory=TimerConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    session_name_format: str = Field(
        default="Session_%Y-%m-%d_%H-%M-%S",
        description="strftime pattern for generated session names",
    )

    def get_value(self, key: str):
        """Read a dotted key such as ``timer.bell``."""
        target = self
        for part in key.split("."):
            if not isinstance(target, BaseModel) or part not in type(target).model_fields:
                raise ValueError(f"Unknown config key '{key}'")
            target = getattr(target, part)
        return target

    def set_value(self, key: str, value) -> AppConfig:
        """Return a validated copy with a dotted key replaced."""
        self.get_value(key)
        data = self.model_dump()
        parts = key.split(".")
        node = data
        for part in parts[:-1]:
            node = node[part]
        node[parts[-1]] = value
        return AppConfig.model_validate(data)
