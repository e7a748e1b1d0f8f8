"""
Catpoint configuration using Pydantic Settings.

Read from CATPOINT_* environment variables; every field has a default so
the service starts with no environment at all.
"""

from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class SecurityConfig(BaseSettings):
    """Runtime configuration for the control API."""

    model_config = SettingsConfigDict(
        env_prefix="CATPOINT_",
        env_ignore_empty=True,
        case_sensitive=False,
    )

    # Persistence (None = in-memory only)
    state_file: Optional[str] = Field(default=None, description="JSON state file path")

    # Fake detector seed (None = nondeterministic)
    detector_seed: Optional[int] = Field(default=None, description="Fake detector seed")

    # Event log
    max_events: int = Field(default=100, ge=0, description="Notifications kept in the event log")

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")

    # Server
    host: str = Field(default="0.0.0.0", description="API host")
    port: int = Field(default=8080, ge=0, le=65535, description="API port")

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.upper() if isinstance(v, str) else v
