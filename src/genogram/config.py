"""Application configuration using Pydantic Settings."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Core engine settings, overridable through GENOGRAM_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="GENOGRAM_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    history_limit: int = Field(default=50, ge=1)
    # Outward margin (in canvas units) applied to household boundaries before containment.
    membership_buffer: float = Field(default=0.0, ge=0.0)
    cascade_child_edges: bool = True
    log_level: str = "WARNING"


settings = Settings()
