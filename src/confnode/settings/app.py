"""Library settings powered by Pydantic BaseSettings."""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class LibrarySettings(BaseSettings):
    """Environment-driven defaults for codecs and logging."""

    model_config = SettingsConfigDict(
        env_prefix="CONFNODE_", case_sensitive=False, extra="ignore"
    )

    json_indent: int = Field(default=2, ge=0, le=16)
    yaml_indent: int = Field(default=2, ge=2, le=9)
    hocon_indent: int = Field(default=2, ge=0, le=16)
    default_codec: Literal["yaml", "json", "hocon"] = "yaml"
    log_level: str = "INFO"
    log_json: bool = True


def get_settings() -> LibrarySettings:
    """Get a settings instance."""
    return LibrarySettings()
