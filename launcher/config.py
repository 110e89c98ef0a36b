"""Configuration management using Pydantic Settings."""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Launcher settings."""

    # Bundled executable, relative to the function's working directory
    executable: str = "./uniqueport"

    # Unset means wait for as long as the host lets the invocation run
    timeout_sec: Optional[float] = None

    log_level: str = "INFO"

    # Safety bound for the event/context dumps
    dump_max_depth: int = 64

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_prefix="LAUNCHER_",
        extra="ignore",
    )


# Global settings instance
settings = Settings()
