"""Configuration management using Pydantic Settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Unique port executable settings."""

    # DynamoDB lock
    lock_timeout_sec: float = 30.0
    lock_ttl_sec: float = 15.0
    lock_poll_sec: float = 1.0

    # CloudFormation response upload
    response_timeout_sec: float = 30.0

    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_prefix="UNIQUE_PORT_",
        extra="ignore",
    )


# Global settings instance
settings = Settings()
