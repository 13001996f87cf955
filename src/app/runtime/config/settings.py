from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.app.runtime.config.config_data import (
    AppConfig,
    ConfigData,
    DatabaseConfig,
    LoggingConfig,
)


class EnvironmentVariables(BaseSettings):
    """Simple primitive values loaded from environment variables and .env files."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
    )

    # Environment and deployment
    environment: Literal["development", "production", "test"] = Field(
        default="development", validation_alias="APP_ENVIRONMENT"
    )
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    # Infrastructure URLs
    database_url: str = Field(
        default="sqlite:///./identity.db", validation_alias="DATABASE_URL"
    )

    def to_config(self) -> ConfigData:
        """Build a configuration from environment variables alone."""
        return ConfigData(
            app=AppConfig(environment=self.environment),
            logging=LoggingConfig(level=self.log_level),
            database=DatabaseConfig(
                url=self.database_url, environment_mode=self.environment
            ),
        )
