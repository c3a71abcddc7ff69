"""
Configuration module for the Gmail Fluent API.

This module uses Pydantic Settings to handle loading environment variables
and configuration files with proper typing and validation.
"""
import json
from enum import Enum
from pathlib import Path
from typing import List, Optional, Union

from pydantic import Field, field_validator
# NOTE: In Pydantic v2 `BaseSettings` lives in the dedicated
# `pydantic_settings` package.
from pydantic_settings import BaseSettings, SettingsConfigDict


class LogLevel(str, Enum):
    """Log levels for the application."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class Environment(str, Enum):
    """Application environment."""
    DEVELOPMENT = "development"
    TESTING = "testing"
    PRODUCTION = "production"


class AuthSettings(BaseSettings):
    """Settings for locating stored Google OAuth credentials."""
    token_path: Path = Field(
        default=Path("token.json"),
        description="Path to the authorized-user token JSON file",
    )
    scopes: List[str] = Field(
        default=[
            "https://www.googleapis.com/auth/gmail.modify",
            "https://www.googleapis.com/auth/gmail.labels",
            "https://www.googleapis.com/auth/gmail.compose",
        ],
        description="OAuth scopes the stored token was granted",
    )


class GmailSettings(BaseSettings):
    """Settings for Gmail API requests."""
    user_id: str = Field(
        default="me",
        description="Gmail user id used on every request ('me' is the token owner)",
    )
    messages_per_page: int = Field(
        default=20,
        description="Default page size for message listing",
        ge=1,
        le=500,
    )
    threads_per_page: int = Field(
        default=20,
        description="Default page size for thread listing",
        ge=1,
        le=500,
    )
    drafts_per_page: int = Field(
        default=20,
        description="Default page size for draft listing",
        ge=1,
        le=500,
    )
    history_per_page: int = Field(
        default=100,
        description="Default page size for history listing",
        ge=1,
        le=500,
    )
    batch_size: int = Field(
        default=50,
        description="Maximum number of requests in one batch call",
        ge=1,
        le=100,
    )
    pub_sub_topic: Optional[str] = Field(
        default=None,
        description="Cloud Pub/Sub topic receiving mailbox push notifications",
    )
    from_name: Optional[str] = Field(
        default=None,
        description="Display name used on outgoing mail",
    )

    @field_validator("pub_sub_topic")
    @classmethod
    def check_topic_name(cls, v: Optional[str]) -> Optional[str]:
        """Ensure the topic is a full resource name."""
        if v and not v.startswith("projects/"):
            raise ValueError(
                f"Pub/Sub topic must look like projects/<project>/topics/<name>, got {v}"
            )
        return v


class AppSettings(BaseSettings):
    """Main application settings."""
    app_name: str = Field(
        default="Gmail Fluent API",
        description="Name of the application",
    )
    version: str = Field(
        default="1.0.0",
        description="Application version",
    )
    environment: Environment = Field(
        default=Environment.PRODUCTION,
        description="Application environment",
    )
    log_level: LogLevel = Field(
        default=LogLevel.INFO,
        description="Logging level",
    )
    storage_dir: Path = Field(
        default=Path("./storage"),
        description="Base directory for relative attachment paths",
    )


class Settings(BaseSettings):
    """Root settings class combining all application settings."""
    model_config = SettingsConfigDict(
        env_prefix="GFA_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    app: AppSettings = Field(default_factory=AppSettings)
    auth: AuthSettings = Field(default_factory=AuthSettings)
    gmail: GmailSettings = Field(default_factory=GmailSettings)

    @classmethod
    def from_json(cls, file_path: Union[str, Path]) -> "Settings":
        """Load settings from a JSON file."""
        file_path = Path(file_path)
        if not file_path.exists():
            raise FileNotFoundError(f"Config file not found: {file_path}")

        with open(file_path, "r") as f:
            config_data = json.load(f)

        return cls.model_validate(config_data)

    def save_to_json(self, file_path: Union[str, Path]) -> None:
        """Save settings to a JSON file."""
        file_path = Path(file_path)

        # Ensure directory exists
        if not file_path.parent.exists():
            file_path.parent.mkdir(parents=True, exist_ok=True)

        with open(file_path, "w") as f:
            json.dump(self.model_dump(mode="json", exclude_none=True), f, indent=2)


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance, initializing if necessary."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def load_settings(file_path: Optional[Union[str, Path]] = None) -> Settings:
    """Load settings from a file or environment variables."""
    global _settings

    if file_path:
        _settings = Settings.from_json(file_path)
    else:
        _settings = Settings()

    return _settings
