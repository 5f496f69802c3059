"""Configuration settings and data models."""

import json
import os
import shutil
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator


class DatabaseConfig(BaseModel):
    """SQLite storage configuration."""

    path: str = Field(default="argumentor.db", description="SQLite database file")
    seed_topics: bool = Field(
        default=True, description="Insert the default topic catalogue on startup"
    )


class MatchmakingConfig(BaseModel):
    """Opponent search configuration."""

    search_interval_seconds: float = Field(
        default=3.0, description="Delay between search attempts while searching"
    )
    max_backoff_seconds: float = Field(
        default=30.0, description="Upper bound for the retry delay after store failures"
    )
    category: str = Field(
        default="matchmaking", description="Category assigned to matchmade debates"
    )

    @field_validator("search_interval_seconds")
    @classmethod
    def validate_interval(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("search_interval_seconds must be positive")
        return v

    @model_validator(mode="after")
    def validate_backoff(self) -> "MatchmakingConfig":
        if self.max_backoff_seconds < self.search_interval_seconds:
            raise ValueError("max_backoff_seconds must be >= search_interval_seconds")
        return self


class NotificationConfig(BaseModel):
    """Notification delivery configuration."""

    enabled: bool = Field(default=True, description="Deliver notifications at all")
    webhook_url: str | None = Field(
        default=None, description="Webhook receiving new-debate events (log only when unset)"
    )
    timeout_seconds: float = Field(default=5.0, description="Webhook request timeout")


class SystemConfig(BaseModel):
    """System-wide configuration."""

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(default="INFO")
    watch_poll_seconds: float = Field(
        default=1.0, description="Polling interval for debate watchers"
    )


class AppConfig(BaseModel):
    """Complete application configuration."""

    database: DatabaseConfig
    matchmaking: MatchmakingConfig
    notifications: NotificationConfig
    system: SystemConfig

    @classmethod
    def load_from_file(cls, config_path: Path) -> "AppConfig":
        """Load configuration from JSON file."""
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)

        required_sections = ["database", "matchmaking", "notifications", "system"]
        missing_sections = [
            section for section in required_sections if section not in data
        ]
        if missing_sections:
            raise ValueError(f"Missing required config sections: {missing_sections}")

        return cls(**data)

    def save_to_file(self, config_path: Path) -> None:
        """Save configuration to YAML file."""
        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, "w", encoding="utf-8") as f:
            yaml.dump(
                self.model_dump(exclude_unset=True),
                f,
                default_flow_style=False,
                indent=2,
            )

    def apply_env_overrides(self) -> "AppConfig":
        """Apply ARGUMENTOR_* environment variables on top of file settings."""
        db_path = os.environ.get("ARGUMENTOR_DB_PATH")
        if db_path:
            self.database.path = db_path

        webhook_url = os.environ.get("ARGUMENTOR_WEBHOOK_URL")
        if webhook_url:
            self.notifications.webhook_url = webhook_url

        return self


def get_default_config(config_path: Path = Path("argumentor_config.json")) -> AppConfig:
    """Load default configuration from argumentor_config.json, creating it if needed."""
    if not config_path.exists():
        example_path = config_path.with_name("argumentor_config.example.json")
        if example_path.exists():
            shutil.copy2(example_path, config_path)
        else:
            template_config = get_template_config()
            with open(config_path, "w", encoding="utf-8") as f:
                json.dump(template_config.model_dump(), f, indent=2)
    return AppConfig.load_from_file(config_path).apply_env_overrides()


def get_template_config() -> AppConfig:
    """Get template configuration for config file generation."""
    return AppConfig(
        database=DatabaseConfig(path="argumentor.db", seed_topics=True),
        matchmaking=MatchmakingConfig(
            search_interval_seconds=3.0,
            max_backoff_seconds=30.0,
            category="matchmaking",
        ),
        notifications=NotificationConfig(
            enabled=True,
            webhook_url=None,  # Set to receive new-debate events over HTTP
            timeout_seconds=5.0,
        ),
        system=SystemConfig(log_level="INFO", watch_poll_seconds=1.0),
    )
