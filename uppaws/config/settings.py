"""Configuration settings and data models."""

import json
import os
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field, field_validator

DEFAULT_CONFIG_PATH = Path("uppaws_config.json")


class TournamentSettings(BaseModel):
    """Rating and scheduling knobs for the tournament service."""

    k_factor: int = Field(default=32, description="Elo K-factor")
    default_rating: int = Field(default=1000, description="Rating of unrated trainers")
    matchmaking_window: int = Field(
        default=100, description="Max rating gap (+/-) for matchmaking"
    )
    weekly_max_participants: int = Field(
        default=64, ge=1, description="Capacity of generated weekly tournaments"
    )
    weekly_registration_days: int = Field(
        default=6, ge=0, description="Days a weekly tournament accepts registrations"
    )

    @field_validator("k_factor")
    @classmethod
    def validate_k_factor(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("k_factor must be positive")
        return v


class StorageConfig(BaseModel):
    """Where tournaments and ratings are kept."""

    backend: Literal["memory", "sqlite"] = Field(default="memory")
    db_path: str = Field(default="tournaments.db", description="SQLite file path")


class SystemConfig(BaseModel):
    """System-wide configuration."""

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(default="INFO")
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)
    allowed_origins: list[str] = Field(
        default_factory=list, description="CORS origins; empty disables CORS"
    )


class AppConfig(BaseModel):
    """Complete application configuration."""

    tournaments: TournamentSettings = Field(default_factory=TournamentSettings)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    system: SystemConfig = Field(default_factory=SystemConfig)

    @classmethod
    def load_from_file(cls, config_path: Path) -> "AppConfig":
        """Load configuration from JSON file."""
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)

        required_sections = ["tournaments", "storage", "system"]
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
                self.model_dump(mode="json"),
                f,
                default_flow_style=False,
                indent=2,
            )

    def apply_env_overrides(self) -> "AppConfig":
        """Apply UPPAWS_DB_PATH, UPPAWS_LOG_LEVEL and PORT from the environment."""
        db_path = os.environ.get("UPPAWS_DB_PATH")
        if db_path:
            self.storage.backend = "sqlite"
            self.storage.db_path = db_path

        log_level = os.environ.get("UPPAWS_LOG_LEVEL")
        if log_level:
            self.system = SystemConfig(
                **{**self.system.model_dump(), "log_level": log_level.upper()}
            )

        port = os.environ.get("PORT")
        if port:
            self.system.port = int(port)

        return self


def get_default_config(config_path: Path = DEFAULT_CONFIG_PATH) -> AppConfig:
    """Load uppaws_config.json if present, otherwise built-in defaults."""
    if config_path.exists():
        config = AppConfig.load_from_file(config_path)
    else:
        config = AppConfig()
    return config.apply_env_overrides()
