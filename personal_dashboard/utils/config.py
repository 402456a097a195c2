"""Configuration management with YAML support and Pydantic validation."""

from datetime import timedelta
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class GitHubConfig(BaseModel):
    """GitHub API endpoints and request settings."""

    api_base_url: str = Field(default="https://api.github.com", description="GitHub REST API base URL")
    graphql_url: str = Field(default="https://api.github.com/graphql", description="GitHub GraphQL endpoint")
    repositories_per_page: int = Field(default=5, ge=1, le=100, description="Recent repositories to show")
    request_timeout_seconds: float = Field(default=15.0, gt=0, description="Per-request timeout")

    @field_validator("api_base_url", "graphql_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize URLs so paths can be appended safely."""
        return v.rstrip("/")


class CacheConfig(BaseModel):
    """How long fetched data stays fresh."""

    repositories_ttl_minutes: int = Field(default=30, ge=1, description="Repository list time-to-live")
    contributions_ttl_hours: int = Field(default=6, ge=1, description="Contribution calendar time-to-live")

    def ttls(self) -> dict["DataKind", timedelta]:
        """Return the time-to-live for each data kind."""
        # models imports the database layer, which imports this module
        from personal_dashboard.models.github import DataKind

        return {
            DataKind.REPOSITORIES: timedelta(minutes=self.repositories_ttl_minutes),
            DataKind.CONTRIBUTIONS: timedelta(hours=self.contributions_ttl_hours),
        }


class DatabaseConfig(BaseModel):
    """Database configuration."""

    url: str = Field(default="sqlite:///personal_dashboard.db", description="Database connection URL")
    echo: bool = Field(default=False, description="Echo SQL statements for debugging")


class WatchConfig(BaseModel):
    """Settings for the long-running watch mode."""

    interval_seconds: int = Field(default=300, ge=10, description="Seconds between refresh checks")


class Config(BaseSettings):
    """Main application configuration."""

    model_config = SettingsConfigDict(
        env_prefix="PD_",
        env_nested_delimiter="__",
    )

    github: GitHubConfig = Field(default_factory=GitHubConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    watch: WatchConfig = Field(default_factory=WatchConfig)


def load_config(config_path: str | Path | None = None) -> Config:
    """Load configuration from YAML file.

    Args:
        config_path: Path to the YAML configuration file. Defaults to config.yaml in CWD.

    Returns:
        Validated Config object.
    """
    if config_path is None:
        config_path = Path("config.yaml")
    else:
        config_path = Path(config_path)

    config_data: dict[str, Any] = {}

    if config_path.exists():
        with open(config_path) as f:
            loaded = yaml.safe_load(f)
            if loaded:
                config_data = loaded

    return Config(**config_data)


# Global config instance - initialized lazily
_config: Config | None = None


def get_config() -> Config:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reset_config() -> None:
    """Reset the global configuration (useful for testing)."""
    global _config
    _config = None
