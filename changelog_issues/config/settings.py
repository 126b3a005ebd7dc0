"""
Changelog Issues Configuration System
=====================================

Configuration management with environment variables and Pydantic models.
Environment variables (prefix ``CHANGELOG_ISSUES_``, nested with ``__``)
override Field defaults; a local ``.env`` file is read as well.
"""

import os
from pathlib import Path
from typing import Optional
from enum import Enum

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings

from ..utils.exceptions import ConfigurationError, ErrorCode

DEFAULT_FEED_URL = "https://github.blog/changelog/feed/"


class LogLevel(str, Enum):
    """Available log levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class FeedSettings(BaseModel):
    """Changelog feed source."""
    url: str = Field(default=DEFAULT_FEED_URL, description="RSS feed URL of the changelog")
    request_timeout: float = Field(default=10, gt=0, le=120, description="Feed request timeout in seconds")

    @field_validator('url')
    @classmethod
    def validate_url(cls, v):
        """Only http(s) feeds can be fetched."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("Feed URL must start with http:// or https://")
        return v


class IssueSettings(BaseModel):
    """How changelog entries become issues."""
    label: str = Field(default="changelog", description="Label added to every created issue (empty to disable)")
    title_prefix: str = Field(default="GitHub Changelog: ", description="Prefix for issue titles")
    auto_label: bool = Field(default=False, description="Add changelog type and label categories as issue labels")


class StoreSettings(BaseModel):
    """Last processed GUID marker file."""
    location: str = Field(default=".github/last-changelog-guid.txt", description="Path of the marker file")


class GitHubSettings(BaseModel):
    """GitHub API access."""
    token: Optional[str] = Field(default=None, description="GitHub token with issues:write permission")
    repository: Optional[str] = Field(default=None, description="Target repository as owner/name")
    api_url: str = Field(default="https://api.github.com", description="GitHub REST API base URL")
    request_timeout: float = Field(default=30, gt=0, le=300, description="API request timeout in seconds")

    @field_validator('repository')
    @classmethod
    def validate_repository(cls, v):
        """Ensure repository is owner/name."""
        if v is None:
            return v
        owner, _, name = v.partition("/")
        if not owner or not name or "/" in name:
            raise ValueError("Repository must be in the form owner/name")
        return v


class LoggingSettings(BaseModel):
    """Logging configuration."""
    level: LogLevel = Field(default=LogLevel.INFO, description="Global log level")
    file_path: Optional[str] = Field(default=None, description="Log file path")
    max_file_size_mb: int = Field(default=10, ge=1, le=100, description="Max log file size in MB")
    backup_count: int = Field(default=5, ge=1, le=20, description="Number of log backup files")
    structured_logging: bool = Field(default=False, description="Use structured JSON logging")
    console_logging: bool = Field(default=True, description="Enable console logging")


class ChangelogIssuesSettings(BaseSettings):
    """Main application settings."""

    feed: FeedSettings = Field(default_factory=FeedSettings)
    issues: IssueSettings = Field(default_factory=IssueSettings)
    store: StoreSettings = Field(default_factory=StoreSettings)
    github: GitHubSettings = Field(default_factory=GitHubSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    app_name: str = Field(default="changelog-issues", description="Application name")
    version: str = Field(default="1.0.0", description="Application version")
    debug: bool = Field(default=False, description="Enable debug mode")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "env_nested_delimiter": "__",
        "env_prefix": "CHANGELOG_ISSUES_",
        "extra": "ignore",
    }

    def validate_configuration(self) -> None:
        """Validate settings that depend on the filesystem."""
        errors = []

        try:
            Path(self.store.location).parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            errors.append(f"Invalid store location: {e}")

        if self.logging.file_path:
            try:
                Path(self.logging.file_path).parent.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                errors.append(f"Invalid log file path: {e}")

        if errors:
            raise ConfigurationError(
                f"Configuration validation failed: {'; '.join(errors)}",
                error_code=ErrorCode.CONFIG_INVALID
            )

    def resolve_github_token(self) -> Optional[str]:
        """Token from settings, falling back to the Actions-provided GITHUB_TOKEN."""
        return self.github.token or os.getenv("GITHUB_TOKEN")

    def resolve_repository(self) -> Optional[str]:
        """Repository from settings, falling back to GITHUB_REPOSITORY."""
        return self.github.repository or os.getenv("GITHUB_REPOSITORY")

    def get_effective_log_level(self) -> str:
        """Get effective log level considering debug mode."""
        if self.debug:
            return "DEBUG"
        return self.logging.level.value


def load_settings() -> ChangelogIssuesSettings:
    """Load settings from environment variables and defaults.

    Returns:
        Loaded and validated settings

    Raises:
        ConfigurationError: If configuration is invalid
    """
    from dotenv import load_dotenv
    load_dotenv()

    try:
        settings = ChangelogIssuesSettings()
        settings.validate_configuration()
        return settings

    except ConfigurationError:
        raise
    except Exception as e:
        raise ConfigurationError(
            f"Failed to initialize settings: {e}",
            error_code=ErrorCode.CONFIG_INVALID
        ) from e


_settings: Optional[ChangelogIssuesSettings] = None


def get_settings(reload: bool = False) -> ChangelogIssuesSettings:
    """Get global settings instance (singleton pattern).

    Args:
        reload: Force reload of settings

    Returns:
        Global settings instance
    """
    global _settings

    if _settings is None or reload:
        _settings = load_settings()

    return _settings
