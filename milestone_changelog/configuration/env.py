"""Pydantic Settings model for application configuration."""

from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from milestone_changelog.utils.constants import DEFAULT_CHANGELOG_FILE


class Settings(BaseSettings):
    """Environment variable settings for the application."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Generic application-wide settings
    DEBUG: bool = False

    # Release settings
    MILESTONE: str | None = Field(default=None, validation_alias=AliasChoices("MILESTONE", "PACK_VERSION"))
    GITHUB_REPOSITORY: str | None = Field(default=None, validation_alias=AliasChoices("GITHUB_REPOSITORY", "REPO"))

    # Changelog settings
    CHANGELOG_FILE: str = DEFAULT_CHANGELOG_FILE
    TAXONOMY_FILE: Path | None = None
    LIBRARY_SUMMARY: str | None = None

    # Set by GitHub Actions for step outputs
    GITHUB_OUTPUT: Path | None = None

    # GitHub API settings
    GITHUB_API_URL: str = "https://api.github.com"

    # GitHub PAT settings
    GITHUB_PAT_TOKEN: str | None = Field(default=None, validation_alias=AliasChoices("GITHUB_PAT_TOKEN", "GITHUB_TOKEN"))

    # GitHub App settings
    GITHUB_APP_ID: int | None = None
    GITHUB_APP_PRIVATE_KEY_PATH: Path | None = None
    GITHUB_APP_INSTALLATION_ID: int | None = None


settings = Settings()
