"""Models for configuration between CLI arguments and environment variables."""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class GitHubAuthenticationType(str, Enum):
    """Enum for GitHub authentication types."""

    PAT = "pat"
    APP = "app"


@dataclass
class GenerateChangelogConfig:
    """Configuration class for the generate command."""

    debug: bool
    milestone: str
    repo: str
    github_api_url: str
    github_authentication_type: GitHubAuthenticationType
    github_pat_token: str | None
    github_app_id: int | None
    github_app_private_key_path: Path | None
    github_app_installation_id: int | None
    output_file: Path
    taxonomy_file: Path | None
    library_summary: str | None
    github_output: Path | None
