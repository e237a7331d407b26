"""Reconciles configuration between CLI arguments and environment variables.

Command line values take precedence over environment variables (and the
.env file). Every required element is checked here so that a misconfigured
run fails before anything is fetched from GitHub.
"""

from pathlib import Path
from typing import TypeVar

import structlog

from milestone_changelog.configuration.env import settings
from milestone_changelog.configuration.exceptions import (
    GitHubAuthenticationConfigurationUndefinedError,
    RequiredConfigurationElementError,
)
from milestone_changelog.configuration.models import GenerateChangelogConfig, GitHubAuthenticationType
from milestone_changelog.utils.github import split_repository_in_configuration

logger = structlog.get_logger(__name__)

T = TypeVar("T")


def _prefer_cli(cli_value: T | None, env_value: T | None) -> T | None:
    return cli_value if cli_value is not None else env_value


async def validate_github_authentication_configuration(
    github_pat_token: str | None,
    github_app_id: int | None,
    github_app_private_key_path: Path | None,
    github_app_installation_id: int | None,
) -> GitHubAuthenticationType:
    """Validates the GitHub authentication configuration.

    Exactly one of a PAT or a complete GitHub App configuration must be given.

    Raises:
        GitHubAuthenticationConfigurationUndefinedError: If neither, both, or an incomplete App configuration is given.

    Returns:
        GitHubAuthenticationType: The type of GitHub authentication used.
    """
    app_settings = {
        "GitHub App ID (command line option --github-app-id, environment variable GITHUB_APP_ID)": github_app_id,
        "GitHub App private key path (command line option --github-app-private-key-path, environment variable GITHUB_APP_PRIVATE_KEY_PATH)": (
            github_app_private_key_path
        ),
        "GitHub App installation ID (command line option --github-app-installation-id, environment variable GITHUB_APP_INSTALLATION_ID)": (
            github_app_installation_id
        ),
    }
    any_app_setting = any(app_settings.values())

    if github_pat_token and any_app_setting:
        raise GitHubAuthenticationConfigurationUndefinedError("Both PAT and GitHub App configurations are defined. Please use one or the other.")
    if github_pat_token:
        return GitHubAuthenticationType.PAT
    if not any_app_setting:
        raise GitHubAuthenticationConfigurationUndefinedError(
            "No GitHub authentication configuration provided. Please provide either a PAT or a GitHub App configuration."
        )

    missing = [name for name, value in app_settings.items() if not value]
    if missing:
        raise GitHubAuthenticationConfigurationUndefinedError("Incomplete GitHub App configuration - missing settings include " + ", ".join(missing))
    return GitHubAuthenticationType.APP


async def reconcile_generate_changelog_configuration(
    cli_debug: bool | None = None,
    cli_milestone: str | None = None,
    cli_repo: str | None = None,
    cli_github_api_url: str | None = None,
    cli_github_pat_token: str | None = None,
    cli_github_app_id: int | None = None,
    cli_github_app_private_key_path: Path | None = None,
    cli_github_app_installation_id: int | None = None,
    cli_output_file: Path | None = None,
    cli_taxonomy_file: Path | None = None,
    cli_library_summary: str | None = None,
    cli_github_output: Path | None = None,
) -> GenerateChangelogConfig:
    """Reconciles the configuration of the generate command.

    Raises:
        RequiredConfigurationElementError: If the milestone or repository is missing.
        ValueError: If the repository is not in 'owner/repo' format.
        GitHubAuthenticationConfigurationUndefinedError: If the GitHub credentials are unusable.
    """
    milestone = _prefer_cli(cli_milestone, settings.MILESTONE)
    if not milestone:
        raise RequiredConfigurationElementError(name="milestone", cli_name="--milestone", env_name="MILESTONE")

    repo = _prefer_cli(cli_repo, settings.GITHUB_REPOSITORY)
    if not repo:
        raise RequiredConfigurationElementError(name="repository", cli_name="--repo", env_name="GITHUB_REPOSITORY")
    owner, repo_name = await split_repository_in_configuration(repo)

    github_pat_token = _prefer_cli(cli_github_pat_token, settings.GITHUB_PAT_TOKEN)
    github_app_id = _prefer_cli(cli_github_app_id, settings.GITHUB_APP_ID)
    github_app_private_key_path = _prefer_cli(cli_github_app_private_key_path, settings.GITHUB_APP_PRIVATE_KEY_PATH)
    github_app_installation_id = _prefer_cli(cli_github_app_installation_id, settings.GITHUB_APP_INSTALLATION_ID)
    github_authentication_type = await validate_github_authentication_configuration(
        github_pat_token=github_pat_token,
        github_app_id=github_app_id,
        github_app_private_key_path=github_app_private_key_path,
        github_app_installation_id=github_app_installation_id,
    )

    config = GenerateChangelogConfig(
        debug=bool(_prefer_cli(cli_debug, settings.DEBUG)),
        milestone=milestone,
        repo=f"{owner}/{repo_name}",
        github_api_url=_prefer_cli(cli_github_api_url, settings.GITHUB_API_URL) or "https://api.github.com",
        github_authentication_type=github_authentication_type,
        github_pat_token=github_pat_token,
        github_app_id=github_app_id,
        github_app_private_key_path=github_app_private_key_path,
        github_app_installation_id=github_app_installation_id,
        output_file=cli_output_file or Path(settings.CHANGELOG_FILE),
        taxonomy_file=_prefer_cli(cli_taxonomy_file, settings.TAXONOMY_FILE),
        library_summary=_prefer_cli(cli_library_summary, settings.LIBRARY_SUMMARY),
        github_output=_prefer_cli(cli_github_output, settings.GITHUB_OUTPUT),
    )
    logger.debug("Reconciled generate configuration", milestone=config.milestone, repo=config.repo, auth_type=github_authentication_type.value)
    return config
