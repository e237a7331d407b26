"""Sets up the authenticated githubkit client."""

from pathlib import Path
from typing import TypeAlias

from githubkit import GitHub
from githubkit.auth import AppAuthStrategy, AppInstallationAuthStrategy, TokenAuthStrategy

from milestone_changelog.configuration.models import GitHubAuthenticationType
from milestone_changelog.utils.github import split_repository_in_configuration

GitHubClient: TypeAlias = GitHub[AppInstallationAuthStrategy] | GitHub[TokenAuthStrategy]


async def get_github_app_client(
    repo: str,
    github_app_id: int,
    github_app_private_key_path: Path,
    github_app_installation_id: int,
    github_api_url: str,
) -> GitHub[AppInstallationAuthStrategy]:
    """Returns a GitHub client authenticated as the installation of a GitHub App on the repository."""
    private_key = github_app_private_key_path.read_text(encoding="utf-8")
    app_client = GitHub(AppAuthStrategy(app_id=github_app_id, private_key=private_key), base_url=github_api_url, http_cache=False)

    owner, repository = await split_repository_in_configuration(repo=repo)
    try:
        response = await app_client.rest.apps.async_get_repo_installation(owner=owner, repo=repository)
    except Exception as e:
        raise ValueError(f"Failed to get GitHub App installation for {repo}: {e}") from e

    installation_id = response.parsed_data.id
    if installation_id != github_app_installation_id:
        raise ValueError(f"GitHub App installation {github_app_installation_id} does not match the installation {installation_id} on {repo}")
    return app_client.with_auth(app_client.auth.as_installation(installation_id))


async def get_github_pat_client(github_pat_token: str, github_api_url: str) -> GitHub[TokenAuthStrategy]:
    """Returns a GitHub client authenticated with a personal access token."""
    return GitHub(TokenAuthStrategy(github_pat_token), base_url=github_api_url, http_cache=False)


async def get_github_client(
    repo: str,
    github_auth_type: GitHubAuthenticationType,
    github_pat_token: str | None,
    github_app_id: int | None,
    github_app_private_key_path: Path | None,
    github_app_installation_id: int | None,
    github_api_url: str,
) -> GitHubClient:
    """Returns an authenticated GitHub client for the requested authentication type.

    Supports a custom base URL for GitHub Enterprise Server (GHES).
    HTTP caching is disabled so every run sees the current milestone.
    """
    if github_auth_type == GitHubAuthenticationType.APP:
        if not (github_app_id and github_app_private_key_path and github_app_installation_id):
            raise RuntimeError("GitHub App authentication requires app_id, private_key_path, and installation_id in config.")
        return await get_github_app_client(repo, github_app_id, github_app_private_key_path, github_app_installation_id, github_api_url)
    if not github_pat_token:
        raise RuntimeError("GitHub PAT authentication requires github_pat_token in config.")
    return await get_github_pat_client(github_pat_token, github_api_url)
