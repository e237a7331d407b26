"""GitHub client adapter for the githubkit library."""

from functools import wraps
from pathlib import Path
from typing import Any, Awaitable, Callable, Self, TypeVar

import structlog
from githubkit import Response
from githubkit.exception import RequestFailed
from githubkit.versions.latest.models import IssueSearchResultItem, SearchIssuesGetResponse200

from milestone_changelog.configuration.models import GitHubAuthenticationType
from milestone_changelog.utils.constants import SEARCH_PAGE_SIZE, SEARCH_RESULT_LIMIT
from milestone_changelog.utils.github import build_milestone_search_query, split_repository_in_configuration
from milestone_changelog.utils.retry import retry_on_rate_limit

from .client import GitHubClient, get_github_client

logger = structlog.get_logger(__name__)

F = TypeVar("F", bound=Callable[..., Awaitable[Any]])


def handle_github_422(func: F) -> F:
    """Decorator turning GitHub 422 Unprocessable Entity errors into a ValueError with the API's details."""

    @wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await func(*args, **kwargs)
        except RequestFailed as exc:
            if exc.response.status_code != 422:
                raise
            try:
                error_data = exc.response.json()
            except ValueError:
                error_data = {}
            message = error_data.get("message", "Unprocessable Entity")
            errors = error_data.get("errors", [])
            logger.error("GitHub 422 Unprocessable Entity", function=func.__name__, message=message, errors=errors)
            raise ValueError(f"GitHub 422 error in {func.__name__}: {message} | errors: {errors}") from exc

    return wrapper  # type: ignore


class GitHubKitAdapter:
    """Reads the pull requests of a repository through the githubkit library."""

    def __init__(self, client: GitHubClient, owner: str, repo_name: str) -> None:
        """Initialize the GitHub client adapter with an already-initialized client."""
        self.client = client
        self.owner = owner
        self.repo_name = repo_name

    @property
    def repo(self) -> str:
        """Repository in 'owner/repo' format."""
        return f"{self.owner}/{self.repo_name}"

    @classmethod
    async def create(
        cls,
        repo: str,
        github_auth_type: GitHubAuthenticationType,
        github_pat_token: str | None = None,
        github_app_id: int | None = None,
        github_app_private_key_path: Path | None = None,
        github_app_installation_id: int | None = None,
        github_api_url: str = "https://api.github.com",
    ) -> Self:
        """Create an adapter searching the pull requests of a repository.

        Only the credentials matching ``github_auth_type`` are used: a token
        for PAT authentication, or the app id, private key path and
        installation id for GitHub App authentication. Pass the API URL of a
        GitHub Enterprise Server instance to search there instead.
        """
        owner, repo_name = await split_repository_in_configuration(repo=repo)
        logger.info("Creating client for GitHub instance and repository", github_api_url=github_api_url, owner=owner, repo_name=repo_name)
        client = await get_github_client(
            repo=repo,
            github_auth_type=github_auth_type,
            github_pat_token=github_pat_token,
            github_app_id=github_app_id,
            github_app_private_key_path=github_app_private_key_path,
            github_app_installation_id=github_app_installation_id,
            github_api_url=github_api_url,
        )
        return cls(client, owner, repo_name)

    @handle_github_422
    @retry_on_rate_limit()
    async def _search_page(self, query: str, page: int, per_page: int) -> SearchIssuesGetResponse200:
        response: Response[SearchIssuesGetResponse200] = await self.client.rest.search.async_issues_and_pull_requests(
            q=query,
            per_page=per_page,
            page=page,
        )
        return response.parsed_data

    async def search_closed_pull_requests(self, milestone: str, per_page: int = SEARCH_PAGE_SIZE) -> list[IssueSearchResultItem]:
        """Search all closed pull requests of a milestone, handling pagination.

        Pages are concatenated in the order the Search API returns them.

        Args:
            milestone: Milestone title as shown on GitHub
            per_page: Number of results per page (max: 100)

        Returns:
            List of search result items
        """
        query = build_milestone_search_query(self.repo, milestone)
        logger.info("Looking up pull requests for milestone", milestone=milestone, repo=self.repo, query=query)

        items: list[IssueSearchResultItem] = []
        page: int = 1
        while True:
            logger.debug(f"Fetching search results page {page}")
            result = await self._search_page(query, page, per_page)
            if result.incomplete_results:
                logger.warning("GitHub reported incomplete search results", milestone=milestone, page=page)
            if not result.items:
                break
            items.extend(result.items)
            reachable = min(result.total_count, SEARCH_RESULT_LIMIT)
            if len(result.items) < per_page or len(items) >= reachable:
                if result.total_count > len(items):
                    logger.warning(
                        "Search matched more pull requests than can be fetched",
                        total_count=result.total_count,
                        fetched=len(items),
                    )
                break
            page += 1

        logger.info("Fetched pull requests for milestone", milestone=milestone, total=len(items))
        return items
