"""Unit tests for the GitHubKitAdapter class and related GitHub operations."""

from datetime import timedelta
from types import SimpleNamespace
from typing import Any, Callable
from unittest.mock import AsyncMock, MagicMock, call, patch

import pytest
from githubkit.exception import PrimaryRateLimitExceeded, RequestFailed
from pytest import LogCaptureFixture

from milestone_changelog.configuration.models import GitHubAuthenticationType
from milestone_changelog.github.adapter import GitHubKitAdapter

MakeSearchItem = Callable[..., Any]


class DummyResponse:
    """A dummy response object to mock GitHub search responses."""

    def __init__(self, items: list[Any], total_count: int, incomplete_results: bool = False) -> None:
        """Initialize the dummy response with one page of search results."""
        self.status_code: int = 200
        self.parsed_data = SimpleNamespace(items=items, total_count=total_count, incomplete_results=incomplete_results)


def make_request_failed(status_code: int, json_data: dict[str, Any] | None = None) -> RequestFailed:
    """Build a githubkit request failure for a status code."""
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = json_data or {}
    response.headers = {}
    return RequestFailed(response)


@pytest.fixture
def adapter() -> GitHubKitAdapter:
    """Adapter around a mocked githubkit client."""
    return GitHubKitAdapter(MagicMock(), "owner", "repo")


def test_repo(adapter: GitHubKitAdapter) -> None:
    """Test that the repository is exposed in owner/repo format."""
    assert adapter.repo == "owner/repo"


@pytest.mark.asyncio
async def test_search_single_page(adapter: GitHubKitAdapter, make_search_item: MakeSearchItem) -> None:
    """Test searching a milestone whose pull requests fit in one page."""
    items = [make_search_item(1), make_search_item(2)]
    adapter.client.rest.search.async_issues_and_pull_requests = AsyncMock(return_value=DummyResponse(items, total_count=2))

    # When
    result = await adapter.search_closed_pull_requests("v1.2.0")

    # Then
    assert result == items
    adapter.client.rest.search.async_issues_and_pull_requests.assert_awaited_once_with(
        q="repo:owner/repo is:pr state:closed milestone:v1.2.0",
        per_page=100,
        page=1,
    )


@pytest.mark.asyncio
async def test_search_quotes_milestone_with_spaces(adapter: GitHubKitAdapter) -> None:
    """Test that a milestone title with spaces is quoted in the query."""
    adapter.client.rest.search.async_issues_and_pull_requests = AsyncMock(return_value=DummyResponse([], total_count=0))

    await adapter.search_closed_pull_requests("Release 2")

    kwargs = adapter.client.rest.search.async_issues_and_pull_requests.call_args.kwargs
    assert kwargs["q"] == 'repo:owner/repo is:pr state:closed milestone:"Release 2"'


@pytest.mark.asyncio
async def test_search_paginates_until_short_page(adapter: GitHubKitAdapter, make_search_item: MakeSearchItem) -> None:
    """Test that pages are concatenated in order until a short page is returned."""
    pages = [
        DummyResponse([make_search_item(5), make_search_item(4)], total_count=5),
        DummyResponse([make_search_item(3), make_search_item(2)], total_count=5),
        DummyResponse([make_search_item(1)], total_count=5),
    ]
    search = AsyncMock(side_effect=pages)
    adapter.client.rest.search.async_issues_and_pull_requests = search

    result = await adapter.search_closed_pull_requests("v1.2.0", per_page=2)

    assert [item.number for item in result] == [5, 4, 3, 2, 1]
    assert [c.kwargs["page"] for c in search.call_args_list] == [1, 2, 3]


@pytest.mark.asyncio
async def test_search_stops_when_total_reached(adapter: GitHubKitAdapter, make_search_item: MakeSearchItem) -> None:
    """Test that no extra request is made once every result was fetched."""
    pages = [
        DummyResponse([make_search_item(4), make_search_item(3)], total_count=4),
        DummyResponse([make_search_item(2), make_search_item(1)], total_count=4),
    ]
    search = AsyncMock(side_effect=pages)
    adapter.client.rest.search.async_issues_and_pull_requests = search

    result = await adapter.search_closed_pull_requests("v1.2.0", per_page=2)

    assert len(result) == 4
    assert search.await_count == 2


@pytest.mark.asyncio
async def test_search_stops_at_result_limit(adapter: GitHubKitAdapter, make_search_item: MakeSearchItem, caplog: LogCaptureFixture) -> None:
    """Test that pagination stops at the Search API result limit with a warning."""
    pages = [
        DummyResponse([make_search_item(10), make_search_item(9)], total_count=10),
        DummyResponse([make_search_item(8), make_search_item(7)], total_count=10),
    ]
    search = AsyncMock(side_effect=pages)
    adapter.client.rest.search.async_issues_and_pull_requests = search

    with patch("milestone_changelog.github.adapter.SEARCH_RESULT_LIMIT", 4):
        result = await adapter.search_closed_pull_requests("v1.2.0", per_page=2)

    assert len(result) == 4
    assert search.await_count == 2
    assert "Search matched more pull requests than can be fetched" in caplog.text


@pytest.mark.asyncio
async def test_search_warns_on_incomplete_results(adapter: GitHubKitAdapter, make_search_item: MakeSearchItem, caplog: LogCaptureFixture) -> None:
    """Test that incomplete results are kept but reported."""
    adapter.client.rest.search.async_issues_and_pull_requests = AsyncMock(
        return_value=DummyResponse([make_search_item(1)], total_count=1, incomplete_results=True)
    )

    result = await adapter.search_closed_pull_requests("v1.2.0")

    assert len(result) == 1
    assert "GitHub reported incomplete search results" in caplog.text


@pytest.mark.asyncio
async def test_search_empty_milestone(adapter: GitHubKitAdapter) -> None:
    """Test that a milestone without pull requests returns no items."""
    adapter.client.rest.search.async_issues_and_pull_requests = AsyncMock(return_value=DummyResponse([], total_count=0))

    assert await adapter.search_closed_pull_requests("v1.2.0") == []


@pytest.mark.asyncio
async def test_search_unprocessable_query(adapter: GitHubKitAdapter) -> None:
    """Test that a 422 from the Search API becomes a ValueError with GitHub's message."""
    error = make_request_failed(422, {"message": "Validation Failed", "errors": [{"message": "The listed users cannot be searched"}]})
    adapter.client.rest.search.async_issues_and_pull_requests = AsyncMock(side_effect=error)

    with pytest.raises(ValueError, match="Validation Failed") as exc_info:
        await adapter.search_closed_pull_requests("v1.2.0")

    assert exc_info.value.__cause__ is error


@pytest.mark.asyncio
async def test_search_other_error(adapter: GitHubKitAdapter) -> None:
    """Test that other API failures propagate unchanged."""
    error = make_request_failed(500)
    adapter.client.rest.search.async_issues_and_pull_requests = AsyncMock(side_effect=error)

    with pytest.raises(RequestFailed):
        await adapter.search_closed_pull_requests("v1.2.0")


@pytest.mark.asyncio
async def test_search_retries_when_rate_limited(adapter: GitHubKitAdapter, make_search_item: MakeSearchItem) -> None:
    """Test that a rate limited page is fetched again after waiting."""
    response = MagicMock()
    response.status_code = 403
    response.headers = {}
    rate_limited = PrimaryRateLimitExceeded(response, timedelta(seconds=5))
    search = AsyncMock(side_effect=[rate_limited, DummyResponse([make_search_item(1)], total_count=1)])
    adapter.client.rest.search.async_issues_and_pull_requests = search

    with patch("milestone_changelog.utils.retry.asyncio.sleep", new=AsyncMock()) as mock_sleep:
        result = await adapter.search_closed_pull_requests("v1.2.0")

    assert len(result) == 1
    assert search.await_args_list == [call(q="repo:owner/repo is:pr state:closed milestone:v1.2.0", per_page=100, page=1)] * 2
    mock_sleep.assert_awaited_once_with(5.0)


@pytest.mark.asyncio
async def test_create_with_pat() -> None:
    """Test that create splits the repository and builds an authenticated client."""
    client = MagicMock()

    with patch("milestone_changelog.github.adapter.get_github_client", new=AsyncMock(return_value=client)) as mock_get_client:
        adapter = await GitHubKitAdapter.create(
            repo="owner/repo",
            github_auth_type=GitHubAuthenticationType.PAT,
            github_pat_token="token",
        )

    assert adapter.client is client
    assert adapter.owner == "owner"
    assert adapter.repo_name == "repo"
    mock_get_client.assert_awaited_once_with(
        repo="owner/repo",
        github_auth_type=GitHubAuthenticationType.PAT,
        github_pat_token="token",
        github_app_id=None,
        github_app_private_key_path=None,
        github_app_installation_id=None,
        github_api_url="https://api.github.com",
    )
