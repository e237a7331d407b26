"""Collect the closed pull requests of a milestone."""

from typing import Protocol

import structlog
from githubkit.versions.latest.models import IssueSearchResultItem

from .models import ChangelogIssue

logger = structlog.get_logger(__name__)


class PullRequestSearcher(Protocol):
    """Protocol for sources of closed pull requests."""

    async def search_closed_pull_requests(self, milestone: str) -> list[IssueSearchResultItem]:
        """Return the closed pull requests of a milestone, in API order."""
        ...


class MilestoneIssueCollector:
    """Turns the search results of a milestone into changelog issues."""

    def __init__(self, searcher: PullRequestSearcher) -> None:
        """Initialize with the source of pull requests."""
        self.searcher = searcher

    async def collect(self, milestone: str) -> list[ChangelogIssue]:
        """Collect the closed pull requests of a milestone.

        Results keep the order the tracker returned them in. A pull request
        seen twice, which happens when the result set shifts between pages,
        keeps its first position.
        """
        items = await self.searcher.search_closed_pull_requests(milestone)

        issues: list[ChangelogIssue] = []
        seen: set[int] = set()
        for item in items:
            if item.number in seen:
                logger.debug("Skipping duplicate search result", issue_number=item.number)
                continue
            seen.add(item.number)
            issues.append(ChangelogIssue.from_github(item))

        logger.info("Collected pull requests", milestone=milestone, count=len(issues))
        return issues
