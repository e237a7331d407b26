"""Utility modules for shared functionality."""

from .constants import DEFAULT_CHANGELOG_FILE, SEARCH_PAGE_SIZE, SEARCH_RESULT_LIMIT
from .github import build_milestone_search_query, split_repository_in_configuration
from .retry import retry_on_rate_limit

__all__ = [
    "DEFAULT_CHANGELOG_FILE",
    "SEARCH_PAGE_SIZE",
    "SEARCH_RESULT_LIMIT",
    "build_milestone_search_query",
    "split_repository_in_configuration",
    "retry_on_rate_limit",
]
