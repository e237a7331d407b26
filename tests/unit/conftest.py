"""Fixtures for unit tests."""

from types import SimpleNamespace
from typing import Any, Callable, Generator

import pytest
import structlog

from milestone_changelog.changelog import ChangelogIssue


@pytest.fixture(autouse=True)
def configure_structlog_for_caplog() -> Generator[None, None, None]:
    """Configure structlog for use with caplog."""
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        # The CLI reconfigures structlog per invocation, so loggers must not be cached.
        cache_logger_on_first_use=False,
    )
    yield
    structlog.reset_defaults()


@pytest.fixture
def make_issue() -> Callable[..., ChangelogIssue]:
    """Factory for changelog issues with sensible defaults."""

    def _make_issue(number: int, *labels: str, title: str | None = None, author: str = "octocat") -> ChangelogIssue:
        return ChangelogIssue(number=number, title=title or f"Change {number}", author=author, labels=frozenset(labels))

    return _make_issue


@pytest.fixture
def make_search_item() -> Callable[..., Any]:
    """Factory for objects shaped like GitHub search result items."""

    def _make_search_item(number: int, *labels: Any, title: str | None = None, login: str | None = "octocat") -> Any:
        user = SimpleNamespace(login=login) if login is not None else None
        return SimpleNamespace(
            number=number,
            title=title or f"Change {number}",
            user=user,
            labels=[SimpleNamespace(name=label) for label in labels],
        )

    return _make_search_item
