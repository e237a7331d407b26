"""Data models for changelog generation."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from githubkit.versions.latest.models import IssueSearchResultItem
from pydantic import BaseModel, ConfigDict, PositiveInt

from milestone_changelog.utils.constants import DEFAULT_CHANGELOG_FILE, GHOST_AUTHOR


class Audience(str, Enum):
    """Audience bucket an issue is partitioned into."""

    CLI = "cli"
    LIBRARY = "library"


class DiagnosticKind(str, Enum):
    """Kind of classification anomaly."""

    UNCATEGORIZED = "uncategorized"
    MULTI_CATEGORIZED = "multi_categorized"
    UNMAPPED_CATEGORY = "unmapped_category"


class ChangelogIssue(BaseModel):
    """A closed pull request considered for the changelog."""

    model_config = ConfigDict(frozen=True)

    number: PositiveInt
    title: str
    author: str
    labels: frozenset[str] = frozenset()

    @classmethod
    def from_github(cls, item: IssueSearchResultItem) -> "ChangelogIssue":
        """Build an issue from a GitHub search result item."""
        author = item.user.login if item.user is not None else GHOST_AUTHOR
        labels = frozenset(label.name for label in item.labels if isinstance(label.name, str) and label.name)
        return cls(number=item.number, title=item.title, author=author, labels=labels)


@dataclass(frozen=True)
class ClassificationDiagnostic:
    """An issue that could not be placed in a category."""

    kind: DiagnosticKind
    issue_number: int
    audience: Audience
    labels: tuple[str, ...] = ()

    @property
    def message(self) -> str:
        """Human readable description of the anomaly."""
        if self.kind == DiagnosticKind.UNCATEGORIZED:
            return f"issue {self.issue_number} doesn't have a type label"
        if self.kind == DiagnosticKind.MULTI_CATEGORIZED:
            return f"issue {self.issue_number} has more than one type label: {', '.join(self.labels)}"
        return f"issue {self.issue_number} has a type label with no changelog category: {', '.join(self.labels)}"


@dataclass
class AudienceReport:
    """Issues of one audience bucket, grouped by category."""

    issues: list[ChangelogIssue] = field(default_factory=list)
    categories: dict[str, list[ChangelogIssue]] = field(default_factory=dict)

    def has_entries(self) -> bool:
        """Whether any category retained at least one issue."""
        return any(self.categories.values())


@dataclass
class ClassifiedReport:
    """CLI and library buckets plus the annotation tags of every issue."""

    cli: AudienceReport
    library: AudienceReport
    annotations: dict[ChangelogIssue, tuple[str, ...]] = field(default_factory=dict)

    def tags_for(self, issue: ChangelogIssue) -> tuple[str, ...]:
        """Return the annotation tags computed for an issue."""
        return self.annotations.get(issue, ())


@dataclass
class ChangelogResult:
    """Result of a changelog generation run."""

    contents: str
    report: ClassifiedReport
    diagnostics: list[ClassificationDiagnostic] = field(default_factory=list)
    file: str = DEFAULT_CHANGELOG_FILE

    def outputs(self) -> dict[str, Any]:
        """Named outputs for tooling integration."""
        return {"contents": self.contents, "file": self.file}

    def count_diagnostics(self, kind: DiagnosticKind) -> int:
        """Count the diagnostics of a given kind."""
        return sum(1 for diagnostic in self.diagnostics if diagnostic.kind == kind)
