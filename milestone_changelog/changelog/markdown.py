"""Markdown rendering for changelogs."""

import structlog

from milestone_changelog.utils.constants import DEFAULT_LIBRARY_SUMMARY, LIBRARY_HEADING

from .models import AudienceReport, ChangelogIssue, ClassifiedReport
from .taxonomy import LabelTaxonomy

logger = structlog.get_logger(__name__)


class MarkdownRenderer:
    """Renders a classified report as a Markdown changelog.

    CLI changes come first, one level-3 heading per non-empty category.
    Library-only changes follow under a single "Library" heading, inside a
    collapsed details block with level-4 category headings.
    """

    def __init__(self, taxonomy: LabelTaxonomy, library_summary: str = DEFAULT_LIBRARY_SUMMARY) -> None:
        """Initialize with the taxonomy giving the category order."""
        self.taxonomy = taxonomy
        self.library_summary = library_summary

    def render_entry(self, issue: ChangelogIssue, tags: tuple[str, ...] = ()) -> str:
        """Render one bullet line, including its trailing newline."""
        line = f"* {issue.title}"
        if tags:
            line += f" [{', '.join(tags)}]"
        return line + f" (#{issue.number} by @{issue.author})\n"

    def render(self, report: ClassifiedReport) -> str:
        """Render the report.

        Returns:
            The changelog, ending with a single newline, or an empty string
            when no category retained any issue
        """
        output = self._render_categories(report, report.cli, "###")

        if report.library.has_entries():
            output += f"### {LIBRARY_HEADING}\n\n"
            output += f"<details><summary>{self.library_summary}</summary><p>\n\n"
            output += self._render_categories(report, report.library, "####")
            output += "</p></details>"

        output = output.strip()
        logger.debug("Rendered changelog", length=len(output))
        return f"{output}\n" if output else ""

    def _render_categories(self, report: ClassifiedReport, audience: AudienceReport, heading: str) -> str:
        output = ""
        for name in self.taxonomy.category_names:
            issues = audience.categories.get(name)
            assert isinstance(issues, list), f"Category '{name}' is missing from the classified report"
            if not issues:
                continue
            output += f"{heading} {name}\n\n"
            for issue in issues:
                output += self.render_entry(issue, report.tags_for(issue))
            output += "\n"
        return output
