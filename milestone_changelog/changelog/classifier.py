"""Classification of pull requests into audience and category buckets."""

from collections import Counter
from typing import Iterable

import structlog

from .models import (
    Audience,
    AudienceReport,
    ChangelogIssue,
    ClassificationDiagnostic,
    ClassifiedReport,
    DiagnosticKind,
)
from .taxonomy import LabelTaxonomy

logger = structlog.get_logger(__name__)


class IssueClassifier:
    """Partitions issues by audience and groups them by type label.

    Classification never fails on badly labeled issues. An issue without a
    type label, with several type labels, or with a type label that maps to
    no category is left out of every category and reported as a diagnostic.
    """

    def __init__(self, taxonomy: LabelTaxonomy) -> None:
        """Initialize with the label taxonomy to classify against."""
        self.taxonomy = taxonomy

    def audience_of(self, issue: ChangelogIssue) -> Audience:
        """Return the audience bucket an issue belongs to."""
        if self.taxonomy.audience_label in issue.labels:
            return Audience.LIBRARY
        return Audience.CLI

    def classify(self, issues: Iterable[ChangelogIssue]) -> tuple[ClassifiedReport, list[ClassificationDiagnostic]]:
        """Classify issues, preserving their input order within each category.

        Args:
            issues: Issues in the order the tracker returned them

        Returns:
            Tuple of (classified report, diagnostics)
        """
        buckets = {audience: self._empty_bucket() for audience in Audience}
        annotations: dict[ChangelogIssue, tuple[str, ...]] = {}
        diagnostics: list[ClassificationDiagnostic] = []

        for issue in issues:
            audience = self.audience_of(issue)
            bucket = buckets[audience]
            bucket.issues.append(issue)
            annotations[issue] = self.taxonomy.annotation_tags(issue.labels)

            diagnostic = self._categorize(issue, audience, bucket)
            if diagnostic is not None:
                logger.warning(diagnostic.message, issue_number=issue.number, kind=diagnostic.kind.value, audience=audience.value)
                diagnostics.append(diagnostic)

        report = ClassifiedReport(cli=buckets[Audience.CLI], library=buckets[Audience.LIBRARY], annotations=annotations)
        self._log_summary(report, diagnostics)
        return report, diagnostics

    def _empty_bucket(self) -> AudienceReport:
        return AudienceReport(categories={name: [] for name in self.taxonomy.category_names})

    def _categorize(self, issue: ChangelogIssue, audience: Audience, bucket: AudienceReport) -> ClassificationDiagnostic | None:
        type_labels = tuple(sorted(label for label in issue.labels if self.taxonomy.is_type_label(label)))

        if not type_labels:
            return ClassificationDiagnostic(DiagnosticKind.UNCATEGORIZED, issue.number, audience)
        if len(type_labels) > 1:
            return ClassificationDiagnostic(DiagnosticKind.MULTI_CATEGORIZED, issue.number, audience, type_labels)

        category = self.taxonomy.category_for_label(type_labels[0])
        if category is None:
            return ClassificationDiagnostic(DiagnosticKind.UNMAPPED_CATEGORY, issue.number, audience, type_labels)

        bucket.categories[category].append(issue)
        return None

    def _log_summary(self, report: ClassifiedReport, diagnostics: list[ClassificationDiagnostic]) -> None:
        counts = Counter(diagnostic.kind for diagnostic in diagnostics)
        logger.info(
            "Classified issues",
            cli_issues=len(report.cli.issues),
            library_issues=len(report.library.issues),
            uncategorized=counts[DiagnosticKind.UNCATEGORIZED],
            multi_categorized=counts[DiagnosticKind.MULTI_CATEGORIZED],
            unmapped_category=counts[DiagnosticKind.UNMAPPED_CATEGORY],
        )
