"""Milestone changelog generation module."""

from .classifier import IssueClassifier
from .collector import MilestoneIssueCollector, PullRequestSearcher
from .generator import ChangelogGenerator
from .markdown import MarkdownRenderer
from .models import (
    Audience,
    AudienceReport,
    ChangelogIssue,
    ChangelogResult,
    ClassificationDiagnostic,
    ClassifiedReport,
    DiagnosticKind,
)
from .taxonomy import DEFAULT_TAXONOMY, AnnotationDefinition, CategoryDefinition, LabelTaxonomy, dump_taxonomy, load_taxonomy
from .writer import write_changelog, write_github_outputs

__all__ = [
    "Audience",
    "AudienceReport",
    "ChangelogIssue",
    "ChangelogResult",
    "ClassificationDiagnostic",
    "ClassifiedReport",
    "DiagnosticKind",
    "AnnotationDefinition",
    "CategoryDefinition",
    "LabelTaxonomy",
    "DEFAULT_TAXONOMY",
    "load_taxonomy",
    "dump_taxonomy",
    "IssueClassifier",
    "MarkdownRenderer",
    "MilestoneIssueCollector",
    "PullRequestSearcher",
    "ChangelogGenerator",
    "write_changelog",
    "write_github_outputs",
]
