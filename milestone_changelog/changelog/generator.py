"""Main changelog generation orchestration."""

import structlog

from milestone_changelog.configuration.models import GenerateChangelogConfig
from milestone_changelog.github.adapter import GitHubKitAdapter
from milestone_changelog.utils.constants import DEFAULT_LIBRARY_SUMMARY

from .classifier import IssueClassifier
from .collector import MilestoneIssueCollector, PullRequestSearcher
from .markdown import MarkdownRenderer
from .models import ChangelogResult
from .taxonomy import LabelTaxonomy

logger = structlog.get_logger(__name__)


class ChangelogGenerator:
    """Orchestrates collecting, classifying and rendering a milestone changelog.

    Only collection talks to GitHub. Classification and rendering are pure,
    and writing the result is left to the caller.
    """

    def __init__(
        self,
        config: GenerateChangelogConfig,
        taxonomy: LabelTaxonomy,
        searcher: PullRequestSearcher | None = None,
    ) -> None:
        """Initialize with the reconciled configuration and label taxonomy.

        Args:
            config: Reconciled generate command configuration
            taxonomy: Label taxonomy to classify against
            searcher: Source of pull requests; a GitHub adapter is created from the configuration when omitted
        """
        self.config = config
        self.taxonomy = taxonomy
        self.searcher = searcher

    async def initialize(self) -> None:
        """Initialize GitHub adapter."""
        self.searcher = await GitHubKitAdapter.create(
            repo=self.config.repo,
            github_auth_type=self.config.github_authentication_type,
            github_pat_token=self.config.github_pat_token,
            github_app_id=self.config.github_app_id,
            github_app_private_key_path=self.config.github_app_private_key_path,
            github_app_installation_id=self.config.github_app_installation_id,
            github_api_url=self.config.github_api_url,
        )
        logger.info("GitHub adapter initialized", repo=self.config.repo)

    async def generate(self) -> ChangelogResult:
        """Generate the changelog of the configured milestone."""
        if self.searcher is None:
            await self.initialize()
        assert self.searcher is not None

        issues = await MilestoneIssueCollector(self.searcher).collect(self.config.milestone)

        report, diagnostics = IssueClassifier(self.taxonomy).classify(issues)
        logger.info("CLI issues", count=len(report.cli.issues))
        logger.info("Library issues", count=len(report.library.issues))
        logger.info("Note: some issues may not be presented (eg. unmapped type labels)")

        renderer = MarkdownRenderer(self.taxonomy, self.config.library_summary or DEFAULT_LIBRARY_SUMMARY)
        contents = renderer.render(report)

        return ChangelogResult(contents=contents, report=report, diagnostics=diagnostics, file=str(self.config.output_file))
