"""Defines the Command Line Interface (CLI) using Typer."""

import asyncio
import logging
import sys
from pathlib import Path

import structlog
import typer
from dotenv import load_dotenv
from typer import Argument, Option
from typing_extensions import Annotated

from milestone_changelog.changelog import (
    DEFAULT_TAXONOMY,
    ChangelogGenerator,
    ChangelogResult,
    DiagnosticKind,
    dump_taxonomy,
    load_taxonomy,
    write_changelog,
    write_github_outputs,
)
from milestone_changelog.configuration.env import settings
from milestone_changelog.configuration.exceptions import (
    GitHubAuthenticationConfigurationUndefinedError,
    RequiredConfigurationElementError,
    TaxonomyConfigurationError,
)
from milestone_changelog.configuration.reconcile import reconcile_generate_changelog_configuration

load_dotenv()

typer_app = typer.Typer(pretty_exceptions_show_locals=False, help="Generate a changelog from the closed pull requests of a milestone.")

DIAGNOSTIC_TITLES = {
    DiagnosticKind.UNCATEGORIZED: "Issues without a type label",
    DiagnosticKind.MULTI_CATEGORIZED: "Issues with more than one type label",
    DiagnosticKind.UNMAPPED_CATEGORY: "Issues with a type label that has no changelog category",
}


def configure_logging(debug: bool) -> None:
    """Send structured logs to stderr so stdout only carries command output."""
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(logging.DEBUG if debug else logging.INFO),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )


def echo_diagnostics(result: ChangelogResult) -> None:
    """Report classification anomalies so tracker hygiene can be fixed."""
    for kind, title in DIAGNOSTIC_TITLES.items():
        diagnostics = [diagnostic for diagnostic in result.diagnostics if diagnostic.kind == kind]
        if not diagnostics:
            continue
        typer.echo(f"{title}: {len(diagnostics)}", err=True)
        for diagnostic in diagnostics:
            typer.echo(f"  - {diagnostic.message}", err=True)


@typer_app.command(name="generate")
def generate_cli(
    milestone: Annotated[str | None, Option(help="Milestone to document. Defaults to the MILESTONE (or PACK_VERSION) environment variable.")] = None,
    repo: Annotated[str | None, Option(help="Repository name (owner/repo). Defaults to the GITHUB_REPOSITORY environment variable.")] = None,
    output: Annotated[Path | None, Option("--output", "-o", help="Path of the changelog file. Defaults to CHANGELOG_FILE or changelog.md.")] = None,
    taxonomy_file: Annotated[Path | None, Option(help="YAML file with the label taxonomy. Defaults to TAXONOMY_FILE or the built-in taxonomy.")] = None,
    library_summary: Annotated[str | None, Option(help="Summary line of the collapsed library section.")] = None,
    github_output: Annotated[Path | None, Option(help="GitHub Actions output file. Defaults to the GITHUB_OUTPUT environment variable.")] = None,
    github_api_url: Annotated[str | None, Option(help="GitHub API URL.")] = None,
    github_pat_token: Annotated[str | None, Option(help="GitHub Personal Access Token.")] = None,
    github_app_id: Annotated[int | None, Option(help="GitHub App ID.")] = None,
    github_app_private_key_path: Annotated[Path | None, Option(help="Path to GitHub App private key.")] = None,
    github_app_installation_id: Annotated[int | None, Option(help="GitHub App Installation ID.")] = None,
    dry_run: Annotated[bool, Option("--dry-run", help="Print the changelog without writing any file.")] = False,
    debug: Annotated[bool, Option("--debug", help="Enable debug logging.")] = False,
) -> None:
    """Generate the changelog of a milestone from its closed pull requests."""
    configure_logging(debug or settings.DEBUG)

    try:
        config = asyncio.run(
            reconcile_generate_changelog_configuration(
                cli_debug=debug or None,
                cli_milestone=milestone,
                cli_repo=repo,
                cli_github_api_url=github_api_url,
                cli_github_pat_token=github_pat_token,
                cli_github_app_id=github_app_id,
                cli_github_app_private_key_path=github_app_private_key_path,
                cli_github_app_installation_id=github_app_installation_id,
                cli_output_file=output,
                cli_taxonomy_file=taxonomy_file,
                cli_library_summary=library_summary,
                cli_github_output=github_output,
            )
        )
    except (RequiredConfigurationElementError, GitHubAuthenticationConfigurationUndefinedError, ValueError) as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(1) from exc

    try:
        taxonomy = load_taxonomy(config.taxonomy_file) if config.taxonomy_file else DEFAULT_TAXONOMY
    except TaxonomyConfigurationError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(1) from exc

    typer.echo(f"Looking up PRs for milestone {config.milestone} in repo {config.repo}", err=True)
    try:
        result = asyncio.run(ChangelogGenerator(config, taxonomy).generate())
    except Exception as exc:
        typer.echo(f"Error generating changelog: {exc}", err=True)
        raise typer.Exit(1) from exc

    echo_diagnostics(result)

    if dry_run:
        typer.echo("Dry run - no files written", err=True)
    else:
        try:
            write_changelog(result.contents, config.output_file)
            typer.echo(f"Changelog saved to {config.output_file}", err=True)
            if config.github_output:
                write_github_outputs(result.outputs(), config.github_output)
        except OSError as exc:
            typer.echo(f"Error: Failed to write changelog outputs: {exc}", err=True)
            raise typer.Exit(1) from exc

    typer.echo(f"CHANGELOG:\n{result.contents}")


@typer_app.command(name="init-taxonomy")
def init_taxonomy_cli(
    path: Annotated[Path, Argument(help="Where to write the label taxonomy.")] = Path("changelog-taxonomy.yaml"),
    force: Annotated[bool, Option("--force", help="Overwrite an existing file.")] = False,
) -> None:
    """Write the built-in label taxonomy to a YAML file as a starting point."""
    if path.exists() and not force:
        typer.echo(f"Error: {path} already exists, use --force to overwrite it", err=True)
        raise typer.Exit(1)
    dump_taxonomy(DEFAULT_TAXONOMY, path)
    typer.echo(f"Label taxonomy written to {path}")


if __name__ == "__main__":
    typer_app()
