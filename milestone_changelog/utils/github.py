"""Contains utility functions for GitHub interactions."""


async def split_repository_in_configuration(repo: str | None) -> tuple[str, str]:
    """Splits the repository in the configuration into owner and repository."""
    if repo is None:
        raise ValueError("A repository is required in config.")
    repo = repo.strip("/")
    parts = repo.split("/")
    if len(parts) != 2 or not all(parts):
        raise ValueError("Repository must be in the format 'owner/repo' with no leading/trailing slashes or extra parts.")
    owner, repository = parts
    return owner, repository


def build_milestone_search_query(repo: str, milestone: str) -> str:
    """Builds the Search API query for the closed pull requests of a milestone.

    Milestone titles containing whitespace are quoted so the search treats
    them as a single qualifier value.
    """
    milestone = milestone.strip()
    if any(char.isspace() for char in milestone):
        milestone = f'"{milestone}"'
    return f"repo:{repo} is:pr state:closed milestone:{milestone}"
