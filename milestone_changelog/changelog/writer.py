"""Persist a rendered changelog and expose it to GitHub Actions."""

import uuid
from pathlib import Path
from typing import Any, Mapping

import structlog

logger = structlog.get_logger(__name__)


def write_changelog(contents: str, path: Path) -> Path:
    """Write the changelog to a file, creating parent directories as needed."""
    if path.parent != Path(""):
        path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(contents)
    logger.info("The changelog was saved", path=str(path), length=len(contents))
    return path


def write_github_outputs(outputs: Mapping[str, Any], path: Path) -> None:
    """Append step outputs to a GitHub Actions output file.

    Every value uses the multiline ``name<<DELIMITER`` syntax with a random
    delimiter, so values may span lines. A single trailing newline of a value
    is consumed as the separator before the delimiter.
    """
    with open(path, "a", encoding="utf-8") as f:
        for name, value in outputs.items():
            delimiter = f"ghadelimiter_{uuid.uuid4()}"
            text = str(value)
            f.write(f"{name}<<{delimiter}\n{text}")
            if not text.endswith("\n"):
                f.write("\n")
            f.write(f"{delimiter}\n")
    logger.debug("Wrote GitHub Actions outputs", path=str(path), outputs=list(outputs))
