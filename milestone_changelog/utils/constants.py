"""Shared constants used across the application."""

# Changelog Constants
# -------------------

DEFAULT_CHANGELOG_FILE = "changelog.md"
"""Suggested file name for the rendered changelog."""

DEFAULT_AUDIENCE_LABEL = "lib"
"""Label marking a pull request as affecting library consumers only."""

DEFAULT_TYPE_LABEL_PREFIX = "type/"
"""Namespace prefix of the labels that carry the change category."""

DEFAULT_CATEGORIES = (
    ("Features", "type/enhancement"),
    ("Fixes", "type/bug"),
)
"""Category headings and their type labels, in heading order."""

DEFAULT_ANNOTATIONS = (
    ("experimental", "experimental"),
    ("breaking-change", "breaking"),
)
"""Annotation labels and the tag displayed for each, in tag order."""

LIBRARY_HEADING = "Library"
"""Heading of the section holding library-only changes."""

DEFAULT_LIBRARY_SUMMARY = "Changes that only affect the project as a library usage..."
"""Summary line of the collapsed library section."""

GHOST_AUTHOR = "ghost"
"""Handle GitHub shows for pull requests whose author account was deleted."""

# GitHub Search Constants
# -----------------------

SEARCH_PAGE_SIZE = 100
"""Maximum number of search results per page."""

SEARCH_RESULT_LIMIT = 1000
"""GitHub's cap on the number of results reachable through the Search API."""
