"""Centralized regex patterns and wire formats."""

import re
from functools import lru_cache

from errors import NoIssueKeyFoundError

DEFAULT_PROJECT_KEY = "PROJ"

# Tempo wire formats
TIME_FORMAT = "%H:%M:%S"
DATE_FORMAT = "%Y-%m-%d"


class Patterns:
    """Regex patterns used throughout narutils."""

    # Jira project key on its own: PROJ, AB_2
    PROJECT_KEY = re.compile(r"^[A-Z][A-Z0-9_]*$")

    @staticmethod
    @lru_cache(maxsize=None)
    def issue_key(project_key: str = DEFAULT_PROJECT_KEY) -> re.Pattern:
        """Issue key for one project: PROJ-123.

        At most 6 digits, so timestamps and other long numbers after the
        prefix are not swallowed whole.
        """
        return re.compile(re.escape(project_key) + r"-\d{1,6}")


def extract_issue_key(text: str, project_key: str = DEFAULT_PROJECT_KEY) -> str:
    """Return the first issue key found in text (a key, branch name, ...).

    Raises:
        NoIssueKeyFoundError: if text does not contain a key for project_key.
    """
    match = Patterns.issue_key(project_key).search(text)
    if not match:
        raise NoIssueKeyFoundError(text, project_key)
    return match.group(0)
