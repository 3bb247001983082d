"""Exceptions raised by narutils.

Everything derives from NarutilsError so the CLI can report any failure with
a single handler while still telling the cases apart by class.
"""


class NarutilsError(Exception):
    """Base class for all expected narutils failures."""


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


class ConfigError(NarutilsError):
    """Problem with the local config.json."""


class ConfigMissingError(ConfigError):
    """config.json does not exist yet."""

    def __init__(self, path):
        super().__init__(
            f"Config file {path} not found. "
            f"To configure the application, please create {path} and fill it with values."
        )
        self.path = path


class ConfigMalformedError(ConfigError):
    """config.json exists but is not valid JSON or misses required values."""

    def __init__(self, path, problems: list[str]):
        details = "; ".join(problems)
        super().__init__(f"Config file {path} is invalid: {details}")
        self.path = path
        self.problems = problems


class TempoNotConfiguredError(ConfigError):
    def __init__(self):
        super().__init__("Tempo is not configured. Add a 'tempo' section to config.json.")


# ---------------------------------------------------------------------------
# Local state
# ---------------------------------------------------------------------------


class StateError(NarutilsError):
    """The active issue file cannot be read or written."""


class NoActiveIssueError(NarutilsError):
    def __init__(self):
        super().__init__("No active issue selected. Run 'narutils activate-issue <key>' first.")


class NoIssueKeyFoundError(NarutilsError):
    def __init__(self, text: str, project_key: str):
        super().__init__(f"Could not find a {project_key}-<number> issue key in '{text}'")
        self.text = text
        self.project_key = project_key


class NoPriorEntryError(NarutilsError):
    def __init__(self):
        super().__init__(
            "No worklog entries found for today. Log the first entry of the day in Tempo, "
            "then track-time continues from where it ends."
        )


# ---------------------------------------------------------------------------
# Remote APIs
# ---------------------------------------------------------------------------


class ApiError(NarutilsError):
    """User-friendly API error."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class AuthError(ApiError):
    """401/403 from Jira or Tempo."""


class NotFoundError(ApiError):
    """404 from Jira or Tempo."""


class TransportError(ApiError):
    """Network failure, timeout or server-side (5xx) error."""


class ValidationError(ApiError):
    """The remote service rejected the request payload."""
