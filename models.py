"""Data models for narutils."""

from dataclasses import dataclass
from datetime import date, time

from patterns import DATE_FORMAT, DEFAULT_PROJECT_KEY, TIME_FORMAT

DEFAULT_TEMPO_API_URL = "https://api.tempo.io/4"


@dataclass(frozen=True)
class TempoConfig:
    """Tempo section of config.json."""

    token: str
    api_url: str = DEFAULT_TEMPO_API_URL
    project_id: str = ""


@dataclass(frozen=True)
class AppConfig:
    """Contents of config.json."""

    jira_host: str
    jira_username: str
    jira_password: str
    jira_project_key: str = DEFAULT_PROJECT_KEY
    tempo: TempoConfig | None = None

    def format_issue_url(self, issue_key: str) -> str:
        return f"{self.jira_host}/browse/{issue_key}"


@dataclass(frozen=True)
class ActiveIssueState:
    """The issue currently being worked on."""

    issue_key: str


@dataclass(frozen=True)
class IssueRecord:
    """A Jira issue, as far as narutils cares."""

    id: str  # numeric, but Jira returns it as a string
    key: str
    summary: str


@dataclass(frozen=True)
class WorklogEntry:
    """A worklog entry from Tempo."""

    billable_seconds: int
    start_time: time
    start_date: str = ""  # YYYY-MM-DD
    worklog_id: int | None = None


@dataclass(frozen=True)
class WorklogWindow:
    """Start and end of a worklog entry as wall-clock times."""

    start: time
    end: time

    def __str__(self) -> str:
        return f"{self.start.strftime(TIME_FORMAT)} - {self.end.strftime(TIME_FORMAT)}"


@dataclass(frozen=True)
class NewWorklogRequest:
    """A worklog to be created in Tempo."""

    issue_id: str
    author_account_id: str
    start_date: date
    start_time: time
    time_spent_seconds: int

    def __post_init__(self):
        """Validate the request before anything is sent."""
        if self.time_spent_seconds <= 0:
            raise ValueError(f"time_spent_seconds must be positive, got {self.time_spent_seconds}")
        if not str(self.issue_id).isdigit():
            raise ValueError(f"issue_id must be numeric, got '{self.issue_id}'")
        if not self.author_account_id:
            raise ValueError("author_account_id is required")

    def to_payload(self) -> dict:
        """Body for POST /worklogs."""
        return {
            "authorAccountId": self.author_account_id,
            "issueId": int(self.issue_id),
            "startDate": self.start_date.strftime(DATE_FORMAT),
            "startTime": self.start_time.strftime(TIME_FORMAT),
            "timeSpentSeconds": self.time_spent_seconds,
        }
