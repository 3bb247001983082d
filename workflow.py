"""User-facing operations, composed from the store and the API clients."""

from typing import Callable

import questionary

from active_issue import ActiveIssueStore
from clients import JiraClient, TempoClient
from errors import NoPriorEntryError, TempoNotConfiguredError
from models import AppConfig, NewWorklogRequest
from patterns import TIME_FORMAT, extract_issue_key
from utils import mask_secret, next_start_time, total_billable_hours, worklog_window

TRACKABLE_MINUTES = (15, 30, 45, 60)


def prompt_minutes(choices: tuple[int, ...]) -> int:
    """Ask how many minutes to track."""
    answer = questionary.select(
        message="How many minutes do you want to track?",
        choices=[questionary.Choice(title=str(m), value=m) for m in choices],
    ).unsafe_ask()
    return int(answer)


class Workflow:
    """Runs one narutils command.

    Config is loaded by the caller and passed in. Clients are created on first use.
    """

    def __init__(
        self,
        config: AppConfig,
        store: ActiveIssueStore,
        jira: JiraClient | None = None,
        tempo: TempoClient | None = None,
        echo: Callable[[str], None] = print,
        ask_minutes: Callable[[tuple[int, ...]], int] = prompt_minutes,
        debug: bool = False,
    ):
        self.config = config
        self.store = store
        self._jira = jira
        self._tempo = tempo
        self.echo = echo
        self.ask_minutes = ask_minutes
        self.debug = debug

    @property
    def jira(self) -> JiraClient:
        if self._jira is None:
            self._jira = JiraClient(self.config, debug=self.debug)
        return self._jira

    @property
    def tempo(self) -> TempoClient:
        if self._tempo is None:
            if self.config.tempo is None:
                raise TempoNotConfiguredError()
            self._tempo = TempoClient(self.config.tempo, debug=self.debug)
        return self._tempo

    def close(self) -> None:
        """Close the HTTP sessions of the clients in use."""
        for client in (self._jira, self._tempo):
            if client is not None:
                client.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def parse_issue_key(self, text: str) -> str:
        return extract_issue_key(text, self.config.jira_project_key)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def show_active_issue(self) -> None:
        state = self.store.load()
        if state is None:
            self.echo("No active issue selected.")
            return

        issue = self.jira.get_issue(state.issue_key)
        self.echo(f"issue_key: {state.issue_key}")
        self.echo(f"summary: {issue.summary}")
        self.echo(f"url: {self.jira.format_issue_url(state.issue_key)}")

    def start_issue(self, raw_input: str) -> str:
        """Make the issue found in raw_input the active one."""
        issue_key = self.parse_issue_key(raw_input)
        self.store.save(issue_key)
        self.echo(f"Active issue: {issue_key}")
        return issue_key

    def format_commit_message(self, raw_input: str | None = None) -> str:
        """Print a commit message for raw_input, or for the active issue if omitted."""
        if raw_input is not None:
            issue_key = self.parse_issue_key(raw_input)
        else:
            issue_key = self.store.require().issue_key

        issue = self.jira.get_issue(issue_key)
        message = f"fix: {issue.summary}"
        self.echo(message)
        return message

    def print_today_summary(self, account_id: str | None = None) -> None:
        tempo = self.tempo
        account_id = account_id or self.jira.get_my_account_id()
        entries = tempo.fetch_today(account_id)

        self.echo(f"Today worked hours: {total_billable_hours(entries)}")
        if entries:
            self.echo(f"Started work at: {entries[0].start_time.strftime(TIME_FORMAT)}")
            self.echo(f"Last entry: {worklog_window(entries[-1])}")

    def track_time(self) -> NewWorklogRequest:
        """Log time on the active issue, right after today's last worklog."""
        issue_key = self.store.require().issue_key
        tempo = self.tempo
        account_id = self.jira.get_my_account_id()

        self.print_today_summary(account_id)

        minutes = self.ask_minutes(TRACKABLE_MINUTES)
        if minutes not in TRACKABLE_MINUTES:
            raise ValueError(f"Cannot track {minutes} minutes, choose one of {TRACKABLE_MINUTES}")

        # Re-fetch: the prompt may have been open for a while
        entries = tempo.fetch_today(account_id)
        if not entries:
            raise NoPriorEntryError()
        start_time = next_start_time(entries[-1])

        issue = self.jira.get_issue(issue_key)
        request = tempo.submit(issue, account_id, start_time, minutes * 60)

        self.echo("Time tracked.")
        return request

    def show_config(self) -> None:
        config = self.config
        self.echo(f"jira_host: {config.jira_host}")
        self.echo(f"jira_username: {config.jira_username}")
        self.echo(f"jira_password: {mask_secret(config.jira_password)}")
        self.echo(f"jira_project_key: {config.jira_project_key}")
        if config.tempo is None:
            self.echo("tempo: not configured")
            return
        self.echo(f"tempo.api_url: {config.tempo.api_url}")
        self.echo(f"tempo.token: {mask_secret(config.tempo.token)}")
        self.echo(f"tempo.project_id: {config.tempo.project_id}")
