"""Utility functions for narutils: config loading and worklog time math."""

import json
import os
from datetime import date, datetime, time, timedelta
from pathlib import Path
from urllib.parse import urlsplit

from errors import ConfigMalformedError, ConfigMissingError
from models import DEFAULT_TEMPO_API_URL, AppConfig, TempoConfig, WorklogEntry, WorklogWindow
from patterns import DEFAULT_PROJECT_KEY, Patterns

# File paths
STATE_DIR = ".narutils"
STATE_DIR_ENV = "NARUTILS_DIR"
CONFIG_FILE = "config.json"

SECONDS_PER_DAY = 24 * 60 * 60


def get_state_dir() -> Path:
    """Directory holding config.json and active_issue.json."""
    return Path(os.environ.get(STATE_DIR_ENV) or STATE_DIR)


def get_config_path(state_dir: str | Path | None = None) -> Path:
    return Path(state_dir or get_state_dir()) / CONFIG_FILE


# ============================================================================
# Config
# ============================================================================


def validate_config(config: dict) -> list[str]:
    """Validate config structure and return list of error messages.

    Returns:
        Empty list if valid, otherwise list of error messages.
    """
    if not isinstance(config, dict):
        return ["Top level must be a JSON object"]

    errors = []

    for key in ["jira_host", "jira_username", "jira_password"]:
        value = config.get(key)
        if not value or not isinstance(value, str):
            errors.append(f"Missing {key}")

    host = config.get("jira_host")
    if isinstance(host, str) and host:
        errors.extend(_url_errors("jira_host", host))

    project_key = config.get("jira_project_key")
    if project_key is not None and not (
        isinstance(project_key, str) and Patterns.PROJECT_KEY.match(project_key)
    ):
        errors.append("jira_project_key must be an uppercase Jira project key like PROJ")

    tempo = config.get("tempo")
    if tempo is not None:
        if not isinstance(tempo, dict):
            errors.append("tempo must be an object")
        else:
            if not tempo.get("token"):
                errors.append("Missing tempo.token")
            api_url = tempo.get("api_url")
            if api_url:
                errors.extend(_url_errors("tempo.api_url", str(api_url)))

    return errors


def _url_errors(name: str, url: str) -> list[str]:
    if not url.startswith(("http://", "https://")):
        return [f"{name} must start with http:// or https://"]
    try:
        hostname = urlsplit(url).hostname
    except ValueError:
        hostname = None
    if not hostname:
        return [f"{name} has no host name"]
    return []


def load_config(state_dir: str | Path | None = None) -> AppConfig:
    """Load and validate config.json.

    Raises:
        ConfigMissingError: the file does not exist.
        ConfigMalformedError: the file is not valid JSON or misses values.
    """
    path = get_config_path(state_dir)
    if not path.exists():
        raise ConfigMissingError(path)

    try:
        with open(path) as f:
            raw = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigMalformedError(
            path, [f"not valid JSON (line {e.lineno}, column {e.colno}: {e.msg})"]
        ) from e

    errors = validate_config(raw)
    if errors:
        raise ConfigMalformedError(path, errors)

    tempo = None
    if raw.get("tempo") is not None:
        tempo_raw = raw["tempo"]
        tempo = TempoConfig(
            token=tempo_raw["token"],
            api_url=(tempo_raw.get("api_url") or DEFAULT_TEMPO_API_URL).rstrip("/"),
            project_id=str(tempo_raw.get("project_id") or ""),
        )

    return AppConfig(
        jira_host=raw["jira_host"].rstrip("/"),
        jira_username=raw["jira_username"],
        jira_password=raw["jira_password"],
        jira_project_key=raw.get("jira_project_key") or DEFAULT_PROJECT_KEY,
        tempo=tempo,
    )


def mask_secret(value: str) -> str:
    """Hide all but the last 4 characters of a secret."""
    if len(value) <= 4:
        return "*" * len(value)
    return "*" * (len(value) - 4) + value[-4:]


# ============================================================================
# Worklog time math
# ============================================================================


def get_today() -> date:
    """Today's local date."""
    return datetime.now().date()


def wrap_add_seconds(start: time, seconds: int) -> time:
    """Add seconds to a wall-clock time, wrapping past midnight."""
    start_seconds = start.hour * 3600 + start.minute * 60 + start.second
    total = (start_seconds + seconds) % SECONDS_PER_DAY
    return (datetime.min + timedelta(seconds=total)).time()


def worklog_window(entry: WorklogEntry) -> WorklogWindow:
    """Start and end time of a worklog entry."""
    return WorklogWindow(
        start=entry.start_time,
        end=wrap_add_seconds(entry.start_time, entry.billable_seconds),
    )


def next_start_time(last_entry: WorklogEntry) -> time:
    """Start time for a new entry that continues exactly where last_entry ends."""
    return worklog_window(last_entry).end


def total_billable_hours(entries: list[WorklogEntry]) -> float:
    """Sum of billable time in hours."""
    return sum(entry.billable_seconds for entry in entries) / 3600
