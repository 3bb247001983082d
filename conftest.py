"""Shared pytest fixtures: fake HTTP sessions and a narutils state directory."""

import json
from typing import Any

import pytest

from active_issue import ActiveIssueStore
from models import AppConfig, TempoConfig

JIRA_HOST = "https://example.atlassian.net"
JIRA_API = f"{JIRA_HOST}/rest/api/latest"
TEMPO_API = "https://api.tempo.io/4"


class FakeResponse:
    def __init__(self, status_code: int = 200, json_data: Any = None, text: str = "", reason: str = ""):
        self.status_code = status_code
        self._json_data = json_data
        self.text = text or (json.dumps(json_data) if json_data is not None else "")
        self.reason = reason or ("OK" if status_code < 400 else "Error")

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    def json(self):
        if self._json_data is None:
            raise ValueError("No JSON body")
        return self._json_data


class FakeSession:
    """Stands in for requests.Session; answers from a (method, url) -> response table."""

    def __init__(self, routes: dict | None = None):
        self.routes = dict(routes or {})
        self.headers: dict[str, str] = {}
        self.auth = None
        self.calls: list[dict] = []
        self.closed = False

    def request(self, method, url, timeout=None, **kwargs):
        self.calls.append({"method": method, "url": url, "timeout": timeout, **kwargs})
        response = self.routes[(method, url)]
        if isinstance(response, Exception):
            raise response
        if isinstance(response, list):
            return response.pop(0)
        return response

    def close(self):
        self.closed = True

    def calls_to(self, method: str, url: str) -> list[dict]:
        return [c for c in self.calls if c["method"] == method and c["url"] == url]


def worklog_json(start_time: str, billable_seconds: int, worklog_id: int = 1, start_date: str = "2026-10-19") -> dict:
    return {
        "tempoWorklogId": worklog_id,
        "billableSeconds": billable_seconds,
        "startDate": start_date,
        "startTime": start_time,
    }


@pytest.fixture
def app_config() -> AppConfig:
    return AppConfig(
        jira_host=JIRA_HOST,
        jira_username="me@example.com",
        jira_password="secret-password",
        jira_project_key="PROJ",
        tempo=TempoConfig(token="tempo-token", api_url=TEMPO_API, project_id="10000"),
    )


@pytest.fixture
def state_dir(tmp_path):
    return tmp_path / ".narutils"


@pytest.fixture
def store(state_dir) -> ActiveIssueStore:
    return ActiveIssueStore(state_dir)


@pytest.fixture
def write_config(state_dir):
    """Write a config.json into the state directory and return its path."""

    def _write(data: Any):
        state_dir.mkdir(parents=True, exist_ok=True)
        path = state_dir / "config.json"
        path.write_text(data if isinstance(data, str) else json.dumps(data))
        return path

    return _write
