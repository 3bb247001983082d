"""API clients for Jira and Tempo."""

import sys
from datetime import date, datetime, time

import requests

from errors import ApiError, AuthError, NotFoundError, TransportError, ValidationError
from models import AppConfig, IssueRecord, NewWorklogRequest, TempoConfig, WorklogEntry
from patterns import DATE_FORMAT, TIME_FORMAT
from utils import get_today

JIRA_TIMEOUT = 10
TEMPO_TIMEOUT = 30


def _handle_api_error(response: requests.Response, service: str) -> ApiError:
    """Convert HTTP errors to user-friendly exceptions."""
    status = response.status_code

    messages = {
        401: f"{service}: Authentication failed. Check your credentials in config.json!",
        403: f"{service}: Access denied. Check your permissions or API token!",
        404: f"{service}: Resource not found. Check the key or the URL in config.json!",
        429: f"{service}: Too many requests. Wait a moment and try again.",
        500: f"{service}: Server error. The service may be temporarily unavailable.",
        502: f"{service}: Bad gateway. The service may be temporarily unavailable.",
        503: f"{service}: Service unavailable. Try again later.",
    }
    if status in (400, 422):
        message = f"{service}: Request rejected. {_error_details(response)}"
    else:
        message = messages.get(status, f"{service}: HTTP {status} - {response.reason}")

    if status in (401, 403):
        return AuthError(message, status)
    if status == 404:
        return NotFoundError(message, status)
    if status in (400, 422):
        return ValidationError(message, status)
    if status >= 500:
        return TransportError(message, status)
    return ApiError(message, status)


def _error_details(response: requests.Response) -> str:
    """Pull the error messages out of a Jira/Tempo error body, if any."""
    try:
        body = response.json()
    except ValueError:
        return response.text[:200]

    if not isinstance(body, dict):
        return ""
    # Tempo: {"errors": [{"message": ...}]}, Jira: {"errorMessages": [...], "errors": {...}}
    errors = body.get("errors")
    if isinstance(errors, list):
        return "; ".join(str(e.get("message", e)) if isinstance(e, dict) else str(e) for e in errors)
    parts = list(body.get("errorMessages", []))
    if isinstance(errors, dict):
        parts.extend(f"{k}: {v}" for k, v in errors.items())
    return "; ".join(parts)


class _BaseClient:
    service = ""
    timeout = JIRA_TIMEOUT

    def __init__(self, session: requests.Session | None = None, debug: bool = False):
        self.session = session or requests.Session()
        self.session.headers.update({"Accept": "application/json"})
        self.debug = debug

    def close(self) -> None:
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def _request(self, method: str, url: str, **kwargs) -> requests.Response:
        """Send a single request. Never retried."""
        try:
            r = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.exceptions.ConnectionError as e:
            raise TransportError(f"{self.service}: Cannot connect to {url}. Check your network!") from e
        except requests.exceptions.Timeout as e:
            raise TransportError(f"{self.service}: Connection timed out. The server may be slow.") from e
        except requests.exceptions.RequestException as e:
            raise TransportError(f"{self.service}: Request to {url} failed: {e}") from e

        if self.debug:
            print(f"[DEBUG] {method} {url} -> {r.status_code}", file=sys.stderr)

        if not r.ok:
            raise _handle_api_error(r, self.service)
        return r

    def _json(self, response: requests.Response) -> dict:
        try:
            return response.json()
        except ValueError as e:
            raise ApiError(f"{self.service}: Response is not valid JSON.", response.status_code) from e


class JiraClient(_BaseClient):
    """Client for Jira REST API."""

    service = "Jira"
    timeout = JIRA_TIMEOUT

    def __init__(self, config: AppConfig, session: requests.Session | None = None, debug: bool = False):
        super().__init__(session, debug)
        self.config = config
        self.api_url = f"{config.jira_host}/rest/api/latest"
        self.session.auth = (config.jira_username, config.jira_password)

    def get_my_account_id(self) -> str:
        """Get the current user's Jira account ID."""
        data = self._json(self._request("GET", f"{self.api_url}/myself"))
        try:
            return data["accountId"]
        except (KeyError, TypeError) as e:
            raise ApiError("Jira: /myself response has no accountId.") from e

    def get_issue(self, issue_key: str) -> IssueRecord:
        """Fetch id and summary of an issue."""
        data = self._json(
            self._request("GET", f"{self.api_url}/issue/{issue_key}", params={"fields": "summary"})
        )
        try:
            return IssueRecord(
                id=str(data["id"]),
                key=data.get("key", issue_key),
                summary=data["fields"]["summary"],
            )
        except (KeyError, TypeError) as e:
            raise ApiError(f"Jira: Unexpected response for issue {issue_key}.") from e

    def format_issue_url(self, issue_key: str) -> str:
        return self.config.format_issue_url(issue_key)


class TempoClient(_BaseClient):
    """Client for Tempo REST API."""

    service = "Tempo"
    timeout = TEMPO_TIMEOUT

    def __init__(self, config: TempoConfig, session: requests.Session | None = None, debug: bool = False):
        super().__init__(session, debug)
        self.api_url = config.api_url
        self.session.headers.update({"Authorization": f"Bearer {config.token}"})

    def fetch_worklogs(self, account_id: str, date_from: str, date_to: str) -> list[WorklogEntry]:
        """Fetch worklogs for a user within a date range, in the order Tempo returns them."""
        worklogs = []
        url = f"{self.api_url}/worklogs/user/{account_id}"
        params = {"from": date_from, "to": date_to}

        while url:
            data = self._json(self._request("GET", url, params=params))

            worklogs.extend(_parse_worklog(wl) for wl in data.get("results", []))

            # Handle pagination
            url = (data.get("metadata") or {}).get("next")
            params = {}  # Clear params for pagination URLs

        return worklogs

    def fetch_today(self, account_id: str, today: date | None = None) -> list[WorklogEntry]:
        """Fetch today's worklogs (local date)."""
        day = (today or get_today()).strftime(DATE_FORMAT)
        return self.fetch_worklogs(account_id, day, day)

    def submit(
        self,
        issue: IssueRecord,
        account_id: str,
        start_time: time,
        duration_seconds: int,
        today: date | None = None,
    ) -> NewWorklogRequest:
        """Create a worklog starting at start_time today. Sent once, never retried."""
        request = NewWorklogRequest(
            issue_id=issue.id,
            author_account_id=account_id,
            start_date=today or get_today(),
            start_time=start_time,
            time_spent_seconds=duration_seconds,
        )
        self._request("POST", f"{self.api_url}/worklogs", json=request.to_payload())
        return request


def _parse_worklog(raw: dict) -> WorklogEntry:
    """Convert a Tempo worklog JSON object."""
    try:
        start_time = datetime.strptime(raw["startTime"], TIME_FORMAT).time()
        return WorklogEntry(
            billable_seconds=int(raw["billableSeconds"]),
            start_time=start_time,
            start_date=raw.get("startDate", ""),
            worklog_id=raw.get("tempoWorklogId"),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise ApiError(f"Tempo: Unexpected worklog format: {raw!r}") from e
