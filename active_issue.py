"""Persistence of the active issue pointer."""

import json
import os
import tempfile
from pathlib import Path

from errors import NoActiveIssueError, StateError
from models import ActiveIssueState

ACTIVE_ISSUE_FILE = "active_issue.json"


class ActiveIssueStore:
    """Reads and writes <state_dir>/active_issue.json."""

    def __init__(self, state_dir: str | Path):
        self.path = Path(state_dir) / ACTIVE_ISSUE_FILE

    def save(self, issue_key: str) -> ActiveIssueState:
        """Replace the active issue.

        The JSON is written to a temp file next to the target and moved into
        place, so the previous file stays intact if anything fails.
        """
        state = ActiveIssueState(issue_key=issue_key)
        dir_path = self.path.parent
        try:
            dir_path.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=dir_path, suffix=".tmp")
        except OSError as e:
            raise StateError(f"Cannot write {self.path}: {e}") from e

        try:
            with os.fdopen(fd, "w") as f:
                json.dump({"active_issue_key": state.issue_key}, f, indent=2)
            os.replace(tmp_path, self.path)
        except OSError as e:
            _discard(tmp_path)
            raise StateError(f"Cannot write {self.path}: {e}") from e
        except BaseException:
            _discard(tmp_path)
            raise
        return state

    def load(self) -> ActiveIssueState | None:
        """Return the active issue, or None if none was ever set."""
        if not self.path.exists():
            return None

        try:
            with open(self.path) as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise StateError(f"{self.path} is not valid JSON (line {e.lineno}: {e.msg})") from e
        except (OSError, UnicodeDecodeError) as e:
            raise StateError(f"Cannot read {self.path}: {e}") from e

        issue_key = data.get("active_issue_key") if isinstance(data, dict) else None
        if not issue_key or not isinstance(issue_key, str):
            raise StateError(f"{self.path} has no 'active_issue_key'")
        return ActiveIssueState(issue_key=issue_key)

    def require(self) -> ActiveIssueState:
        state = self.load()
        if state is None:
            raise NoActiveIssueError()
        return state


def _discard(tmp_path: str) -> None:
    try:
        os.unlink(tmp_path)
    except OSError:
        pass
