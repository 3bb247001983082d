# PYTHON_ARGCOMPLETE_OK
"""
narutils - link your working copy to Jira and Tempo.

Usage:
    # Make an issue the active one (a key or any text containing one, e.g. a branch name)
    narutils activate-issue feature/PROJ-99-retry-logic

    # Commit message for the active issue
    git commit -m "$(narutils format-commit)"

    # Log 15-60 minutes on the active issue, right after today's last worklog
    narutils track-time
"""

import argparse
import sys

import argcomplete

from active_issue import ActiveIssueStore
from errors import ConfigMissingError, NarutilsError
from utils import get_state_dir, load_config
from workflow import Workflow

PROG = "narutils"
SHELLS = ["bash", "zsh", "fish", "tcsh", "powershell"]


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=PROG,
        description="Link your working copy to Jira and Tempo",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Files:
    .narutils/config.json        Jira/Tempo credentials (see 'narutils config')
    .narutils/active_issue.json  The active issue

Set NARUTILS_DIR to use another directory than ./.narutils.
        """,
    )
    parser.add_argument("--debug", action="store_true", help="Print every HTTP call to stderr")

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    fmt = subparsers.add_parser("format-commit", help="Print a commit message for an issue")
    fmt.add_argument(
        "jira_issue", nargs="?", default=None, help="Issue key or text containing one (default: active issue)"
    )

    activate = subparsers.add_parser("activate-issue", help="Set the active issue")
    activate.add_argument("jira_issue", help="Issue key or text containing one, e.g. a branch name")

    subparsers.add_parser("get-active-issue", help="Show the active issue")
    subparsers.add_parser("print-tempo-worklog", help="Summarize today's Tempo worklogs")
    subparsers.add_parser("track-time", help="Log time on the active issue in Tempo")
    subparsers.add_parser("config", help="Show the loaded configuration")

    completions = subparsers.add_parser(
        "completions",
        help="Generate shell tab-completion scripts",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Bash (add to ~/.bashrc):
    eval "$(narutils completions bash)"

Zsh (add to ~/.zshrc):
    eval "$(narutils completions zsh)"

Fish (add to ~/.config/fish/config.fish):
    narutils completions fish | source
        """,
    )
    completions.add_argument("shell", choices=SHELLS)

    return parser


def completions_command(shell: str) -> int:
    print(argcomplete.shellcode([PROG], shell=shell))
    return 0


def config_command(workflow_factory) -> int:
    try:
        workflow = workflow_factory()
    except ConfigMissingError as e:
        print(f"To configure the application, please create a file {e.path} and fill it with values.")
        print()
        print("    {")
        print('      "jira_host": "https://example.atlassian.net",')
        print('      "jira_username": "me@example.com",')
        print('      "jira_password": "<api token>",')
        print('      "jira_project_key": "PROJ",')
        print('      "tempo": {"token": "<tempo token>", "api_url": "https://api.tempo.io/4", "project_id": ""}')
        print("    }")
        return 0
    workflow.show_config()
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = create_parser()
    argcomplete.autocomplete(parser)
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    if args.command == "completions":
        return completions_command(args.shell)

    state_dir = get_state_dir()

    def workflow_factory() -> Workflow:
        return Workflow(load_config(state_dir), ActiveIssueStore(state_dir), debug=args.debug)

    try:
        if args.command == "config":
            return config_command(workflow_factory)

        with workflow_factory() as workflow:
            if args.command == "format-commit":
                workflow.format_commit_message(args.jira_issue)
            elif args.command == "activate-issue":
                workflow.start_issue(args.jira_issue)
            elif args.command == "get-active-issue":
                workflow.show_active_issue()
            elif args.command == "print-tempo-worklog":
                workflow.print_today_summary()
            elif args.command == "track-time":
                workflow.track_time()
    except KeyboardInterrupt:
        print("\n[!] Aborted.", file=sys.stderr)
        return 130
    except NarutilsError as e:
        print(f"[!] ERROR: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
