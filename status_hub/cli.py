"""
Reporter CLI - drive a running hub from shells and editor hooks

Usage:
    python report_status.py status
    python report_status.py update-by-path --status running
    python report_status.py update --task-id cursor_proj --status completed --source hook
    python report_status.py report --task-id cursor_proj --name "cursor - proj" --ide cursor --title proj
    python report_status.py delete --task-id cursor_proj
    python report_status.py reset [--task-id cursor_proj]

Exit codes: 0 applied, 1 hub/transport error, 3 update ignored by policy.
"""

import argparse
import json
import os
import sys
from typing import Any, Dict, List, Optional

from status_hub.client import StatusHubClient
from status_hub.models import TaskSource, TaskStatus
from status_hub.utils.exceptions import HubClientError

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_IGNORED = 3


def _add_progress_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--status", choices=TaskStatus.values(), help="New task status")
    parser.add_argument("--progress", type=int, help="Progress percentage (0-100)")
    parser.add_argument("--stage", dest="current_stage", help="Current stage description")
    parser.add_argument(
        "--estimated-duration", type=int, help="Expected total run time in milliseconds"
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="report_status",
        description="Report AI task status to a running Vibe Status Hub",
    )
    parser.add_argument("--url", default=None, help="Hub base URL (default: http://127.0.0.1:31415)")
    parser.add_argument("--timeout", type=float, default=5.0, help="Request timeout in seconds")

    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("status", help="Print the current task list")

    report = sub.add_parser("report", help="Register or refresh a window")
    report.add_argument("--task-id", required=True)
    report.add_argument("--name", required=True)
    report.add_argument("--ide", required=True)
    report.add_argument("--title", dest="window_title", required=True)
    report.add_argument("--focused", dest="is_focused", action="store_true")
    report.add_argument("--project-path")
    report.add_argument("--active-file")

    update = sub.add_parser("update", help="Update a task by id")
    update.add_argument("--task-id", required=True)
    update.add_argument("--source", choices=TaskSource.values(), default=None)
    _add_progress_arguments(update)

    by_path = sub.add_parser("update-by-path", help="Update the task of a project directory")
    by_path.add_argument("--project-path", default=None, help="Project directory (default: CWD)")
    by_path.add_argument("--ide", default=None, help="Restrict the match to one IDE")
    by_path.add_argument("--source", choices=TaskSource.values(), default=TaskSource.HOOK.value)
    _add_progress_arguments(by_path)

    delete = sub.add_parser("delete", help="Remove one task")
    delete.add_argument("--task-id", required=True)

    reset = sub.add_parser("reset", help="Remove one task, or all tasks")
    reset.add_argument("--task-id", default=None)

    return parser


def _dispatch(hub: StatusHubClient, args: argparse.Namespace) -> Dict[str, Any]:
    if args.command == "status":
        return hub.status()
    if args.command == "report":
        return hub.report(
            args.task_id,
            name=args.name,
            ide=args.ide,
            window_title=args.window_title,
            is_focused=args.is_focused,
            project_path=args.project_path,
            active_file=args.active_file,
        )
    if args.command == "update":
        return hub.update_state(
            args.task_id,
            status=args.status,
            source=args.source,
            progress=args.progress,
            current_stage=args.current_stage,
            estimated_duration=args.estimated_duration,
        )
    if args.command == "update-by-path":
        return hub.update_state_by_path(
            args.project_path or os.getcwd(),
            status=args.status,
            source=args.source,
            ide=args.ide,
            progress=args.progress,
            current_stage=args.current_stage,
            estimated_duration=args.estimated_duration,
        )
    if args.command == "delete":
        return hub.delete(args.task_id)
    return hub.reset(args.task_id)


def main(argv: Optional[List[str]] = None, client: Optional[StatusHubClient] = None) -> int:
    """
    Run one CLI command.

    Args:
        argv: Arguments without the program name; sys.argv[1:] when omitted
        client: Pre-built client (tests); one is created from --url otherwise
    """
    args = build_parser().parse_args(argv)
    hub = client or StatusHubClient(base_url=args.url, timeout=args.timeout)

    try:
        result = _dispatch(hub, args)
    except HubClientError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_ERROR
    finally:
        if client is None:
            hub.close()

    print(json.dumps(result, indent=2, ensure_ascii=False))
    if isinstance(result, dict) and result.get("status") == "ignored":
        return EXIT_IGNORED
    return EXIT_OK
