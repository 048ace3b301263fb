"""
Task Manager CLI
=================
Run the server, or talk to one that is already running.

Usage:
    # Start the server (port 4001 unless configured otherwise)
    python -m taskmanager.cli serve
    python -m taskmanager.cli serve --port 8080 --log-file server.log

    # Use a running server
    python -m taskmanager.cli list
    python -m taskmanager.cli add "Learn Go" "Complete tutorials."
    python -m taskmanager.cli submit "Buy milk"
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional

from taskmanager.client import DEFAULT_BASE_URL, TaskClient, TaskClientError
from taskmanager.config import ServerConfig
from taskmanager.server import run_server

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


# ─────────────────────────────────────────────────────────────
#  Helpers
# ─────────────────────────────────────────────────────────────

def configure_logging(level: str = "info", log_file: str = "") -> None:
    """Send log records to stderr, and also to ``log_file`` when given."""
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )


# ─────────────────────────────────────────────────────────────
#  Commands
# ─────────────────────────────────────────────────────────────

def cmd_serve(args) -> int:
    """Start the Task Manager server."""
    try:
        config = ServerConfig.from_env().with_overrides(
            host=args.host,
            port=args.port,
            log_level="debug" if args.debug else args.log_level,
            log_file=args.log_file,
        )
    except ValueError as e:
        print(f"✘ Configuration error: {e}", file=sys.stderr)
        return 2

    configure_logging(config.log_level, config.log_file)
    logger.debug("Config: %s", config)
    return run_server(config)


def cmd_list(args) -> int:
    """Print every task held by the server."""
    tasks = TaskClient(args.url).list_tasks()
    print(f"\n─── Tasks ({len(tasks)}) ───")
    for i, task in enumerate(tasks, 1):
        line = f"  {i}. {task.title}"
        if task.description:
            line += f" — {task.description}"
        print(line)
    return 0


def cmd_add(args) -> int:
    """Create a task through the JSON endpoint."""
    print(TaskClient(args.url).add_task(args.title, args.description))
    return 0


def cmd_submit(args) -> int:
    """Create a task through the form endpoint."""
    print(TaskClient(args.url).submit_form(args.title, args.description))
    return 0


# ─────────────────────────────────────────────────────────────
#  Main
# ─────────────────────────────────────────────────────────────

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="taskmanager",
        description="Task Manager — in-memory task API",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  taskmanager serve --port 4001\n"
            "  taskmanager add \"Learn Go\" \"Complete tutorials.\"\n"
            "  taskmanager list\n"
        ),
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # serve
    p_serve = subparsers.add_parser("serve", help="Start the Task Manager server")
    p_serve.add_argument("--host", default=None, help="Interface to bind (default: 0.0.0.0)")
    p_serve.add_argument("--port", type=int, default=None, help="Port number (default: 4001)")
    p_serve.add_argument("--log-level", default=None,
                         choices=["debug", "info", "warning", "error"],
                         help="Log level (default: info)")
    p_serve.add_argument("--log-file", default=None, help="Also write logs to this file")
    p_serve.add_argument("--debug", action="store_true", help="Shorthand for --log-level debug")

    # client commands
    for name, help_text in [
        ("list", "List tasks on a running server"),
        ("add", "Add a task (JSON endpoint)"),
        ("submit", "Add a task (form endpoint)"),
    ]:
        p = subparsers.add_parser(name, help=help_text)
        p.add_argument("--url", default=DEFAULT_BASE_URL,
                       help=f"Server base URL (default: {DEFAULT_BASE_URL})")
        if name != "list":
            p.add_argument("title", help="Task title")
            p.add_argument("description", nargs="?", default="", help="Task description")

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    commands = {
        "serve": cmd_serve,
        "list": cmd_list,
        "add": cmd_add,
        "submit": cmd_submit,
    }

    if args.command not in commands:
        parser.print_help()
        return 0

    try:
        return commands[args.command](args)
    except TaskClientError as e:
        print(f"✘ {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
