"""Summary: Command-line interface for TaskPilot.

Importance: Provides a local entry point to serve the API and inspect tasks.
Alternatives: Use a CLI framework like Typer or Click.
"""

from __future__ import annotations

import argparse
import logging
from datetime import datetime

import uvicorn

from taskpilot.api import create_app
from taskpilot.app import build_services
from taskpilot.config import AppConfig
from taskpilot.models import Task


def build_parser() -> argparse.ArgumentParser:
    """Summary: Build the CLI argument parser.

    Importance: Defines supported commands for local operation.
    Alternatives: Use a CLI framework like Typer or Click.
    """

    parser = argparse.ArgumentParser(description="TaskPilot CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", type=str, default=None)
    serve.add_argument("--port", type=int, default=None)

    subparsers.add_parser("list-tasks", help="List tasks")

    add_task = subparsers.add_parser("add-task", help="Create a task")
    add_task.add_argument("title", type=str)
    add_task.add_argument("--description", type=str, default=None)
    add_task.add_argument("--status", type=str, default=None)
    add_task.add_argument("--due", type=datetime.fromisoformat, default=None)

    delete_task = subparsers.add_parser("delete-task", help="Delete a task")
    delete_task.add_argument("task_id", type=int)

    return parser


def run_cli(argv: list[str] | None = None) -> None:
    """Summary: Execute the CLI command.

    Importance: Acts as the primary entrypoint for local usage.
    Alternatives: Provide separate scripts per command.
    """

    args = build_parser().parse_args(argv)
    config = AppConfig.from_env()
    logging.basicConfig(level=config.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")

    if args.command == "serve":
        app = create_app(config)
        uvicorn.run(app, host=args.host or config.api_host, port=args.port or config.api_port)
        return

    services = build_services(config)
    if args.command == "list-tasks":
        for task in services.tasks.list_tasks():
            due = task.due_date.isoformat() if task.due_date else "-"
            print(f"{task.id}: {task.title} [{task.status}] due {due} - {task.description or ''}")
        return
    if args.command == "add-task":
        draft = Task(
            title=args.title,
            description=args.description,
            status=args.status,
            due_date=args.due,
        )
        task = services.tasks.create_task(draft)
        print(f"Added task {task.id}: {task.description}")
        return
    if args.command == "delete-task":
        services.tasks.delete_task(args.task_id)
        print(f"Deleted task {args.task_id}.")
        return


if __name__ == "__main__":
    run_cli()
