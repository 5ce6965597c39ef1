"""
Command-line front end for compose sessions.

Usage:
  compose-session -f docker-compose.yml up [SERVICE ...]
  compose-session -f docker-compose.yml down [SERVICE ...]
  compose-session -f docker-compose.yml kill [SERVICE ...]
  compose-session -f docker-compose.yml logs SERVICE     # Ctrl+C to stop
"""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.text import Text

from .models.errors import ComposeSessionException
from .models.result import CommandResult
from .session import ComposeSession
from .utils.logging import setup_logging

console = Console()
err_console = Console(stderr=True)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="compose-session",
        description="Run docker-compose lifecycle commands and follow service logs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-f", "--file", required=True, dest="manifest", help="Compose manifest")
    parser.add_argument(
        "--project-directory",
        dest="working_directory",
        default=None,
        help="Directory to run in (default: the manifest's directory)",
    )
    parser.add_argument(
        "--no-recreate",
        dest="force_recreate",
        action="store_false",
        help="Do not pass --force-recreate on up",
    )
    parser.add_argument(
        "-t", "--timestamps", action="store_true", help="Show timestamps in logs"
    )
    parser.add_argument("--log-level", default=None, help="Log level (default: settings)")

    subparsers = parser.add_subparsers(dest="command", required=True)

    for name, help_text in (
        ("up", "Start services detached"),
        ("down", "Stop and remove services"),
        ("kill", "Kill running services"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("services", nargs="*", help="Services (default: all)")

    logs_p = subparsers.add_parser("logs", help="Follow one service's logs")
    logs_p.add_argument("service", help="Service to follow")

    return parser


def print_result(result: CommandResult) -> None:
    output = (result.stdout + result.stderr).strip()
    if output:
        console.print(Panel(Text(output), title=" ".join(result.command), border_style="cyan"))
    console.print("[green]Done.[/green]")


async def cmd_lifecycle(session: ComposeSession, args: argparse.Namespace) -> None:
    operation = getattr(session, args.command)
    result = await operation(args.services or None)
    print_result(result)


async def cmd_logs(session: ComposeSession, args: argparse.Namespace) -> None:
    def on_line(line: str) -> None:
        if line:
            console.print(line, markup=False, highlight=False)

    subscription = await session.logs(args.service, on_line)
    try:
        returncode = await subscription.wait()
    finally:
        await subscription.dispose()
    if returncode:
        raise SystemExit(returncode)


async def run(args: argparse.Namespace) -> None:
    session = ComposeSession(
        args.manifest,
        working_directory=args.working_directory,
        force_recreate=args.force_recreate,
        timestamps=args.timestamps,
    )
    async with session:
        if args.command == "logs":
            await cmd_logs(session, args)
        else:
            await cmd_lifecycle(session, args)


def main(argv: Optional[List[str]] = None) -> None:
    # Values in .env also reach the compose tool, e.g. COMPOSE_PROJECT_NAME
    load_dotenv(Path.cwd() / ".env")

    args = build_parser().parse_args(argv)
    setup_logging(level=args.log_level)

    try:
        asyncio.run(run(args))
    except ComposeSessionException as e:
        err_console.print(f"[red]Error:[/red] {escape(e.message)}")
        sys.exit(1)
    except KeyboardInterrupt:
        console.print("\n[yellow]Stopped.[/yellow]")
        sys.exit(0)


if __name__ == "__main__":
    main()
