"""
cronops CLI - describe, preview and validate cron expressions.

Usage:
    cronops describe "*/15 * * * *"
    cronops next "0 9 * * 1-5" --count 3 --after 2024-01-05T18:00
    cronops validate "60 * * * *"
    cronops serve --port 8080
"""

import argparse
import json
import sys
from datetime import datetime
from typing import List, Optional

from dotenv import load_dotenv

from cronops.engine import (
    CronExpressionError,
    describe,
    format_occurrence,
    next_occurrences,
    parse_expression,
)
from cronops.infra import settings
from cronops.infra.logging_config import setup_logging

EXIT_OK = 0
EXIT_INVALID = 1
EXIT_USAGE = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cronops",
        description="Cron expression converter",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        help="Logging level (default: LOG_LEVEL env or INFO)"
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    describe_parser = subparsers.add_parser("describe", help="Describe an expression in English")
    describe_parser.add_argument("expression", help="Five-field cron expression (quote it)")

    next_parser = subparsers.add_parser("next", help="List upcoming executions")
    next_parser.add_argument("expression", help="Five-field cron expression (quote it)")
    next_parser.add_argument(
        "--count",
        type=int,
        default=None,
        help=f"Number of executions (1-{settings.MAX_OCCURRENCE_COUNT}, default: DEFAULT_OCCURRENCE_COUNT or 5)"
    )
    next_parser.add_argument(
        "--after",
        type=str,
        default=None,
        help="Reference instant in ISO format (default: now)"
    )
    next_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Print description and executions as JSON"
    )

    validate_parser = subparsers.add_parser("validate", help="Validate an expression")
    validate_parser.add_argument("expression", help="Five-field cron expression (quote it)")

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API server")
    serve_parser.add_argument("--host", type=str, default=None, help="Bind address (default: HOST env)")
    serve_parser.add_argument("--port", type=int, default=None, help="Port (default: PORT env or 8080)")

    return parser


def _print_error(error: CronExpressionError) -> None:
    print(f"Invalid cron expression: {error}", file=sys.stderr)
    print(f"  reason: {error.reason}", file=sys.stderr)
    if error.field_index is not None:
        print(f"  field:  {error.field_index} ({error.field_name})", file=sys.stderr)
        print(f"  token:  {error.token}", file=sys.stderr)


def run_describe(args) -> int:
    try:
        schedule = parse_expression(args.expression)
    except CronExpressionError as e:
        _print_error(e)
        return EXIT_INVALID

    print(describe(schedule))
    return EXIT_OK


def run_next(args) -> int:
    count = args.count if args.count is not None else settings.get_default_occurrence_count()
    if count < 1 or count > settings.MAX_OCCURRENCE_COUNT:
        print(f"--count must be between 1 and {settings.MAX_OCCURRENCE_COUNT}", file=sys.stderr)
        return EXIT_USAGE

    try:
        after = datetime.fromisoformat(args.after) if args.after else datetime.now()
    except ValueError:
        print(f"--after is not an ISO timestamp: {args.after}", file=sys.stderr)
        return EXIT_USAGE

    try:
        schedule = parse_expression(args.expression)
        occurrences = next_occurrences(schedule, after, count)
    except CronExpressionError as e:
        _print_error(e)
        return EXIT_INVALID

    executions = [format_occurrence(o) for o in occurrences]
    if args.json:
        print(json.dumps({
            "description": describe(schedule),
            "nextExecutions": executions,
        }, ensure_ascii=False, indent=2))
    else:
        for execution in executions:
            print(execution)
    return EXIT_OK


def run_validate(args) -> int:
    try:
        schedule = parse_expression(args.expression)
    except CronExpressionError as e:
        _print_error(e)
        return EXIT_INVALID

    print(f"Valid: {schedule.to_expression()}")
    return EXIT_OK


def run_serve(args) -> int:
    import uvicorn

    host = args.host or settings.get_host()
    port = args.port or settings.get_port()
    uvicorn.run("cronops.api.main:app", host=host, port=port)
    return EXIT_OK


COMMANDS = {
    "describe": run_describe,
    "next": run_next,
    "validate": run_validate,
    "serve": run_serve,
}


def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv()

    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command not in COMMANDS:
        parser.print_help()
        return EXIT_USAGE

    log_dir = settings.get_log_dir() if args.command == "serve" else None
    setup_logging(args.log_level or settings.get_log_level(), log_dir=log_dir)

    return COMMANDS[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
