from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import NoReturn

from pydantic import ValidationError

from kubefn.common.core.logging_config import setup_logging

from .config import KubefnConfig, config
from .core import console
from .core.exceptions import (
    DeploymentTimeoutError,
    FetchError,
    KubefnError,
    NotFoundError,
    SubmissionError,
)
from .models import FormatOptions, Ready
from .operations import InfoReport, open_operations

logger = logging.getLogger("kubefn.cli")

PROG = "kubefn"

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_REJECTED = 2
EXIT_TIMEOUT = 3
EXIT_NOT_FOUND = 4
EXIT_FETCH = 5

_EXIT_CODES = (
    (SubmissionError, EXIT_REJECTED),
    (DeploymentTimeoutError, EXIT_TIMEOUT),
    (NotFoundError, EXIT_NOT_FOUND),
    (FetchError, EXIT_FETCH),
)


def exit_code_for(exc: KubefnError) -> int:
    for error_type, code in _EXIT_CODES:
        if isinstance(exc, error_type):
            return code
    return EXIT_FAILURE


def _exit_parser_error(message: str) -> NoReturn:
    print(f"Error: {message}", file=sys.stderr)
    print(f"Hint: run `{PROG} --help`.", file=sys.stderr)
    raise SystemExit(EXIT_FAILURE)


class _KubefnArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> NoReturn:
        _exit_parser_error(message)


def build_parser() -> argparse.ArgumentParser:
    parser = _KubefnArgumentParser(
        prog=PROG,
        description="Deploy functions and show their live status.",
    )
    parser.add_argument("--config", default="", help="Path to the service description")
    parser.add_argument("--no-color", action="store_true", help="Disable colored output")
    subparsers = parser.add_subparsers(dest="command")

    # Accepted after the subcommand as well; SUPPRESS keeps a top-level flag intact.
    color = argparse.ArgumentParser(add_help=False)
    color.add_argument(
        "--no-color", action="store_true", default=argparse.SUPPRESS, help="Disable colored output"
    )

    deploy = subparsers.add_parser(
        "deploy-function",
        parents=[color],
        help="Redeploy a single function and wait until it is ready",
    )
    deploy.add_argument("-f", "--function", required=True, help="Function name")
    deploy.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Seconds to wait for readiness (default: DEPLOY_TIMEOUT)",
    )

    info = subparsers.add_parser(
        "info", parents=[color], help="Display information about the functions"
    )
    info.add_argument(
        "-f",
        "--function",
        action="append",
        default=[],
        help="Function name (repeatable; default: every function in the description)",
    )
    info.add_argument("-v", "--verbose", action="store_true", help="Display metadata")

    return parser


async def execute_deploy(cfg: KubefnConfig, name: str, timeout: float | None) -> Ready:
    async with open_operations(cfg) as operations:
        return await operations.deploy_function(name, timeout=timeout)


async def execute_info(cfg: KubefnConfig, names: list[str], options: FormatOptions) -> InfoReport:
    async with open_operations(cfg) as operations:
        return await operations.info(names, options)


def run(argv: list[str]) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    command = (args.command or "").strip()
    if command == "":
        print(f"Error: {PROG} requires a subcommand.", file=sys.stderr)
        print(f"Hint: run `{PROG} --help`.", file=sys.stderr)
        return EXIT_FAILURE

    cfg = config
    if args.config:
        cfg = config.model_copy(update={"FUNCTIONS_CONFIG_PATH": args.config})
    setup_logging(cfg.LOG_CONFIG_PATH, level=cfg.LOG_LEVEL)
    color = not args.no_color

    try:
        if command == "deploy-function":
            ready = asyncio.run(execute_deploy(cfg, args.function, args.timeout))
            console.success(
                f"Function {ready.name} successfully deployed ({ready.attempts} checks)",
                color=color,
            )
            return EXIT_OK

        if command == "info":
            options = FormatOptions(color=color, verbose=args.verbose)
            report = asyncio.run(execute_info(cfg, args.function, options))
            if report.message:
                print(report.message)
            for warning in report.warnings:
                console.warning(str(warning), color=color)
            for name, error in report.errors.items():
                console.error(f"{name}: {error}", color=color)
            return EXIT_OK if report.ok else EXIT_FAILURE
    except KubefnError as exc:
        logger.error(f"{command} failed: {exc}", extra={"error_type": type(exc).__name__})
        console.error(str(exc), color=color)
        return exit_code_for(exc)
    except ValidationError as exc:
        console.error(f"Invalid function description: {exc}", color=color)
        return EXIT_FAILURE

    print(f"Error: unknown command: {command}", file=sys.stderr)
    return EXIT_FAILURE


def main() -> int:
    return run(sys.argv[1:])


if __name__ == "__main__":
    raise SystemExit(main())
