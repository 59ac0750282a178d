#!/usr/bin/env python3
from __future__ import annotations

import argparse
import sys

from bootstrap import bootstrap_base_env, bootstrap_run_context


def _dispatch_help(parser: argparse.ArgumentParser, argv: list[str]) -> int:
    # Support:
    #   livelistarr help
    #   livelistarr help sync
    #   livelistarr sync help
    if argv and argv[0] == "help":
        argv = argv[1:]
    argv = [a for a in argv if a != "help"]

    if not argv:
        parser.print_help()
        return 0

    try:
        build_parser().parse_args(argv + ["--help"])
    except SystemExit:
        pass
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="livelistarr",
        description="Keep YouTube playlists in sync with channels that are live right now.",
    )

    sub = p.add_subparsers(dest="command", required=True)

    help_cmd = sub.add_parser("help", help="Show help")
    help_cmd.add_argument("path", nargs="*", help="Command path to show help for")
    help_cmd.set_defaults(_help=True)

    # Keep imports inside builder to avoid early side effects.
    from cli.cli_auth import build_auth_parser
    from cli.cli_env import build_env_parser
    from cli.cli_logs import build_logs_parser
    from cli.cli_status import build_status_parser
    from cli.cli_sync import build_sync_parser

    build_sync_parser(sub)
    build_status_parser(sub)
    build_auth_parser(sub)
    build_env_parser(sub)
    build_logs_parser(sub)

    return p


def main(argv: list[str] | None = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)

    # Load .env and base environment early
    bootstrap_base_env()

    parser = build_parser()

    # Unified help routing
    if not argv or argv[0] == "help" or argv[-1] == "help":
        return _dispatch_help(parser, argv)

    args = parser.parse_args(argv)

    # Stamp run context early (so subprocesses inherit it)
    bootstrap_run_context(
        command=args.command,
        verbose=bool(getattr(args, "verbose", False)),
        quiet=bool(getattr(args, "quiet", False) or getattr(args, "json", False)),
    )

    # Initialize logging AFTER run-context env stamping
    from logger import get_logger, init_logging

    init_logging(module=args.command)

    log = get_logger(__name__)
    log.info("Livelistarr starting")
    log.debug(f"Command: {args.command}")

    # Dispatch
    if args.command == "sync":
        from cli.cli_sync import handle_sync

        return handle_sync(args)

    if args.command == "status":
        from cli.cli_status import handle_status

        return handle_status(args)

    if args.command == "auth":
        from cli.cli_auth import handle_auth

        return handle_auth(args)

    if args.command == "env":
        from cli.cli_env import handle_env

        return handle_env(args)

    if args.command == "logs":
        from cli.cli_logs import handle_logs

        return handle_logs(args)

    raise RuntimeError(f"Unknown command: {args.command}")


if __name__ == "__main__":
    raise SystemExit(main())
