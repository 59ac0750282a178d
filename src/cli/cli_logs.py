from __future__ import annotations

import argparse

from cli.common import (
    dispatch_subparser_help,
    find_log_file,
    format_mtime,
    infer_run_status,
    list_run_files,
    print_table,
    print_tail,
    resolve_log_dir,
)


def build_logs_parser(subparsers: argparse._SubParsersAction) -> None:
    logs = subparsers.add_parser("logs", help="Log utilities")
    lsub = logs.add_subparsers(dest="logs_cmd", required=True)

    help_p = lsub.add_parser("help", help="Show help for logs")
    help_p.add_argument("path", nargs="*", help="Subcommand path (e.g. list, show)")
    help_p.set_defaults(action="help", _help_parser=logs)

    list_p = lsub.add_parser("list", help="List run logs with their final status")
    list_p.add_argument(
        "--command", dest="log_command", default="sync", help="Command log folder (default: sync)"
    )
    list_p.add_argument("--dir", help="Explicit log directory")
    list_p.add_argument("--limit", type=int, default=20, help="Newest N runs")
    list_p.set_defaults(action="list")

    show_p = lsub.add_parser("show", help="Show a log file (tail)")
    show_p.add_argument("name", help="Log filename or stem")
    show_p.add_argument(
        "--command", dest="log_command", default="sync", help="Command log folder (default: sync)"
    )
    show_p.add_argument("--dir", help="Explicit log directory")
    show_p.add_argument("--tail", type=int, default=120, help="Lines from end")
    show_p.set_defaults(action="show")


def handle_logs(args: argparse.Namespace) -> int:
    if args.action == "help":
        return dispatch_subparser_help(
            args._help_parser, list(getattr(args, "path", []) or [])
        )

    log_dir = resolve_log_dir(
        command=getattr(args, "log_command", None), explicit=getattr(args, "dir", None)
    )

    if args.action == "list":
        runs = list_run_files(log_dir)
        if args.limit > 0:
            runs = runs[: args.limit]
        print_table(
            ["run", "modified", "status"],
            [[r.run_id, format_mtime(r.mtime), infer_run_status(r.path)] for r in runs],
        )
        return 0

    if args.action == "show":
        path = find_log_file(log_dir, args.name)
        if not path:
            print(f"Log not found: {args.name}")
            return 1
        print_tail(path, int(args.tail))
        return 0

    raise SystemExit(f"Unknown logs action: {args.action}")
