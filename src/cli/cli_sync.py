from __future__ import annotations

import argparse
import json

from branding import LIVELISTARR_BANNER


# ------------------------------------------------------------
# Exit codes
# ------------------------------------------------------------

EXIT_OK = 0
EXIT_CONFIG_INVALID = 2
EXIT_AUTH_INVALID = 12
EXIT_FAILED = 20


# ------------------------------------------------------------
# Parser
# ------------------------------------------------------------


def build_sync_parser(subparsers: argparse._SubParsersAction) -> None:
    sync = subparsers.add_parser(
        "sync", help="Reconcile every configured playlist with what is live now"
    )

    sync.add_argument("--playlists", help="Path to playlists.json (overrides env)")
    sync.add_argument("--json", action="store_true", help="Print the run summary as JSON")
    sync.add_argument("--verbose", action="store_true")
    sync.add_argument("--quiet", action="store_true")


# ------------------------------------------------------------
# Handler
# ------------------------------------------------------------


def handle_sync(args: argparse.Namespace) -> int:
    from logger import get_logger
    from pipeline.models import RunResult
    from runner import run_once

    log = get_logger("livelistarr")

    log.info(LIVELISTARR_BANNER)
    log.info("Command: sync")

    summary = run_once(tasks_path=getattr(args, "playlists", None))

    if args.json:
        print(json.dumps(summary.as_dict(), indent=2, ensure_ascii=False))

    # -----------------------------
    # Terminal state handling
    # -----------------------------

    if summary.status == RunResult.OK:
        log.info("Done: OK (playlists reconciled)")
        return EXIT_OK

    if summary.status == RunResult.CONFIG_INVALID:
        log.error("Done: configuration invalid")
        return EXIT_CONFIG_INVALID

    if summary.status == RunResult.AUTH_INVALID:
        log.error("Done: OAuth invalid (reauth required)")
        return EXIT_AUTH_INVALID

    log.error("Done: failed")
    return EXIT_FAILED
