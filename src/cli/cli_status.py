from __future__ import annotations

import argparse
import json

from rich.console import Console
from rich.table import Table

from pipeline.snapshot import SnapshotStore


def build_status_parser(subparsers: argparse._SubParsersAction) -> None:
    status = subparsers.add_parser(
        "status", help="Show the playlists as of the last sync (no API calls)"
    )
    status.add_argument("--json", action="store_true", help="Print raw JSON")


def handle_status(args: argparse.Namespace) -> int:
    data = SnapshotStore().status()

    if args.json:
        print(json.dumps(data, indent=2, ensure_ascii=False))
        return 0

    console = Console()

    if not data["last_sync_at"]:
        console.print("No sync has completed yet.", style="yellow")
        return 0

    table = Table(title=f"Last sync: {data['last_sync_at']}")
    table.add_column("Playlist")
    table.add_column("Live", justify="right")
    table.add_column("Channels", justify="right")
    table.add_column("URL", overflow="fold")

    for p in data["playlists"]:
        table.add_row(
            str(p.get("name", "")),
            str(p.get("live_items_found", 0)),
            str(len(p.get("channels") or [])),
            str(p.get("youtube_url", "")),
        )

    console.print(table)
    return 0
