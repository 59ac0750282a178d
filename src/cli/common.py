from __future__ import annotations

import argparse
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from env import logs_dir


# ----------------------------
# Help dispatch (subparser-local)
# ----------------------------


def dispatch_subparser_help(
    parser: argparse.ArgumentParser, path: list[str] | None
) -> int:
    """
    Implements consistent `X help [subcmd ...]` behavior for a subtree parser.
    """
    if not path:
        parser.print_help()
        return 0

    try:
        parser.parse_args(path + ["--help"])
    except SystemExit:
        pass
    return 0


# ----------------------------
# Logs filesystem helpers
# ----------------------------


def resolve_log_dir(*, command: str | None, explicit: str | None) -> Path:
    if explicit:
        return Path(explicit).expanduser().resolve()

    base = logs_dir()
    return (base / command).resolve() if command else base


def find_log_file(log_dir: Path, name: str) -> Path | None:
    if not log_dir.exists():
        return None

    for p in (log_dir / name, log_dir / f"{name}.log"):
        if p.exists() and p.is_file():
            return p

    for p in log_dir.glob("*.log"):
        if p.stem == name:
            return p

    return None


def read_text(path: Path) -> str:
    return path.read_text(encoding="utf-8", errors="replace")


def print_tail(path: Path, lines: int) -> None:
    try:
        data = read_text(path).splitlines()
    except OSError as e:
        print(f"[error reading log] {e}")
        return

    tail = data[-lines:] if lines > 0 else data
    for line in tail:
        print(line)


# ----------------------------
# Run status inference (log-driven)
# ----------------------------


def infer_run_status(path: Path) -> str:
    """
    Signal: the last RUN_STATUS=<value> line
      completed | config_invalid | auth_invalid | failed
    """
    try:
        text = read_text(path)
    except OSError:
        return "unknown"

    status = "unknown"
    for line in text.splitlines():
        _, sep, rest = line.partition("RUN_STATUS=")
        if sep:
            status = rest.strip() or "unknown"
    return status


# ----------------------------
# Run listing models
# ----------------------------


@dataclass(frozen=True)
class RunFile:
    run_id: str
    path: Path
    mtime: float
    size: int


def list_run_files(log_dir: Path) -> list[RunFile]:
    if not log_dir.exists():
        return []

    items: list[RunFile] = []
    for p in log_dir.glob("*.log"):
        try:
            st = p.stat()
        except OSError:
            continue
        items.append(RunFile(run_id=p.stem, path=p, mtime=st.st_mtime, size=st.st_size))

    items.sort(key=lambda r: r.mtime, reverse=True)
    return items


def format_mtime(ts: float) -> str:
    return datetime.fromtimestamp(ts).strftime("%Y-%m-%d %H:%M:%S")


# ----------------------------
# CLI output helpers
# ----------------------------


def print_table(headers: list[str], rows: list[list[str]]) -> None:
    """
    Simple fixed-width table printer for CLI output.
    """
    if not rows:
        print("(no results)")
        return

    widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(str(cell)))

    fmt = "  ".join(f"{{:{w}}}" for w in widths)

    print(fmt.format(*headers))
    print(fmt.format(*("-" * w for w in widths)))

    for row in rows:
        print(fmt.format(*(str(c) for c in row)))
