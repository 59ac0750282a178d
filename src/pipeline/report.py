from __future__ import annotations

from typing import List

import config
from branding import LIVELISTARR_BOX, SYMBOLS, center
from pipeline.models import ItemChange, RunSummary, TaskResult

LINE_WIDTH = 80
DOUBLE_LINE = "=" * LINE_WIDTH
SINGLE_LINE = "-" * LINE_WIDTH


def _format_change(change: ItemChange, indent: str, removal: bool = False) -> List[str]:
    video_url = config.VIDEO_URL_TEMPLATE.format(video_id=change.item_id)

    if change.title and change.source_label:
        lines = [
            f'{indent}* "{change.title}" by {change.source_label} '
            f"({change.source_id or 'unknown'})",
            f"{indent}  {video_url}",
        ]
        if change.source_id:
            channel_url = config.CHANNEL_URL_TEMPLATE.format(channel_id=change.source_id)
            lines.append(f"{indent}  Channel: {channel_url}")
        return lines

    if removal:
        return [f"{indent}* Video ID: {change.item_id} (Stream ended)"]

    return [f"{indent}* Video ID: {change.item_id}", f"{indent}  {video_url}"]


def _format_task(result: TaskResult) -> List[str]:
    lines = [
        SINGLE_LINE,
        f"{SYMBOLS.PLAYLIST} PLAYLIST: {result.task_name}",
        SINGLE_LINE,
        f"Live Streams Found: {result.live_items_found}",
        f"Videos Added: {result.items_added}",
        f"Videos Removed: {result.items_removed}",
        "",
    ]

    if result.added_detail:
        lines.append(f"  [{SYMBOLS.ADD}] ADDED:")
        for change in result.added_detail:
            lines.extend(_format_change(change, "      "))
        lines.append("")

    if result.removed_detail:
        lines.append(f"  [{SYMBOLS.REMOVE}] REMOVED:")
        for change in result.removed_detail:
            lines.extend(_format_change(change, "      ", removal=True))
        lines.append("")

    if result.errors:
        lines.append(f"Errors: {len(result.errors)}")
        lines.extend(f"  ! {e}" for e in result.errors)
    else:
        lines.append("Errors: None")

    return lines


def format_sync_report(summary: RunSummary) -> str:
    lines = [
        DOUBLE_LINE,
        center("YOUTUBE LIVE PLAYLIST SYNC REPORT", LINE_WIDTH),
        DOUBLE_LINE,
        f"Execution Time: {summary.execution_time_ms / 1000:.2f}s",
        f"Status: {'SUCCESS' if summary.success else 'FAILED'}",
        f"Total Playlists: {summary.total_tasks}",
        f"Total Live Streams Found: {summary.totals.total_found}",
        f"Total Videos Added: {summary.totals.total_added}",
        f"Total Videos Removed: {summary.totals.total_removed}",
        f"Total Errors: {summary.totals.total_errors}",
        "",
    ]

    for i, result in enumerate(summary.results):
        lines.extend(_format_task(result))
        if i < len(summary.results) - 1:
            lines.append("")

    lines.extend([DOUBLE_LINE, center("END OF REPORT", LINE_WIDTH), DOUBLE_LINE])
    return "\n".join(lines)


def format_failure_report(summary: RunSummary) -> str:
    return LIVELISTARR_BOX(
        [
            f"Execution Time: {summary.execution_time_ms / 1000:.2f}s",
            f"Status: {summary.status.value}",
            f"Error: {summary.error or 'Unknown error'}",
        ],
        title=f"{SYMBOLS.FAIL} SYNC JOB FAILED",
        width=LINE_WIDTH,
    )
