"""
runner.py

The single "run now" entry point.

    run_once() -> RunSummary

Sequence:
1) resolve OAuth settings + load playlists file   (no network yet)
2) build credentials / executor / content source
3) pre-flight an access token                     (auth errors abort here)
4) sync every playlist                            (failures contained per task)
5) write the status snapshot                      (best effort)
6) summarise + report

Never raises: every outcome is a RunSummary.
"""

from __future__ import annotations

import time
from pathlib import Path
from typing import List, Optional

from auth.credentials import CredentialManager
from auth.errors import AuthError, AuthInvalid
from branding import LIVELISTARR_HEADER, LIVELISTARR_SECTION_END
from env import Environment, get_env
from logger import get_logger
from pipeline.errors import ConfigurationError
from pipeline.models import PlaylistTask, RunResult, RunSummary, RunTotals, TaskResult
from pipeline.playlists_config import load_tasks
from pipeline.report import format_failure_report, format_sync_report
from pipeline.snapshot import SnapshotStore, build_snapshot
from providers.base import ContentSource
from providers.youtube.api_manager import ResilientExecutor
from providers.youtube.provider import YouTubeContentSource
from stages.sync import SyncOrchestrator

log = get_logger("livelistarr.runner")


def _elapsed_ms(start: float) -> int:
    return int((time.monotonic() - start) * 1000)


def _build_source(env: Environment) -> tuple[CredentialManager, ContentSource]:
    oauth = env.oauth_credentials()
    credentials = CredentialManager(
        oauth.client_id,
        oauth.client_secret,
        oauth.refresh_token,
        timeout=env.request_timeout,
    )
    executor = ResilientExecutor(credentials)
    return credentials, YouTubeContentSource(executor, timeout=env.request_timeout)


def _save_snapshot(
    store: SnapshotStore,
    source: ContentSource,
    tasks: List[PlaylistTask],
    results: List[TaskResult],
) -> None:
    try:
        metadata = source.playlist_metadata(t.target_collection_id for t in tasks)
        path = store.save(build_snapshot(tasks, results, metadata))
        log.info(f"Saved sync snapshot to {path}")
    except Exception as e:
        log.error("Failed to save sync snapshot (non-fatal)", exc_info=e)


def _emit(summary: RunSummary, env: Environment) -> None:
    if env.enable_report:
        report = (
            format_sync_report(summary)
            if summary.success
            else format_failure_report(summary)
        )
        for line in report.splitlines():
            log.info(line)

    status = "completed" if summary.success else summary.status.value
    log.info(f"RUN_STATUS={status}")


def run_once(
    *,
    env: Optional[Environment] = None,
    source: Optional[ContentSource] = None,
    credentials: Optional[CredentialManager] = None,
    tasks_path: Optional[Path] = None,
    snapshot_store: Optional[SnapshotStore] = None,
) -> RunSummary:
    """
    Execute one full reconciliation run.

    `source` / `credentials` are normally built from the environment; tests
    and embedders may pass their own.
    """
    start = time.monotonic()
    env = env or get_env()

    log.info(LIVELISTARR_HEADER("YouTube Live Playlist sync").rstrip("\n"))

    try:
        tasks = load_tasks(Path(tasks_path) if tasks_path else env.playlists_file)
        log.info(f"Loaded configuration with {len(tasks)} playlists")

        if source is None:
            credentials, source = _build_source(env)

        if credentials is not None:
            credentials.get_valid_token()

        orchestrator = SyncOrchestrator(
            source, mutation_pause_sec=env.mutation_pause_sec
        )
        results = orchestrator.sync_all(tasks)

        if env.snapshot_enabled:
            _save_snapshot(snapshot_store or SnapshotStore(), source, tasks, results)

        summary = RunSummary(
            success=True,
            status=RunResult.OK,
            execution_time_ms=_elapsed_ms(start),
            total_tasks=len(tasks),
            results=results,
            totals=RunTotals.from_results(results),
        )

    except ConfigurationError as e:
        log.error(f"Configuration invalid: {e}")
        summary = RunSummary(
            success=False,
            status=RunResult.CONFIG_INVALID,
            execution_time_ms=_elapsed_ms(start),
            error=str(e),
        )

    except AuthError as e:
        log.error(f"Authentication failed: {e}")
        summary = RunSummary(
            success=False,
            status=RunResult.AUTH_INVALID if isinstance(e, AuthInvalid) else RunResult.FAILED,
            execution_time_ms=_elapsed_ms(start),
            error=str(e),
        )

    except Exception as e:
        log.error("Sync job failed", exc_info=e)
        summary = RunSummary(
            success=False,
            status=RunResult.FAILED,
            execution_time_ms=_elapsed_ms(start),
            error=str(e) or e.__class__.__name__,
        )

    if summary.success:
        log.info(
            f"Sync job completed: {summary.totals.total_found} found, "
            f"{summary.totals.total_added} added, {summary.totals.total_removed} removed, "
            f"{summary.totals.total_errors} errors"
        )

    _emit(summary, env)
    log.info(LIVELISTARR_SECTION_END())
    return summary
