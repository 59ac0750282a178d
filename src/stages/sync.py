"""
sync.py

Per-playlist reconciliation against what is live right now.

For each playlist task:
    DISCOVERING  ask every configured channel what it is broadcasting
    FETCHING     read the playlist's current members (all pages)
    RECONCILING  diff current vs. desired by video id
    APPLYING     add missing items, then remove stale ones
    DONE         result emitted (FAILED if anything above raised)

Failure containment, innermost first:
- one channel failing discovery  → logged, recorded, counts as zero items
- one add / remove failing       → logged, recorded, batch continues
- anything else inside a task    → task result with zero counts + one error
Tasks run strictly one after another; results keep task order.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, replace
from typing import Callable, List, Optional, Sequence

import config
from logger import get_logger
from pipeline.models import (
    ItemChange,
    LiveItem,
    MemberItem,
    PlaylistTask,
    TaskResult,
    TaskState,
)
from providers.base import ContentSource
from stages.diff import ReconciliationPlan, diff

StateObserver = Callable[[str, TaskState], None]


def _error_text(e: BaseException) -> str:
    return str(e) or e.__class__.__name__


def dedupe_live_items(items: Sequence[LiveItem]) -> List[LiveItem]:
    """First occurrence per item id wins; discovery order is preserved."""
    seen: set[str] = set()
    unique: List[LiveItem] = []
    for item in items:
        if item.item_id in seen:
            continue
        seen.add(item.item_id)
        unique.append(item)
    return unique


@dataclass
class ApplyOutcome:
    succeeded: List[ItemChange]
    errors: List[str]


class SyncOrchestrator:
    def __init__(
        self,
        source: ContentSource,
        *,
        mutation_pause_sec: float = config.DEFAULT_MUTATION_PAUSE_SEC,
        sleep: Callable[[float], None] = time.sleep,
        on_state: Optional[StateObserver] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._source = source
        self._mutation_pause_sec = mutation_pause_sec
        self._sleep = sleep
        self._on_state = on_state
        self._logger = logger or get_logger("stages.sync")

    # -----------------------------------------------------------------
    # Run level
    # -----------------------------------------------------------------

    def sync_all(self, tasks: Sequence[PlaylistTask]) -> List[TaskResult]:
        self._logger.info(f"Starting sync for {len(tasks)} playlists")

        results: List[TaskResult] = []
        for task in tasks:
            try:
                results.append(self.sync_task(task))
            except Exception as e:
                self._logger.error(
                    f"Failed to sync playlist: {task.display_name}", exc_info=e
                )
                self._transition(task, TaskState.FAILED)
                results.append(
                    TaskResult.failed(
                        task.display_name, f"Failed to sync: {_error_text(e)}"
                    )
                )

        return results

    # -----------------------------------------------------------------
    # Task level
    # -----------------------------------------------------------------

    def sync_task(self, task: PlaylistTask) -> TaskResult:
        """
        Reconcile one playlist. Raises only for failures outside the
        per-source / per-item containment (e.g. the member listing).
        """
        self._logger.info(f"Syncing playlist: {task.display_name}")
        result = TaskResult(task_name=task.display_name)

        self._transition(task, TaskState.DISCOVERING)
        desired = self.discover(task, result.errors)
        result.live_items_found = len(desired)
        self._logger.info(
            f"Found {len(desired)} live streams for {task.display_name}"
        )

        self._transition(task, TaskState.FETCHING)
        current = self._source.list_current_members(task.target_collection_id)

        self._transition(task, TaskState.RECONCILING)
        plan = self.plan(current, desired)
        self._logger.info(
            f"Sync diff for {task.display_name}: "
            f"{len(plan.to_add)} to add, {len(plan.to_remove)} to remove"
        )

        self._transition(task, TaskState.APPLYING)
        added = self.apply_additions(task, plan.to_add)
        removed = self.apply_removals(task, plan.to_remove)

        result.items_added = len(added.succeeded)
        result.items_removed = len(removed.succeeded)
        result.added_detail = added.succeeded
        result.removed_detail = removed.succeeded
        result.errors.extend(added.errors)
        result.errors.extend(removed.errors)

        self._transition(task, TaskState.DONE)
        result.state = TaskState.DONE
        self._logger.info(
            f"Sync completed for {task.display_name}: "
            f"{result.items_added} added, {result.items_removed} removed"
        )
        return result

    # -----------------------------------------------------------------
    # Steps
    # -----------------------------------------------------------------

    def discover(self, task: PlaylistTask, errors: List[str]) -> List[LiveItem]:
        """
        Live items across all of the task's sources, deduplicated.
        A failing source contributes nothing; its error is appended to `errors`.
        """
        self._logger.debug(f"Discovering live streams from {len(task.sources)} channels")

        found: List[LiveItem] = []
        for ref in task.sources:
            try:
                items = self._source.discover_live(ref.source_id)
            except Exception as e:
                self._logger.error(
                    f"Failed to fetch live streams for channel {ref.describe()}",
                    exc_info=e,
                )
                errors.append(
                    f"Discovery failed for channel {ref.describe()}: {_error_text(e)}"
                )
                continue

            if ref.display_label:
                items = [replace(i, source_label=ref.display_label) for i in items]
            found.extend(items)

        return dedupe_live_items(found)

    @staticmethod
    def plan(
        current: Sequence[MemberItem], desired: Sequence[LiveItem]
    ) -> ReconciliationPlan[MemberItem, LiveItem]:
        return diff(current, desired, lambda item: item.item_id)

    def apply_additions(
        self, task: PlaylistTask, items: Sequence[LiveItem]
    ) -> ApplyOutcome:
        outcome = ApplyOutcome(succeeded=[], errors=[])
        if not items:
            return outcome

        self._logger.info(
            f"Adding {len(items)} videos to playlist {task.target_collection_id}"
        )
        for i, item in enumerate(items):
            if i:
                self._sleep(self._mutation_pause_sec)
            try:
                self._source.add(task.target_collection_id, item.item_id)
            except Exception as e:
                self._logger.error(
                    f"Failed to add video {item.item_id} ({item.title!r}) "
                    f"to {task.target_collection_id}, continuing with next",
                    exc_info=e,
                )
                outcome.errors.append(
                    f"Failed to add video {item.item_id}: {_error_text(e)}"
                )
                continue
            outcome.succeeded.append(ItemChange.from_live(item))

        return outcome

    def apply_removals(
        self, task: PlaylistTask, items: Sequence[MemberItem]
    ) -> ApplyOutcome:
        outcome = ApplyOutcome(succeeded=[], errors=[])
        if not items:
            return outcome

        self._logger.info(
            f"Removing {len(items)} videos from playlist {task.target_collection_id}"
        )
        for i, item in enumerate(items):
            if i:
                self._sleep(self._mutation_pause_sec)
            try:
                self._source.remove(item.membership_handle)
            except Exception as e:
                self._logger.error(
                    f"Failed to remove playlist item {item.membership_handle} "
                    f"(video {item.item_id}), continuing with next",
                    exc_info=e,
                )
                outcome.errors.append(
                    f"Failed to remove video {item.item_id}: {_error_text(e)}"
                )
                continue
            outcome.succeeded.append(ItemChange.from_member(item))

        return outcome

    # -----------------------------------------------------------------
    # Internals
    # -----------------------------------------------------------------

    def _transition(self, task: PlaylistTask, state: TaskState) -> None:
        self._logger.debug(f"{task.display_name}: {state.value}")
        if self._on_state is not None:
            self._on_state(task.display_name, state)
