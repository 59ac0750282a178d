from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple


class RunResult(str, Enum):
    OK = "ok"
    AUTH_INVALID = "auth_invalid"
    CONFIG_INVALID = "config_invalid"
    FAILED = "failed"


class TaskState(str, Enum):
    PENDING = "pending"
    DISCOVERING = "discovering"
    FETCHING = "fetching"
    RECONCILING = "reconciling"
    APPLYING = "applying"
    DONE = "done"
    FAILED = "failed"


# ------------------------------------------------------------------
# Configuration-side models (immutable, loaded once)
# ------------------------------------------------------------------


@dataclass(frozen=True)
class SourceRef:
    source_id: str
    display_label: Optional[str] = None

    def describe(self) -> str:
        if self.display_label:
            return f"{self.source_id} ({self.display_label})"
        return self.source_id


@dataclass(frozen=True)
class PlaylistTask:
    display_name: str
    target_collection_id: str
    sources: Tuple[SourceRef, ...]


# ------------------------------------------------------------------
# Per-run items
# ------------------------------------------------------------------


@dataclass(frozen=True)
class LiveItem:
    item_id: str
    source_id: str
    title: str
    discovered_at: str
    source_label: Optional[str] = None


@dataclass(frozen=True)
class MemberItem:
    membership_handle: str  # required for removal
    item_id: str  # required for comparison


@dataclass(frozen=True)
class ItemChange:
    item_id: str
    title: Optional[str] = None
    source_id: Optional[str] = None
    source_label: Optional[str] = None

    @classmethod
    def from_live(cls, item: LiveItem) -> ItemChange:
        return cls(
            item_id=item.item_id,
            title=item.title,
            source_id=item.source_id,
            source_label=item.source_label,
        )

    @classmethod
    def from_member(cls, item: MemberItem) -> ItemChange:
        return cls(item_id=item.item_id)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "item_id": self.item_id,
            "title": self.title,
            "source_id": self.source_id,
            "source_label": self.source_label,
        }


@dataclass(frozen=True)
class PlaylistMetadata:
    playlist_id: str
    title: str = ""
    thumbnail_url: Optional[str] = None


# ------------------------------------------------------------------
# Results
# ------------------------------------------------------------------


@dataclass
class TaskResult:
    task_name: str
    live_items_found: int = 0
    items_added: int = 0
    items_removed: int = 0
    errors: List[str] = field(default_factory=list)
    added_detail: Optional[List[ItemChange]] = None
    removed_detail: Optional[List[ItemChange]] = None
    state: TaskState = TaskState.PENDING

    @classmethod
    def failed(cls, task_name: str, message: str) -> TaskResult:
        return cls(task_name=task_name, errors=[message], state=TaskState.FAILED)

    def as_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "task_name": self.task_name,
            "live_items_found": self.live_items_found,
            "items_added": self.items_added,
            "items_removed": self.items_removed,
            "errors": list(self.errors),
            "state": self.state.value,
        }
        if self.added_detail is not None:
            out["added_detail"] = [c.as_dict() for c in self.added_detail]
        if self.removed_detail is not None:
            out["removed_detail"] = [c.as_dict() for c in self.removed_detail]
        return out


@dataclass(frozen=True)
class RunTotals:
    total_found: int = 0
    total_added: int = 0
    total_removed: int = 0
    total_errors: int = 0

    @classmethod
    def from_results(cls, results: Sequence[TaskResult]) -> RunTotals:
        return cls(
            total_found=sum(r.live_items_found for r in results),
            total_added=sum(r.items_added for r in results),
            total_removed=sum(r.items_removed for r in results),
            total_errors=sum(len(r.errors) for r in results),
        )


@dataclass
class RunSummary:
    """
    Structured outcome of one run. Always produced, even when the run
    aborts before doing any work.
    """

    success: bool
    status: RunResult
    execution_time_ms: int
    total_tasks: int = 0
    results: List[TaskResult] = field(default_factory=list)
    totals: RunTotals = field(default_factory=RunTotals)
    error: Optional[str] = None

    def as_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "success": self.success,
            "status": self.status.value,
            "execution_time_ms": self.execution_time_ms,
            "total_tasks": self.total_tasks,
            "results": [r.as_dict() for r in self.results],
            "summary": {
                "total_found": self.totals.total_found,
                "total_added": self.totals.total_added,
                "total_removed": self.totals.total_removed,
                "total_errors": self.totals.total_errors,
            },
        }
        if self.error is not None:
            out["error"] = self.error
        return out
