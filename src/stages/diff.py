from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Generic, Hashable, List, Sequence, TypeVar

C = TypeVar("C")
D = TypeVar("D")


@dataclass(frozen=True)
class ReconciliationPlan(Generic[C, D]):
    to_add: List[D] = field(default_factory=list)
    to_remove: List[C] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.to_add and not self.to_remove


def diff(
    current: Sequence[C],
    desired: Sequence[D],
    key_of_current: Callable[[C], Hashable],
    key_of_desired: Callable[[D], Hashable] | None = None,
) -> ReconciliationPlan[C, D]:
    """
    Minimal add/remove sets turning `current` into `desired`.

    Only the extracted key is compared. Both outputs keep their input order.
    Duplicate keys in `desired` collapse to their first occurrence; every
    `current` entry is judged on its own since each has its own handle.
    `key_of_desired` defaults to `key_of_current` when both sides share a shape.
    """
    key_of_desired = key_of_desired or key_of_current  # type: ignore[assignment]

    current_keys = {key_of_current(c) for c in current}
    desired_keys = set()
    to_add: List[D] = []

    for d in desired:
        k = key_of_desired(d)
        if k in desired_keys:
            continue
        desired_keys.add(k)
        if k not in current_keys:
            to_add.append(d)

    to_remove = [c for c in current if key_of_current(c) not in desired_keys]
    return ReconciliationPlan(to_add=to_add, to_remove=to_remove)
