from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Dict, Iterable, List

from pipeline.models import LiveItem, MemberItem, PlaylistMetadata


class ContentSource(ABC):
    """
    Abstract interface over an upstream listing / mutation API.

    Implementations must surface transient failures as exceptions so the
    request executor underneath can retry them.
    """

    name: str

    @abstractmethod
    def discover_live(self, source_id: str) -> List[LiveItem]:
        """Items the source is broadcasting right now (single capped page)."""
        raise NotImplementedError

    @abstractmethod
    def list_current_members(self, collection_id: str) -> List[MemberItem]:
        """Every member of the collection, in server order, across all pages."""
        raise NotImplementedError

    @abstractmethod
    def add(self, collection_id: str, item_id: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def remove(self, membership_handle: str) -> None:
        raise NotImplementedError

    def playlist_metadata(
        self, collection_ids: Iterable[str]
    ) -> Dict[str, PlaylistMetadata]:
        """Display metadata for snapshots. Optional; empty by default."""
        return {}
