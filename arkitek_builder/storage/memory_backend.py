"""
In-process storage backend.
"""

import copy
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

from ..models.cluster_link import ClusterLink
from .base import (
    LinkStorageBackend,
    LinkSnapshot,
    SnapshotState,
    parse_link_records,
    serialize_link_records
)


class MemoryStorageBackend(LinkStorageBackend):
    """Keeps the serialized collection in memory.

    Records are stored in their on-disk form so that a load always returns
    fresh objects, like the file backend does.
    """

    backend_type = "memory"

    def __init__(self, records: Optional[List[Any]] = None):
        self._records = copy.deepcopy(list(records)) if records is not None else None
        self.save_count = 0

    async def initialize(self) -> bool:
        return True

    async def close(self) -> None:
        pass

    async def load_links(self) -> LinkSnapshot:
        if self._records is None:
            return LinkSnapshot(state=SnapshotState.MISSING)
        links, unparsed = parse_link_records(self._records, "memory")
        return LinkSnapshot(links=links, state=SnapshotState.LOADED, unparsed_records=unparsed)

    async def save_links(self, links: List[ClusterLink], unparsed_records: Sequence[Any] = ()) -> None:
        self._records = serialize_link_records(links, unparsed_records)
        self.save_count += 1

    async def health_check(self) -> Dict[str, Any]:
        return {
            "status": "healthy",
            "backend_type": self.backend_type,
            "link_count": len(self._records or []),
            "last_check": datetime.now(timezone.utc).isoformat()
        }
