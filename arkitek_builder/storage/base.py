"""
Abstract base class for cluster link storage backends.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Sequence, Set, Tuple

from pydantic import ValidationError as ModelValidationError

from ..models.cluster_link import ClusterLink

logger = logging.getLogger(__name__)


class SnapshotState(str, Enum):
    """How the stored collection looked when it was read."""
    LOADED = "loaded"
    MISSING = "missing"
    UNREADABLE = "unreadable"
    MALFORMED = "malformed"


@dataclass
class LinkSnapshot:
    """Result of reading the full link collection from a backend.

    Only LOADED snapshots can carry links; every other state reads as an
    empty collection. Stored entries that are not valid links are kept
    verbatim in `unparsed_records` so a later save can write them back.
    """
    links: List[ClusterLink] = field(default_factory=list)
    state: SnapshotState = SnapshotState.LOADED
    unparsed_records: List[Any] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def skipped_records(self) -> int:
        """Number of stored entries that could not be read as links."""
        return len(self.unparsed_records)

    @property
    def reserved_names(self) -> Set[str]:
        """Names still claimed by unparsed entries."""
        return {
            record["name"] for record in self.unparsed_records
            if isinstance(record, dict) and isinstance(record.get("name"), str)
        }

    @property
    def is_clean(self) -> bool:
        """True when the collection was read without setting anything aside."""
        return self.state in (SnapshotState.LOADED, SnapshotState.MISSING) and not self.unparsed_records


def parse_link_records(records: Iterable[Any], source: str) -> Tuple[List[ClusterLink], List[Any]]:
    """Split stored entries into valid links and entries to keep verbatim."""
    links = []
    unparsed = []
    for index, record in enumerate(records):
        try:
            links.append(ClusterLink.model_validate(record))
        except ModelValidationError as e:
            unparsed.append(record)
            logger.warning(
                f"Keeping invalid cluster link record #{index} in {source} unchanged: "
                f"{e.error_count()} validation error(s)"
            )
    return links, unparsed


def serialize_link_records(links: List[ClusterLink], unparsed_records: Sequence[Any] = ()) -> List[Any]:
    """On-disk form of a collection, unparsed entries appended unchanged."""
    return [link.to_storage() for link in links] + list(unparsed_records)


class LinkStorageBackend(ABC):
    """Abstract interface for cluster link persistence.

    Backends always read and write the whole collection.
    """

    backend_type: str = "abstract"

    @abstractmethod
    async def initialize(self) -> bool:
        """Initialize the storage backend.

        Returns:
            True if initialization was successful

        Raises:
            PersistenceError: If initialization fails
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close the storage backend and cleanup resources."""
        pass

    @abstractmethod
    async def load_links(self) -> LinkSnapshot:
        """Read the full link collection.

        Read problems are reported through the snapshot state, never raised.

        Returns:
            Snapshot holding the links in insertion order
        """
        pass

    @abstractmethod
    async def save_links(self, links: List[ClusterLink], unparsed_records: Sequence[Any] = ()) -> None:
        """Replace the stored collection with `links`.

        Args:
            links: Complete collection in insertion order
            unparsed_records: Entries from the last read to write back unchanged

        Raises:
            PersistenceError: If the collection could not be written
        """
        pass

    @abstractmethod
    async def health_check(self) -> Dict[str, Any]:
        """Perform health check on storage backend.

        Returns:
            Dictionary with health status information
        """
        pass
