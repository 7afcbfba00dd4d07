"""
Registry of cluster links backed by a pluggable storage backend.
"""

import asyncio
import time
import uuid
from typing import Callable, List, Optional

from ..models.base import utc_now
from ..models.cluster_link import ClusterLink, ClusterLinkStatus, DEFAULT_BUILDER_TYPE
from ..storage.base import LinkStorageBackend, LinkSnapshot, SnapshotState
from ..storage.file_backend import JsonFileStorageBackend
from ..utils.logging import get_logger, log_service_operation
from ..exceptions import ArkitekBuilderError
from .exceptions import (
    DuplicateNameError,
    ClusterLinkNotFoundError,
    MissingFieldError
)

logger = get_logger(__name__)


def generate_link_id() -> str:
    """Return a new random link identifier."""
    return uuid.uuid4().hex


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not str(value).strip()


class ClusterLinkRegistry:
    """Durable list of cluster links with unique names.

    The whole collection is re-read from storage at the start of every
    operation and written back in full after every mutation. An asyncio lock
    serializes these cycles so concurrent requests in one process cannot
    overwrite each other's changes. Stored entries that are not valid links
    are written back unchanged and keep their names reserved.
    """

    def __init__(self,
                 storage_backend: Optional[LinkStorageBackend] = None,
                 id_factory: Optional[Callable[[], str]] = None):
        """Initialize cluster link registry.

        Args:
            storage_backend: Storage backend for persistence (uses JsonFileStorageBackend if None)
            id_factory: Callable producing new link IDs (random UUIDs if None)
        """
        self.storage = storage_backend or JsonFileStorageBackend()
        self._id_factory = id_factory or generate_link_id
        self._lock = asyncio.Lock()

    async def initialize(self) -> None:
        """Prepare the storage backend and report what it currently holds."""
        await self.storage.initialize()
        snapshot = await self.load_snapshot()
        logger.info(
            f"Cluster link registry initialized with {len(snapshot.links)} links "
            f"(storage {snapshot.state.value})"
        )

    async def load_snapshot(self) -> LinkSnapshot:
        """Read the collection together with how it was read."""
        async with self._lock:
            return await self._load()

    async def list_links(self) -> List[ClusterLink]:
        """Return every registered link in insertion order.

        A missing, unreadable or malformed store yields an empty list.
        """
        snapshot = await self.load_snapshot()
        return snapshot.links

    async def create_link(self,
                          name: Optional[str],
                          endpoint: Optional[str],
                          credentials: Optional[str] = None,
                          builder_type: Optional[str] = None) -> ClusterLink:
        """Register a new cluster link.

        Args:
            name: Unique label for the link
            endpoint: Address of the remote cluster
            credentials: Opaque credentials, empty when omitted
            builder_type: Classification tag, "generic" when omitted

        Returns:
            The stored link

        Raises:
            MissingFieldError: If name or endpoint is empty
            DuplicateNameError: If a link with the same name exists
            PersistenceError: If the updated collection could not be written
        """
        missing = [field for field, value in (("name", name), ("endpoint", endpoint)) if _is_blank(value)]
        if missing:
            raise MissingFieldError(missing)

        start_time = time.time()
        async with self._lock:
            snapshot = await self._load()
            links = snapshot.links

            for existing in links:
                if existing.name == name:
                    log_service_operation(
                        "link_registry", "create_link", False,
                        (time.time() - start_time) * 1000,
                        error="duplicate name", link_name=name
                    )
                    raise DuplicateNameError(name, existing.id)

            if name in snapshot.reserved_names:
                log_service_operation(
                    "link_registry", "create_link", False,
                    (time.time() - start_time) * 1000,
                    error="name held by an unreadable record", link_name=name
                )
                raise DuplicateNameError(name)

            link = ClusterLink(
                id=self._id_factory(),
                name=name,
                endpoint=endpoint,
                credentials=credentials or "",
                builder_type=builder_type or DEFAULT_BUILDER_TYPE,
                created_at=utc_now(),
                status=ClusterLinkStatus.ACTIVE.value
            )
            links.append(link)
            await self._save(links, snapshot, "create_link", start_time)

        log_service_operation(
            "link_registry", "create_link", True,
            (time.time() - start_time) * 1000,
            link_id=link.id, link_name=link.name, link_count=len(links)
        )
        return link

    async def delete_link(self, link_id: str) -> ClusterLink:
        """Remove the link with the given ID.

        Returns:
            The removed link

        Raises:
            ClusterLinkNotFoundError: If no link has that ID
            PersistenceError: If the updated collection could not be written
        """
        start_time = time.time()
        async with self._lock:
            snapshot = await self._load()
            remaining = [link for link in snapshot.links if link.id != link_id]

            if len(remaining) == len(snapshot.links):
                log_service_operation(
                    "link_registry", "delete_link", False,
                    (time.time() - start_time) * 1000,
                    error="not found", link_id=link_id
                )
                raise ClusterLinkNotFoundError(link_id)

            removed = next(link for link in snapshot.links if link.id == link_id)
            await self._save(remaining, snapshot, "delete_link", start_time)

        log_service_operation(
            "link_registry", "delete_link", True,
            (time.time() - start_time) * 1000,
            link_id=link_id, link_count=len(remaining)
        )
        return removed

    async def get_link_count(self) -> int:
        """Number of registered links."""
        return len(await self.list_links())

    async def _load(self) -> LinkSnapshot:
        """Load the collection; caller must hold the lock."""
        snapshot = await self.storage.load_links()

        if snapshot.state in (SnapshotState.UNREADABLE, SnapshotState.MALFORMED):
            logger.warning(
                f"Cluster link storage is {snapshot.state.value}, treating it as empty",
                extra={'snapshot_state': snapshot.state.value, 'storage_error': snapshot.error}
            )
        elif snapshot.skipped_records:
            logger.warning(
                f"Keeping {snapshot.skipped_records} invalid cluster link record(s) as stored"
            )

        return snapshot

    async def _save(self,
                    links: List[ClusterLink],
                    snapshot: LinkSnapshot,
                    operation: str,
                    start_time: float) -> None:
        """Persist the collection with the entries it could not parse; caller must hold the lock."""
        try:
            await self.storage.save_links(links, snapshot.unparsed_records)
        except ArkitekBuilderError as e:
            log_service_operation(
                "link_registry", operation, False,
                (time.time() - start_time) * 1000,
                error=e.message
            )
            raise
