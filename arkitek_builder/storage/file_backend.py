"""
File-based storage backend keeping the link collection in one JSON file.
"""

import json
import uuid
import aiofiles
import aiofiles.os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Sequence

from ..models.cluster_link import ClusterLink
from ..exceptions import PersistenceError
from ..utils.logging import get_logger
from .base import (
    LinkStorageBackend,
    LinkSnapshot,
    SnapshotState,
    parse_link_records,
    serialize_link_records
)

logger = get_logger(__name__)


class JsonFileStorageBackend(LinkStorageBackend):
    """Stores the link collection as a JSON array in a single file.

    Every save rewrites the whole file through a temporary sibling that is
    renamed over the target, so readers never see a partial write.
    """

    backend_type = "file"

    def __init__(self, links_file: str = "cluster-links.json"):
        """Initialize file storage backend.

        Args:
            links_file: Path of the JSON file holding the collection
        """
        self.links_file = Path(links_file)

    async def initialize(self) -> bool:
        """Make sure the directory holding the links file exists."""
        try:
            self.links_file.parent.mkdir(parents=True, exist_ok=True)
            logger.info(f"File storage backend initialized at {self.links_file}")
            return True
        except OSError as e:
            logger.error(f"Failed to initialize file storage backend: {e}")
            raise PersistenceError(
                "Failed to initialize file storage backend",
                backend_type=self.backend_type,
                operation="initialize",
                cause=e
            )

    async def close(self) -> None:
        """Nothing is held open between operations."""
        logger.info("File storage backend closed")

    async def load_links(self) -> LinkSnapshot:
        """Read the full collection, classifying any read problem."""
        if not self.links_file.exists():
            return LinkSnapshot(state=SnapshotState.MISSING)

        try:
            content = await self._read_file()
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Failed to read links file {self.links_file}: {e}")
            return LinkSnapshot(state=SnapshotState.UNREADABLE, error=str(e))

        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            logger.warning(f"Links file {self.links_file} is not valid JSON: {e}")
            return LinkSnapshot(state=SnapshotState.MALFORMED, error=str(e))

        if not isinstance(data, list):
            logger.warning(
                f"Links file {self.links_file} holds {type(data).__name__}, expected a JSON array"
            )
            return LinkSnapshot(
                state=SnapshotState.MALFORMED,
                error=f"expected a JSON array, found {type(data).__name__}"
            )

        links, unparsed = parse_link_records(data, str(self.links_file))

        logger.debug(f"Loaded {len(links)} cluster links from {self.links_file}")
        return LinkSnapshot(links=links, state=SnapshotState.LOADED, unparsed_records=unparsed)

    async def save_links(self, links: List[ClusterLink], unparsed_records: Sequence[Any] = ()) -> None:
        """Atomically replace the links file with the given collection."""
        content = json.dumps(serialize_link_records(links, unparsed_records), indent=2)
        temp_file = self.links_file.with_name(f".{self.links_file.name}.{uuid.uuid4().hex}.tmp")

        try:
            self.links_file.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(temp_file, 'w', encoding='utf-8') as f:
                await f.write(content)
            await aiofiles.os.replace(temp_file, self.links_file)
            logger.debug(f"Wrote {len(links)} cluster links to {self.links_file}")

        except OSError as e:
            logger.error(f"Failed to write links file {self.links_file}: {e}")
            if temp_file.exists():
                temp_file.unlink()
            raise PersistenceError(
                f"Failed to write cluster links to {self.links_file}",
                backend_type=self.backend_type,
                operation="save_links",
                cause=e
            )

    async def health_check(self) -> Dict[str, Any]:
        """Report whether the links file can be used."""
        directory = self.links_file.parent
        snapshot = await self.load_links()
        healthy = directory.is_dir() and snapshot.state in (SnapshotState.LOADED, SnapshotState.MISSING)

        return {
            "status": "healthy" if healthy else "unhealthy",
            "backend_type": self.backend_type,
            "links_file": str(self.links_file),
            "file_exists": self.links_file.exists(),
            "snapshot_state": snapshot.state.value,
            "link_count": len(snapshot.links),
            "skipped_records": snapshot.skipped_records,
            "last_check": datetime.now(timezone.utc).isoformat()
        }

    async def _read_file(self) -> str:
        """Read the raw links file."""
        async with aiofiles.open(self.links_file, 'r', encoding='utf-8') as f:
            return await f.read()
