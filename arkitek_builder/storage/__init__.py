"""
Storage backends for cluster link persistence.
"""

from .base import LinkStorageBackend, LinkSnapshot, SnapshotState
from .file_backend import JsonFileStorageBackend
from .memory_backend import MemoryStorageBackend

__all__ = [
    "LinkStorageBackend",
    "LinkSnapshot",
    "SnapshotState",
    "JsonFileStorageBackend",
    "MemoryStorageBackend"
]
