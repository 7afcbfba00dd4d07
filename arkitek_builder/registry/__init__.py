"""
Cluster link registry components.
"""

from .link_registry import ClusterLinkRegistry, generate_link_id
from .exceptions import (
    ClusterLinkRegistryError,
    DuplicateNameError,
    ClusterLinkNotFoundError,
    NotFoundError,
    MissingFieldError
)

__all__ = [
    "ClusterLinkRegistry",
    "generate_link_id",
    "ClusterLinkRegistryError",
    "DuplicateNameError",
    "ClusterLinkNotFoundError",
    "NotFoundError",
    "MissingFieldError"
]
