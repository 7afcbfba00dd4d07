"""
Exceptions for cluster link registry operations.
"""

from typing import Optional
from ..exceptions import ArkitekBuilderError, ErrorCode, MissingFieldError


class ClusterLinkRegistryError(ArkitekBuilderError):
    """Base exception for cluster link registry operations."""
    pass


class DuplicateNameError(ClusterLinkRegistryError):
    """Raised when a link with the same name is already registered."""

    def __init__(self, name: str, existing_id: Optional[str] = None):
        details = {"name": name}
        if existing_id:
            details["existing_id"] = existing_id
        super().__init__(
            f"A cluster link with the name '{name}' already exists",
            error_code=ErrorCode.CONFLICT,
            details=details
        )
        self.name = name
        self.existing_id = existing_id


class ClusterLinkNotFoundError(ClusterLinkRegistryError):
    """Raised when a link ID is not found in the registry."""

    def __init__(self, link_id: str):
        super().__init__(
            f"Cluster link '{link_id}' not found",
            error_code=ErrorCode.NOT_FOUND,
            details={"id": link_id}
        )
        self.link_id = link_id


# Short alias matching the registry vocabulary.
NotFoundError = ClusterLinkNotFoundError

__all__ = [
    "ClusterLinkRegistryError",
    "DuplicateNameError",
    "ClusterLinkNotFoundError",
    "NotFoundError",
    "MissingFieldError"
]
