"""Cluster link data models."""

from enum import Enum
from typing import Optional
from datetime import datetime
from pydantic import Field, StrictInt, field_validator

from .base import CamelModel


DEFAULT_BUILDER_TYPE = "generic"


class ClusterLinkStatus(str, Enum):
    """Lifecycle flag of a cluster link. Links are created active."""
    ACTIVE = "active"


class ClusterLink(CamelModel):
    """A registered remote cluster endpoint."""
    id: str = Field(..., min_length=1, description="Opaque unique identifier")
    name: str = Field(..., min_length=1, description="Unique human-readable label")
    endpoint: str = Field(..., min_length=1, description="Address or URL of the remote cluster")
    credentials: str = Field(default="", description="Opaque credentials string")
    builder_type: str = Field(
        default=DEFAULT_BUILDER_TYPE,
        alias="builderType",
        description="Builder classification tag"
    )
    created_at: datetime = Field(
        ...,
        alias="createdAt",
        description="Creation timestamp"
    )
    status: str = Field(default=ClusterLinkStatus.ACTIVE.value, description="Lifecycle flag")

    def to_storage(self) -> dict:
        """Serialize using the on-disk field names."""
        return self.model_dump(mode="json", by_alias=True)


class ClusterLinkCreateRequest(CamelModel):
    """Request body for creating a cluster link.

    `name` and `endpoint` are optional here so that the registry, not the
    request parser, reports them as missing.
    """
    name: Optional[str] = Field(None, description="Unique label for the link")
    endpoint: Optional[str] = Field(None, description="Address or URL of the remote cluster")
    credentials: Optional[str] = Field(None, description="Opaque credentials string")
    builder_type: Optional[str] = Field(
        None,
        alias="builderType",
        description="Builder classification tag"
    )


class ClusterLinkDeleteResponse(CamelModel):
    """Confirmation returned after a link is deleted."""
    message: str = "Cluster link deleted successfully"
    id: str


class BootScriptRequest(CamelModel):
    """Request body for iPXE boot script generation."""
    cluster_name: Optional[str] = Field(None, alias="clusterName", description="Cluster name")
    server_count: Optional[StrictInt] = Field(None, alias="serverCount", description="Number of servers")
    boot_image: Optional[str] = Field(None, alias="bootImage", description="Kernel image URL")
    kernel_params: Optional[str] = Field(None, alias="kernelParams", description="Kernel command line")

    @field_validator('cluster_name', 'boot_image', 'kernel_params')
    @classmethod
    def strip_blank(cls, v):
        """Treat whitespace-only strings as not supplied."""
        if v is not None and not v.strip():
            return None
        return v
