"""
FastAPI routes for cluster links and boot script generation.
"""

import logging
from typing import List, Optional
from fastapi import APIRouter, Path, status
from fastapi.responses import PlainTextResponse

from ..models.cluster_link import (
    ClusterLink,
    ClusterLinkCreateRequest,
    ClusterLinkDeleteResponse,
    BootScriptRequest,
)
from ..registry.link_registry import ClusterLinkRegistry
from ..services.boot_script_generator import BootScriptGenerator
from ..exceptions import MissingFieldError


logger = logging.getLogger(__name__)

# Create API router
router = APIRouter(prefix="/api")

# Global instances (will be initialized in main.py)
link_registry: Optional[ClusterLinkRegistry] = None
boot_script_generator: Optional[BootScriptGenerator] = None


def init_cluster_link_services(
    registry: ClusterLinkRegistry,
    generator: BootScriptGenerator
):
    """Initialize the service instances used by these routes."""
    global link_registry, boot_script_generator
    link_registry = registry
    boot_script_generator = generator


# Cluster link endpoints
@router.get("/cluster-links", response_model=List[ClusterLink], tags=["Cluster Links"])
async def list_cluster_links() -> List[ClusterLink]:
    """
    List every registered cluster link in creation order.

    An empty or unreadable store returns an empty list.
    """
    return await link_registry.list_links()


@router.post(
    "/cluster-links",
    response_model=ClusterLink,
    status_code=status.HTTP_201_CREATED,
    tags=["Cluster Links"]
)
async def create_cluster_link(
    request: ClusterLinkCreateRequest = ClusterLinkCreateRequest()
) -> ClusterLink:
    """
    Register a new cluster link.

    `name` and `endpoint` are required and the name must not already be in
    use. `credentials` defaults to an empty string and `builderType` to
    "generic".
    """
    return await link_registry.create_link(
        name=request.name,
        endpoint=request.endpoint,
        credentials=request.credentials,
        builder_type=request.builder_type
    )


@router.delete(
    "/cluster-links/{link_id}",
    response_model=ClusterLinkDeleteResponse,
    tags=["Cluster Links"]
)
async def delete_cluster_link(
    link_id: str = Path(..., description="ID of the cluster link to delete")
) -> ClusterLinkDeleteResponse:
    """Delete a cluster link by ID."""
    removed = await link_registry.delete_link(link_id)
    return ClusterLinkDeleteResponse(id=removed.id)


# Boot script endpoints
@router.post("/ipxe/generate", response_class=PlainTextResponse, tags=["Boot Scripts"])
async def generate_ipxe_script(
    request: BootScriptRequest = BootScriptRequest()
) -> PlainTextResponse:
    """
    Generate an iPXE boot script for a cluster.

    The script is returned as a plain-text attachment named
    `<clusterName>-boot.ipxe`.
    """
    missing = []
    if not request.cluster_name:
        missing.append("clusterName")
    if request.server_count is None:
        missing.append("serverCount")
    if missing:
        raise MissingFieldError(missing)

    script = boot_script_generator.generate(
        cluster_name=request.cluster_name,
        server_count=request.server_count,
        boot_image=request.boot_image,
        kernel_params=request.kernel_params
    )
    filename = boot_script_generator.suggested_filename(request.cluster_name)

    logger.info(f"Generated boot script {filename} ({request.server_count} servers)")
    return PlainTextResponse(
        script,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'}
    )
