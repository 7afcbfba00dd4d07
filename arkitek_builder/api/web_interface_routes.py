"""
Web interface API routes.

This module provides the data behind the dashboard, cluster configuration
and boot script pages of the web interface.
"""

import logging
from collections import Counter
from typing import Any, Dict, Optional
from fastapi import APIRouter

from ..registry.link_registry import ClusterLinkRegistry
from ..services.boot_script_generator import BootScriptGenerator

logger = logging.getLogger(__name__)

# Create web interface API router
router = APIRouter(prefix="/web", tags=["Web Interface"])

# Global instances (will be initialized in main.py)
link_registry: Optional[ClusterLinkRegistry] = None
boot_script_generator: Optional[BootScriptGenerator] = None


def init_web_interface_services(
    registry: ClusterLinkRegistry,
    generator: BootScriptGenerator
):
    """Initialize web interface service instances."""
    global link_registry, boot_script_generator
    link_registry = registry
    boot_script_generator = generator


async def _serialized_links():
    links = await link_registry.list_links()
    return [link.model_dump(mode="json", by_alias=True) for link in links]


@router.get("/dashboard", response_model=Dict[str, Any])
async def get_dashboard_data() -> Dict[str, Any]:
    """Links plus a per-builder-type breakdown for the landing page."""
    links = await _serialized_links()
    builder_types = Counter(link["builderType"] for link in links)

    return {
        "clusterLinks": links,
        "linkCount": len(links),
        "builderTypes": dict(builder_types)
    }


@router.get("/cluster-config", response_model=Dict[str, Any])
async def get_cluster_config_data() -> Dict[str, Any]:
    """Links shown on the cluster configuration page."""
    return {"clusterLinks": await _serialized_links()}


@router.get("/ipxe-boot", response_model=Dict[str, Any])
async def get_ipxe_boot_data() -> Dict[str, Any]:
    """Links and generator defaults used to prefill the boot script form."""
    config = boot_script_generator.config
    return {
        "clusterLinks": await _serialized_links(),
        "defaults": {
            "bootImage": config.boot_image,
            "kernelParams": config.kernel_params,
            "initrdImage": config.initrd_image,
            "maxServerCount": config.max_server_count
        }
    }
