"""Data models package for Arkitek Builder."""

# Base models
from .base import CamelModel, ErrorResponse, utc_now

# Cluster link models
from .cluster_link import (
    DEFAULT_BUILDER_TYPE,
    ClusterLinkStatus,
    ClusterLink,
    ClusterLinkCreateRequest,
    ClusterLinkDeleteResponse,
    BootScriptRequest,
)

# Diagnostic stub models
from .diagnostics import (
    BenchmarkRequest,
    BenchmarkRun,
    ContinuousTestRequest,
    ContinuousTestRun,
)

__all__ = [
    # Base
    "CamelModel",
    "ErrorResponse",
    "utc_now",
    # Cluster links
    "DEFAULT_BUILDER_TYPE",
    "ClusterLinkStatus",
    "ClusterLink",
    "ClusterLinkCreateRequest",
    "ClusterLinkDeleteResponse",
    "BootScriptRequest",
    # Diagnostics
    "BenchmarkRequest",
    "BenchmarkRun",
    "ContinuousTestRequest",
    "ContinuousTestRun",
]
