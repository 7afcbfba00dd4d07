"""Request and response models for the diagnostic stub endpoints."""

from typing import Optional
from datetime import datetime
from pydantic import Field

from .base import CamelModel


class BenchmarkRequest(CamelModel):
    """Request to start a benchmark against an endpoint."""
    endpoint: Optional[str] = Field(None, description="Endpoint to benchmark")
    test_type: Optional[str] = Field(None, alias="testType", description="Benchmark flavour")
    iterations: Optional[int] = Field(None, ge=1, description="Number of iterations")


class BenchmarkRun(CamelModel):
    """Status description of an accepted benchmark."""
    endpoint: str
    test_type: str = Field(..., alias="testType")
    iterations: int
    start_time: datetime = Field(..., alias="startTime")
    status: str


class ContinuousTestRequest(CamelModel):
    """Request to run tests against a cluster until one fails."""
    cluster_name: Optional[str] = Field(None, alias="clusterName", description="Target cluster")
    test_type: Optional[str] = Field(None, alias="testType", description="Test flavour")
    max_iterations: Optional[int] = Field(None, alias="maxIterations", ge=1, description="Upper bound on iterations")


class ContinuousTestRun(CamelModel):
    """Status description of an accepted continuous test run."""
    cluster_name: str = Field(..., alias="clusterName")
    test_type: str = Field(..., alias="testType")
    max_iterations: int = Field(..., alias="maxIterations")
    start_time: datetime = Field(..., alias="startTime")
    status: str
    message: str
