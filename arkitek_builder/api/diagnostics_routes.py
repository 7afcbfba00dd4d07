"""
Benchmark and continuous-test API routes.
"""

from fastapi import APIRouter

from ..models.diagnostics import (
    BenchmarkRequest,
    BenchmarkRun,
    ContinuousTestRequest,
    ContinuousTestRun,
)
from ..services.diagnostics import run_benchmark, run_until_fail

router = APIRouter(prefix="/api", tags=["Diagnostics"])


@router.post("/benchmark/run", response_model=BenchmarkRun)
async def start_benchmark(request: BenchmarkRequest = BenchmarkRequest()) -> BenchmarkRun:
    """Accept a benchmark against an endpoint and report it as running."""
    return run_benchmark(request)


@router.post("/test/run-until-fail", response_model=ContinuousTestRun)
async def start_continuous_test(
    request: ContinuousTestRequest = ContinuousTestRequest()
) -> ContinuousTestRun:
    """Accept a run-until-failure test against a cluster and report it as running."""
    return run_until_fail(request)
