"""
Benchmark and continuous-test requests.

Nothing is executed yet: accepted requests are answered with a status
description that echoes the effective parameters.
"""

import logging

from ..models.base import utc_now
from ..models.diagnostics import (
    BenchmarkRequest,
    BenchmarkRun,
    ContinuousTestRequest,
    ContinuousTestRun,
)
from ..exceptions import MissingFieldError

logger = logging.getLogger(__name__)

DEFAULT_BENCHMARK_TYPE = "stress"
DEFAULT_BENCHMARK_ITERATIONS = 100
DEFAULT_CONTINUOUS_TEST_TYPE = "continuous"
DEFAULT_MAX_ITERATIONS = 1000


def run_benchmark(request: BenchmarkRequest) -> BenchmarkRun:
    """Accept a benchmark request against an endpoint."""
    if not request.endpoint or not request.endpoint.strip():
        raise MissingFieldError(["endpoint"])

    run = BenchmarkRun(
        endpoint=request.endpoint,
        test_type=request.test_type or DEFAULT_BENCHMARK_TYPE,
        iterations=request.iterations or DEFAULT_BENCHMARK_ITERATIONS,
        start_time=utc_now(),
        status="running"
    )
    logger.info(f"Benchmark accepted for {run.endpoint} ({run.test_type}, {run.iterations} iterations)")
    return run


def run_until_fail(request: ContinuousTestRequest) -> ContinuousTestRun:
    """Accept a request to test a cluster until a failure is detected."""
    if not request.cluster_name or not request.cluster_name.strip():
        raise MissingFieldError(["clusterName"])

    run = ContinuousTestRun(
        cluster_name=request.cluster_name,
        test_type=request.test_type or DEFAULT_CONTINUOUS_TEST_TYPE,
        max_iterations=request.max_iterations or DEFAULT_MAX_ITERATIONS,
        start_time=utc_now(),
        status="running",
        message=f"Running continuous tests on {request.cluster_name} until failure is detected"
    )
    logger.info(f"Continuous test run accepted for cluster {run.cluster_name}")
    return run
