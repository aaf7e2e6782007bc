"""Run orchestration."""

from .scheduler import (
    CancellationToken,
    InvocationResult,
    InvocationTask,
    RunSummary,
    Scheduler,
    enumerate_mutants,
    enumerate_seed_folders,
    enumerate_seeds,
)

__all__ = [
    "CancellationToken",
    "InvocationResult",
    "InvocationTask",
    "RunSummary",
    "Scheduler",
    "enumerate_mutants",
    "enumerate_seed_folders",
    "enumerate_seeds",
]
