"""Benchmark orchestration: run configurations, engines, runner and reporter."""

from bench.errors import AssertionFailed, EmptyInput, InvalidArgument, RunFailed
from bench.run_config import DEBUG, NORMAL, QUICK, SLOW, PRESETS, RunConfiguration, ExecutionPlan, get_preset
from bench.schemas import RawResult

__all__ = [
    "AssertionFailed",
    "EmptyInput",
    "InvalidArgument",
    "RunFailed",
    "DEBUG",
    "NORMAL",
    "QUICK",
    "SLOW",
    "PRESETS",
    "RunConfiguration",
    "ExecutionPlan",
    "get_preset",
    "RawResult",
]
