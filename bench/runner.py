"""Benchmark runner: build one plan per call, hand it to the engine, report."""

import uuid
from typing import Optional, Sequence, Union

from bench.engine import MeasurementEngine, get_engine
from bench.errors import AssertionFailed, EmptyInput, InvalidArgument, RunFailed
from bench.logging_utils import run_log
from bench.reporter import FormattedReport, PerformanceReporter
from bench.run_config import DEBUG, NORMAL, QUICK, SLOW, RunConfiguration
from bench.schemas import RawResult
from support.memory_usage import MemoryUsageTracker

BenchmarkRef = Union[str, type]


def to_identifiers(groups: Sequence[BenchmarkRef]) -> list[str]:
    """Classes become their dotted canonical name; strings pass through."""
    out = []
    for g in groups:
        if isinstance(g, type):
            out.append(f"{g.__module__}.{g.__qualname__}")
        elif isinstance(g, str) and g.strip():
            out.append(g.strip())
        else:
            raise InvalidArgument(f"not a benchmark identifier: {g!r}")
    return out


class BenchmarkRunner:
    """Runs identifiers under a RunConfiguration.

    The engine defaults to one chosen from the plan (in-process for DEBUG,
    forked otherwise); pass one in to replace process forking, e.g. in tests.
    """

    def __init__(
        self,
        engine: Optional[MeasurementEngine] = None,
        memory_usage: Optional[MemoryUsageTracker] = None,
    ):
        self.engine = engine
        self.memory_usage = memory_usage if memory_usage is not None else MemoryUsageTracker()

    def run(self, identifiers: Sequence[BenchmarkRef], config: RunConfiguration) -> list[RawResult]:
        names = to_identifiers(identifiers)
        if not names:
            raise InvalidArgument("no benchmark identifiers given")
        plan = config.to_plan(names)
        engine = self.engine or get_engine(plan, memory_usage=self.memory_usage)
        run_id = str(uuid.uuid4())[:8]
        run_log("run_start", run_id=run_id, config_hash=plan.config_hash, includes=names, forks=plan.forks)
        try:
            results = engine.run(plan)
        except AssertionFailed as e:
            run_log("run_failed", level="error", run_id=run_id, error=str(e), kind="assertion")
            raise
        except Exception as e:
            run_log("run_failed", level="error", run_id=run_id, error=str(e), kind=type(e).__name__)
            raise RunFailed(f"benchmark run failed: {e}", cause=e) from e
        run_log("run_end", run_id=run_id, n_results=len(results))
        return list(results)

    def run_and_report(self, identifiers: Sequence[BenchmarkRef], config: RunConfiguration) -> Optional[FormattedReport]:
        """Run and print the report; an empty result set is reported and yields None."""
        names = to_identifiers(identifiers)
        results = self.run(names, config)
        try:
            return PerformanceReporter.of(names, results).print()
        except EmptyInput as e:
            run_log("report_empty", level="warning", includes=names, error=str(e))
            print(f"No performance report: {e}")
            return None

    def run_debug(self, identifiers: Sequence[BenchmarkRef]) -> list[RawResult]:
        """Correctness pass with assertions on; timings are unreliable."""
        results = self.run(identifiers, DEBUG)
        self.memory_usage.print_and_reset()
        return results

    def run_quick(self, identifiers: Sequence[BenchmarkRef]) -> Optional[FormattedReport]:
        return self.run_and_report(identifiers, QUICK)

    def run_normal(self, identifiers: Sequence[BenchmarkRef]) -> Optional[FormattedReport]:
        return self.run_and_report(identifiers, NORMAL)

    def run_slow(self, identifiers: Sequence[BenchmarkRef]) -> Optional[FormattedReport]:
        return self.run_and_report(identifiers, SLOW)


def run_debug_with_asserts(groups: Sequence[BenchmarkRef]) -> list[RawResult]:
    return BenchmarkRunner().run_debug(groups)


def run_quick_no_asserts(groups: Sequence[BenchmarkRef]) -> Optional[FormattedReport]:
    return BenchmarkRunner().run_quick(groups)


def run_normal_no_asserts(groups: Sequence[BenchmarkRef]) -> Optional[FormattedReport]:
    return BenchmarkRunner().run_normal(groups)


def run_slow_no_asserts(groups: Sequence[BenchmarkRef]) -> Optional[FormattedReport]:
    return BenchmarkRunner().run_slow(groups)
