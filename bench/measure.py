"""Measurement loop: resolve a benchmark class, warm up, measure throughput."""

import gc
import importlib
import itertools
import logging
import time
from typing import Any, Callable, Optional

from bench.errors import AssertionFailed, BenchmarkNotFound, EngineError
from bench.run_config import ExecutionPlan, VerboseMode
from bench.schemas import RawResult
from support.base import Benchmark, benchmark_methods, split_benchmark_name
from support.memory_usage import MemoryUsageTracker

logger = logging.getLogger(__name__)


def resolve_benchmark(identifier: str) -> type:
    """Import a benchmark class by its dotted name (module.Class or module:Class)."""
    if ":" in identifier:
        module_name, _, class_name = identifier.partition(":")
    else:
        module_name, _, class_name = identifier.rpartition(".")
    if not module_name or not class_name:
        raise BenchmarkNotFound(identifier, "expected module.Class")
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise BenchmarkNotFound(identifier, str(e)) from e
    cls = getattr(module, class_name, None)
    if not isinstance(cls, type) or not issubclass(cls, Benchmark):
        raise BenchmarkNotFound(identifier, "not a Benchmark subclass")
    if not benchmark_methods(cls):
        raise BenchmarkNotFound(identifier, "no bench_* methods")
    return cls


def iter_param_sets(cls: type) -> list[dict[str, Any]]:
    params = getattr(cls, "params", None) or {}
    if not params:
        return [{}]
    names = list(params)
    return [dict(zip(names, combo)) for combo in itertools.product(*(params[n] for n in names))]


def run_iteration(fn: Callable[[], Any], millis: int) -> float:
    """Call fn until `millis` elapsed with GC disabled; return operations per second."""
    budget_ns = millis * 1_000_000
    ops = 0
    gc_was_enabled = gc.isenabled()
    gc.disable()
    try:
        start = time.perf_counter_ns()
        while True:
            fn()
            ops += 1
            elapsed = time.perf_counter_ns() - start
            if elapsed >= budget_ns:
                break
    finally:
        if gc_was_enabled:
            gc.enable()
    return ops / (elapsed / 1e9)


def collect_garbage() -> float:
    """Full collection between iterations; returns the pause in milliseconds."""
    start = time.perf_counter()
    gc.collect()
    return (time.perf_counter() - start) * 1000.0


def _between_iterations(plan: ExecutionPlan, label: str, max_gc_pause_ms: Optional[float], print_gc_stats: bool) -> None:
    if plan.do_gc:
        pause = collect_garbage()
        if max_gc_pause_ms is not None and pause > max_gc_pause_ms:
            logger.warning("%s: gc pause %.1fms exceeded target %.0fms", label, pause, max_gc_pause_ms)
    if print_gc_stats:
        logger.info("%s: gc stats %s", label, gc.get_stats())


def measure_benchmark(
    instance: Benchmark,
    identifier: str,
    name: str,
    params: dict[str, Any],
    plan: ExecutionPlan,
    max_gc_pause_ms: Optional[float] = None,
    print_gc_stats: bool = False,
) -> RawResult:
    fn = getattr(instance, name)
    label = f"{identifier}.{name}" + (f" [{', '.join(f'{k}={v}' for k, v in params.items())}]" if params else "")
    extra = plan.verbosity is VerboseMode.EXTRA

    for i in range(plan.warmup_iterations):
        score = run_iteration(fn, plan.warmup_millis)
        if extra:
            logger.info("%s warmup %d/%d: %.3f ops/s", label, i + 1, plan.warmup_iterations, score)
        _between_iterations(plan, label, max_gc_pause_ms, print_gc_stats)

    scores: list[float] = []
    for i in range(plan.measurement_iterations):
        score = run_iteration(fn, plan.measurement_millis)
        scores.append(score)
        if extra:
            logger.info("%s iteration %d/%d: %.3f ops/s", label, i + 1, plan.measurement_iterations, score)
        _between_iterations(plan, label, max_gc_pause_ms, print_gc_stats)

    operation, implementation = split_benchmark_name(name)
    result = RawResult(
        identifier=identifier,
        benchmark=name,
        operation=operation,
        implementation=implementation,
        scores=scores,
        params=dict(params),
        mode=plan.mode,
        unit=f"ops/{plan.time_unit}",
        warmup_iterations=plan.warmup_iterations,
        measurement_iterations=plan.measurement_iterations,
        fork=plan.forks,
    )
    if plan.verbosity is not VerboseMode.SILENT:
        logger.info("%s: %.3f ± %.3f %s", label, result.score, result.score_error, result.unit)
    return result


def measure_class(
    identifier: str,
    plan: ExecutionPlan,
    memory_usage: Optional[MemoryUsageTracker] = None,
    max_gc_pause_ms: Optional[float] = None,
    print_gc_stats: bool = False,
    after_setup: Optional[Callable[[], None]] = None,
) -> list[RawResult]:
    """Measure every bench_* method of one class for every parameter combination."""
    cls = resolve_benchmark(identifier)
    tracker = memory_usage if memory_usage is not None else MemoryUsageTracker()
    results: list[RawResult] = []
    for params in iter_param_sets(cls):
        instance = cls(memory_usage=tracker, assertions_enabled=plan.assertions_enabled)
        for key, value in params.items():
            setattr(instance, key, value)
        for name in benchmark_methods(cls):
            try:
                instance.setup()
                if after_setup is not None:
                    after_setup()
                results.append(measure_benchmark(instance, identifier, name, params, plan, max_gc_pause_ms, print_gc_stats))
            except AssertionFailed:
                raise
            except Exception as e:
                if plan.fail_on_error:
                    raise EngineError(f"{identifier}.{name} failed: {e!r}") from e
                logger.error("%s.%s failed, skipping: %r", identifier, name, e)
    return results
