"""Tests for benchmark resolution and the in-process measurement loop."""

import gc
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from bench.errors import AssertionFailed, BenchmarkNotFound, EngineError
from bench.measure import iter_param_sets, measure_class, resolve_benchmark, run_iteration
from bench.run_config import DEBUG, make_config, Assertions, Fork, VerboseMode
from support.base import Benchmark, benchmark_methods, split_benchmark_name
from support.memory_usage import MemoryUsageTracker


class CountingBenchmark(Benchmark):
    params = {"SIZE": [1, 3], "MODE": ["a"]}
    SIZE = 1
    MODE = "a"

    def setup(self):
        self.data = list(range(self.SIZE))

    def bench_sum__builtin(self):
        return sum(self.data)

    def bench_sum__loop(self):
        total = 0
        for x in self.data:
            total += x
        return total

    def bench_build(self):
        return self.create(tuple, self.data, lambda t: len(t) == self.SIZE)


class FailingAssertionBenchmark(Benchmark):
    def bench_check(self):
        self.assert_that(False, "always wrong")


class CrashingBenchmark(Benchmark):
    def bench_crash(self):
        raise ZeroDivisionError("boom")


class NotABenchmark:
    def bench_x(self):
        pass


def ident(cls):
    return f"{cls.__module__}.{cls.__qualname__}"


def tiny_plan(identifiers, **overrides):
    options = dict(warmup_iterations=1, measurement_iterations=2, iteration_millis=1,
                   fork=Fork.DISABLE, verbosity=VerboseMode.SILENT)
    options.update(overrides)
    return make_config(**options).to_plan(identifiers)


def test_benchmark_methods_in_definition_order():
    assert benchmark_methods(CountingBenchmark) == ["bench_sum__builtin", "bench_sum__loop", "bench_build"]


def test_split_benchmark_name():
    assert split_benchmark_name("bench_create__deque") == ("create", "deque")
    assert split_benchmark_name("bench_create") == ("create", "")
    assert split_benchmark_name("bench_enqueue_dequeue__heapq") == ("enqueue_dequeue", "heapq")


def test_iter_param_sets():
    assert iter_param_sets(CountingBenchmark) == [{"SIZE": 1, "MODE": "a"}, {"SIZE": 3, "MODE": "a"}]
    assert iter_param_sets(CrashingBenchmark) == [{}]


def test_resolve_benchmark():
    assert resolve_benchmark(ident(CountingBenchmark)) is CountingBenchmark
    assert resolve_benchmark("targets.list_benchmark:ListBenchmark").__name__ == "ListBenchmark"


@pytest.mark.parametrize("identifier", [
    "no.such.module.Bench",
    "targets.list_benchmark.Missing",
    "NoDots",
])
def test_resolve_missing(identifier):
    with pytest.raises(BenchmarkNotFound):
        resolve_benchmark(identifier)


def test_resolve_rejects_non_benchmark():
    with pytest.raises(BenchmarkNotFound):
        resolve_benchmark(ident(NotABenchmark))


def test_run_iteration_counts_calls():
    calls = []
    score = run_iteration(lambda: calls.append(1), 2)
    assert len(calls) >= 1
    assert score > 0


def test_measure_class_results():
    tracker = MemoryUsageTracker()
    plan = tiny_plan([ident(CountingBenchmark)], assertions=Assertions.ENABLE)
    results = measure_class(ident(CountingBenchmark), plan, memory_usage=tracker)
    assert len(results) == 6
    first = results[0]
    assert first.identifier == ident(CountingBenchmark)
    assert first.operation == "sum"
    assert first.implementation == "builtin"
    assert first.params == {"SIZE": 1, "MODE": "a"}
    assert len(first.scores) == 2
    assert first.score > 0
    assert first.unit == "ops/s"
    assert first.mode == "thrpt"
    assert len(tracker) > 0


def test_measure_class_assertion_failure_is_fatal():
    plan = DEBUG.to_plan([ident(FailingAssertionBenchmark)])
    with pytest.raises(AssertionFailed):
        measure_class(ident(FailingAssertionBenchmark), plan)


def test_measure_class_crash_raises_engine_error():
    plan = tiny_plan([ident(CrashingBenchmark)])
    with pytest.raises(EngineError) as exc:
        measure_class(ident(CrashingBenchmark), plan)
    assert isinstance(exc.value.__cause__, ZeroDivisionError)


def test_measure_class_without_fail_on_error_skips():
    plan = tiny_plan([ident(CrashingBenchmark)]).model_copy(update={"fail_on_error": False})
    assert measure_class(ident(CrashingBenchmark), plan) == []


def test_run_iteration_disables_gc_and_restores_it():
    seen = []
    assert gc.isenabled()
    run_iteration(lambda: seen.append(gc.isenabled()), 1)
    assert seen
    assert not any(seen)
    assert gc.isenabled()


def test_run_iteration_restores_gc_after_error():
    def boom():
        raise KeyError("x")

    with pytest.raises(KeyError):
        run_iteration(boom, 1)
    assert gc.isenabled()


def test_assertions_disabled_in_plan_skips_checks():
    tracker = MemoryUsageTracker()
    plan = tiny_plan([ident(FailingAssertionBenchmark)], assertions=Assertions.DISABLE)
    results = measure_class(ident(FailingAssertionBenchmark), plan, memory_usage=tracker)
    assert len(results) == 1
    counting = measure_class(ident(CountingBenchmark), tiny_plan([ident(CountingBenchmark)]), memory_usage=tracker)
    assert len(counting) == 6
    assert len(tracker) == 0


def test_assertions_enabled_in_plan_checks_regardless_of_interpreter():
    plan = tiny_plan([ident(FailingAssertionBenchmark)], assertions=Assertions.ENABLE)
    with pytest.raises(AssertionFailed):
        measure_class(ident(FailingAssertionBenchmark), plan)


def test_benchmark_assertions_flag():
    bench = FailingAssertionBenchmark(assertions_enabled=False)
    bench.assert_that(False, "ignored")
    assert bench.create(tuple, [1, 2], lambda t: False) == (1, 2)
    assert len(bench.memory_usage) == 0
    checked = FailingAssertionBenchmark(assertions_enabled=True)
    with pytest.raises(AssertionFailed):
        checked.create(tuple, [1, 2], lambda t: False)
    assert len(checked.memory_usage) == 1
