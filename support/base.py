"""Base class for benchmark targets."""

import inspect
from typing import Any, Callable, Optional

from bench.errors import AssertionFailed
from support.memory_usage import MemoryUsageTracker

BENCH_PREFIX = "bench_"
IMPL_SEPARATOR = "__"


def benchmark_methods(cls: type) -> list[str]:
    """Names of bench_* methods in definition order (base classes first)."""
    names: list[str] = []
    for klass in reversed(cls.__mro__):
        for name, member in vars(klass).items():
            if name.startswith(BENCH_PREFIX) and inspect.isfunction(member) and name not in names:
                names.append(name)
    return names


def split_benchmark_name(name: str) -> tuple[str, str]:
    """bench_create__deque -> ("create", "deque"); bench_create -> ("create", "")."""
    stem = name[len(BENCH_PREFIX):] if name.startswith(BENCH_PREFIX) else name
    operation, _, implementation = stem.partition(IMPL_SEPARATOR)
    return operation, implementation


class Benchmark:
    """Subclass and add bench_<operation>__<implementation> methods.

    `params` maps attribute names to the values to measure with; every
    combination gets its own instance and setup() call. Checks and memory
    recording run only while `assertions_enabled` is set; the engine sets it
    from the run configuration.
    """

    params: dict[str, list[Any]] = {}

    def __init__(
        self,
        memory_usage: Optional[MemoryUsageTracker] = None,
        assertions_enabled: bool = __debug__,
    ):
        self.memory_usage = memory_usage if memory_usage is not None else MemoryUsageTracker()
        self.assertions_enabled = assertions_enabled

    def setup(self) -> None:
        pass

    def create(
        self,
        function: Callable[[Any], Any],
        source: Any,
        assertion: Callable[[Any], bool],
        element_count: Optional[int] = None,
    ) -> Any:
        """Build a collection from source, check it, and record its memory usage."""
        if not self.assertions_enabled:
            return function(source)
        if element_count is None:
            element_count = len(source)
        result = self.memory_usage.record(len(source), element_count, lambda: function(source))
        if not assertion(result):
            raise AssertionFailed(f"{type(self).__name__}: assertion failed for {type(result).__name__}")
        return result

    def assert_that(self, condition: bool, message: str = "") -> None:
        if self.assertions_enabled and not condition:
            raise AssertionFailed(f"{type(self).__name__}: {message or 'assertion failed'}")
