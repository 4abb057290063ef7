"""Collection benchmarks run by bench.main."""

from targets.list_benchmark import ListBenchmark
from targets.hash_set_benchmark import HashSetBenchmark
from targets.priority_queue_benchmark import PriorityQueueBenchmark

ALL_TARGETS = [
    HashSetBenchmark,
    ListBenchmark,
    PriorityQueueBenchmark,
]

__all__ = ["ListBenchmark", "HashSetBenchmark", "PriorityQueueBenchmark", "ALL_TARGETS"]
