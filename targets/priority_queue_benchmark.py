"""Priority queues: heapq vs a list kept sorted with bisect."""

import bisect
import heapq
from functools import reduce

from support.base import Benchmark
from support.generators import aggregate, get_random_values


class PriorityQueueBenchmark(Benchmark):
    params = {"CONTAINER_SIZE": [10, 100, 1000]}
    CONTAINER_SIZE = 10

    def setup(self) -> None:
        self.elements = get_random_values(self.CONTAINER_SIZE, 0)
        self.expected = sorted(self.elements)

    @staticmethod
    def _heapify(values):
        heap = list(values)
        heapq.heapify(heap)
        return heap

    def bench_create__heapq(self):
        return self.create(self._heapify, self.elements, lambda h: h[0] == self.expected[0])

    def bench_create__sorted(self):
        return self.create(sorted, self.elements, lambda s: s == self.expected)

    def bench_enqueue_dequeue__heapq(self):
        heap = []
        for e in self.elements:
            heapq.heappush(heap, e)
        drained = [heapq.heappop(heap) for _ in range(len(self.elements))]
        self.assert_that(drained == self.expected, "heapq order")
        return reduce(aggregate, drained, 0)

    def bench_enqueue_dequeue__sorted(self):
        queue = []
        for e in self.elements:
            bisect.insort(queue, e)
        drained = [queue.pop(0) for _ in range(len(self.elements))]
        self.assert_that(drained == self.expected, "insort order")
        return reduce(aggregate, drained, 0)
