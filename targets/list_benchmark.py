"""Sequences: list vs tuple vs collections.deque."""

from collections import deque
from functools import reduce

from support.base import Benchmark
from support.generators import aggregate, get_random_values


class ListBenchmark(Benchmark):
    params = {"CONTAINER_SIZE": [10, 100, 1000]}
    CONTAINER_SIZE = 10

    def setup(self) -> None:
        self.elements = get_random_values(self.CONTAINER_SIZE, 0)
        self.expected_aggregate = reduce(aggregate, self.elements, 0)
        self.as_list = list(self.elements)
        self.as_tuple = tuple(self.elements)
        self.as_deque = deque(self.elements)

    def _is_complete(self, values) -> bool:
        return len(values) == self.CONTAINER_SIZE and reduce(aggregate, values, 0) == self.expected_aggregate

    def bench_create__list(self):
        return self.create(list, self.elements, self._is_complete)

    def bench_create__tuple(self):
        return self.create(tuple, self.elements, self._is_complete)

    def bench_create__deque(self):
        return self.create(deque, self.elements, self._is_complete)

    def bench_prepend__list(self):
        values = []
        for e in self.elements:
            values.insert(0, e)
        self.assert_that(values[0] == self.elements[-1], "list prepend order")
        return values

    def bench_prepend__deque(self):
        values = deque()
        for e in self.elements:
            values.appendleft(e)
        self.assert_that(values[0] == self.elements[-1], "deque prepend order")
        return values

    def bench_iterate__list(self):
        agg = 0
        for e in self.as_list:
            agg = aggregate(agg, e)
        self.assert_that(agg == self.expected_aggregate, "list iteration")
        return agg

    def bench_iterate__tuple(self):
        agg = 0
        for e in self.as_tuple:
            agg = aggregate(agg, e)
        self.assert_that(agg == self.expected_aggregate, "tuple iteration")
        return agg

    def bench_iterate__deque(self):
        agg = 0
        for e in self.as_deque:
            agg = aggregate(agg, e)
        self.assert_that(agg == self.expected_aggregate, "deque iteration")
        return agg
