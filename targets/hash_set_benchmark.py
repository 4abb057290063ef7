"""Hash sets: set vs frozenset vs dict keys."""

from functools import reduce

from support.base import Benchmark
from support.generators import aggregate, get_random_values


class HashSetBenchmark(Benchmark):
    params = {"CONTAINER_SIZE": [10, 100, 1000]}
    CONTAINER_SIZE = 10

    def setup(self) -> None:
        self.elements = get_random_values(self.CONTAINER_SIZE, 0)
        self.distinct = set(self.elements)
        self.as_set = set(self.elements)
        self.as_frozenset = frozenset(self.elements)
        self.as_dict = dict.fromkeys(self.elements)
        self.expected_aggregate = reduce(aggregate, self.distinct, 0)

    def _is_complete(self, values) -> bool:
        return len(values) == len(self.distinct) and all(e in values for e in self.distinct)

    def bench_create__set(self):
        return self.create(set, self.elements, self._is_complete)

    def bench_create__frozenset(self):
        return self.create(frozenset, self.elements, self._is_complete)

    def bench_create__dict(self):
        return self.create(dict.fromkeys, self.elements, self._is_complete)

    def bench_add__set(self):
        values = set()
        for e in self.elements:
            values.add(e)
        self.assert_that(reduce(aggregate, values, 0) == self.expected_aggregate, "set add")
        return values

    def bench_add__frozenset(self):
        values = frozenset()
        for e in self.elements:
            values = values | {e}
        self.assert_that(values == self.distinct, "frozenset union")
        return values

    def bench_contains__set(self):
        found = sum(1 for e in self.elements if e in self.as_set)
        self.assert_that(found == self.CONTAINER_SIZE, "set lookup")
        return found

    def bench_contains__frozenset(self):
        found = sum(1 for e in self.elements if e in self.as_frozenset)
        self.assert_that(found == self.CONTAINER_SIZE, "frozenset lookup")
        return found

    def bench_contains__dict(self):
        found = sum(1 for e in self.elements if e in self.as_dict)
        self.assert_that(found == self.CONTAINER_SIZE, "dict lookup")
        return found

    def bench_iterate__set(self):
        agg = 0
        for e in self.as_set:
            agg = aggregate(agg, e)
        self.assert_that(agg == self.expected_aggregate, "set iteration")
        return agg

    def bench_iterate__frozenset(self):
        agg = 0
        for e in self.as_frozenset:
            agg = aggregate(agg, e)
        self.assert_that(agg == self.expected_aggregate, "frozenset iteration")
        return agg
