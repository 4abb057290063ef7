"""Memory usage of constructed collections, accumulated per measurement campaign."""

import tracemalloc
from dataclasses import dataclass, asdict
from typing import Callable, Optional, TypeVar

from bench.errors import InvalidArgument

R = TypeVar("R")

EMPTY_REPORT = "No memory usage recorded."


@dataclass
class MemorySample:
    label: str
    source_size: int
    element_count: int
    before_bytes: int
    after_bytes: int

    @property
    def retained_bytes(self) -> int:
        return max(self.after_bytes - self.before_bytes, 0)


class MemoryUsageTracker:
    """Accumulates before/after traced heap sizes around producer calls.

    Not thread-safe: use one tracker per campaign and reset it between
    independent campaigns.
    """

    def __init__(self):
        self._samples: list[MemorySample] = []

    def record(
        self,
        source_size: int,
        element_count: int,
        producer: Callable[[], R],
        label: Optional[str] = None,
    ) -> R:
        if source_size < 0 or element_count < 0:
            raise InvalidArgument("source_size and element_count must be non-negative")
        started = not tracemalloc.is_tracing()
        if started:
            tracemalloc.start()
        try:
            before, _ = tracemalloc.get_traced_memory()
            result = producer()
            after, _ = tracemalloc.get_traced_memory()
        finally:
            if started:
                tracemalloc.stop()
        self._samples.append(MemorySample(
            label=label or type(result).__name__,
            source_size=source_size,
            element_count=element_count,
            before_bytes=before,
            after_bytes=after,
        ))
        return result

    @property
    def samples(self) -> list[MemorySample]:
        return list(self._samples)

    def __len__(self) -> int:
        return len(self._samples)

    def summary(self):
        import pandas as pd
        columns = ["label", "element_count", "samples", "retained_bytes", "bytes_per_element"]
        if not self._samples:
            return pd.DataFrame(columns=columns)
        df = pd.DataFrame([{**asdict(s), "retained_bytes": s.retained_bytes} for s in self._samples])
        grouped = (
            df.groupby(["label", "element_count"], sort=True)
            .agg(samples=("retained_bytes", "size"), retained_bytes=("retained_bytes", "mean"))
            .reset_index()
        )
        per_element = grouped["element_count"].where(grouped["element_count"] > 0)
        grouped["bytes_per_element"] = (grouped["retained_bytes"] / per_element).fillna(0.0)
        return grouped[columns]

    def report(self) -> str:
        if not self._samples:
            return EMPTY_REPORT
        table = self.summary().to_string(index=False, float_format=lambda v: f"{v:,.1f}")
        return "Memory usage (mean retained bytes):\n" + table

    def print_and_reset(self, sink: Callable[[str], None] = print) -> str:
        text = self.report()
        sink(text)
        self.reset()
        return text

    def reset(self) -> None:
        self._samples.clear()
