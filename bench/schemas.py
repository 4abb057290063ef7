"""Schemas for measurement results."""

import statistics
from dataclasses import dataclass, field, asdict
from typing import Any


@dataclass
class RawResult:
    identifier: str
    benchmark: str
    operation: str
    implementation: str
    scores: list[float]
    params: dict[str, Any] = field(default_factory=dict)
    mode: str = "thrpt"
    unit: str = "ops/s"
    warmup_iterations: int = 0
    measurement_iterations: int = 0
    fork: int = 0

    @property
    def score(self) -> float:
        return statistics.fmean(self.scores) if self.scores else 0.0

    @property
    def score_error(self) -> float:
        return statistics.stdev(self.scores) if len(self.scores) > 1 else 0.0

    @property
    def params_label(self) -> str:
        return ", ".join(f"{k}={v}" for k, v in sorted(self.params.items()))

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RawResult":
        return cls(
            identifier=data["identifier"],
            benchmark=data["benchmark"],
            operation=data.get("operation", data["benchmark"]),
            implementation=data.get("implementation", ""),
            scores=[float(s) for s in data.get("scores", [])],
            params=dict(data.get("params", {})),
            mode=data.get("mode", "thrpt"),
            unit=data.get("unit", "ops/s"),
            warmup_iterations=data.get("warmup_iterations", 0),
            measurement_iterations=data.get("measurement_iterations", 0),
            fork=data.get("fork", 0),
        )
