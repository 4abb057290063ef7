"""Performance report: per-identifier summary and per-operation implementation comparison."""

from dataclasses import dataclass
from typing import Callable, Sequence

import pandas as pd

from bench.errors import EmptyInput
from bench.schemas import RawResult

RESULT_COLUMNS = [
    "identifier", "benchmark", "operation", "implementation", "params",
    "score", "score_error", "unit", "mode", "fork",
]


def results_to_dataframe(results: Sequence[RawResult]) -> pd.DataFrame:
    rows = []
    for r in results:
        rows.append({
            "identifier": r.identifier,
            "benchmark": r.benchmark,
            "operation": r.operation,
            "implementation": r.implementation or "-",
            "params": r.params_label,
            "score": r.score,
            "score_error": r.score_error,
            "unit": r.unit,
            "mode": r.mode,
            "fork": r.fork,
        })
    return pd.DataFrame(rows, columns=RESULT_COLUMNS)


@dataclass
class FormattedReport:
    text: str
    summary: pd.DataFrame
    detail: pd.DataFrame

    def __str__(self) -> str:
        return self.text


class PerformanceReporter:
    def __init__(self, identifiers: Sequence[str], results: Sequence[RawResult]):
        self.identifiers = list(identifiers)
        self.results = list(results)

    @classmethod
    def of(cls, identifiers: Sequence[str], results: Sequence[RawResult]) -> "PerformanceReporter":
        return cls(identifiers, results)

    def _ordered_identifiers(self, df: pd.DataFrame) -> list[str]:
        present = list(dict.fromkeys(df["identifier"]))
        ordered = [i for i in self.identifiers if i in present]
        return ordered + [i for i in present if i not in ordered]

    def summary(self, df: pd.DataFrame) -> pd.DataFrame:
        """Mean throughput per identifier and its delta (%) against the first one."""
        rows = []
        for identifier in self._ordered_identifiers(df):
            group = df[df["identifier"] == identifier]
            rows.append({
                "identifier": identifier,
                "benchmarks": len(group),
                "mean_score": group["score"].mean(),
                "unit": group["unit"].iloc[0],
            })
        out = pd.DataFrame(rows)
        baseline = out["mean_score"].iloc[0]
        if baseline:
            out["delta_pct"] = (out["mean_score"] - baseline) / baseline * 100.0
        else:
            out["delta_pct"] = float("nan")
        return out

    def detail(self, df: pd.DataFrame) -> pd.DataFrame:
        """Per (identifier, operation, params): each implementation relative to the first."""
        keys = ["identifier", "operation", "params"]
        merged = (
            df.groupby(keys + ["implementation"], sort=False)
            .agg(score=("score", "mean"), score_error=("score_error", "mean"))
            .reset_index()
        )
        frames = []
        for _, group in merged.groupby(keys, sort=False):
            group = group.copy()
            baseline = group["score"].iloc[0]
            group["ratio"] = group["score"] / baseline if baseline else float("nan")
            frames.append(group)
        return pd.concat(frames, ignore_index=True)

    def report(self) -> FormattedReport:
        if not self.results:
            raise EmptyInput("no benchmark results to report")
        df = results_to_dataframe(self.results)
        summary = self.summary(df)
        detail = self.detail(df)
        fmt: Callable[[float], str] = lambda v: f"{v:,.3f}"
        unit = df["unit"].iloc[0]
        text = "\n".join([
            f"Performance report ({df['mode'].iloc[0]}, {unit}, higher is better)",
            "",
            "Summary by benchmark class:",
            summary.to_string(index=False, float_format=fmt),
            "",
            "Implementations by operation (ratio vs first implementation):",
            detail.to_string(index=False, float_format=fmt),
        ])
        return FormattedReport(text=text, summary=summary, detail=detail)

    def print(self, sink: Callable[[str], None] = print) -> FormattedReport:
        report = self.report()
        sink(report.text)
        return report
