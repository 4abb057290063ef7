"""Measurement engines: in-process (no fork) or one forked interpreter per benchmark class."""

import json
import logging
import os
import subprocess
import sys
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from bench.errors import AssertionFailed, EngineError
from bench.measure import measure_class
from bench.run_config import ExecutionPlan, VerboseMode
from bench.schemas import RawResult
from support.memory_usage import MemoryUsageTracker

logger = logging.getLogger(__name__)

ROOT = Path(__file__).resolve().parents[1]


class MeasurementEngine(ABC):
    @abstractmethod
    def run(self, plan: ExecutionPlan) -> list[RawResult]:
        """Measure every included identifier; raise on any failure."""
        pass


class InProcessEngine(MeasurementEngine):
    """Measures in the current interpreter; used when the plan does not fork."""

    def __init__(self, memory_usage: Optional[MemoryUsageTracker] = None):
        self.memory_usage = memory_usage if memory_usage is not None else MemoryUsageTracker()

    def run(self, plan: ExecutionPlan) -> list[RawResult]:
        results: list[RawResult] = []
        for identifier in plan.includes:
            results.extend(measure_class(identifier, plan, memory_usage=self.memory_usage))
        return results


class ForkingEngine(MeasurementEngine):
    """Runs each benchmark class in a fresh `python -m bench.worker` process."""

    def __init__(self, python: Optional[str] = None):
        self.python = python or os.environ.get("BENCH_PYTHON") or sys.executable

    def command(self, plan: ExecutionPlan, identifier: str) -> list[str]:
        return [
            self.python,
            *plan.interpreter_args,
            "-m", "bench.worker",
            f"--include={identifier}",
            *plan.worker_args,
        ]

    def environment(self, plan: ExecutionPlan) -> dict[str, str]:
        env = dict(os.environ)
        env.update(plan.env)
        paths = [str(ROOT)] + ([env["PYTHONPATH"]] if env.get("PYTHONPATH") else [])
        env["PYTHONPATH"] = os.pathsep.join(paths)
        return env

    def run(self, plan: ExecutionPlan) -> list[RawResult]:
        results: list[RawResult] = []
        payload = plan.model_dump_json()
        for identifier in plan.includes:
            for _ in range(plan.forks):
                results.extend(self._run_fork(plan, identifier, payload))
        return results

    def _run_fork(self, plan: ExecutionPlan, identifier: str, payload: str) -> list[RawResult]:
        cmd = self.command(plan, identifier)
        logger.debug("forking: %s", " ".join(cmd))
        silent = plan.verbosity is VerboseMode.SILENT
        try:
            proc = subprocess.run(
                cmd,
                input=payload,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE if silent else None,
                text=True,
                env=self.environment(plan),
                check=False,
            )
        except OSError as e:
            raise EngineError(f"could not start worker for {identifier}: {e}") from e
        document = self._parse(identifier, proc.stdout)
        error = document.get("error")
        if error:
            if error.get("type") == "AssertionFailed":
                raise AssertionFailed(error.get("message", ""))
            raise EngineError(f"{identifier}: {error.get('type')}: {error.get('message')}")
        if proc.returncode != 0:
            detail = (proc.stderr or "").strip()[-2000:] if silent else ""
            raise EngineError(f"worker for {identifier} exited with {proc.returncode}" + (f": {detail}" if detail else ""))
        if "results" not in document:
            raise EngineError(f"worker for {identifier} produced no results")
        return [RawResult.from_dict(d) for d in document.get("results", [])]

    @staticmethod
    def _parse(identifier: str, stdout: Optional[str]) -> dict:
        lines = [line for line in (stdout or "").splitlines() if line.strip()]
        if not lines:
            return {}
        try:
            document = json.loads(lines[-1])
        except json.JSONDecodeError as e:
            raise EngineError(f"unreadable worker output for {identifier}: {lines[-1][:200]!r}") from e
        if not isinstance(document, dict):
            raise EngineError(f"unexpected worker output for {identifier}")
        return document


def get_engine(plan: ExecutionPlan, memory_usage: Optional[MemoryUsageTracker] = None) -> MeasurementEngine:
    if plan.forks == 0:
        return InProcessEngine(memory_usage=memory_usage)
    return ForkingEngine()
