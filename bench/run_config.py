"""RunConfiguration (pydantic), named presets and ExecutionPlan materialization."""

import hashlib
import json
from enum import Enum
from typing import Any, Sequence

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from bench.errors import InvalidArgument


class Fork(Enum):
    ENABLE = 1
    DISABLE = 0


class Assertions(Enum):
    ENABLE = "enable"
    DISABLE = "disable"


class PrintInlining(Enum):
    ENABLE = "enable"
    DISABLE = "disable"


class VerboseMode(Enum):
    SILENT = "silent"
    NORMAL = "normal"
    EXTRA = "extra"


# Tuning for the forked interpreter: a high memory ceiling, a pause budget for
# between-iteration collections, and a gen-0 threshold large enough that no
# automatic collection lands inside a measured iteration.
HEAP_LIMIT_MB = 4096
MAX_GC_PAUSE_MS = 1000
GC_THRESHOLD = 1_000_000

TUNING_ARGS: tuple[str, ...] = (
    f"--heap-limit-mb={HEAP_LIMIT_MB}",
    f"--max-gc-pause-ms={MAX_GC_PAUSE_MS}",
    f"--gc-threshold={GC_THRESHOLD}",
    "--gc-freeze",
)

# option member -> (interpreter args, worker args)
FLAG_TABLE: dict[Enum, tuple[tuple[str, ...], tuple[str, ...]]] = {
    Assertions.ENABLE: ((), ()),
    Assertions.DISABLE: (("-O",), ()),
    PrintInlining.ENABLE: (("-X", "importtime"), ("--print-gc-stats",)),
    PrintInlining.DISABLE: ((), ()),
}

FORKED_ENV = {"PYTHONHASHSEED": "0"}


class RunConfiguration(BaseModel):
    """Immutable options for one measurement run."""

    model_config = ConfigDict(frozen=True)

    warmup_iterations: int = Field(default=10, ge=0)
    measurement_iterations: int = Field(default=10, ge=1)
    iteration_millis: int = Field(default=200, ge=1, description="Duration of each warm-up and measured iteration")
    fork: Fork = Fork.ENABLE
    verbosity: VerboseMode = VerboseMode.NORMAL
    assertions: Assertions = Assertions.DISABLE
    print_inlining: PrintInlining = PrintInlining.DISABLE

    @property
    def fork_count(self) -> int:
        return self.fork.value

    @property
    def assertions_enabled(self) -> bool:
        return self.assertions is Assertions.ENABLE

    def to_plan(self, identifiers: Sequence[str]) -> "ExecutionPlan":
        interpreter_args, worker_args = runtime_flags(self)
        return ExecutionPlan(
            includes=list(identifiers),
            warmup_iterations=self.warmup_iterations,
            warmup_millis=self.iteration_millis,
            measurement_iterations=self.measurement_iterations,
            measurement_millis=self.iteration_millis,
            forks=self.fork_count,
            verbosity=self.verbosity,
            assertions_enabled=self.assertions_enabled,
            interpreter_args=list(interpreter_args),
            worker_args=list(worker_args),
            env=dict(FORKED_ENV),
            config_hash=stable_config_hash(self),
        )


class ExecutionPlan(BaseModel):
    """Everything the measurement engine needs; serializable for forked workers."""

    model_config = ConfigDict(frozen=True)

    includes: list[str]
    mode: str = "thrpt"
    time_unit: str = "s"
    warmup_iterations: int = Field(ge=0)
    warmup_millis: int = Field(ge=1)
    measurement_iterations: int = Field(ge=1)
    measurement_millis: int = Field(ge=1)
    forks: int = Field(ge=0, le=1)
    verbosity: VerboseMode = VerboseMode.NORMAL
    assertions_enabled: bool = False
    fail_on_error: bool = True
    do_gc: bool = True
    interpreter_args: list[str] = Field(default_factory=list)
    worker_args: list[str] = Field(default_factory=list)
    env: dict[str, str] = Field(default_factory=dict)
    config_hash: str = ""


def runtime_flags(config: RunConfiguration) -> tuple[tuple[str, ...], tuple[str, ...]]:
    """Pure mapping from options to (interpreter args, worker args)."""
    interpreter: list[str] = []
    worker: list[str] = list(TUNING_ARGS)
    for option in (config.assertions, config.print_inlining):
        interp_args, worker_args = FLAG_TABLE[option]
        interpreter.extend(interp_args)
        worker.extend(worker_args)
    return tuple(interpreter), tuple(worker)


def make_config(**kwargs: Any) -> RunConfiguration:
    """Build a RunConfiguration, turning validation errors into InvalidArgument."""
    try:
        return RunConfiguration(**kwargs)
    except ValidationError as e:
        raise InvalidArgument(str(e)) from e


# Timing from DEBUG is meaningless: no warm-up, 1ms iterations, in-process, asserts on.
DEBUG = RunConfiguration(
    warmup_iterations=0, measurement_iterations=1, iteration_millis=1,
    fork=Fork.DISABLE, verbosity=VerboseMode.SILENT, assertions=Assertions.ENABLE,
)
QUICK = RunConfiguration(
    warmup_iterations=5, measurement_iterations=5, iteration_millis=10,
    fork=Fork.ENABLE, verbosity=VerboseMode.NORMAL, assertions=Assertions.DISABLE,
)
NORMAL = RunConfiguration(
    warmup_iterations=10, measurement_iterations=10, iteration_millis=200,
    fork=Fork.ENABLE, verbosity=VerboseMode.NORMAL, assertions=Assertions.DISABLE,
)
SLOW = RunConfiguration(
    warmup_iterations=25, measurement_iterations=15, iteration_millis=500,
    fork=Fork.ENABLE, verbosity=VerboseMode.EXTRA, assertions=Assertions.DISABLE,
)

PRESETS: dict[str, RunConfiguration] = {
    "debug": DEBUG,
    "quick": QUICK,
    "normal": NORMAL,
    "slow": SLOW,
}


def get_preset(name: str) -> RunConfiguration:
    try:
        return PRESETS[name.lower()]
    except KeyError:
        raise InvalidArgument(f"unknown preset {name!r}; expected one of {sorted(PRESETS)}") from None


def stable_config_hash(config: Any) -> str:
    """Stable hash from config (sorted keys). Same config => same hash."""
    if hasattr(config, "model_dump"):
        d = config.model_dump(mode="json")
    elif hasattr(config, "__dict__"):
        d = {k: v for k, v in config.__dict__.items() if not k.startswith("_")}
    else:
        d = dict(config) if hasattr(config, "items") else {}
    payload = json.dumps(d, sort_keys=True, default=str)
    return hashlib.sha256(payload.encode()).hexdigest()[:16]
