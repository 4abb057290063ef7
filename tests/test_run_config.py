"""Tests for RunConfiguration, presets and plan materialization."""

import sys
from pathlib import Path

import pytest
from pydantic import ValidationError

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from bench.errors import InvalidArgument
from bench.run_config import (
    DEBUG, NORMAL, QUICK, SLOW, PRESETS, TUNING_ARGS,
    Assertions, Fork, PrintInlining, RunConfiguration, VerboseMode,
    get_preset, make_config, runtime_flags, stable_config_hash,
)


@pytest.mark.parametrize("config, expected", [
    (DEBUG, (0, 1, 1, 0, VerboseMode.SILENT, True)),
    (QUICK, (5, 5, 10, 1, VerboseMode.NORMAL, False)),
    (NORMAL, (10, 10, 200, 1, VerboseMode.NORMAL, False)),
    (SLOW, (25, 15, 500, 1, VerboseMode.EXTRA, False)),
])
def test_presets(config, expected):
    actual = (
        config.warmup_iterations, config.measurement_iterations, config.iteration_millis,
        config.fork_count, config.verbosity, config.assertions_enabled,
    )
    assert actual == expected
    assert config.print_inlining is PrintInlining.DISABLE


def test_get_preset():
    assert get_preset("slow") is SLOW
    assert get_preset("DEBUG") is DEBUG
    assert set(PRESETS) == {"debug", "quick", "normal", "slow"}
    with pytest.raises(InvalidArgument):
        get_preset("fastest")


def test_config_is_immutable():
    with pytest.raises(ValidationError):
        SLOW.warmup_iterations = 1


def test_make_config_validates():
    with pytest.raises(InvalidArgument):
        make_config(measurement_iterations=0)
    with pytest.raises(InvalidArgument):
        make_config(warmup_iterations=-1)
    assert make_config(iteration_millis=5).iteration_millis == 5


def test_debug_vs_slow_plans():
    debug_plan = DEBUG.to_plan(["a.B"])
    slow_plan = SLOW.to_plan(["a.B"])
    assert debug_plan.forks == 0
    assert slow_plan.forks == 1
    assert debug_plan.assertions_enabled is True
    assert slow_plan.assertions_enabled is False
    assert "-O" not in debug_plan.interpreter_args
    assert "-O" in slow_plan.interpreter_args
    assert slow_plan.warmup_iterations == 25
    assert slow_plan.measurement_millis == 500
    assert slow_plan.warmup_millis == 500
    assert slow_plan.includes == ["a.B"]
    assert slow_plan.fail_on_error is True
    assert slow_plan.do_gc is True
    assert slow_plan.env["PYTHONHASHSEED"] == "0"


def test_tuning_flags_always_present():
    for config in PRESETS.values():
        _, worker = runtime_flags(config)
        for flag in TUNING_ARGS:
            assert flag in worker


def test_print_inlining_flags():
    config = make_config(print_inlining=PrintInlining.ENABLE, assertions=Assertions.ENABLE)
    interpreter, worker = runtime_flags(config)
    assert interpreter == ("-X", "importtime")
    assert "--print-gc-stats" in worker


def test_runtime_flags_is_pure():
    assert runtime_flags(NORMAL) == runtime_flags(NORMAL)


def test_plan_round_trips_as_json():
    plan = QUICK.to_plan(["x.Y", "z.W"])
    assert type(plan).model_validate_json(plan.model_dump_json()) == plan


def test_stable_config_hash():
    a = RunConfiguration(fork=Fork.DISABLE)
    b = RunConfiguration(fork=Fork.DISABLE)
    assert stable_config_hash(a) == stable_config_hash(b)
    assert stable_config_hash(a) != stable_config_hash(RunConfiguration(fork=Fork.ENABLE))
    assert SLOW.to_plan(["a.B"]).config_hash == stable_config_hash(SLOW)
