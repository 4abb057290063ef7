"""Forked measurement worker: reads an ExecutionPlan on stdin, prints JSON results on stdout.

Invoked by ForkingEngine as `python [-O] -m bench.worker --include <identifier> <tuning flags>`.
Logs go to stderr; stdout carries exactly one JSON document.
"""

import argparse
import gc
import json
import logging
import os
import sys
from typing import Any, Optional

from bench.errors import AssertionFailed
from bench.logging_utils import configure_root_logging, level_from_name
from bench.measure import measure_class
from bench.run_config import ExecutionPlan

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="bench.worker")
    p.add_argument("--include", required=True, help="Benchmark class identifier")
    p.add_argument("--heap-limit-mb", type=int, default=None)
    p.add_argument("--max-gc-pause-ms", type=float, default=None)
    p.add_argument("--gc-threshold", type=int, default=None)
    p.add_argument("--gc-freeze", action="store_true")
    p.add_argument("--print-gc-stats", action="store_true")
    return p.parse_args(argv)


def apply_heap_limit(limit_mb: int) -> None:
    if sys.platform == "win32":
        logger.warning("heap limit not supported on %s", sys.platform)
        return
    import resource
    limit = limit_mb * 1024 * 1024
    _, hard = resource.getrlimit(resource.RLIMIT_AS)
    if hard != resource.RLIM_INFINITY and hard < limit:
        limit = hard
    try:
        resource.setrlimit(resource.RLIMIT_AS, (limit, hard))
    except (ValueError, OSError) as e:
        # macOS rejects RLIMIT_AS changes; measure without the ceiling.
        logger.warning("could not set heap limit to %dMB: %s", limit_mb, e)


def apply_gc_tuning(args: argparse.Namespace) -> None:
    if args.gc_threshold:
        _, gen1, gen2 = gc.get_threshold()
        gc.set_threshold(args.gc_threshold, gen1, gen2)


def emit(document: dict[str, Any]) -> None:
    sys.stdout.write(json.dumps(document, default=str) + "\n")
    sys.stdout.flush()


def main(argv: Optional[list[str]] = None) -> int:
    args = parse_args(argv)
    configure_root_logging(level_from_name(os.environ.get("BENCH_LOG_LEVEL")), stream=sys.stderr)
    try:
        plan = ExecutionPlan.model_validate_json(sys.stdin.read())
        if args.heap_limit_mb:
            apply_heap_limit(args.heap_limit_mb)
        apply_gc_tuning(args)
        results = measure_class(
            args.include,
            plan,
            max_gc_pause_ms=args.max_gc_pause_ms,
            print_gc_stats=args.print_gc_stats,
            after_setup=gc.freeze if args.gc_freeze else None,
        )
    except AssertionFailed as e:
        emit({"error": {"type": "AssertionFailed", "message": str(e)}})
        return 1
    except Exception as e:
        # Reported to the parent process, which raises it there.
        logger.debug("worker failed", exc_info=True)
        emit({"error": {"type": type(e).__name__, "message": str(e)}})
        return 1
    emit({"results": [r.to_dict() for r in results]})
    return 0


if __name__ == "__main__":
    sys.exit(main())
