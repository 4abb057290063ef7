"""Entry point: a correctness pass over all targets, then a full precision run.

The precision run takes a long time (every class is forked and measured with
the SLOW preset).
"""

import logging
import os

from bench.logging_utils import configure_root_logging, level_from_name
from bench.runner import run_debug_with_asserts, run_slow_no_asserts
from targets import ALL_TARGETS

logger = logging.getLogger(__name__)


def main() -> None:
    configure_root_logging(level_from_name(os.environ.get("BENCH_LOG_LEVEL"), logging.INFO))
    logger.info("running %d benchmark classes", len(ALL_TARGETS))
    run_debug_with_asserts(ALL_TARGETS)
    run_slow_no_asserts(ALL_TARGETS)


if __name__ == "__main__":
    main()
