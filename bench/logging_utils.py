"""Root logging setup and structured run events."""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Optional, TextIO


def configure_root_logging(level: int = logging.INFO, stream: Optional[TextIO] = None) -> None:
    """Configure root logger with a consistent format."""
    root = logging.getLogger()
    root.setLevel(level)
    if not root.handlers:
        h = logging.StreamHandler(stream or sys.stdout)
        h.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s"))
        root.addHandler(h)


def level_from_name(name: Optional[str], default: int = logging.INFO) -> int:
    if not name:
        return default
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else default


def run_log(
    event: str,
    level: str = "info",
    run_id: Optional[str] = None,
    **kwargs: Any,
) -> dict[str, Any]:
    """Emit a structured event on the bench.run logger and return its payload."""
    payload = {
        "ts": datetime.now(tz=timezone.utc).isoformat(),
        "event": event,
        "level": level,
        **kwargs,
    }
    if run_id is not None:
        payload["run_id"] = run_id
    logger = logging.getLogger("bench.run")
    log_fn = getattr(logger, level.lower(), logger.info)
    log_fn("%s", json.dumps(payload, default=str))
    return payload
