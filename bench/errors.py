"""Error taxonomy for benchmark orchestration."""

from typing import Optional


class BenchError(Exception):
    """Base class for all errors raised by the benchmark harness."""


class InvalidArgument(BenchError, ValueError):
    """Bad input rejected before anything is measured."""


class AssertionFailed(BenchError, AssertionError):
    """A correctness check inside a benchmark failed; the whole run is void."""


class EmptyInput(BenchError):
    """The reporter was given nothing to summarize."""


class EngineError(BenchError):
    """The measurement engine could not complete a plan."""


class BenchmarkNotFound(EngineError):
    def __init__(self, identifier: str, reason: str = ""):
        self.identifier = identifier
        msg = f"benchmark class not found: {identifier}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)


class RunFailed(BenchError, RuntimeError):
    """Wraps any engine failure; no partial results accompany it."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause
