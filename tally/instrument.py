"""Instrumentation of calls: counts successes and errors and times each call."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, TypeVar

RESULT_TYPE = "result_type"
RESULT_TYPE_ERROR = "error"
RESULT_TYPE_SUCCESS = "success"
TIMING_SUFFIX = "latency"

T = TypeVar("T")


@dataclass
class Call:
    """Tracks the successes, errors and timing of executed functions."""

    success: Any
    error: Any
    timing: Any

    def exec(self, fn: Callable[[], T]) -> T:
        """Run ``fn``, record its duration and whether it raised.

        The result of ``fn`` is returned; any exception it raises is counted
        as an error and propagated unchanged.
        """
        stopwatch = self.timing.start()
        try:
            result = fn()
        except Exception:
            stopwatch.stop()
            self.error.inc(1)
            raise
        stopwatch.stop()
        self.success.inc(1)
        return result


def new_call(scope: Any, name: str) -> Call:
    """Create a :class:`Call` recording metrics on ``scope`` under ``name``.

    Counters ``name`` tagged ``result_type=success`` and ``result_type=error``
    are created, along with a timer ``latency`` in the sub-scope ``name``.
    """
    return Call(
        success=scope.tagged({RESULT_TYPE: RESULT_TYPE_SUCCESS}).counter(name),
        error=scope.tagged({RESULT_TYPE: RESULT_TYPE_ERROR}).counter(name),
        timing=scope.sub_scope(name).timer(TIMING_SUFFIX),
    )