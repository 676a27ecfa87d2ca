"""In-memory blessed run metrics.

Units may run on several threads under a parallel host runner, so updates
take a lock.
"""

import threading
import time

_start_time = time.monotonic()
_lock = threading.Lock()

_metrics: dict = {
    "units_passed": 0,
    "units_failed": 0,
    "verdicts": {},
    "harnesses": {},
}


def record_harness_invocation(harness_name: str, duration_ms: float, success: bool) -> None:
    """Record a single harness invocation with timing.

    ``success`` is False when the adapter produced a blessed_error artifact.
    """
    with _lock:
        h = _metrics["harnesses"].setdefault(harness_name, {
            "invocations": 0,
            "successes": 0,
            "blessed_errors": 0,
            "total_duration_ms": 0.0,
        })
        h["invocations"] += 1
        h["total_duration_ms"] += duration_ms
        if success:
            h["successes"] += 1
        else:
            h["blessed_errors"] += 1


def record_verdict(status: str, passed: bool) -> None:
    with _lock:
        _metrics["verdicts"][status] = _metrics["verdicts"].get(status, 0) + 1
        if passed:
            _metrics["units_passed"] += 1
        else:
            _metrics["units_failed"] += 1


def record_unit_failed() -> None:
    """A unit aborted before reaching a verdict (missing harness, I/O, status query)."""
    with _lock:
        _metrics["units_failed"] += 1


def reset_metrics() -> None:
    with _lock:
        _metrics["units_passed"] = 0
        _metrics["units_failed"] = 0
        _metrics["verdicts"] = {}
        _metrics["harnesses"] = {}


def get_metrics() -> dict:
    """Return a snapshot of current metrics."""
    with _lock:
        return {
            "uptime_seconds": round(time.monotonic() - _start_time, 1),
            "units_passed": _metrics["units_passed"],
            "units_failed": _metrics["units_failed"],
            "verdicts": dict(_metrics["verdicts"]),
            "harnesses": {
                name: dict(stats)
                for name, stats in _metrics["harnesses"].items()
            },
        }
