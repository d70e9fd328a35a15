"""
Timing helpers for observability.

Responsibilities:
- Measure durations using monotonic time (immune to clock changes)
- Emit metrics as JSONL events via observability.logger
- Never aggregate: one metric = one log event

Design notes:
- Durations use monotonic time for correctness
- Event timestamps (ts_ms) use wall-clock time for human readability
- The timer lives on the stack of `timed()`, so nothing can leak
"""

from __future__ import annotations

import time
from contextlib import contextmanager
from typing import Any, Iterator

from observability.logger import log_event


def emit_timer(
    name: str,
    duration_ms: int,
    *,
    user_id: str | None = None,
    request_id: str | None = None,
    details: dict[str, Any] | None = None,
) -> None:
    """Emit one METRIC_TIMER event."""
    log_event({
        # Wall-clock timestamp for log correlation / readability
        "ts_ms": int(time.time() * 1000),
        "event_type": "METRIC_TIMER",
        "metric": name,
        "value_ms": duration_ms,
        "user_id": user_id,
        "request_id": request_id,
        "details": details or {},
    })


@contextmanager
def timed(
    name: str,
    *,
    user_id: str | None = None,
    request_id: str | None = None,
    details: dict[str, Any] | None = None,
) -> Iterator[dict[str, Any]]:
    """
    Context manager for measuring durations safely.

    Guarantees:
    - Metric is emitted exactly once
    - Exceptions inside the block do NOT suppress timing

    The yielded dict is merged into details, so the block can attach
    facts it only learns while running:

        with timed("request_handling", user_id=uid) as extra:
            ...
            extra["decision"] = "play"
    """
    extra: dict[str, Any] = {}
    start_ns = time.monotonic_ns()
    try:
        yield extra
    finally:
        emit_timer(
            name,
            (time.monotonic_ns() - start_ns) // 1_000_000,
            user_id=user_id,
            request_id=request_id,
            details={**(details or {}), **extra},
        )
