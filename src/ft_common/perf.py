"""Operation timing for slow-query and slow-handler logging.

Usage:
    with track_performance("paginate", "database") as track:
        ...
        track.context["total"] = total

Logs at WARNING when the elapsed time crosses the threshold for its kind,
DEBUG otherwise. Exceptions propagate; the timing is still logged with
error=True.
"""

import logging
import time
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any

from config.settings import settings

logger = logging.getLogger("ft.perf")

_THRESHOLDS_MS = {
    "database": settings.SLOW_DB_MS,
    "api": settings.SLOW_API_MS,
}


@dataclass
class Tracker:
    operation: str
    kind: str
    context: dict[str, Any] = field(default_factory=dict)
    elapsed_ms: float = 0.0


@contextmanager
def track_performance(operation: str, kind: str = "api") -> Iterator[Tracker]:
    tracker = Tracker(operation=operation, kind=kind)
    start = time.perf_counter()
    try:
        yield tracker
    except Exception:
        tracker.context["error"] = True
        raise
    finally:
        tracker.elapsed_ms = (time.perf_counter() - start) * 1000
        threshold = _THRESHOLDS_MS.get(kind, settings.SLOW_API_MS)
        slow = tracker.elapsed_ms > threshold
        logger.log(
            logging.WARNING if slow else logging.DEBUG,
            "%s [%s] %.0fms slow=%s %s",
            operation,
            kind,
            tracker.elapsed_ms,
            slow,
            tracker.context,
        )
