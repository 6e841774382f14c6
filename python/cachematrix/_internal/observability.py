from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field, fields
from typing import Any, Dict, Tuple


CACHE_HIT = "CACHE_HIT"
CACHE_MISS = "CACHE_MISS"
NO_CACHE = "NO_CACHE"

EVENTS: Tuple[str, ...] = (CACHE_HIT, CACHE_MISS, NO_CACHE)

logger = logging.getLogger("cachematrix.cache")

_MESSAGES: Dict[str, Tuple[int, str]] = {
    CACHE_HIT: (logging.INFO, "Fetching cached inverse"),
    CACHE_MISS: (logging.INFO, "Calculating the inverse"),
    NO_CACHE: (logging.DEBUG, "No cache available; calculating the inverse"),
}


@dataclass
class CacheRecord:
    event: str
    trace_tag: str
    shape: Tuple[int, int] | None
    solver: str | None
    options: Dict[str, Any] = field(default_factory=dict)
    timestamp: float = 0.0


def _shape(obj: Any) -> Tuple[int, int] | None:
    shape_attr = getattr(obj, "shape", None)
    if isinstance(shape_attr, tuple) and len(shape_attr) == 2:
        return int(shape_attr[0]), int(shape_attr[1])
    return None


def _solver_label(solver: Any) -> str | None:
    if solver is None:
        return None
    module = getattr(solver, "__module__", None)
    name = getattr(solver, "__qualname__", None) or getattr(solver, "__name__", None)
    if name is None:
        return type(solver).__name__
    return f"{module}.{name}" if module else str(name)


class CacheObservability:
    """Keeps the most recent cache decision per event kind plus running counts."""

    def __init__(self) -> None:
        self._counter = 0
        self._counts: Dict[str, int] = {event: 0 for event in EVENTS}
        self._last: dict[str, dict[str, Any]] = {}

    def clear(self) -> None:
        self._counter = 0
        self._counts = {event: 0 for event in EVENTS}
        self._last.clear()

    def _record(self, record: CacheRecord) -> dict[str, Any]:
        # Options are opaque caller objects (locks, files, ...); never deep-copy them.
        payload = {f.name: getattr(record, f.name) for f in fields(record)}
        self._last["__latest__"] = payload
        self._last[record.event] = payload
        self._counts[record.event] += 1
        return payload

    def record(
        self,
        event: str,
        matrix: Any,
        *,
        solver: Any = None,
        options: Dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        if event not in self._counts:
            raise ValueError(f"unknown cache event {event!r}")

        self._counter += 1
        record = CacheRecord(
            event=event,
            trace_tag=f"{event}:{self._counter}",
            shape=_shape(matrix),
            solver=_solver_label(solver),
            options=dict(options or {}),
            timestamp=time.time(),
        )
        level, message = _MESSAGES[event]
        logger.log(level, "%s (shape=%s, tag=%s)", message, record.shape, record.trace_tag)
        return self._record(record)

    def last(self, event: str | None = None) -> dict[str, Any] | None:
        key = event or "__latest__"
        payload = self._last.get(key)
        if payload is None:
            return None
        copied = dict(payload)
        copied["options"] = dict(payload["options"])
        return copied

    def stats(self) -> dict[str, int]:
        return dict(self._counts)


# Module-level singleton helpers (optional convenience)
_default_observability = CacheObservability()


def default_instance() -> CacheObservability:
    return _default_observability
