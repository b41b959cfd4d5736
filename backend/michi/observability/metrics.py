"""Lightweight metrics helpers."""
from __future__ import annotations

import logging
from contextlib import contextmanager
from time import perf_counter
from typing import Any, Dict, Iterator, Optional

from michi.observability import tracing

logger = logging.getLogger(__name__)


def log_metric(name: str, value: float | int, metadata: Optional[Dict[str, Any]] = None) -> None:
    """Record a metric as a short-lived Opik trace when Opik is enabled."""
    client = tracing.get_opik_client()
    if not client:
        return

    payload: Dict[str, Any] = {"value": value}
    if metadata:
        payload.update(metadata)

    try:
        metric_trace = client.trace(name=f"metric:{name}", metadata=payload)
        metric_trace.end()
    except Exception as exc:  # pragma: no cover - defensive
        logger.debug("Unable to record metric %s: %s", name, exc)


@contextmanager
def timed_metric(name: str, metadata: Optional[Dict[str, Any]] = None) -> Iterator[Dict[str, Any]]:
    """
    Measure the wrapped block and emit ``<name>.latency_ms`` plus ``<name>.success``.

    The yielded dict can be mutated to attach extra metadata discovered inside
    the block (for example the number of blocks generated).
    """
    extra: Dict[str, Any] = dict(metadata or {})
    started = perf_counter()
    success = False
    try:
        yield extra
        success = True
    finally:
        latency_ms = (perf_counter() - started) * 1000
        log_metric(f"{name}.success", 1 if success else 0, metadata=extra)
        log_metric(f"{name}.latency_ms", latency_ms, metadata=extra)
