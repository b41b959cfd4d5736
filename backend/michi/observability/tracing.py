"""Tracing utilities wrapping Opik."""
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

from michi.observability.client import get_opik_client

logger = logging.getLogger(__name__)


@contextmanager
def trace(
    name: str,
    metadata: Optional[Dict[str, Any]] = None,
    *,
    user_id: Optional[str] = None,
    trip_id: Optional[str] = None,
    request_id: Optional[str] = None,
) -> Iterator[Any]:
    """
    Open an Opik trace around a unit of work.

    Yields the trace handle, or None when Opik is disabled so callers can guard
    ``update`` calls with a simple truthiness check.
    """
    client = get_opik_client()
    opik_trace = None

    if client:
        trace_metadata = {key: value for key, value in (metadata or {}).items() if value is not None}
        for key, value in (("user_id", user_id), ("trip_id", trip_id), ("request_id", request_id)):
            if value:
                trace_metadata.setdefault(key, str(value))
        try:
            opik_trace = client.trace(name=name, metadata=trace_metadata or None)
        except Exception as exc:  # pragma: no cover - defensive guard
            logger.debug("Unable to start Opik trace %s: %s", name, exc)
            opik_trace = None

    try:
        yield opik_trace
    except Exception as exc:
        if opik_trace:
            try:
                opik_trace.update(error_info={"exception_type": type(exc).__name__, "message": str(exc)})
            except Exception:  # pragma: no cover
                logger.debug("Failed to attach error info to Opik trace %s", name, exc_info=True)
        raise
    finally:
        if opik_trace:
            try:
                opik_trace.end()
            except Exception:  # pragma: no cover
                logger.debug("Failed to close Opik trace %s cleanly", name, exc_info=True)
