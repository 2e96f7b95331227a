"""Shared structured JSON logging helpers."""

from __future__ import annotations

import json
import sys
from datetime import UTC, datetime
from typing import Any, TextIO

from core.config import CleanerConfig


def emit_json_event(
    event_type: str,
    *,
    run_id: str | None,
    level: str = "info",
    stream: TextIO | None = None,
    **payload: Any,
) -> str:
    """Emit one JSON event line (stderr by default) and return the rendered line."""
    event: dict[str, Any] = {
        "event_type": event_type,
        "level": level,
        "timestamp": datetime.now(UTC).isoformat(),
        "run_id": run_id,
    }
    event.update(payload)
    line = json.dumps(event, ensure_ascii=True, sort_keys=True, default=str)
    print(line, file=stream if stream is not None else sys.stderr)
    return line


def emit_debug_event(event_type: str, **payload: Any) -> str | None:
    """Emit a debug event only when CleanerConfig.DEBUG_EVENTS is enabled."""
    if not CleanerConfig.DEBUG_EVENTS:
        return None
    return emit_json_event(event_type, run_id=None, level="debug", **payload)
