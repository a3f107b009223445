from __future__ import annotations

import time
from collections import deque
from typing import Any

MAX_EVENTS = 5000

# Oldest events are discarded once MAX_EVENTS is reached.
_events: deque[dict[str, Any]] = deque(maxlen=MAX_EVENTS)


def record_event(event_type: str, data: dict[str, Any]) -> None:
    _events.append({
        "type": event_type,
        "timestamp": time.time(),
        **data,
    })


def get_events(event_type: str | None = None) -> list[dict[str, Any]]:
    if event_type is None:
        return list(_events)
    return [e for e in _events if e["type"] == event_type]


def clear_events() -> None:
    _events.clear()
