"""
Event log listener.

Records every SecurityService notification so the control API can show
recent activity.
"""

from collections import deque
from datetime import datetime, timezone

from ..domain.enums import AlarmStatus
from .interfaces import StatusListener


class EventLogListener(StatusListener):
    """Bounded in-memory log of notifications, newest last."""

    def __init__(self, max_events: int = 100):
        self.max_events = max_events
        self._events: deque[dict] = deque(maxlen=max_events)

    def notify(self, status: AlarmStatus) -> None:
        self._append({"type": "alarm_status", "alarm_status": status.value})

    def cat_detected(self, cat: bool) -> None:
        self._append({"type": "cat_detected", "cat": cat})

    def sensor_status_changed(self) -> None:
        self._append({"type": "sensor_status_changed"})

    def _append(self, record: dict) -> None:
        record["timestamp"] = datetime.now(timezone.utc).isoformat()
        self._events.append(record)

    def events(self) -> list[dict]:
        return list(self._events)

    def clear(self) -> None:
        self._events.clear()
