from collections import deque
from datetime import datetime
from typing import Any, Callable, Deque, Dict, List, Optional

from core.models import AnalyticalRecord
from utils.logger import logger

from .models import BreachEvent

OnAlertCallback = Callable[[BreachEvent], None]


class BreachMonitor:
    """
    Edge-triggered watcher over AnalyticalRecords.

    Fires once when the ratio leaves the band, stays quiet while it
    remains outside, re-arms when a record comes back inside.
    """

    def __init__(self, history_size: int = 100):
        self._history: Deque[BreachEvent] = deque(maxlen=history_size)
        self._callbacks: List[OnAlertCallback] = []
        self._active = False
        self._stats = self._fresh_stats()

    @staticmethod
    def _fresh_stats() -> Dict[str, Any]:
        return {
            "evaluations": 0,
            "triggers": 0,
            "suppressed": 0,
            "callback_errors": 0,
            "start_time": datetime.now(),
        }

    @property
    def is_active(self) -> bool:
        return self._active

    def evaluate(self, record: AnalyticalRecord) -> Optional[BreachEvent]:
        self._stats["evaluations"] += 1

        if not record.is_alert:
            self._active = False
            return None

        if self._active:
            self._stats["suppressed"] += 1
            return None

        self._active = True
        event = BreachEvent.from_record(record)
        self._history.append(event)
        self._stats["triggers"] += 1
        logger.warning(event.message)

        for callback in self._callbacks:
            try:
                callback(event)
            except Exception as e:
                self._stats["callback_errors"] += 1
                logger.exception(f"Alert callback failed: {e}")

        return event

    def on_alert(self, callback: OnAlertCallback) -> None:
        self._callbacks.append(callback)

    def get_history(self, limit: int = 50) -> List[BreachEvent]:
        history = list(self._history)
        history.reverse()
        return history[:limit]

    def clear_history(self) -> None:
        self._history.clear()

    def reset(self) -> None:
        self._active = False
        self._history.clear()
        self._stats = self._fresh_stats()

    def stats(self) -> Dict[str, Any]:
        uptime = (datetime.now() - self._stats["start_time"]).total_seconds()
        return {
            **{k: v for k, v in self._stats.items() if k != "start_time"},
            "uptime_seconds": round(uptime, 2),
            "is_active": self._active,
            "history_size": len(self._history),
        }
