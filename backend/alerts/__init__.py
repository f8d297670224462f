"""
Alert System
Bound breach events derived from the live ratio.

Structure:
    alerts/
    ├── models.py    → BreachEvent, BreachSide, AlertSeverity
    └── engine.py    → BreachMonitor (edge detection + history)

Usage:
    from alerts import BreachMonitor

    monitor = BreachMonitor(history_size=100)
    event = monitor.evaluate(record)   # None unless the ratio just left the band
    history = monitor.get_history(limit=20)
"""

from .models import (
    BreachEvent,
    BreachSide,
    AlertSeverity,
)

from .engine import BreachMonitor

__all__ = [
    # Models
    "BreachEvent",
    "BreachSide",
    "AlertSeverity",
    # Engine
    "BreachMonitor",
]
