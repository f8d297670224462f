"""
Alert Models
Data structures for bound breach events.
"""

import math
import uuid
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from core.models import AnalyticalRecord


class BreachSide(str, Enum):
    """Which bound the ratio crossed"""
    ABOVE = "above"
    BELOW = "below"


class AlertSeverity(str, Enum):
    """Alert severity levels"""
    WARNING = "warning"
    CRITICAL = "critical"


def _json_float(value: float) -> Optional[float]:
    return round(value, 4) if math.isfinite(value) else None


@dataclass
class BreachEvent:
    """
    A ratio bound breach.

    This is what gets sent to API clients and kept in history.
    Non-finite ratios are always CRITICAL.
    """
    id: str
    timestamp: datetime
    ratio: float
    bound: float
    side: BreachSide
    severity: AlertSeverity
    message: str

    def __post_init__(self):
        if not self.id:
            self.id = f"evt_{uuid.uuid4().hex[:8]}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "timestamp": self.timestamp.isoformat(),
            "ratio": _json_float(self.ratio),
            "ratio_repr": repr(self.ratio),
            "bound": self.bound,
            "side": self.side.value,
            "severity": self.severity.value,
            "message": self.message,
        }

    @classmethod
    def from_record(cls, record: AnalyticalRecord) -> "BreachEvent":
        """Create event from a record whose trigger_alert is set"""
        ratio = record.trigger_alert if record.trigger_alert is not None else record.ratio

        if ratio > record.upper_bound:
            side, bound = BreachSide.ABOVE, record.upper_bound
        else:
            side, bound = BreachSide.BELOW, record.lower_bound

        severity = AlertSeverity.WARNING if math.isfinite(ratio) else AlertSeverity.CRITICAL

        if side == BreachSide.ABOVE:
            message = f"Ratio crossed above {bound} (value: {ratio:.4f})"
        else:
            message = f"Ratio crossed below {bound} (value: {ratio:.4f})"

        return cls(
            id="",
            timestamp=record.timestamp,
            ratio=ratio,
            bound=bound,
            side=side,
            severity=severity,
            message=message,
        )
