"""
Domain Models
The SINGLE SOURCE OF TRUTH for data formats.

Quotes come in as QuoteSnapshot, records go out as AnalyticalRecord.
Everything else in the system sees only these types.
"""

import math
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from .exceptions import InvalidInputError


DEFAULT_UPPER_BOUND = 1.05
DEFAULT_LOWER_BOUND = 0.95


def to_naive_utc(ts: datetime) -> datetime:
    """Aware → UTC with tzinfo dropped; naive values are taken as UTC already"""
    if ts.tzinfo is None:
        return ts
    return ts.astimezone(timezone.utc).replace(tzinfo=None)


def parse_timestamp(v: Any) -> Any:
    """
    Handle various timestamp formats.

    Every parsed value is naive UTC so any two quotes compare.
    """
    if isinstance(v, datetime):
        return to_naive_utc(v)
    if isinstance(v, str):
        # ISO format, with 'T' or space separator
        return to_naive_utc(datetime.fromisoformat(v.strip().replace('Z', '+00:00')))
    if isinstance(v, (int, float)) and not isinstance(v, bool):
        # Unix timestamp (seconds or milliseconds)
        seconds = v / 1000 if v > 1e12 else v
        try:
            return datetime.fromtimestamp(seconds, tz=timezone.utc).replace(tzinfo=None)
        except (OverflowError, OSError, ValueError) as e:
            raise ValueError(f"Unix timestamp out of range: {v!r}") from e
    return v


# =============================================================================
# QuoteSnapshot — Input Contract
# =============================================================================

class PriceLevel(BaseModel):
    """Top-of-book level: {"price": ..., "size": ...}"""
    model_config = ConfigDict(frozen=True)

    price: float
    size: int = 0


class QuoteSnapshot(BaseModel):
    """
    Latest quote for one instrument.

    Consumed, never owned. Prices are trusted as delivered: no sign
    check happens here, a zero price is legal and simply yields a
    non-finite ratio downstream.

    Fields:
        stock: Uppercase instrument id (ABC)
        top_ask: Best ask level
        top_bid: Best bid level
        timestamp: Quote time, normalized to naive UTC
    """
    model_config = ConfigDict(frozen=True)

    stock: str = Field(..., min_length=1, max_length=20)
    top_ask: PriceLevel
    top_bid: PriceLevel
    timestamp: datetime

    @field_validator('stock', mode='before')
    @classmethod
    def uppercase_stock(cls, v):
        return v.upper() if isinstance(v, str) else v

    @field_validator('timestamp', mode='before')
    @classmethod
    def parse_ts(cls, v):
        return parse_timestamp(v)


# =============================================================================
# AnalyticalRecord — Output Contract
# =============================================================================

class AnalyticalRecord(BaseModel):
    """
    One derived row per quote pair.

    Immutable. Field names and types match the sink schema exactly.
    `trigger_alert` is None when the ratio is inside the bounds; it is
    never 0, so the sink's mean over that column only sees real alerts.
    `ratio` and `trigger_alert` may be non-finite (price_b == 0).
    """
    model_config = ConfigDict(frozen=True)

    price_a: float
    price_b: float
    ratio: float
    timestamp: datetime
    upper_bound: float
    lower_bound: float
    trigger_alert: Optional[float] = None

    @property
    def is_alert(self) -> bool:
        return self.trigger_alert is not None

    @property
    def is_finite(self) -> bool:
        return math.isfinite(self.ratio)

    def to_row(self) -> Dict[str, Any]:
        """Sink row: the seven schema columns, absent alert as None"""
        return {
            'price_a': self.price_a,
            'price_b': self.price_b,
            'ratio': self.ratio,
            'timestamp': self.timestamp,
            'upper_bound': self.upper_bound,
            'lower_bound': self.lower_bound,
            'trigger_alert': self.trigger_alert,
        }


# =============================================================================
# RatioBounds — Alert Band Configuration
# =============================================================================

class RatioBounds(BaseModel):
    """
    Alert band around parity.

    Accepts both snake_case and the option names upperBound / lowerBound:
        RatioBounds(upperBound=1.1, lowerBound=0.9)
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    upper_bound: float = Field(default=DEFAULT_UPPER_BOUND, alias='upperBound', allow_inf_nan=False)
    lower_bound: float = Field(default=DEFAULT_LOWER_BOUND, alias='lowerBound', allow_inf_nan=False)

    @model_validator(mode='after')
    def check_order(self):
        if self.lower_bound >= self.upper_bound:
            raise ValueError(
                f"lower_bound ({self.lower_bound}) must be below upper_bound ({self.upper_bound})"
            )
        return self

    @classmethod
    def default(cls) -> "RatioBounds":
        """Bounds from config (env-overridable)"""
        from config import RATIO_LOWER_BOUND, RATIO_UPPER_BOUND
        return cls(upper_bound=RATIO_UPPER_BOUND, lower_bound=RATIO_LOWER_BOUND)


# =============================================================================
# Converters — External → Internal
# =============================================================================

def _level(data: Mapping, nested_key: str, flat_key: str) -> Dict[str, Any]:
    level = data.get(nested_key)
    if isinstance(level, Mapping):
        if level.get('price') is None:
            raise InvalidInputError(f"{nested_key}.price missing")
        return {'price': level['price'], 'size': level.get('size') or 0}
    if data.get(flat_key) is not None:
        return {'price': data[flat_key], 'size': data.get(f"{flat_key}_size") or 0}
    raise InvalidInputError(f"{nested_key} missing")


def to_quote_snapshot(data: Mapping) -> QuoteSnapshot:
    """
    Convert external quote payload to QuoteSnapshot.

    This is the NORMALIZATION POINT for quotes.

    Handles:
    - stock/symbol field variants
    - nested top_ask/top_bid levels or flat ask/bid prices
    - timestamp/ts field variants
    """
    if not isinstance(data, Mapping):
        raise InvalidInputError(f"Expected quote mapping, got {type(data).__name__}")

    stock = data.get('stock') or data.get('symbol')
    ts = data.get('timestamp')
    if ts is None:
        ts = data.get('ts')
    if ts is None:
        raise InvalidInputError("timestamp missing")

    try:
        return QuoteSnapshot(
            stock=stock,
            top_ask=_level(data, 'top_ask', 'ask'),
            top_bid=_level(data, 'top_bid', 'bid'),
            timestamp=ts,
        )
    except ValidationError as e:
        raise InvalidInputError(f"Invalid quote for {stock!r}: {e.error_count()} error(s)") from e
