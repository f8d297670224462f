"""
Core Module
Data contracts shared by the reducer, the sink and the feed.

Exports:
    Models: PriceLevel, QuoteSnapshot, AnalyticalRecord, RatioBounds
    Converters: to_quote_snapshot
    Errors: RatioMonitorError, InvalidInputError, SchemaMismatchError
"""

from .models import (
    PriceLevel,
    QuoteSnapshot,
    AnalyticalRecord,
    RatioBounds,
    DEFAULT_UPPER_BOUND,
    DEFAULT_LOWER_BOUND,
    parse_timestamp,
    to_quote_snapshot,
)
from .exceptions import RatioMonitorError, InvalidInputError, SchemaMismatchError

__all__ = [
    # Models
    "PriceLevel",
    "QuoteSnapshot",
    "AnalyticalRecord",
    "RatioBounds",
    "DEFAULT_UPPER_BOUND",
    "DEFAULT_LOWER_BOUND",
    "parse_timestamp",
    "to_quote_snapshot",
    # Errors
    "RatioMonitorError",
    "InvalidInputError",
    "SchemaMismatchError",
]
