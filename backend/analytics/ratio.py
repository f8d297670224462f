"""
Pair Ratio
Live quote pair → AnalyticalRecord.

Update: Every quote pair
Use: Feeding the pivoted ratio table, bound alerts

Formula:
    price_X = (top_ask_X + top_bid_X) / 2
    ratio   = price_A / price_B
    alert   = ratio outside [lower_bound, upper_bound]
"""

from collections.abc import Mapping
from typing import Optional, Sequence, Union

import numpy as np

from core.exceptions import InvalidInputError
from core.models import AnalyticalRecord, QuoteSnapshot, RatioBounds, to_quote_snapshot

QuoteLike = Union[QuoteSnapshot, Mapping]

_DEFAULT_BOUNDS = RatioBounds()


def mid_price(quote: QuoteSnapshot) -> float:
    """Mean of best ask and best bid."""
    return (quote.top_ask.price + quote.top_bid.price) / 2


def price_ratio(price_a: float, price_b: float) -> float:
    """
    price_a / price_b with IEEE-754 semantics.

    Never raises: x/0 is ±inf, 0/0 is nan.
    """
    with np.errstate(divide='ignore', invalid='ignore'):
        return float(np.float64(price_a) / np.float64(price_b))


def is_out_of_bounds(ratio: float, bounds: RatioBounds = _DEFAULT_BOUNDS) -> bool:
    """
    True when ratio breaches the band.

    ±inf breaches; nan compares false both ways and never breaches.
    """
    return ratio > bounds.upper_bound or ratio < bounds.lower_bound


def _as_snapshot(quote: QuoteLike, index: int) -> QuoteSnapshot:
    if isinstance(quote, QuoteSnapshot):
        return quote
    if isinstance(quote, Mapping):
        return to_quote_snapshot(quote)
    raise InvalidInputError(f"quotes[{index}] is {type(quote).__name__}, expected a quote snapshot")


def generate_row(
    quotes: Sequence[QuoteLike],
    bounds: Optional[RatioBounds] = None
) -> AnalyticalRecord:
    """
    Reduce a quote pair to one AnalyticalRecord.

    Pure: no state, no side effects, same inputs → identical record.

    Args:
        quotes: Exactly two snapshots, instrument A at 0, instrument B at 1
        bounds: Alert band (defaults to 1.05 / 0.95)

    Returns:
        AnalyticalRecord with mid prices, ratio, bounds, latest timestamp,
        and trigger_alert = ratio when out of bounds (else None)

    Raises:
        InvalidInputError: not a pair, or missing/unparseable prices or
            timestamps
    """
    if isinstance(quotes, (str, bytes, Mapping)) or not isinstance(quotes, Sequence):
        raise InvalidInputError(f"Expected a pair of quotes, got {type(quotes).__name__}")
    if len(quotes) != 2:
        raise InvalidInputError(f"Expected exactly 2 quotes, got {len(quotes)}")

    bounds = bounds or _DEFAULT_BOUNDS
    quote_a = _as_snapshot(quotes[0], 0)
    quote_b = _as_snapshot(quotes[1], 1)

    price_a = mid_price(quote_a)
    price_b = mid_price(quote_b)
    ratio = price_ratio(price_a, price_b)

    timestamp = max(quote_a.timestamp, quote_b.timestamp)

    return AnalyticalRecord(
        price_a=price_a,
        price_b=price_b,
        ratio=ratio,
        timestamp=timestamp,
        upper_bound=bounds.upper_bound,
        lower_bound=bounds.lower_bound,
        trigger_alert=ratio if is_out_of_bounds(ratio, bounds) else None,
    )


reduce_quotes = generate_row
