"""
Analytics Module
Pair ratio reduction for the live ratio table.

Structure:
    analytics/
    └── ratio.py     → Quote pair → AnalyticalRecord

Usage:
    from analytics import generate_row

    record = generate_row([quote_abc, quote_def])
    table.update([record.to_row()])

Design Principles:
    ✓ ALL functions are PURE (inputs → computation → outputs)
    ✓ NO sink access
    ✓ NO state management
"""

from . import ratio

from .ratio import (
    generate_row,
    reduce_quotes,
    mid_price,
    price_ratio,
    is_out_of_bounds,
)

__all__ = [
    "ratio",
    "generate_row",
    "reduce_quotes",
    "mid_price",
    "price_ratio",
    "is_out_of_bounds",
]
