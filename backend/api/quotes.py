"""
Quotes API
Submit quote pairs to the ratio feed.

Endpoints:
    POST /api/quotes    → Reduce one pair, push the row to the table
"""

import math
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from core import AnalyticalRecord, InvalidInputError
from services import get_ratio_feed

router = APIRouter(prefix="/quotes", tags=["Quotes"])


class QuotePairRequest(BaseModel):
    """Two quote snapshots: instrument A first, instrument B second"""
    quotes: List[Dict[str, Any]]

    model_config = {
        "json_schema_extra": {
            "example": {
                "quotes": [
                    {
                        "stock": "ABC",
                        "top_ask": {"price": 121.2, "size": 36},
                        "top_bid": {"price": 120.48, "size": 109},
                        "timestamp": "2019-02-11 22:06:30.572453",
                    },
                    {
                        "stock": "DEF",
                        "top_ask": {"price": 121.68, "size": 4},
                        "top_bid": {"price": 117.87, "size": 81},
                        "timestamp": "2019-02-11 22:06:30.572453",
                    },
                ]
            }
        }
    }


def _json_float(value: Optional[float]) -> Optional[float]:
    if value is None or not math.isfinite(value):
        return None
    return value


def record_to_dict(record: AnalyticalRecord) -> Dict[str, Any]:
    """JSON-safe record: non-finite floats become null, raw value kept in ratio_repr"""
    return {
        "price_a": record.price_a,
        "price_b": record.price_b,
        "ratio": _json_float(record.ratio),
        "ratio_repr": repr(record.ratio),
        "timestamp": record.timestamp.isoformat(),
        "upper_bound": record.upper_bound,
        "lower_bound": record.lower_bound,
        "trigger_alert": _json_float(record.trigger_alert),
        "is_alert": record.is_alert,
    }


@router.post("")
async def submit_quotes(request: QuotePairRequest):
    """
    Reduce a quote pair and append the record to the ratio table.

    Returns the record, or status "skipped" when its timestamp is older
    than the last submitted one.
    """
    feed = get_ratio_feed()

    try:
        record = feed.process(request.quotes)
    except InvalidInputError as e:
        raise HTTPException(422, str(e))

    if record is None:
        return {"status": "skipped", "reason": "out_of_order"}

    return {"status": "ok", "record": record_to_dict(record)}
