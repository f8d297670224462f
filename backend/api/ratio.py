"""
Ratio Table API
Read the aggregated ratio view.

Endpoints:
    GET    /api/ratio/view        → Pivoted rows, visible columns only
    GET    /api/ratio/aggregate   → Pivoted rows, every aggregate
    GET    /api/ratio/config      → Schema, view attributes, bounds
    GET    /api/ratio/stats       → Feed + table statistics
    DELETE /api/ratio             → Clear table and feed state
"""

import math
from typing import Any, Dict, List

from fastapi import APIRouter

from services import get_ratio_feed
from sink import PivotTable, schema_to_dict

router = APIRouter(prefix="/ratio", tags=["Ratio"])


def _serialize(rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    out = []
    for row in rows:
        item = {"row_path": [v.isoformat() if hasattr(v, "isoformat") else v for v in row["row_path"]]}
        for key, value in row.items():
            if key == "row_path":
                continue
            if isinstance(value, float) and not math.isfinite(value):
                value = None
            elif hasattr(value, "isoformat"):
                value = value.isoformat()
            item[key] = value
        out.append(item)
    return out


def _table() -> PivotTable:
    return get_ratio_feed().sink


@router.get("/view")
async def get_view():
    rows = _table().view()
    return {"count": len(rows), "rows": _serialize(rows)}


@router.get("/aggregate")
async def get_aggregate():
    rows = _table().aggregate()
    return {"count": len(rows), "rows": _serialize(rows)}


@router.get("/config")
async def get_config():
    feed = get_ratio_feed()
    table = feed.sink
    return {
        "schema": schema_to_dict(table.schema),
        "view": table.config.model_dump(),
        "attributes": table.config.to_attributes(),
        "bounds": {
            "upper_bound": feed.bounds.upper_bound,
            "lower_bound": feed.bounds.lower_bound,
        },
    }


@router.get("/stats")
async def get_stats():
    feed = get_ratio_feed()
    return {
        "feed": feed.stats(),
        "table": feed.sink.stats(),
    }


@router.delete("")
async def clear_table():
    feed = get_ratio_feed()
    feed.sink.clear()
    feed.reset()
    feed.monitor.reset()
    return {"message": "Ratio table cleared"}
