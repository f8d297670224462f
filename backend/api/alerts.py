"""
Alerts API
Ratio bound breach history.

Endpoints:
    GET    /api/alerts/history   → Recent breach events (newest first)
    DELETE /api/alerts/history   → Clear breach history
    GET    /api/alerts/stats     → Monitor statistics
"""

from fastapi import APIRouter, Query

from services import get_ratio_feed

router = APIRouter(prefix="/alerts", tags=["Alerts"])


@router.get("/history")
async def get_history(limit: int = Query(default=50, ge=1, le=200)):
    """Get recent breach history"""
    monitor = get_ratio_feed().monitor
    history = monitor.get_history(limit)

    return {
        "count": len(history),
        "alerts": [e.to_dict() for e in history]
    }


@router.delete("/history")
async def clear_history():
    """Clear breach history"""
    get_ratio_feed().monitor.clear_history()
    return {"message": "Alert history cleared"}


@router.get("/stats")
async def get_stats():
    """Get breach monitor statistics"""
    return get_ratio_feed().monitor.stats()
