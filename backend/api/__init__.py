"""
API Routers
"""
from .quotes import router as quotes_router
from .ratio import router as ratio_router
from .alerts import router as alerts_router

__all__ = ["quotes_router", "ratio_router", "alerts_router"]
