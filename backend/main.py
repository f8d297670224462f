from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api import alerts_router, quotes_router, ratio_router
from config import API_HOST, API_PORT
from services import get_ratio_feed
from utils.logger import logger


@asynccontextmanager
async def lifespan(app: FastAPI):
    get_ratio_feed()
    logger.info("Pair Ratio Monitor API started")
    yield
    logger.info("Pair Ratio Monitor API stopped")

app = FastAPI(
    title="Pair Ratio Monitor API",
    version="2.0.0",
    lifespan=lifespan,
    docs_url="/docs",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(quotes_router, prefix="/api")
app.include_router(ratio_router, prefix="/api")
app.include_router(alerts_router, prefix="/api")

@app.get("/")
async def root():
    return {
        "name": "Pair Ratio Monitor API",
        "version": "2.0.0",
        "docs": "/docs",
    }

@app.get("/health")
async def health():
    feed = get_ratio_feed()
    stats = feed.stats()

    return {
        "status": "healthy",
        "feed": {
            "pairs_received": stats["pairs_received"],
            "records_submitted": stats["records_submitted"],
            "alerts": stats["alerts"],
            "last_timestamp": stats["last_timestamp"],
            "uptime_seconds": stats["uptime_seconds"],
        },
        "table": {
            "rows": feed.sink.size(),
        },
        "alert_active": feed.monitor.is_active,
    }


def run(reload: bool = False):
    import uvicorn
    uvicorn.run("main:app", host=API_HOST, port=API_PORT, reload=reload)


if __name__ == "__main__":
    run(reload=True)
