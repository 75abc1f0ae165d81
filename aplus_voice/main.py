"""
FastAPI Application - A Plus Auto Voice Agent

Main entry point for the API. The voice platform calls these routes as
custom functions and reads the returned ``message`` aloud.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from aplus_voice import __version__
from aplus_voice.api import info, inquiries, parts, vehicles
from aplus_voice.config import get_settings
from aplus_voice.core.logging_config import configure_logging
from aplus_voice.core.store_client import close_store_client
from aplus_voice.models import HealthResponse
from aplus_voice.responses import SERVICE_FALLBACK

settings = get_settings()
configure_logging()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan events - startup and shutdown

    The store client is created on first use and closed here
    """
    # Startup
    logger.info("Starting %s", settings.APP_NAME)
    logger.info("   Environment: %s", settings.ENVIRONMENT)
    logger.info("   Upstream: %s", settings.UPSTREAM_BASE_URL)

    yield

    # Shutdown
    logger.info("Shutting down...")
    await close_store_client()
    logger.info("Cleanup complete")


# Create FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    description="Voice agent functions for the A Plus Auto parts store",
    version=__version__,
    lifespan=lifespan
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def error_boundary(request: Request, call_next):
    """
    Every route answers with something speakable

    An unhandled error is logged with its traceback and replaced by a
    polite fallback sentence (HTTP 200, the caller is a voice agent).
    """
    try:
        return await call_next(request)
    except Exception:
        logger.exception("[API] Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=200,
            content={"success": False, "message": SERVICE_FALLBACK}
        )


@app.get("/")
async def root():
    """Liveness marker"""
    return {
        "status": "running",
        "service": settings.APP_NAME
    }


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Process health only; the upstream store is never contacted"""
    return HealthResponse(
        status="ok",
        timestamp=datetime.now(timezone.utc).isoformat()
    )


app.include_router(parts.router, tags=["parts"])
app.include_router(vehicles.router, tags=["vehicles"])
app.include_router(inquiries.router, tags=["inquiries"])
app.include_router(info.router, tags=["info"])


def run():
    """Console entry point: serve on $PORT (default 3000)"""
    import uvicorn

    uvicorn.run(
        "aplus_voice.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG
    )


if __name__ == "__main__":
    run()
