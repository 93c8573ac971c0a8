"""Steam price watch service - FastAPI application."""
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from steamwatch.api import cron_router, games_router, watchlist_router
from steamwatch.api.auth import CronUnauthorized
from steamwatch.config import get_settings
from steamwatch.database import init_db
from steamwatch.scheduler import start_scheduler, stop_scheduler

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    # Startup
    logger.info("Starting steamwatch")
    await init_db()
    start_scheduler()

    yield

    # Shutdown
    logger.info("Shutting down steamwatch")
    stop_scheduler()


# Create application
app = FastAPI(
    title="steamwatch",
    description="Steam price history and price-drop alerts",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "timestamp": datetime.now(timezone.utc).isoformat(), "service": "steamwatch"}


@app.get("/")
async def root():
    """API information."""
    return {
        "service": "steamwatch",
        "version": "0.1.0",
        "docs": "/docs",
        "health": "/health",
    }


# Include routers
app.include_router(games_router, prefix="/api/v1")
app.include_router(watchlist_router, prefix="/api/v1")
app.include_router(cron_router, prefix="/api")


# Error handlers
@app.exception_handler(CronUnauthorized)
async def cron_unauthorized_handler(request: Request, exc: CronUnauthorized):
    """Reject cron triggers with a bad or missing secret."""
    return JSONResponse(status_code=401, content={"error": "Unauthorized"})


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle uncaught exceptions."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"},
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "steamwatch.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
