"""
FastAPI application entry point.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.api.router import api_router
from app.database import Base, engine
from app.logging_config import configure_logging
from app.recurrence.errors import BackendUnavailable
from app.recurrence.jobs import init_scheduling, shutdown_scheduling

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings.log_level)
    Base.metadata.create_all(bind=engine)

    if settings.scheduler_enabled:
        init_scheduling()
    else:
        logger.info("Job scheduler disabled; recurring items and reminders will not fire")

    yield

    if settings.scheduler_enabled:
        shutdown_scheduling()


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    version="1.0.0",
    description="Task and expense tracker with recurring items and reminders",
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.frontend_url],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(BackendUnavailable)
async def backend_unavailable_handler(request: Request, exc: BackendUnavailable):
    """The job backend is down; the client may retry."""
    logger.error(f"Job backend unavailable: {exc}")
    return JSONResponse(
        status_code=503,
        content={"detail": "Scheduling backend unavailable, please retry"},
    )


# Include API router
app.include_router(api_router, prefix="/api/v1")


@app.get("/")
def read_root():
    """Root endpoint."""
    return {
        "name": settings.app_name,
        "version": "1.0.0",
        "status": "running"
    }


@app.get("/api/v1/health")
def health_check():
    """Health check endpoint."""
    return {
        "status": "ok",
        "app_name": settings.app_name
    }
