"""
Lead Funnel Backend - FastAPI Application
Main entry point with all routes configured.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import InterfaceError, OperationalError

from leadfunnel.config import settings
from leadfunnel.core.exceptions import LeadFunnelException, QuotaExceededError, StoreUnavailableError
from leadfunnel.database import init_db, ping_db

# Import all API routers
from leadfunnel.api import dashboard, leads, profile, webhooks

# Import models to ensure they are registered with SQLModel
from leadfunnel.models import Company, ProspectingProfile, Lead, ActivityLog

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    # Startup
    await init_db()
    yield
    # Shutdown


app = FastAPI(
    title="Lead Funnel API",
    description="Lead qualification pipeline with funnel analytics and daily activation quota",
    version="1.0.0",
    lifespan=lifespan
)

# CORS Configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(LeadFunnelException)
async def lead_funnel_exception_handler(request: Request, exc: LeadFunnelException):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected ({exc.status_code}): {exc.message}")

    content = {"detail": exc.message}
    if isinstance(exc, QuotaExceededError):
        content["remaining"] = exc.remaining
    return JSONResponse(status_code=exc.status_code, content=content)


@app.exception_handler(OperationalError)
@app.exception_handler(InterfaceError)
async def store_exception_handler(request: Request, exc: Exception):
    logger.error(f"Database error on {request.method} {request.url.path}: {exc}")
    error = StoreUnavailableError()
    return JSONResponse(status_code=error.status_code, content={"detail": error.message})


# Include all routers
app.include_router(dashboard.router)
app.include_router(leads.router)
app.include_router(profile.router)
app.include_router(webhooks.router)


@app.get("/")
async def root():
    return {
        "message": "Lead Funnel API is running",
        "version": "1.0.0",
        "docs": "/docs"
    }


@app.get("/health")
async def health():
    """Database connectivity check."""
    try:
        await ping_db()
    except (OperationalError, InterfaceError, OSError) as e:
        logger.error(f"Health check failed: {e}")
        return JSONResponse(
            status_code=503,
            content={
                "status": "error",
                "database": "connection_failed",
                "message": "Could not connect to the database"
            }
        )
    return {"status": "ok", "database": "connected"}
