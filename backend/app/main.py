"""FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.database import lifespan_db
from app.services.registry import build_services
from app.utils.logging import get_logger, setup_logging

# Setup logging
setup_logging(debug=settings.debug)

# Import routers
from app.api import (
    admin_router,
    ai_router,
    auth_router,
    collections_router,
    cron_router,
    products_router,
)

logger = get_logger("rentals.main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    async with lifespan_db():
        logger.info("app_started", app=settings.app_name, version=settings.app_version)
        yield


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Rental marketplace API: listings, collections and owner tools",
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)

app.state.services = build_services(settings)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    # Internal details stay in the logs.
    logger.exception("unhandled_error", path=request.url.path, method=request.method)
    return JSONResponse(status_code=500, content={"detail": "Internal Server Error"})


# Include routers
app.include_router(auth_router, tags=["Authentication"])
app.include_router(products_router, prefix="/products", tags=["Products"])
app.include_router(collections_router, prefix="/collections", tags=["Collections"])
app.include_router(admin_router, prefix="/admin", tags=["Admin"])
app.include_router(cron_router, prefix="/cron", tags=["Cron"])
app.include_router(ai_router, tags=["AI"])


@app.get("/", tags=["Health"])
async def root():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "app": settings.app_name,
        "version": settings.app_version,
    }


@app.get("/health", tags=["Health"])
async def health_check():
    """Detailed health check."""
    return {
        "status": "healthy",
        "database": "connected",
        "ai": "configured" if app.state.services.descriptions.configured else "disabled",
    }
