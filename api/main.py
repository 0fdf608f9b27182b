"""
AI Impact Calculator API - Main Application.

FastAPI application with CORS enabled for frontend communication.
"""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api import __version__
from api.models import ErrorResponse
from domain.errors import ValidationError
from repositories.client import load_provider_settings
from services.carbon_intensity_service import CarbonIntensityResolver
from services.impact_service import ImpactCalculator

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create one resolver (and its cache and HTTP client) per application."""
    settings = load_provider_settings()
    resolver = CarbonIntensityResolver(settings=settings)
    app.state.resolver = resolver
    app.state.calculator = ImpactCalculator(resolver)
    logger.info(
        "Carbon intensity resolver ready",
        extra={"live_enabled": settings.live_enabled, "ttl_seconds": settings.cache_ttl_seconds},
    )
    try:
        yield
    finally:
        await resolver.aclose()


# Create FastAPI application
app = FastAPI(
    title="AI Impact Calculator API",
    description="REST API for estimating the energy and CO2 footprint of AI token usage",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# Configure CORS - Allow all origins for development
# TODO: Restrict origins in production
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Allow all origins for demo
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    """Invalid user input is a 400 with the standard error body."""
    return JSONResponse(
        status_code=400,
        content=ErrorResponse(
            error="Invalid request",
            detail=str(exc),
            status_code=400
        ).model_dump(),
    )


@app.get("/health", tags=["Health"])
def health_check():
    """
    Health check endpoint.

    Returns the API status and version.
    """
    return {
        "status": "healthy",
        "version": __version__,
        "service": "ai-impact-calculator-api"
    }


@app.get("/", tags=["Root"])
def root():
    """
    Root endpoint with API information.
    """
    return {
        "message": "AI Impact Calculator API",
        "version": __version__,
        "docs": "/docs",
        "health": "/health"
    }


# Import and include routers
from api.routers import calculations, carbon

app.include_router(calculations.router, prefix="/api/v1", tags=["Calculations"])
app.include_router(carbon.router, prefix="/api/v1", tags=["Carbon Intensity"])
