"""
NutriCalc Engine: Main Application Entry Point
==============================================
This is the FastAPI application. It:
  1. Creates the FastAPI app instance with metadata
  2. Registers the calculations router
  3. Configures CORS middleware for frontend integration
  4. Provides health check endpoints

The service is stateless: there is no database, every request is a pure
calculation.

To run locally:
  uvicorn nutricalc.main:app --reload --host 0.0.0.0 --port 8000
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from nutricalc.core.config import settings
from nutricalc.routers import calculations

# Configure logging so we can see what's happening in the console
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


# ============================================================
# APPLICATION LIFESPAN (Startup / Shutdown)
# ============================================================
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log startup and shutdown; there are no resources to open or close."""
    logger.info(f"🚀 Starting {settings.APP_NAME} v{settings.APP_VERSION}...")
    yield
    logger.info(f"🛑 Shutting down {settings.APP_NAME}...")


# ============================================================
# CREATE THE FASTAPI APPLICATION
# ============================================================
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description=(
        "Anthropometric and energy-balance calculation engine. "
        "Turns raw body measurements and patient context into BMI, body "
        "composition, energy expenditure and a macro / meal distribution plan."
    ),
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)


# ============================================================
# CORS MIDDLEWARE
# ============================================================
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================================
# REGISTER ROUTERS
# ============================================================
app.include_router(calculations.router)    # /calculations/*


# ============================================================
# ROOT / HEALTH CHECK ENDPOINT
# ============================================================
@app.get("/", tags=["Health"])
async def root():
    """
    Root endpoint, doubles as a health check.
    Returns basic app info to confirm the API is running.
    """
    return {
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "status": "healthy",
        "docs": "/docs",
    }


@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint for container health probes."""
    return {"status": "ok"}
