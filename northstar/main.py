import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

from northstar.core.config import settings
from northstar.api.v1.router import api_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logging.basicConfig(level=settings.LOG_LEVEL, format=settings.LOG_FORMAT)
    logger.info(f"{settings.APP_NAME} started (default tracking source: {settings.DEFAULT_TRACKING_SOURCE})")

    yield
    # Shutdown


app = FastAPI(
    title=settings.APP_NAME,
    description="OKR progress engine: progress, pace, forecasts and rollups for annual key results",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(api_router, prefix="/api/v1")


@app.get("/health")
async def health_check():
    return {"status": "healthy", "app": settings.APP_NAME}
