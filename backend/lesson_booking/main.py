# backend/lesson_booking/main.py
"""
FastAPI application for lesson availability and booking.

Run with:
    uvicorn lesson_booking.main:app --reload
"""

from contextlib import asynccontextmanager
import logging
from typing import AsyncGenerator

from fastapi import APIRouter, FastAPI

from . import models  # noqa: F401  registers tables on Base.metadata
from .core.config import settings
from .database import Base, engine
from .routes.v1 import availability as availability_v1
from .routes.v1 import bookings as bookings_v1
from .routes.v1 import health as health_v1
from .routes.v1 import learners as learners_v1
from .routes.v1 import prometheus as prometheus_v1

# Configure logging
logging.basicConfig(
    level=settings.log_level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def app_lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Create tables on SQLite; PostgreSQL schemas are managed outside the app."""
    if settings.is_sqlite:
        Base.metadata.create_all(bind=engine)
    logger.info("Lesson booking API starting (environment=%s)", settings.environment)
    yield
    logger.info("Lesson booking API shutting down")


app = FastAPI(
    title="Lesson Booking API",
    description="Teacher availability resolution and conflict-safe lesson booking",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=app_lifespan,
)

# Create API v1 router
api_v1 = APIRouter(prefix=settings.api_prefix)
api_v1.include_router(availability_v1.router, prefix="/teachers")
api_v1.include_router(bookings_v1.router, prefix="/bookings")
api_v1.include_router(learners_v1.router, prefix="/learners")

app.include_router(api_v1)
app.include_router(health_v1.router, prefix="/health")
app.include_router(prometheus_v1.router, prefix="/metrics")
