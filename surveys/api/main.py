"""
FastAPI app assembly: logging and router wiring.
"""
import logging

from fastapi import FastAPI

from surveys.config import get_settings

# Configure logging
LOG_LEVEL_NAME = get_settings().log_level
LOG_LEVEL = getattr(logging, LOG_LEVEL_NAME, logging.INFO)
logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)
logger.setLevel(LOG_LEVEL)
logger.info("app_startup: log_level=%s", LOG_LEVEL_NAME)

from surveys.api.surveys import router as surveys_router
from surveys.api.token_cache import router as token_cache_router

# Database schema is managed by Alembic migrations.

app = FastAPI(
    title="Survey Service",
    description="Read access to surveys and per-user token cache management.",
    version="1.0.0",
)

app.include_router(surveys_router)
app.include_router(token_cache_router)
