"""
API dependency helpers.

Provides request-scoped stores, the caller's principal and the configured
token cache service for routes.
"""
import logging
from functools import lru_cache
from typing import Optional

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from surveys.config import get_settings
from surveys.db.database import SessionLocal, get_db
from surveys.db.repositories import SurveyStore
from surveys.token_storage import (
    ClaimsPrincipal,
    DatabaseTokenCacheService,
    MemoryTokenCacheService,
    TokenCacheService,
    principal_from_headers,
)

logger = logging.getLogger(__name__)


def get_survey_store(db: AsyncSession = Depends(get_db)) -> SurveyStore:
    return SurveyStore(db)


# Contract:
# Returns the caller's ClaimsPrincipal.
# Raises 401 if identity cannot be resolved.

def get_current_principal(
    x_ms_client_principal: Optional[str] = Header(default=None),
    x_ms_client_principal_id: Optional[str] = Header(default=None),
    x_ms_client_principal_name: Optional[str] = Header(default=None),
) -> ClaimsPrincipal:
    try:
        principal = principal_from_headers(
            x_ms_client_principal=x_ms_client_principal,
            x_ms_client_principal_id=x_ms_client_principal_id,
            x_ms_client_principal_name=x_ms_client_principal_name,
        )
    except ValueError as e:
        logger.warning("Rejected identity headers: %s", e)
        principal = None
    if principal is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Authentication required")
    return principal


@lru_cache(maxsize=None)
def get_token_cache_service() -> TokenCacheService:
    """Return the process-wide token cache service for the configured backend."""
    settings = get_settings()
    if settings.token_cache_backend == "memory":
        return MemoryTokenCacheService(settings.client_id)
    return DatabaseTokenCacheService(SessionLocal, settings.client_id)
