"""
Per-user token cache storage.

`TokenCacheService` hands out a principal's `TokenCache`; concrete services
decide where the cache lives.
"""

from .principal import (
    Claim,
    ClaimsPrincipal,
    MissingClaimError,
    principal_from_headers,
)
from .token_cache import TokenCache, TokenCacheItem
from .service import TokenCacheService
from .memory import MemoryTokenCacheService
from .database import DatabaseTokenCache, DatabaseTokenCacheService

__all__ = [
    "Claim",
    "ClaimsPrincipal",
    "MissingClaimError",
    "principal_from_headers",
    "TokenCache",
    "TokenCacheItem",
    "TokenCacheService",
    "MemoryTokenCacheService",
    "DatabaseTokenCache",
    "DatabaseTokenCacheService",
]
