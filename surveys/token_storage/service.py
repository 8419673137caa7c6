"""
Token cache service base.

Returns and manages the token cache used when acquiring tokens on behalf of
a signed-in user. How the cache is stored is left to subclasses.
"""
from __future__ import annotations

import abc
import logging
from typing import Optional

from surveys.config import get_settings
from surveys.token_storage.principal import ClaimsPrincipal
from surveys.token_storage.token_cache import TokenCache


class TokenCacheService(abc.ABC):
    def __init__(self, client_id: Optional[str] = None):
        self.client_id = client_id or get_settings().client_id
        if not self.client_id:
            raise ValueError("client_id is required (set AUTH_CLIENT_ID)")
        self.logger = logging.getLogger(f"{type(self).__module__}.{type(self).__qualname__}")

    @abc.abstractmethod
    async def get_cache(self, principal: ClaimsPrincipal) -> TokenCache:
        """Return the token cache belonging to ``principal``."""

    async def clear_cache(self, principal: ClaimsPrincipal) -> None:
        """Discard all cached tokens for ``principal``."""
        cache = await self.get_cache(principal)
        cache.clear()
        await cache.flush()
