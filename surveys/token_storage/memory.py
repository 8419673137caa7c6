"""Process-local token cache strategy: one cache handle per (user, client).

Handles live until their cache is cleared, so the map holds one entry per
user that has a non-cleared cache in this process.
"""
from __future__ import annotations

from typing import Dict, Optional, Tuple

from surveys.token_storage.principal import ClaimsPrincipal
from surveys.token_storage.service import TokenCacheService
from surveys.token_storage.token_cache import TokenCache


class MemoryTokenCacheService(TokenCacheService):
    def __init__(self, client_id: Optional[str] = None):
        super().__init__(client_id)
        self._caches: Dict[Tuple[str, str], TokenCache] = {}

    def _key(self, principal: ClaimsPrincipal) -> Tuple[str, str]:
        return (principal.get_object_identifier_value(), self.client_id)

    async def get_cache(self, principal: ClaimsPrincipal) -> TokenCache:
        key = self._key(principal)
        cache = self._caches.get(key)
        if cache is None:
            cache = TokenCache()
            self._caches[key] = cache
            self.logger.debug("token_cache_created: user_object_id=%s", key[0])
        return cache

    async def clear_cache(self, principal: ClaimsPrincipal) -> None:
        await super().clear_cache(principal)
        # Cleared handles are dropped; the next get_cache starts a new one
        if self._caches.pop(self._key(principal), None) is not None:
            self.logger.debug("token_cache_released: user_object_id=%s", principal.get_object_identifier_value())
