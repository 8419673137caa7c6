"""
Database-backed token cache strategy.

Each (user object id, client id) pair owns one `user_token_caches` row holding
the serialized cache. Loads and flushes open their own short-lived session so
a cache instance never borrows a request's session.
"""
from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from surveys.db import models
from surveys.token_storage.principal import ClaimsPrincipal
from surveys.token_storage.service import TokenCacheService
from surveys.token_storage.token_cache import TokenCache

logger = logging.getLogger(__name__)


class DatabaseTokenCache(TokenCache):
    def __init__(self, session_factory: async_sessionmaker[AsyncSession], user_object_id: str, client_id: str):
        super().__init__()
        self._session_factory = session_factory
        self.user_object_id = user_object_id
        self.client_id = client_id

    def _row_filter(self):
        return (
            models.UserTokenCache.user_object_id == self.user_object_id,
            models.UserTokenCache.client_id == self.client_id,
        )

    async def load(self) -> None:
        """Read the stored state; unreadable state loads as an empty, changed cache.

        Marking it changed means the next flush overwrites or deletes the bad row.
        """
        async with self._session_factory() as db:
            result = await db.execute(select(models.UserTokenCache.cache_bits).where(*self._row_filter()))
            state = result.scalars().first()
        try:
            self.deserialize(state)
        except ValueError as e:
            logger.warning("token_cache_unreadable: user_object_id=%s error=%s", self.user_object_id, e)
            self.has_state_changed = True

    async def _write_row(self, db: AsyncSession, bits: bytes) -> None:
        result = await db.execute(select(models.UserTokenCache).where(*self._row_filter()))
        row = result.scalars().first()
        if row is None:
            row = models.UserTokenCache(user_object_id=self.user_object_id, client_id=self.client_id)
            db.add(row)
        row.cache_bits = bits
        row.last_write = models.now_utc()
        await db.commit()

    async def flush(self) -> None:
        if not self.has_state_changed:
            return
        async with self._session_factory() as db:
            if self.count == 0:
                await db.execute(delete(models.UserTokenCache).where(*self._row_filter()))
                await db.commit()
            else:
                bits = self.serialize()
                try:
                    await self._write_row(db, bits)
                except IntegrityError:
                    # A concurrent first flush inserted the row; last write wins
                    await db.rollback()
                    logger.info("token_cache_insert_conflict: user_object_id=%s", self.user_object_id)
                    await self._write_row(db, bits)
        self.has_state_changed = False
        logger.debug("token_cache_flushed: user_object_id=%s items=%d", self.user_object_id, self.count)


class DatabaseTokenCacheService(TokenCacheService):
    def __init__(self, session_factory: async_sessionmaker[AsyncSession], client_id: Optional[str] = None):
        super().__init__(client_id)
        self._session_factory = session_factory

    async def get_cache(self, principal: ClaimsPrincipal) -> TokenCache:
        user_object_id = principal.get_object_identifier_value()
        cache = DatabaseTokenCache(self._session_factory, user_object_id, self.client_id)
        await cache.load()
        return cache
