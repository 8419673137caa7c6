import pytest
from sqlalchemy import func, select

from surveys.db import models
from surveys.token_storage import (
    ClaimsPrincipal,
    DatabaseTokenCache,
    DatabaseTokenCacheService,
    MissingClaimError,
    TokenCacheItem,
)


def _principal(oid="oid-1"):
    return ClaimsPrincipal([("oid", oid)])


def _item(resource="https://graph.example.com"):
    return TokenCacheItem(
        authority="https://login.example.com/tenant",
        client_id="client-a",
        resource=resource,
        access_token="at",
        refresh_token="rt",
    )


async def _row_count(session_factory):
    async with session_factory() as db:
        return (await db.execute(select(func.count()).select_from(models.UserTokenCache))).scalar_one()


@pytest.mark.asyncio
async def test_new_principal_gets_empty_cache_without_writing(session_factory):
    service = DatabaseTokenCacheService(session_factory, client_id="client-a")

    cache = await service.get_cache(_principal())
    await cache.flush()

    assert cache.count == 0
    assert await _row_count(session_factory) == 0


@pytest.mark.asyncio
async def test_flushed_items_are_visible_to_later_loads(session_factory):
    service = DatabaseTokenCacheService(session_factory, client_id="client-a")
    cache = await service.get_cache(_principal())
    cache.add_item(_item())
    await cache.flush()

    reloaded = await service.get_cache(_principal())

    assert [i.resource for i in reloaded.items()] == ["https://graph.example.com"]
    assert await _row_count(session_factory) == 1

    # A second flush updates the same row
    reloaded.add_item(_item(resource="https://other.example.com"))
    await reloaded.flush()
    assert await _row_count(session_factory) == 1
    assert (await service.get_cache(_principal())).count == 2


@pytest.mark.asyncio
async def test_caches_are_keyed_by_user_and_client(session_factory):
    service_a = DatabaseTokenCacheService(session_factory, client_id="client-a")
    service_b = DatabaseTokenCacheService(session_factory, client_id="client-b")
    cache = await service_a.get_cache(_principal("oid-1"))
    cache.add_item(_item())
    await cache.flush()

    assert (await service_a.get_cache(_principal("oid-2"))).count == 0
    assert (await service_b.get_cache(_principal("oid-1"))).count == 0


@pytest.mark.asyncio
async def test_clear_cache_removes_persisted_state(session_factory):
    service = DatabaseTokenCacheService(session_factory, client_id="client-a")
    for oid in ("oid-1", "oid-2"):
        cache = await service.get_cache(_principal(oid))
        cache.add_item(_item())
        await cache.flush()

    await service.clear_cache(_principal("oid-1"))

    assert (await service.get_cache(_principal("oid-1"))).count == 0
    assert (await service.get_cache(_principal("oid-2"))).count == 1
    assert await _row_count(session_factory) == 1


@pytest.mark.asyncio
async def test_clear_cache_without_object_identifier_raises(session_factory):
    service = DatabaseTokenCacheService(session_factory, client_id="client-a")
    with pytest.raises(MissingClaimError):
        await service.clear_cache(ClaimsPrincipal([("tid", "tenant-only")]))


@pytest.mark.asyncio
async def test_unreadable_row_loads_empty_and_clear_cache_removes_it(session_factory, seed):
    await seed(models.UserTokenCache(user_object_id="oid-1", client_id="client-a", cache_bits=b'["not", "an", "object"]'))
    service = DatabaseTokenCacheService(session_factory, client_id="client-a")

    cache = await service.get_cache(_principal())
    assert cache.count == 0
    assert cache.has_state_changed is True

    await service.clear_cache(_principal())

    assert await _row_count(session_factory) == 0
    assert (await service.get_cache(_principal())).count == 0


@pytest.mark.asyncio
async def test_unreadable_row_is_overwritten_by_next_flush(session_factory, seed):
    await seed(models.UserTokenCache(user_object_id="oid-1", client_id="client-a", cache_bits=b'{"version": 1, "items": [{}]}'))
    service = DatabaseTokenCacheService(session_factory, client_id="client-a")

    cache = await service.get_cache(_principal())
    cache.add_item(_item())
    await cache.flush()

    assert await _row_count(session_factory) == 1
    assert [i.resource for i in (await service.get_cache(_principal())).items()] == ["https://graph.example.com"]


@pytest.mark.asyncio
async def test_concurrent_first_flush_updates_existing_row(session_factory, monkeypatch):
    service = DatabaseTokenCacheService(session_factory, client_id="client-a")
    first = await service.get_cache(_principal())
    second = await service.get_cache(_principal())
    first.add_item(_item(resource="https://first.example.com"))
    second.add_item(_item(resource="https://second.example.com"))
    await first.flush()

    original = DatabaseTokenCache._write_row
    calls = []

    async def _insert_as_if_no_row(self, db, bits):
        calls.append(bits)
        if len(calls) == 1:
            # Lost the race: row was absent when this writer looked
            db.add(models.UserTokenCache(user_object_id=self.user_object_id, client_id=self.client_id, cache_bits=bits))
            await db.commit()
        else:
            await original(self, db, bits)

    monkeypatch.setattr(DatabaseTokenCache, "_write_row", _insert_as_if_no_row)
    await second.flush()

    assert len(calls) == 2
    assert second.has_state_changed is False
    assert await _row_count(session_factory) == 1
    assert [i.resource for i in (await service.get_cache(_principal())).items()] == ["https://second.example.com"]
