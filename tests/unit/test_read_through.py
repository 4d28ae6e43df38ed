"""Tests for ReadThroughCache: population, negative results, fail-open paths."""

import asyncio
from datetime import datetime
from typing import Any

from orgdesk.application.dtos import StaffResult
from orgdesk.infrastructure.cache.memory_cache import InMemoryCache
from orgdesk.infrastructure.cache.policy import CachePolicies
from orgdesk.infrastructure.cache.read_through import ReadThroughCache


def _staff(**overrides: Any) -> StaffResult:
    values: dict[str, Any] = {
        "id": "s-1",
        "organization_id": "o-1",
        "user_id": None,
        "department_id": None,
        "employee_id": "E-1",
        "first_name": "Ada",
        "last_name": "Lovelace",
        "email": "ada@example.com",
        "phone": None,
        "position": None,
        "employment_type": "FULL_TIME",
        "hire_date": None,
        "is_active": True,
        "created_at": datetime(2024, 1, 1, 9, 0),
        "updated_at": datetime(2024, 1, 1, 9, 0),
    }
    values.update(overrides)
    return StaffResult(**values)


class _Loader:
    def __init__(self, value: Any) -> None:
        self.value = value
        self.calls = 0

    async def __call__(self) -> Any:
        self.calls += 1
        return self.value


class _BrokenCache:
    """Backend whose every call fails like a dropped connection."""

    def is_available(self) -> bool:
        return True

    async def get(self, key: str) -> Any:
        raise ConnectionError("connection refused")

    async def set(self, key: str, value: Any, ttl: int = 300) -> bool:
        raise ConnectionError("connection refused")

    async def delete(self, key: str) -> bool:
        raise ConnectionError("connection refused")


class _HangingCache(_BrokenCache):
    async def get(self, key: str) -> Any:
        await asyncio.sleep(1)
        return None


async def test_miss_loads_and_populates_then_hit_skips_loader(cache: InMemoryCache) -> None:
    rtc = ReadThroughCache(cache)
    loader = _Loader(_staff())

    first = await rtc.get_or_load("staff:s-1", loader, ttl=60, value_type=StaffResult)
    second = await rtc.get_or_load("staff:s-1", loader, ttl=60, value_type=StaffResult)

    assert first == second == _staff()
    assert loader.calls == 1
    assert await cache.get("staff:s-1") is not None


async def test_not_found_is_not_cached(cache: InMemoryCache) -> None:
    rtc = ReadThroughCache(cache)
    loader = _Loader(None)

    assert await rtc.get_or_load("staff:s-1", loader, ttl=60, value_type=StaffResult) is None
    assert len(cache) == 0

    loader.value = _staff()
    assert await rtc.get_or_load("staff:s-1", loader, ttl=60, value_type=StaffResult) == _staff()
    assert loader.calls == 2


async def test_alias_keys_populated_on_miss(cache: InMemoryCache, policies: CachePolicies) -> None:
    rtc = ReadThroughCache(cache)
    key = "staff:org:o-1:email:ada@example.com"

    await rtc.get_or_load(
        key,
        _Loader(_staff()),
        ttl=60,
        value_type=StaffResult,
        alias_keys=policies.staff.entity_keys,
    )

    assert await cache.get(key) is not None
    assert await cache.get("staff:s-1") is not None
    assert await cache.get("staff:org:o-1:employee:E-1") is not None


async def test_entry_reloaded_after_ttl(cache: InMemoryCache, clock) -> None:
    rtc = ReadThroughCache(cache)
    loader = _Loader(_staff())

    await rtc.get_or_load("staff:s-1", loader, ttl=60, value_type=StaffResult)
    clock.advance(61)
    await rtc.get_or_load("staff:s-1", loader, ttl=60, value_type=StaffResult)

    assert loader.calls == 2


async def test_broken_cache_falls_back_to_loader() -> None:
    rtc = ReadThroughCache(_BrokenCache(), timeout=0.05)
    loader = _Loader(_staff())

    assert await rtc.get_or_load("staff:s-1", loader, ttl=60, value_type=StaffResult) == _staff()
    await rtc.invalidate(["staff:s-1", "staff:s-2"])
    assert loader.calls == 1


async def test_hanging_cache_times_out_to_loader() -> None:
    rtc = ReadThroughCache(_HangingCache(), timeout=0.01)
    loader = _Loader(_staff())

    assert await rtc.get_or_load("staff:s-1", loader, ttl=60, value_type=StaffResult) == _staff()
    assert loader.calls == 1


async def test_undecodable_entry_is_dropped_and_reloaded(cache: InMemoryCache) -> None:
    rtc = ReadThroughCache(cache)
    await cache.set("staff:s-1", {"unexpected": "shape"}, ttl=60)
    loader = _Loader(_staff())

    assert await rtc.get_or_load("staff:s-1", loader, ttl=60, value_type=StaffResult) == _staff()
    assert loader.calls == 1
    assert await cache.get("staff:s-1") is not None


async def test_disabled_cache_always_loads() -> None:
    rtc = ReadThroughCache(None)
    loader = _Loader(_staff())

    await rtc.get_or_load("staff:s-1", loader, ttl=60, value_type=StaffResult)
    await rtc.get_or_load("staff:s-1", loader, ttl=60, value_type=StaffResult)
    await rtc.invalidate(["staff:s-1"])

    assert loader.calls == 2


async def test_invalidate_twice_and_unknown_keys(cache: InMemoryCache) -> None:
    rtc = ReadThroughCache(cache)
    await cache.set("staff:s-1", {"id": "s-1"}, ttl=60)

    await rtc.invalidate(["staff:s-1", "staff:s-1", "never-set"])
    await rtc.invalidate(["staff:s-1"])

    assert await cache.get("staff:s-1") is None


async def test_invalidate_updated_drops_keys_of_old_and_new_values(
    cache: InMemoryCache, policies: CachePolicies
) -> None:
    rtc = ReadThroughCache(cache)
    before = _staff()
    after = _staff(email="ada.l@example.com")
    for key in [*policies.staff.affected_keys(before), *policies.staff.affected_keys(after)]:
        await cache.set(key, {"id": "s-1"}, ttl=60)

    await rtc.invalidate_updated(policies.staff, before, after)

    assert len(cache) == 0


class _FlappingCache(InMemoryCache):
    """Reports available while its connection is already closed."""

    def is_available(self) -> bool:
        return True


async def test_backend_closed_between_check_and_call_is_a_miss() -> None:
    backend = _FlappingCache()
    await backend.disconnect()
    rtc = ReadThroughCache(backend)
    loader = _Loader(_staff())

    assert await rtc.get_or_load("staff:s-1", loader, ttl=60, value_type=StaffResult) == _staff()
    await rtc.invalidate(["staff:s-1"])
    assert loader.calls == 1


class _UnparseableCache(InMemoryCache):
    """Backend whose stored payload cannot be parsed (e.g. non-JSON in Redis)."""

    async def get(self, key: str) -> Any:
        raise ValueError("Expecting value: line 1 column 1 (char 0)")


async def test_unparseable_payload_is_a_miss_and_deleted() -> None:
    backend = _UnparseableCache()
    await InMemoryCache.set(backend, "staff:s-1", "not-json{", ttl=60)
    rtc = ReadThroughCache(backend)
    loader = _Loader(_staff())

    assert await rtc.get_or_load("staff:s-1", loader, ttl=60, value_type=StaffResult) == _staff()
    assert loader.calls == 1
    assert await InMemoryCache.get(backend, "staff:s-1") is not None


async def test_bypass_neither_reads_nor_populates(cache: InMemoryCache) -> None:
    bypassing = True
    rtc = ReadThroughCache(cache, bypass=lambda: bypassing)
    await cache.set("staff:s-1", {"stale": True}, ttl=60)
    loader = _Loader(_staff(last_name="Byron"))

    loaded = await rtc.get_or_load("staff:s-1", loader, ttl=60, value_type=StaffResult)
    assert loaded is not None and loaded.last_name == "Byron"
    assert await cache.get("staff:s-1") == {"stale": True}

    bypassing = False
    await cache.delete("staff:s-1")
    await rtc.get_or_load("staff:s-1", loader, ttl=60, value_type=StaffResult)
    await rtc.get_or_load("staff:s-1", loader, ttl=60, value_type=StaffResult)
    assert loader.calls == 2


async def test_invalidate_helpers_return_dropped_keys(
    cache: InMemoryCache, policies: CachePolicies
) -> None:
    rtc = ReadThroughCache(cache)
    before = _staff()
    after = _staff(email="ada.l@example.com")

    dropped = await rtc.invalidate_updated(policies.staff, before, after)

    assert set(dropped) == {
        *policies.staff.affected_keys(before),
        *policies.staff.affected_keys(after),
    }
    assert len(dropped) == len(set(dropped))
    assert await rtc.invalidate_deleted(policies.staff, before) == (
        policies.staff.affected_keys(before)
    )
