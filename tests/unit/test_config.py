"""Tests for settings validation."""

import logging

import pytest
from pydantic import ValidationError

from orgdesk.core.config import Settings, get_settings
from orgdesk.infrastructure.cache.factory import create_cache
from orgdesk.infrastructure.cache.memory_cache import InMemoryCache
from orgdesk.infrastructure.cache.redis_cache import CacheService
from orgdesk.shared.telemetry.logging import CACHE_LOGGER, setup_logging


def test_defaults_are_valid() -> None:
    settings = Settings(cache_backend="redis")
    assert settings.cache_namespace == "cache"
    assert settings.cache_ttl_organization == 3600
    assert settings.cache_ttl_unread_count == 60


def test_unknown_cache_backend_rejected() -> None:
    with pytest.raises(ValidationError):
        Settings(cache_backend="memcached")


@pytest.mark.parametrize(
    "overrides",
    [{"cache_ttl_staff": 0}, {"cache_ttl_dashboard": -5}, {"cache_operation_timeout": 0}],
)
def test_non_positive_ttl_or_timeout_rejected(overrides: dict) -> None:
    with pytest.raises(ValidationError):
        Settings(**overrides)


def test_factory_selects_backend() -> None:
    assert isinstance(create_cache(Settings(cache_backend="redis")), CacheService)
    memory = create_cache(Settings(cache_backend="memory", cache_namespace="t"))
    assert isinstance(memory, InMemoryCache)
    assert memory.namespace == "t"
    assert create_cache(Settings(cache_backend="none")) is None


def test_cache_log_hits_enables_cache_trace(monkeypatch: pytest.MonkeyPatch) -> None:
    cache_logger = logging.getLogger(CACHE_LOGGER)
    previous = cache_logger.level
    monkeypatch.setenv("CACHE_LOG_HITS", "true")
    get_settings.cache_clear()
    try:
        setup_logging()
        assert cache_logger.level == logging.DEBUG
    finally:
        cache_logger.setLevel(previous)
        get_settings.cache_clear()
