from __future__ import annotations

from typing import Iterable

import pytest

from datastore.mock_dynamodb import build_default_table
from services.errors import ConfigurationError
from services.hourly_average import build_default_service
from services.local_time import build_default_resolver
from settings import get_settings

CACHES = (
    get_settings,
    build_default_table,
    build_default_resolver,
    build_default_service,
)


def _clear_caches(caches: Iterable) -> None:
    for cache in caches:
        cache.cache_clear()


@pytest.fixture(autouse=True)
def clean_caches():
    _clear_caches(CACHES)
    yield
    _clear_caches(CACHES)


def test_environment_overrides_apply(monkeypatch, tmp_path) -> None:
    table_path = tmp_path / "db.json"

    monkeypatch.setenv("TRAFFIC_TABLE_NAME", "custom-table")
    monkeypatch.setenv("TRAFFIC_TABLE_PERSISTENCE_PATH", str(table_path))
    monkeypatch.setenv("TRAFFIC_TABLE_PAGE_SIZE", "25")
    monkeypatch.setenv("HOUR_CACHE_SIZE", "64")
    monkeypatch.setenv("DST_CACHE_SIZE", "8")
    monkeypatch.setenv("CORS_ALLOW_ORIGINS", "https://a.example, https://b.example")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = get_settings()
    table = build_default_table()
    resolver = build_default_resolver()
    service = build_default_service()

    assert settings.cors_origins == ("https://a.example", "https://b.example")
    assert settings.log_level == "DEBUG"
    assert table.name == "custom-table"
    assert table.persistence_path == table_path
    assert table.page_size == 25
    assert resolver.hour_cache.maxsize == 64
    assert resolver.dst_cache.maxsize == 8
    assert service.table is table
    assert service.aggregator.resolver is resolver


def test_invalid_numbers_fall_back_to_defaults(monkeypatch) -> None:
    monkeypatch.setenv("TRAFFIC_TABLE_PAGE_SIZE", "-4")
    monkeypatch.setenv("HOUR_CACHE_SIZE", "lots")

    settings = get_settings()

    assert settings.table_page_size == 1000
    assert settings.hour_cache_size == 100_000


def test_empty_table_name_is_a_configuration_error(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("TRAFFIC_TABLE_NAME", "  ")
    monkeypatch.setenv("TRAFFIC_TABLE_PERSISTENCE_PATH", str(tmp_path / "db.json"))

    with pytest.raises(ConfigurationError):
        build_default_service()
