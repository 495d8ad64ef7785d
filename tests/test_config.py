"""
Tests for CacheConfig and create_cache.
"""

import pytest
from pydantic import ValidationError as PydanticValidationError

from recencycache import (
    CacheConfig,
    FixedCapacityRecencyCache,
    InvalidConfiguration,
    ThreadSafeRecencyCache,
    create_cache,
)
from recencycache.utils.metrics import get_metrics_registry, series_key


def test_defaults():
    config = CacheConfig(capacity=5)
    assert config.capacity == 5
    assert config.name == "default"
    assert config.thread_safe is False
    assert config.enable_metrics is False


@pytest.mark.parametrize("values", [
    {},
    {"capacity": 0},
    {"capacity": -3},
    {"capacity": "lots"},
    {"capacity": True},
    {"capacity": False},
    {"capacity": 3, "thread_safe": "maybe"},
])
def test_from_mapping_rejects_invalid_values(values):
    with pytest.raises(InvalidConfiguration) as excinfo:
        CacheConfig.from_mapping(values)
    assert excinfo.value.original_exception is not None


def test_from_mapping_rejects_invalid_name():
    with pytest.raises(InvalidConfiguration):
        CacheConfig.from_mapping({"capacity": 3, "name": "bad name"})


def test_from_environment():
    environ = {
        "RECENCYCACHE_CAPACITY": "128",
        "RECENCYCACHE_NAME": "sessions",
        "RECENCYCACHE_THREAD_SAFE": "true",
        "RECENCYCACHE_ENABLE_METRICS": "false",
        "UNRELATED": "ignored",
    }
    config = CacheConfig.from_environment(environ=environ)
    assert config.capacity == 128
    assert config.name == "sessions"
    assert config.thread_safe is True
    assert config.enable_metrics is False


def test_from_environment_custom_prefix():
    config = CacheConfig.from_environment(prefix="APP_CACHE_", environ={"APP_CACHE_CAPACITY": "4"})
    assert config.capacity == 4


def test_from_environment_reads_os_environ(monkeypatch):
    monkeypatch.setenv("RECENCYCACHE_CAPACITY", "7")
    monkeypatch.delenv("RECENCYCACHE_NAME", raising=False)
    monkeypatch.delenv("RECENCYCACHE_THREAD_SAFE", raising=False)
    monkeypatch.delenv("RECENCYCACHE_ENABLE_METRICS", raising=False)
    assert CacheConfig.from_environment().capacity == 7


def test_from_environment_requires_capacity():
    with pytest.raises(InvalidConfiguration, match="RECENCYCACHE_CAPACITY is not set"):
        CacheConfig.from_environment(environ={})


def test_from_environment_rejects_zero_capacity():
    with pytest.raises(InvalidConfiguration):
        CacheConfig.from_environment(environ={"RECENCYCACHE_CAPACITY": "0"})


def test_create_cache_plain():
    cache = create_cache(CacheConfig(capacity=2, name="plain"))
    assert type(cache) is FixedCapacityRecencyCache
    assert cache.capacity == 2
    assert cache.name == "plain"


def test_create_cache_thread_safe_with_listener():
    evicted = []
    cache = create_cache(
        CacheConfig(capacity=1, thread_safe=True),
        on_evict=lambda k, v: evicted.append(k),
    )
    assert isinstance(cache, ThreadSafeRecencyCache)
    cache.put("a", 1)
    cache.put("b", 2)
    assert evicted == ["a"]


def test_create_cache_with_metrics_uses_global_registry():
    cache = create_cache(CacheConfig(capacity=2, name="metered", enable_metrics=True))
    cache.put("a", 1)
    cache.get("a")

    counters = get_metrics_registry().collect_metrics()["counters"]
    key = series_key("recencycache_hits_total", cache.metric_labels)
    assert counters[key]["value"] == 1
    assert counters[key]["labels"]["cache"] == "metered"


def test_capacity_bool_rejected_by_model():
    with pytest.raises(PydanticValidationError):
        CacheConfig(capacity=True)


def test_capacity_numeric_string_still_coerced():
    config = CacheConfig.from_mapping({"capacity": "4"})
    assert config.capacity == 4
