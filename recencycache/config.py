"""
Cache configuration.

``CacheConfig`` validates the settings a cache is built from and can be
loaded from ``RECENCYCACHE_*`` environment variables; ``create_cache`` turns
a config into a ready cache instance.
"""

import logging
import os
from typing import Mapping, Optional, Union

from pydantic import BaseModel, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from recencycache.cache_store.stores.in_memory import EvictionListener, FixedCapacityRecencyCache
from recencycache.cache_store.stores.synchronized import ThreadSafeRecencyCache
from recencycache.exceptions import InvalidConfiguration
from recencycache.utils.metrics import get_metrics_registry
from recencycache.utils.validation import validate_cache_name

logger = logging.getLogger(__name__)

ENV_PREFIX = "RECENCYCACHE_"


class CacheConfig(BaseModel):
    """Settings for building a cache."""

    capacity: int = Field(..., gt=0, description="Maximum number of cached entries")
    name: str = Field("default", description="Name used in log records and metric labels")
    thread_safe: bool = Field(False, description="Guard every operation with a lock")
    enable_metrics: bool = Field(False, description="Publish counters to the global metrics registry")

    @field_validator("capacity", mode="before")
    @classmethod
    def reject_bool_capacity(cls, value):
        if isinstance(value, bool):
            raise ValueError("Capacity must be an integer, not a bool")
        return value

    @classmethod
    def from_mapping(cls, values: Mapping[str, object]) -> "CacheConfig":
        """
        Build a config from a plain mapping.

        Raises:
            InvalidConfiguration: If any value fails validation.
        """
        try:
            config = cls(**dict(values))
        except PydanticValidationError as e:
            raise InvalidConfiguration("Invalid cache configuration", original_exception=e) from e
        validate_cache_name(config.name)
        return config

    @classmethod
    def from_environment(
        cls,
        prefix: str = ENV_PREFIX,
        environ: Optional[Mapping[str, str]] = None,
    ) -> "CacheConfig":
        """
        Build a config from environment variables.

        Environment variables:
        - RECENCYCACHE_CAPACITY: Maximum number of entries (required)
        - RECENCYCACHE_NAME: Cache name
        - RECENCYCACHE_THREAD_SAFE: Lock every operation (true/false)
        - RECENCYCACHE_ENABLE_METRICS: Publish metrics (true/false)

        Args:
            prefix: Variable name prefix
            environ: Mapping to read instead of ``os.environ``

        Raises:
            InvalidConfiguration: If capacity is missing or any value is invalid.
        """
        env = os.environ if environ is None else environ

        capacity = env.get(f"{prefix}CAPACITY")
        if capacity is None:
            raise InvalidConfiguration(f"{prefix}CAPACITY is not set")

        values = {"capacity": capacity}
        for field_name in ("name", "thread_safe", "enable_metrics"):
            raw = env.get(f"{prefix}{field_name.upper()}")
            if raw is not None:
                values[field_name] = raw

        return cls.from_mapping(values)


def create_cache(
    config: CacheConfig,
    on_evict: Optional[EvictionListener] = None,
) -> Union[FixedCapacityRecencyCache, ThreadSafeRecencyCache]:
    """
    Build a cache from a config.

    Args:
        config: Validated cache settings
        on_evict: Optional eviction listener passed to the cache

    Returns:
        A ThreadSafeRecencyCache if ``config.thread_safe`` is set, a plain
        FixedCapacityRecencyCache otherwise.
    """
    registry = get_metrics_registry() if config.enable_metrics else None
    cache_cls = ThreadSafeRecencyCache if config.thread_safe else FixedCapacityRecencyCache

    logger.info(
        f"Creating {cache_cls.__name__} {config.name!r} with capacity {config.capacity}"
    )
    return cache_cls(
        config.capacity,
        on_evict=on_evict,
        name=config.name,
        metrics_registry=registry,
    )
