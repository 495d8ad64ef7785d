import re
from typing import Any, Hashable

from recencycache.exceptions import InvalidConfiguration, ValidationError

MAX_CACHE_NAME_LENGTH = 100

def validate_capacity(capacity: int):
    """Ensures capacity is a positive integer."""
    # bool is an int subclass; True would otherwise pass as capacity 1
    if isinstance(capacity, bool) or not isinstance(capacity, int):
        raise InvalidConfiguration(f"Capacity must be an integer, got {type(capacity).__name__}.")

    if capacity < 1:
        raise InvalidConfiguration(f"Capacity must be at least 1, got {capacity}.")

def validate_key(key: Any) -> Hashable:
    """Checks that the key can be used in the key index."""
    try:
        hash(key)
    except TypeError as e:
        raise ValidationError(f"Cache key must be hashable, got {type(key).__name__}.") from e
    return key

def validate_cache_name(name: str):
    """Validates cache name format and length."""
    if not isinstance(name, str):
        raise InvalidConfiguration("Cache name must be a string.")

    if not name:
        raise InvalidConfiguration("Cache name cannot be empty.")

    if len(name) > MAX_CACHE_NAME_LENGTH:
        raise InvalidConfiguration(
            f"Cache name is too long. Maximum length is {MAX_CACHE_NAME_LENGTH} characters."
        )

    if not re.match(r'^[a-zA-Z0-9_.-]+$', name):
        raise InvalidConfiguration(
            "Cache name can only contain alphanumeric characters, dots, hyphens, and underscores."
        )
