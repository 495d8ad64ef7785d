import pytest
from recencycache.exceptions import InvalidConfiguration, ValidationError
from recencycache.utils.validation import (
    validate_cache_name,
    validate_capacity,
    validate_key,
)

def test_validate_capacity():
    validate_capacity(1)
    validate_capacity(10_000)
    with pytest.raises(InvalidConfiguration):
        validate_capacity(0)
    with pytest.raises(InvalidConfiguration):
        validate_capacity(-5)
    with pytest.raises(InvalidConfiguration):
        validate_capacity(2.0)
    with pytest.raises(InvalidConfiguration):
        validate_capacity(False)
    with pytest.raises(InvalidConfiguration):
        validate_capacity(None)

def test_validate_key():
    assert validate_key("key") == "key"
    assert validate_key((1, "a")) == (1, "a")
    assert validate_key(None) is None
    with pytest.raises(ValidationError):
        validate_key([1, 2])
    with pytest.raises(ValidationError):
        validate_key({"a": 1})
    with pytest.raises(ValidationError):
        validate_key((1, [2]))

def test_validate_cache_name():
    validate_cache_name("default")
    validate_cache_name("users.v2-primary_1")
    with pytest.raises(InvalidConfiguration):
        validate_cache_name("")
    with pytest.raises(InvalidConfiguration):
        validate_cache_name("with space")
    with pytest.raises(InvalidConfiguration):
        validate_cache_name(123)
    with pytest.raises(InvalidConfiguration):
        validate_cache_name("x" * 101)
