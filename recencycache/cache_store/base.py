"""
Base class for cache stores.
"""

from abc import ABC, abstractmethod
from typing import Any, Hashable, Optional


class _Missing:
    """Marker type for the ``MISSING`` sentinel."""

    _instance: Optional["_Missing"] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


# Pass as ``default`` to tell a miss apart from a cached None
MISSING = _Missing()


class BaseCacheStore(ABC):
    """Abstract base class for synchronous key/value cache stores."""

    @abstractmethod
    def get(self, key: Hashable, default: Any = None) -> Any:
        """
        Get a cached value and mark the key as most recently used.

        Args:
            key: The key to look up.
            default: Returned when the key is not cached.

        Returns:
            The cached value if found, ``default`` otherwise.
        """
        pass

    @abstractmethod
    def put(self, key: Hashable, value: Any) -> None:
        """
        Insert or overwrite a value and mark the key as most recently used.

        Args:
            key: The key to store.
            value: The value to store.
        """
        pass

    @abstractmethod
    def peek(self, key: Hashable, default: Any = None) -> Any:
        """Get a cached value without changing the recency order."""
        pass

    @abstractmethod
    def remove(self, key: Hashable) -> bool:
        """
        Remove a key from the cache.

        Args:
            key: The key to remove

        Returns:
            bool: True if the key was found and removed, False otherwise
        """
        pass

    @abstractmethod
    def clear(self) -> None:
        """Remove all cached items."""
        pass

    @abstractmethod
    def size(self) -> int:
        """Get the number of cached items."""
        pass

    def __len__(self) -> int:
        return self.size()

    def __contains__(self, key: Hashable) -> bool:
        return self.peek(key, MISSING) is not MISSING
