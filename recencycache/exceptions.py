class RecencyCacheError(Exception):
    """Base class for all recencycache exceptions."""
    pass

class ConfigurationError(RecencyCacheError):
    """Raised when there is an error in the configuration."""
    def __init__(self, message: str, original_exception: Exception = None):
        super().__init__(message)
        self.original_exception = original_exception
        self.message = message

    def __str__(self) -> str:
        if self.original_exception:
            return f"{self.message} (Original: {str(self.original_exception)})"
        return self.message

class InvalidConfiguration(ConfigurationError, ValueError):
    """Raised when a configuration value is out of range, e.g. capacity < 1."""
    pass

class CacheStoreError(RecencyCacheError):
    """Base class for cache store related errors."""
    def __init__(self, message: str, original_exception: Exception = None):
        super().__init__(message)
        self.original_exception = original_exception
        self.message = message

    def __str__(self) -> str:
        if self.original_exception:
            return f"{self.message} (Original: {str(self.original_exception)})"
        return self.message

class CacheOperationError(CacheStoreError):
    """Raised when a cache operation (get/put/remove) fails."""
    pass

class ValidationError(RecencyCacheError, ValueError):
    """Raised when input validation fails."""
    pass
