"""
Redis Flush Exceptions

Exception Hierarchy:
    RedisFlushError (base)
    ├── StoreUnavailableError
    ├── StatisticsParseError
    ├── FlushCommandError
    ├── BackendIntrospectionError
    └── ConfigurationError

None of these cross the public boundary of the discovery, statistics or
flush components: discovery and statistics degrade to ``None`` and the
flush coordinator reports failures through ``FlushResult``. They exist so
the internals can raise something specific and the boundary can log it.
"""


class RedisFlushError(Exception):
    """
    Base exception for the Redis flush tool

    Attributes:
        message: Error message describing what went wrong
        details: Optional dictionary with additional error context
    """

    def __init__(self, message: str, details: dict = None):
        """
        Initialize the exception

        Args:
            message: Error message
            details: Optional dictionary with additional context
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self):
        """String representation of the error"""
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message


class StoreUnavailableError(RedisFlushError):
    """
    Raised when no Redis connection could be discovered

    Common Causes:
    - No cache backend in the pool is Redis-backed
    - The Redis backend does not expose a recognized client
    """

    pass


class StatisticsParseError(RedisFlushError):
    """
    Raised when the INFO reply is not in the expected shape

    The collector never trusts a partially parsed reply; this error is
    caught at the collector boundary and surfaces as "no statistics".
    """

    pass


class FlushCommandError(RedisFlushError):
    """
    Raised when FLUSHALL could not be executed on any connection
    """

    pass


class BackendIntrospectionError(RedisFlushError):
    """
    Raised when a cache backend cannot be unwrapped or probed for a client

    Common Causes:
    - A synchronization wrapper without a remote backend
    - A registered extractor that fails on an unexpected backend layout
    """

    pass


class ConfigurationError(RedisFlushError):
    """
    Raised when registry or command-line configuration is invalid

    Example:
        register_client_extractor("MyBackend", "not-callable")
    """

    pass
