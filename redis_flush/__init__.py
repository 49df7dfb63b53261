"""
Redis Flush

Redis statistics and FLUSHALL coordination for cache backends.

Quick Start:
    from redis_flush import create_flush_service

    service = create_flush_service()          # uses REDIS_* settings
    stats = service.get_statistics()
    if stats:
        print(stats.used_memory_mb, stats.total_keys)

    result = service.flush_all()
    print(result.summary())
"""

from .models import KeyspaceInfo, RedisStatistics, FlushResult

from .discovery import (
    RedisConnectionDiscovery,
    StoreClientSource,
    SynchronizedBackend,
    register_client_extractor,
    register_backend_unwrapper,
    register_store_client_type,
)

from .statistics import RedisStatisticsCollector, parse_keyspace_stats
from .events import FlushEventBus, FLUSH_BEFORE_EVENT, FLUSH_AFTER_EVENT
from .flush import RedisFlushCoordinator
from .backends import RedisBackend
from .service import RedisFlushService, create_flush_service, create_default_pool

from .exceptions import (
    RedisFlushError,
    StoreUnavailableError,
    StatisticsParseError,
    FlushCommandError,
    BackendIntrospectionError,
    ConfigurationError,
)

__version__ = "1.0.0"

__all__ = [
    # Models
    "KeyspaceInfo",
    "RedisStatistics",
    "FlushResult",
    # Discovery
    "RedisConnectionDiscovery",
    "StoreClientSource",
    "SynchronizedBackend",
    "register_client_extractor",
    "register_backend_unwrapper",
    "register_store_client_type",
    # Statistics and flush
    "RedisStatisticsCollector",
    "parse_keyspace_stats",
    "FlushEventBus",
    "FLUSH_BEFORE_EVENT",
    "FLUSH_AFTER_EVENT",
    "RedisFlushCoordinator",
    # Service
    "RedisBackend",
    "RedisFlushService",
    "create_flush_service",
    "create_default_pool",
    # Exceptions
    "RedisFlushError",
    "StoreUnavailableError",
    "StatisticsParseError",
    "FlushCommandError",
    "BackendIntrospectionError",
    "ConfigurationError",
]
