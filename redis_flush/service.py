"""
Redis Flush Service

Wires discovery, statistics collection and flush coordination together over
one backend pool. This is the surface an admin UI or CLI talks to.

Example:
    service = create_flush_service({"default": django_cache, "page": page_cache})
    stats = service.get_statistics()
    result = service.flush_all()
    if not result.success:
        show_error(result.error_message)
"""

from typing import Optional

from redis_flush.config import Settings, get_settings
from redis_flush.backends import RedisBackend
from redis_flush.discovery import BackendPool, RedisConnectionDiscovery
from redis_flush.events import FlushEventBus
from redis_flush.flush import RedisFlushCoordinator
from redis_flush.models import FlushResult, RedisStatistics
from redis_flush.statistics import RedisStatisticsCollector
from redis_flush.logs import get_component_logger, time_execution

logger = get_component_logger("Service")


class RedisFlushService:
    """
    Facade over one discovery/collector/coordinator set

    Each service owns its discovery cache, so separate instances never share
    resolved clients.
    """

    def __init__(self, backend_pool: BackendPool, event_bus: Optional[FlushEventBus] = None):
        self.discovery = RedisConnectionDiscovery(backend_pool)
        self.collector = RedisStatisticsCollector(self.discovery)
        self._event_bus = event_bus or FlushEventBus()
        self.coordinator = RedisFlushCoordinator(
            self.discovery, self.collector, self._event_bus
        )

    @property
    def events(self) -> FlushEventBus:
        return self._event_bus

    def get_statistics(self) -> Optional[RedisStatistics]:
        """Read-only statistics snapshot, or None if Redis is unavailable."""
        return self.collector.collect()

    @time_execution("Service", "FlushAll")
    def flush_all(self) -> FlushResult:
        """Run FLUSHALL. Destructive; check ``success`` on the result."""
        return self.coordinator.flush_all()

    def is_available(self) -> bool:
        return self.discovery.is_available()


def create_default_pool(settings: Optional[Settings] = None) -> dict:
    """
    Build a single-backend pool from settings

    Returns:
        ``{settings.redis_cache_id: RedisBackend(settings)}``
    """
    settings = settings or get_settings()
    return {settings.redis_cache_id: RedisBackend(settings)}


def create_flush_service(
    backend_pool: Optional[BackendPool] = None,
    settings: Optional[Settings] = None,
    event_bus: Optional[FlushEventBus] = None,
) -> RedisFlushService:
    """
    Factory function to create a RedisFlushService

    Args:
        backend_pool: Cache backends to search; defaults to one RedisBackend
            built from settings
        settings: Settings for the default pool (default: get_settings())
        event_bus: Event bus to publish flush events on

    Returns:
        Configured service
    """
    if backend_pool is None:
        backend_pool = create_default_pool(settings)
        logger.debug(
            "Using configured Redis connection",
            component="Service",
            subcomponent="Factory",
        )

    return RedisFlushService(backend_pool, event_bus=event_bus)
