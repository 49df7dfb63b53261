"""
Redis Flush Coordinator

Runs one FLUSHALL with statistics captured before and after, publishing
``redis_flush_before`` and ``redis_flush_after`` events for observers.

Flow:
    collect before -> discover connections -> notify before -> FLUSHALL on the
    first connection that accepts it -> collect after -> notify after

FLUSHALL clears every database on the server, so one accepted call is
enough; sibling connections pointing at the same server are not commanded.
Every failure is returned as a FlushResult with ``success=False``.
"""

import time
from datetime import datetime
from typing import Any, Dict, List

from redis.exceptions import RedisError

from redis_flush.discovery import RedisConnectionDiscovery
from redis_flush.events import FLUSH_AFTER_EVENT, FLUSH_BEFORE_EVENT, FlushEventBus
from redis_flush.exceptions import FlushCommandError
from redis_flush.models import FlushResult
from redis_flush.statistics import RedisStatisticsCollector
from redis_flush.logs import get_component_logger

logger = get_component_logger("Flush")

NO_CONNECTIONS_MESSAGE = "no connections available"
NO_TARGET_MESSAGE = "failed to execute flush on any connection"


def _elapsed_ms(start_time: float) -> int:
    return max(0, int((time.perf_counter() - start_time) * 1000))


class RedisFlushCoordinator:
    """
    Orchestrates a Redis FLUSHALL

    ``flush_all()`` never raises; callers check ``FlushResult.success``.
    """

    def __init__(
        self,
        discovery: RedisConnectionDiscovery,
        collector: RedisStatisticsCollector,
        event_bus: FlushEventBus,
    ):
        self.discovery = discovery
        self.collector = collector
        self.event_bus = event_bus
        self.logger = logger

    def flush_all(self) -> FlushResult:
        """
        Flush all Redis data

        Returns:
            FlushResult describing the attempt
        """
        start_time = time.perf_counter()
        executed_at = datetime.now()

        # Statistics are advisory: the flush proceeds without them
        stats_before = self.collector.collect()
        memory_before_mb = stats_before.used_memory_mb if stats_before else 0.0
        keys_before_flush = stats_before.total_keys if stats_before else 0

        connections = self.discovery.list_connections()

        if not connections:
            self.logger.warning(
                "Redis flush skipped: no connections available",
                component="Flush",
                subcomponent="FlushAll",
            )
            return FlushResult.failure(
                memory_before_mb=memory_before_mb,
                execution_time_ms=_elapsed_ms(start_time),
                executed_at=executed_at,
                error_message=NO_CONNECTIONS_MESSAGE,
            )

        try:
            self.event_bus.emit(
                FLUSH_BEFORE_EVENT,
                {"statistics": stats_before, "connections": connections},
            )

            targets = self._execute_flush_all(connections)

            stats_after = self.collector.collect()
            memory_after_mb = stats_after.used_memory_mb if stats_after else 0.0

            result = FlushResult(
                success=True,
                memory_before_mb=memory_before_mb,
                memory_after_mb=memory_after_mb,
                execution_time_ms=_elapsed_ms(start_time),
                keys_deleted=keys_before_flush,
                targets_flushed=tuple(targets),
                executed_at=executed_at,
            )

            self.event_bus.emit(
                FLUSH_AFTER_EVENT,
                {
                    "result": result,
                    "statistics_before": stats_before,
                    "statistics_after": stats_after,
                },
            )

            self.logger.info(
                "Redis cache flushed successfully",
                component="Flush",
                subcomponent="FlushAll",
                status="success",
                result=result.to_dict(),
            )

            return result

        except RedisError as e:
            error_message = f"Redis error: {e}"
            self.logger.error(
                f"Redis flush failed: {e}",
                component="Flush",
                subcomponent="FlushAll",
                status="failed",
                exc_info=True,
            )

        except FlushCommandError as e:
            error_message = e.message
            self.logger.error(
                f"Redis flush failed: {e}",
                component="Flush",
                subcomponent="FlushAll",
                status="failed",
                exc_info=True,
            )

        except Exception as e:
            error_message = f"Unexpected error: {e}"
            self.logger.error(
                f"Unexpected error during Redis flush: {e}",
                component="Flush",
                subcomponent="FlushAll",
                status="error",
                exc_info=True,
            )

        return FlushResult.failure(
            memory_before_mb=memory_before_mb,
            execution_time_ms=_elapsed_ms(start_time),
            executed_at=executed_at,
            error_message=error_message,
        )

    def _execute_flush_all(self, connections: Dict[str, Any]) -> List[str]:
        """
        Run FLUSHALL on the first connection that accepts it

        Returns:
            The identifier of the connection that was flushed, as a one-item list

        Raises:
            FlushCommandError: If no connection accepted the command
            RedisError: If the command itself fails
        """
        for cache_id, client in connections.items():
            flushall = getattr(client, "flushall", None)
            if not callable(flushall):
                continue

            if flushall():
                self.logger.debug(
                    "FLUSHALL executed",
                    component="Flush",
                    subcomponent="Execute",
                    cache_id=cache_id,
                )
                return [cache_id]

            self.logger.warning(
                "FLUSHALL was not acknowledged",
                component="Flush",
                subcomponent="Execute",
                cache_id=cache_id,
            )

        raise FlushCommandError(NO_TARGET_MESSAGE, {"connections": len(connections)})
