"""
Redis Connection Discovery

Finds the Redis clients behind a pool of cache backends. Each pool entry is
an (identifier, handle) pair; a handle is either a backend itself or a
frontend that exposes one through ``get_backend()`` or a ``backend``
attribute.

Resolutions are memoized per identifier for the lifetime of the discovery
instance, including failed ones, until ``clear_cache()`` is called.
"""

from collections.abc import Mapping
from typing import Any, Dict, Iterable, Iterator, Optional, Tuple, Union

from redis_flush.exceptions import BackendIntrospectionError
from redis_flush.discovery.registry import (
    extract_store_client,
    is_redis_backend,
    unwrap_backend,
)
from redis_flush.logs import get_component_logger

logger = get_component_logger("Discovery")

BackendPool = Union[Mapping, Iterable[Tuple[Any, Any]]]


class RedisConnectionDiscovery:
    """
    Locates Redis client handles in a backend pool

    Discovery never raises: a backend that cannot be introspected is logged
    and treated as having no Redis client.

    Example:
        discovery = RedisConnectionDiscovery({"default": backend})
        client = discovery.primary_connection()
    """

    def __init__(self, backend_pool: BackendPool):
        """
        Initialize discovery over a backend pool

        Args:
            backend_pool: Mapping of identifier -> handle, or an iterable of
                (identifier, handle) pairs. A Mapping is enumerated on every
                call; any other iterable is read once, here.
        """
        self.backend_pool = (
            backend_pool if isinstance(backend_pool, Mapping) else list(backend_pool)
        )
        self.logger = logger
        self._resolved: Dict[str, Optional[Any]] = {}

    def list_connections(self) -> Dict[str, Any]:
        """
        Get all Redis clients in the pool

        Returns:
            Ordered mapping of backend identifier -> client, in pool order
        """
        connections: Dict[str, Any] = {}

        try:
            for cache_id, handle in self._iter_pool():
                client = self._resolve(cache_id, handle)
                if client is not None:
                    connections[cache_id] = client
        except Exception as e:
            self.logger.error(
                f"Failed to enumerate cache backend pool: {e}",
                component="Discovery",
                subcomponent="ListConnections",
                exc_info=True,
            )

        return connections

    def primary_connection(self) -> Optional[Any]:
        """Get the first available Redis client, or None."""
        connections = self.list_connections()
        return next(iter(connections.values()), None)

    def is_available(self) -> bool:
        return bool(self.list_connections())

    def clear_cache(self) -> None:
        """Forget resolved clients so the next call probes every backend again."""
        self._resolved.clear()

        self.logger.debug(
            "Redis client cache cleared",
            component="Discovery",
            subcomponent="ClearCache",
        )

    def _iter_pool(self) -> Iterator[Tuple[str, Any]]:
        items = (
            self.backend_pool.items()
            if isinstance(self.backend_pool, Mapping)
            else self.backend_pool
        )
        for cache_id, handle in items:
            yield str(cache_id), handle

    def _resolve(self, cache_id: str, handle: Any) -> Optional[Any]:
        if cache_id in self._resolved:
            return self._resolved[cache_id]

        client = None
        try:
            backend = unwrap_backend(self._backend_of(handle))

            if is_redis_backend(backend):
                client = extract_store_client(backend)

        except BackendIntrospectionError as e:
            self.logger.warning(
                f"Failed to extract remote backend: {e}",
                component="Discovery",
                subcomponent="Resolve",
                cache_id=cache_id,
            )

        except Exception as e:
            self.logger.error(
                f'Failed to extract Redis client for cache "{cache_id}": {e}',
                component="Discovery",
                subcomponent="Resolve",
                cache_id=cache_id,
            )

        self._resolved[cache_id] = client
        return client

    @staticmethod
    def _backend_of(handle: Any) -> Any:
        get_backend = getattr(handle, "get_backend", None)
        if callable(get_backend):
            return get_backend()

        backend = getattr(handle, "backend", None)
        if backend is not None:
            return backend

        return handle
