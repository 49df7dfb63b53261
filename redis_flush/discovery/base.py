"""
Backend Capability Interfaces

Cache backends that know how to hand out their Redis client implement
``StoreClientSource`` directly. Wrappers that mirror a remote backend into a
local one implement ``SynchronizedBackend`` so discovery can look through
them. Backends that implement neither are handled by the registries in
``redis_flush.discovery.registry``.
"""

from abc import ABC, abstractmethod
from typing import Any


class StoreClientSource(ABC):
    """
    A cache backend that exposes a retrievable store client

    Example:
        class MyRedisBackend(StoreClientSource):
            def __init__(self, client):
                self._client = client

            def get_store_client(self):
                return self._client
    """

    @abstractmethod
    def get_store_client(self) -> Any:
        """
        Return the underlying store client

        Returns:
            A client object (``redis.Redis`` or another registered type),
            or None if the backend has no live client
        """
        pass


class SynchronizedBackend(ABC):
    """
    A backend wrapper that delegates storage to a remote backend

    Discovery unwraps exactly one layer of this wrapper before checking
    whether the delegate is Redis-backed.
    """

    @property
    @abstractmethod
    def remote(self) -> Any:
        """The wrapped remote backend."""
        pass
