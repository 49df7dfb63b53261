"""
Connection Discovery Module

Locates Redis clients behind heterogeneous cache backends.

Quick Start:
    from redis_flush.discovery import RedisConnectionDiscovery

    discovery = RedisConnectionDiscovery({"default": backend, "page_cache": other})
    connections = discovery.list_connections()   # {"default": <redis.Redis>}
    client = discovery.primary_connection()
"""

from .base import StoreClientSource, SynchronizedBackend

from .registry import (
    CLIENT_ATTRIBUTE_NAMES,
    register_client_extractor,
    register_backend_unwrapper,
    register_store_client_type,
    get_available_client_extractors,
    is_store_client,
)

from .connection import RedisConnectionDiscovery, BackendPool

__all__ = [
    "StoreClientSource",
    "SynchronizedBackend",
    "CLIENT_ATTRIBUTE_NAMES",
    "register_client_extractor",
    "register_backend_unwrapper",
    "register_store_client_type",
    "get_available_client_extractors",
    "is_store_client",
    "RedisConnectionDiscovery",
    "BackendPool",
]
