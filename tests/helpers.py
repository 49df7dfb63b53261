"""Stub backends and INFO replies shared by the unit tests."""

import redis
from unittest.mock import MagicMock

from redis_flush.discovery import StoreClientSource, SynchronizedBackend

MB = 1024 * 1024


def make_info(used_memory_mb: float = 500.0, **overrides):
    """INFO reply shaped like redis-py's parsed dict."""
    info = {
        "redis_version": "7.2.4",
        "used_memory": int(used_memory_mb * MB),
        "used_memory_peak": int(600 * MB),
        "maxmemory": int(1024 * MB),
        "connected_clients": 12,
        "uptime_in_seconds": 90000,
        "db0": {"keys": 1234, "expires": 523, "avg_ttl": 3600},
        "db2": {"keys": 10, "expires": 0, "avg_ttl": 0},
    }
    info.update(overrides)
    return info


def make_client(info=None, flushall=True):
    client = MagicMock(spec=redis.Redis)
    client.info.return_value = info if info is not None else make_info()
    client.flushall.return_value = flushall
    return client


class StubSourceBackend(StoreClientSource):
    """Backend implementing the explicit client capability."""

    def __init__(self, client):
        self.client = client

    def get_store_client(self):
        return self.client


class CmCacheBackendRedis:
    """Legacy Redis backend found only by class name and attribute probing."""

    def __init__(self, client):
        self._redis = client


class FileCacheBackend:
    def __init__(self):
        self.cache_dir = "/tmp/cache"


class StubSynchronizedBackend(SynchronizedBackend):
    def __init__(self, remote):
        self._remote_backend = remote

    @property
    def remote(self):
        return self._remote_backend


class RemoteSynchronizedCache:
    """Wrapper recognized by class name through the unwrapper registry."""

    def __init__(self, remote):
        self.remote = remote
        self.local = FileCacheBackend()


class CountingFrontend:
    """Frontend that counts how often discovery asks for its backend."""

    def __init__(self, backend):
        self._backend = backend
        self.probe_count = 0

    def get_backend(self):
        self.probe_count += 1
        return self._backend


class BrokenFrontend:
    def get_backend(self):
        raise RuntimeError("backend not initialised")
