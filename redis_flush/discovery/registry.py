"""
Backend Registries

Maps known backend variants to the functions that reach their Redis client,
so discovery can support legacy or third-party backends without ad hoc
structural probing. Three registries are kept:

- Store client types: classes accepted as a usable client
- Client extractors: backend class name -> function returning the client
- Backend unwrappers: wrapper class name -> function returning the delegate

Example:
    def extract_my_backend(backend):
        return backend.connection.client

    register_client_extractor("MyCacheBackend", extract_my_backend)
"""

from typing import Any, Callable, Dict, List, Optional, Tuple, Type

import redis
from redis.cluster import RedisCluster

from redis_flush.exceptions import BackendIntrospectionError, ConfigurationError
from redis_flush.discovery.base import StoreClientSource, SynchronizedBackend
from redis_flush.logs import get_logger

logger = get_logger(__name__)

# Attribute names probed, in order, on Redis-looking backends with no registration
CLIENT_ATTRIBUTE_NAMES: Tuple[str, ...] = ("_redis", "redis", "_client", "client")

STORE_CLIENT_TYPES: List[Type] = [redis.Redis, RedisCluster]


def _extract_django_cache_client(backend: Any) -> Any:
    """
    Reach the client of a Django cache backend.

    Django's built-in RedisCache keeps a RedisCacheClient in ``_cache``;
    django-redis keeps a DefaultClient in ``client``. Both expose
    ``get_client(write=True)``.
    """
    for attribute in ("_cache", "client"):
        inner = getattr(backend, attribute, None)
        if inner is not None and callable(getattr(inner, "get_client", None)):
            return inner.get_client(write=True)
    return None


def _unwrap_remote_attribute(wrapper: Any) -> Any:
    for attribute in ("remote", "_remote"):
        remote = getattr(wrapper, attribute, None)
        if remote is not None:
            return remote
    raise BackendIntrospectionError(
        "Synchronized backend has no remote backend",
        {"backend": type(wrapper).__name__},
    )


CLIENT_EXTRACTOR_REGISTRY: Dict[str, Callable[[Any], Any]] = {
    "RedisCache": _extract_django_cache_client,
}

BACKEND_UNWRAPPER_REGISTRY: Dict[str, Callable[[Any], Any]] = {
    "RemoteSynchronizedCache": _unwrap_remote_attribute,
}


def _register(registry: Dict[str, Callable], kind: str, name: str, func: Callable) -> None:
    if not callable(func):
        raise ConfigurationError(
            f"Cannot register {kind} for '{name}': not callable",
            {"type": type(func).__name__},
        )

    if name in registry:
        logger.warning(
            f"Overwriting existing {kind} registration: {name}",
            component="Discovery",
            subcomponent="Registry",
        )

    registry[name] = func

    logger.debug(
        f"Registered {kind}: {name}",
        component="Discovery",
        subcomponent="Registry",
    )


def register_client_extractor(backend_class_name: str, extractor: Callable[[Any], Any]) -> None:
    """
    Register a function that returns the store client of a backend variant

    Args:
        backend_class_name: Exact class name of the backend (``type(b).__name__``)
        extractor: Callable taking the backend and returning its client or None

    Raises:
        ConfigurationError: If extractor is not callable
    """
    _register(CLIENT_EXTRACTOR_REGISTRY, "client extractor", backend_class_name, extractor)


def register_backend_unwrapper(wrapper_class_name: str, unwrapper: Callable[[Any], Any]) -> None:
    """
    Register a function that returns the delegate of a wrapping backend

    Args:
        wrapper_class_name: Exact class name of the wrapper
        unwrapper: Callable taking the wrapper and returning the inner backend

    Raises:
        ConfigurationError: If unwrapper is not callable
    """
    _register(BACKEND_UNWRAPPER_REGISTRY, "backend unwrapper", wrapper_class_name, unwrapper)


def register_store_client_type(client_type: Type) -> None:
    """Accept instances of client_type as usable store clients."""
    if not isinstance(client_type, type):
        raise ConfigurationError(
            "Store client type must be a class",
            {"type": type(client_type).__name__},
        )
    if client_type not in STORE_CLIENT_TYPES:
        STORE_CLIENT_TYPES.append(client_type)


def get_available_client_extractors() -> List[str]:
    """List the backend class names with a registered client extractor."""
    return list(CLIENT_EXTRACTOR_REGISTRY.keys())


def is_store_client(candidate: Any) -> bool:
    return candidate is not None and isinstance(candidate, tuple(STORE_CLIENT_TYPES))


def unwrap_backend(backend: Any) -> Any:
    """
    Remove one layer of remote-synchronization wrapping, if present

    Raises:
        BackendIntrospectionError: If the wrapper cannot be unwrapped
    """
    if isinstance(backend, SynchronizedBackend):
        remote = backend.remote
        if remote is None:
            raise BackendIntrospectionError(
                "Synchronized backend has no remote backend",
                {"backend": type(backend).__name__},
            )
        return remote

    unwrapper = BACKEND_UNWRAPPER_REGISTRY.get(type(backend).__name__)
    if unwrapper is not None:
        return unwrapper(backend)

    return backend


def is_redis_backend(backend: Any) -> bool:
    """
    Decide whether a (possibly unwrapped) backend is Redis-backed

    Explicit capability or registration wins; a class name containing
    "redis" is accepted as a last-resort heuristic.
    """
    if isinstance(backend, StoreClientSource):
        return True

    class_name = type(backend).__name__
    if class_name in CLIENT_EXTRACTOR_REGISTRY:
        return True

    return "redis" in class_name.lower()


def extract_store_client(backend: Any) -> Optional[Any]:
    """
    Get the store client from a Redis-backed backend

    Returns:
        The client when it is a recognized store client type, otherwise None
    """
    class_name = type(backend).__name__

    if isinstance(backend, StoreClientSource):
        candidates = [backend.get_store_client()]
    elif class_name in CLIENT_EXTRACTOR_REGISTRY:
        candidates = [CLIENT_EXTRACTOR_REGISTRY[class_name](backend)]
    else:
        candidates = (
            getattr(backend, name, None) for name in CLIENT_ATTRIBUTE_NAMES
        )

    for candidate in candidates:
        if is_store_client(candidate):
            return candidate

    logger.warning(
        f'Redis backend "{class_name}" does not have a recognized Redis client',
        component="Discovery",
        subcomponent="Registry",
    )
    return None
