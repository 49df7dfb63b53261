"""
Directly configured Redis backend.

Used when the tool runs outside a host framework (for example from the
command line): the backend pool then holds a single ``RedisBackend`` built
from settings instead of framework cache backends.
"""

from typing import Any, Dict, Optional

import redis

from redis_flush.config import Settings
from redis_flush.discovery import StoreClientSource
from redis_flush.logs import get_component_logger

logger = get_component_logger("Backend")


class RedisBackend(StoreClientSource):
    """
    A cache backend holding one redis-py client built from settings

    The client is created on first use; creating it does not touch the
    network, the first command does.
    """

    def __init__(self, settings: Settings, client: Optional[redis.Redis] = None):
        """
        Initialize the backend

        Args:
            settings: Connection settings (URL or host/port/db/password)
            client: Pre-built client, mainly for tests
        """
        self.settings = settings
        self._client = client

    def get_store_client(self) -> redis.Redis:
        if self._client is None:
            self._client = self._create_client()
        return self._client

    def _create_client(self) -> redis.Redis:
        timeouts = {
            "socket_timeout": self.settings.redis_socket_timeout,
            "socket_connect_timeout": self.settings.redis_socket_connect_timeout,
        }

        if self.settings.redis_url:
            logger.info(
                "Creating Redis client from URL",
                component="Backend",
                subcomponent="RedisBackend",
            )
            return redis.Redis.from_url(self.settings.redis_url, **timeouts)

        connection_params: Dict[str, Any] = {
            "host": self.settings.redis_host,
            "port": self.settings.redis_port,
            "db": self.settings.redis_db,
            **timeouts,
        }
        if self.settings.redis_password:
            connection_params["password"] = self.settings.redis_password

        logger.info(
            "Creating Redis client",
            component="Backend",
            subcomponent="RedisBackend",
            host=self.settings.redis_host,
            port=self.settings.redis_port,
            db=self.settings.redis_db,
        )
        return redis.Redis(**connection_params)

    def close(self) -> None:
        """Close the client if one was created."""
        if self._client is not None:
            try:
                self._client.close()
            except Exception as e:
                logger.warning(
                    f"Error closing Redis client: {e}",
                    component="Backend",
                    subcomponent="RedisBackend",
                )
            self._client = None
