"""
Redis Statistics Collector

Collects memory usage, keyspace information and connection details from the
primary Redis connection via the INFO command.

The INFO reply is accepted either as redis-py returns it (keyspace entries
already split into dicts) or as raw ``key=value`` strings, e.g.
``db0:keys=1234,expires=523,avg_ttl=3600``.
"""

import re
from collections.abc import Mapping
from datetime import datetime
from typing import Any, Dict, Optional

from redis_flush.exceptions import StatisticsParseError, StoreUnavailableError
from redis_flush.models import KeyspaceInfo, RedisStatistics
from redis_flush.discovery import RedisConnectionDiscovery
from redis_flush.logs import get_component_logger, log_execution_time

logger = get_component_logger("Statistics")

BYTES_PER_MEGABYTE = 1024 * 1024
KEYSPACE_FIELDS = ("keys", "expires", "avg_ttl")

_DATABASE_KEY = re.compile(r"db(\d+)")


def bytes_to_megabytes(value: int) -> float:
    return round(value / BYTES_PER_MEGABYTE, 2)


def _to_int(value: Any) -> int:
    """Coerce an INFO field to int; anything unparseable counts as 0."""
    if value is None:
        return 0
    try:
        return int(value)
    except (TypeError, ValueError):
        pass
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return 0


def parse_keyspace_stats(stats: Any) -> Dict[str, int]:
    """
    Parse one keyspace entry

    Args:
        stats: ``"keys=1234,expires=523,avg_ttl=3600"`` or the equivalent
            mapping. Unknown fields and parts without ``=`` are ignored.

    Returns:
        Dict with exactly ``keys``, ``expires`` and ``avg_ttl`` (0 when missing)
    """
    parsed = {name: 0 for name in KEYSPACE_FIELDS}

    if isinstance(stats, Mapping):
        for name in KEYSPACE_FIELDS:
            if name in stats:
                parsed[name] = _to_int(stats[name])
        return parsed

    for part in str(stats or "").split(","):
        if "=" not in part:
            continue
        key, value = part.split("=", 1)
        key = key.strip()
        if key in parsed:
            parsed[key] = _to_int(value.strip())

    return parsed


def parse_keyspace(info: Mapping) -> Dict[int, KeyspaceInfo]:
    """Build KeyspaceInfo for every ``db<N>`` entry, ascending by database id."""
    keyspace: Dict[int, KeyspaceInfo] = {}

    for key, value in info.items():
        match = _DATABASE_KEY.fullmatch(str(key))
        if not match:
            continue

        database = int(match.group(1))
        stats = parse_keyspace_stats(value)
        keyspace[database] = KeyspaceInfo(
            database=database,
            keys=stats["keys"],
            expires=stats["expires"],
            avg_ttl=stats["avg_ttl"],
        )

    return dict(sorted(keyspace.items()))


class RedisStatisticsCollector:
    """
    Gathers a RedisStatistics snapshot from the primary connection

    ``collect()`` never raises; an unavailable store or an unexpected reply
    is logged and reported as None.
    """

    def __init__(self, discovery: RedisConnectionDiscovery):
        self.discovery = discovery
        self.logger = logger

    def collect(self) -> Optional[RedisStatistics]:
        """
        Get Redis statistics

        Returns:
            RedisStatistics, or None if Redis is not available or INFO failed
        """
        try:
            client = self._require_connection()

            with log_execution_time(self.logger, "Statistics", "Info"):
                info = client.info()

            return self.build_statistics(info)

        except StoreUnavailableError as e:
            self.logger.warning(
                e.message,
                component="Statistics",
                subcomponent="Collect",
            )
            return None

        except Exception as e:
            self.logger.error(
                f"Failed to gather Redis statistics: {e}",
                component="Statistics",
                subcomponent="Collect",
                exc_info=True,
            )
            return None

    def _require_connection(self) -> Any:
        client = self.discovery.primary_connection()
        if client is None:
            raise StoreUnavailableError(
                "Redis connection not available for statistics gathering"
            )
        return client

    def build_statistics(self, info: Any) -> RedisStatistics:
        """
        Convert an INFO reply into RedisStatistics

        Raises:
            StatisticsParseError: If the reply is not a mapping
        """
        if not isinstance(info, Mapping):
            raise StatisticsParseError(
                "Redis INFO command returned invalid data",
                {"type": type(info).__name__},
            )

        max_memory = _to_int(info.get("maxmemory"))

        return RedisStatistics(
            used_memory_mb=bytes_to_megabytes(_to_int(info.get("used_memory"))),
            used_memory_peak_mb=bytes_to_megabytes(_to_int(info.get("used_memory_peak"))),
            max_memory_mb=bytes_to_megabytes(max_memory) if max_memory else None,
            connected_clients=_to_int(info.get("connected_clients")),
            uptime_seconds=_to_int(info.get("uptime_in_seconds")),
            keyspace=parse_keyspace(info),
            redis_version=str(info.get("redis_version") or "unknown"),
            is_connected=True,
            collected_at=datetime.now(),
        )
