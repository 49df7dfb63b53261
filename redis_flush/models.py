"""
Value objects for Redis statistics and flush results.

All models are frozen dataclasses created fresh per query or flush and
never mutated afterwards.
"""

from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}{'' if count == 1 else 's'}"


@dataclass(frozen=True)
class KeyspaceInfo:
    """
    Keyspace statistics for a single Redis logical database

    Attributes:
        database: Database number (0-15 typically)
        keys: Total number of keys
        expires: Number of keys with an expiry set
        avg_ttl: Average time-to-live in seconds (0 if no TTL info)
    """

    database: int
    keys: int = 0
    expires: int = 0
    avg_ttl: int = 0

    @property
    def expiry_percentage(self) -> float:
        """Percentage of keys with an expiry (0-100)."""
        if self.keys == 0:
            return 0.0
        return (self.expires / self.keys) * 100

    @property
    def avg_ttl_formatted(self) -> str:
        """Average TTL in its largest whole unit, e.g. ``45s``, ``2h``."""
        if self.avg_ttl == 0:
            return "N/A"
        if self.avg_ttl < 60:
            return f"{self.avg_ttl}s"
        if self.avg_ttl < 3600:
            return f"{self.avg_ttl // 60}m"
        if self.avg_ttl < 86400:
            return f"{self.avg_ttl // 3600}h"
        return f"{self.avg_ttl // 86400}d"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "database": self.database,
            "keys": self.keys,
            "expires": self.expires,
            "expiry_percentage": self.expiry_percentage,
            "avg_ttl": self.avg_ttl,
            "avg_ttl_formatted": self.avg_ttl_formatted,
        }


@dataclass(frozen=True)
class RedisStatistics:
    """
    Snapshot of Redis server statistics taken from the INFO command

    Attributes:
        used_memory_mb: Memory used by Redis in megabytes
        used_memory_peak_mb: Peak memory usage in megabytes
        max_memory_mb: Maximum memory limit in MB (None if unlimited)
        connected_clients: Number of connected clients
        uptime_seconds: Server uptime in seconds
        keyspace: Keyspace information per database, ascending by database id
        redis_version: Redis server version
        is_connected: Connection status
        collected_at: When the snapshot was taken

    Hashing ignores keyspace; it is stored as a read-only mapping.
    """

    used_memory_mb: float
    used_memory_peak_mb: float
    max_memory_mb: Optional[float]
    connected_clients: int
    uptime_seconds: int
    keyspace: Mapping[int, KeyspaceInfo] = field(default_factory=dict, hash=False)
    redis_version: str = "unknown"
    is_connected: bool = True
    collected_at: datetime = field(default_factory=datetime.now)

    def __post_init__(self):
        object.__setattr__(self, "keyspace", MappingProxyType(dict(self.keyspace)))

    @property
    def memory_usage_percentage(self) -> Optional[float]:
        """Used memory as a percentage of maxmemory, or None when unlimited."""
        if not self.max_memory_mb:
            return None
        return (self.used_memory_mb / self.max_memory_mb) * 100

    @property
    def total_keys(self) -> int:
        return sum(info.keys for info in self.keyspace.values())

    @property
    def total_expires(self) -> int:
        return sum(info.expires for info in self.keyspace.values())

    @property
    def uptime_formatted(self) -> str:
        """
        Uptime as ``"1 day, 1 hour"`` style text.

        Days and hours are shown only when nonzero; minutes are shown when
        nonzero or when nothing else would be shown.
        """
        days = self.uptime_seconds // 86400
        hours = (self.uptime_seconds % 86400) // 3600
        minutes = (self.uptime_seconds % 3600) // 60

        parts = []
        if days > 0:
            parts.append(_plural(days, "day"))
        if hours > 0:
            parts.append(_plural(hours, "hour"))
        if minutes > 0 or not parts:
            parts.append(_plural(minutes, "minute"))

        return ", ".join(parts)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "used_memory_mb": self.used_memory_mb,
            "used_memory_peak_mb": self.used_memory_peak_mb,
            "max_memory_mb": self.max_memory_mb,
            "memory_usage_percentage": self.memory_usage_percentage,
            "connected_clients": self.connected_clients,
            "uptime_seconds": self.uptime_seconds,
            "uptime_formatted": self.uptime_formatted,
            "keyspace": {
                db: info.to_dict() for db, info in self.keyspace.items()
            },
            "total_keys": self.total_keys,
            "total_expires": self.total_expires,
            "redis_version": self.redis_version,
            "is_connected": self.is_connected,
            "collected_at": self.collected_at.strftime(DATETIME_FORMAT),
        }


@dataclass(frozen=True)
class FlushResult:
    """
    Outcome of one FLUSHALL attempt

    ``keys_deleted`` is an estimate: the total key count observed before the
    flush. FLUSHALL leaves nothing to diff against, so no exact count exists.

    On failure ``memory_after_mb`` equals ``memory_before_mb``,
    ``targets_flushed`` is empty and ``error_message`` is set.
    """

    success: bool
    memory_before_mb: float
    memory_after_mb: float
    execution_time_ms: int
    keys_deleted: int
    targets_flushed: Tuple[str, ...]
    executed_at: datetime
    error_message: Optional[str] = None

    @classmethod
    def failure(
        cls,
        memory_before_mb: float,
        execution_time_ms: int,
        executed_at: datetime,
        error_message: str,
    ) -> "FlushResult":
        """Build a failed result; memory is reported as unchanged."""
        return cls(
            success=False,
            memory_before_mb=memory_before_mb,
            memory_after_mb=memory_before_mb,
            execution_time_ms=execution_time_ms,
            keys_deleted=0,
            targets_flushed=(),
            executed_at=executed_at,
            error_message=error_message,
        )

    @property
    def memory_freed_mb(self) -> float:
        return max(0.0, self.memory_before_mb - self.memory_after_mb)

    @property
    def memory_freed_percentage(self) -> float:
        if self.memory_before_mb == 0:
            return 0.0
        return (self.memory_freed_mb / self.memory_before_mb) * 100

    @property
    def execution_time_seconds(self) -> float:
        return round(self.execution_time_ms / 1000, 3)

    def summary(self) -> str:
        """Human-readable one-line summary of the flush."""
        if not self.success:
            return f"Flush failed: {self.error_message or 'Unknown error'}"

        return (
            f"Flushed {self.keys_deleted:,} keys, "
            f"freed {self.memory_freed_mb:.2f} MB ({self.memory_freed_percentage:.1f}%) "
            f"in {self.execution_time_seconds:.3f} seconds"
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "memory_before_mb": self.memory_before_mb,
            "memory_after_mb": self.memory_after_mb,
            "memory_freed_mb": self.memory_freed_mb,
            "memory_freed_percentage": self.memory_freed_percentage,
            "execution_time_ms": self.execution_time_ms,
            "execution_time_seconds": self.execution_time_seconds,
            "keys_deleted": self.keys_deleted,
            "targets_flushed": list(self.targets_flushed),
            "executed_at": self.executed_at.strftime(DATETIME_FORMAT),
            "error_message": self.error_message,
        }
