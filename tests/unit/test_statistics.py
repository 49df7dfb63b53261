import pytest
import redis

from redis_flush.discovery import RedisConnectionDiscovery
from redis_flush.exceptions import StatisticsParseError
from redis_flush.statistics import (
    RedisStatisticsCollector,
    bytes_to_megabytes,
    parse_keyspace,
    parse_keyspace_stats,
)
from tests.helpers import FileCacheBackend, StubSourceBackend, make_client, make_info


def collector_for(client):
    return RedisStatisticsCollector(RedisConnectionDiscovery({"default": StubSourceBackend(client)}))


class TestParseKeyspaceStats:
    def test_parses_redis_keyspace_line(self):
        assert parse_keyspace_stats("keys=1234,expires=523,avg_ttl=3600") == {
            "keys": 1234,
            "expires": 523,
            "avg_ttl": 3600,
        }

    @pytest.mark.parametrize("value", ["", "garbage", ",,,", None])
    def test_empty_or_malformed_yields_zeros(self, value):
        assert parse_keyspace_stats(value) == {"keys": 0, "expires": 0, "avg_ttl": 0}

    def test_ignores_unknown_fields_and_parts_without_equals(self):
        stats = parse_keyspace_stats("keys=5,subexpiry=0,oops, expires = 2")

        assert stats == {"keys": 5, "expires": 2, "avg_ttl": 0}

    def test_unparseable_numbers_default_to_zero(self):
        assert parse_keyspace_stats("keys=abc,expires=3")["keys"] == 0

    def test_accepts_mapping_from_redis_py(self):
        stats = parse_keyspace_stats({"keys": 7, "expires": 1, "avg_ttl": 10, "subexpiry": 0})

        assert stats == {"keys": 7, "expires": 1, "avg_ttl": 10}


def test_parse_keyspace_orders_by_database_and_skips_other_keys():
    info = {
        "db10": "keys=1,expires=0,avg_ttl=0",
        "db2": {"keys": 2, "expires": 0, "avg_ttl": 0},
        "db0": "keys=3,expires=1,avg_ttl=60",
        "dbsize_hint": "keys=99",
        "used_memory": 100,
    }

    keyspace = parse_keyspace(info)

    assert list(keyspace) == [0, 2, 10]
    assert keyspace[0].keys == 3
    assert keyspace[0].avg_ttl == 60
    assert keyspace[10].database == 10


def test_parse_keyspace_last_duplicate_database_wins():
    keyspace = parse_keyspace({"db0": "keys=1,expires=0,avg_ttl=0", "db00": "keys=2,expires=1,avg_ttl=5"})

    assert list(keyspace) == [0]
    assert keyspace[0].keys == 2
    assert keyspace[0].expires == 1


def test_bytes_to_megabytes_rounds_to_two_places():
    assert bytes_to_megabytes(524288000) == 500.0
    assert bytes_to_megabytes(1500000) == 1.43
    assert bytes_to_megabytes(0) == 0.0


def test_collect_builds_statistics(redis_client):
    stats = collector_for(redis_client).collect()

    assert stats is not None
    assert stats.used_memory_mb == 500.0
    assert stats.used_memory_peak_mb == 600.0
    assert stats.max_memory_mb == 1024.0
    assert stats.connected_clients == 12
    assert stats.uptime_seconds == 90000
    assert stats.redis_version == "7.2.4"
    assert stats.is_connected is True
    assert list(stats.keyspace) == [0, 2]
    assert stats.total_keys == 1244
    assert stats.total_expires == 523


def test_zero_maxmemory_means_unlimited():
    stats = collector_for(make_client(make_info(maxmemory=0))).collect()

    assert stats.max_memory_mb is None
    assert stats.memory_usage_percentage is None


def test_missing_and_unparseable_fields_default():
    stats = collector_for(make_client({"used_memory": "not-a-number"})).collect()

    assert stats.used_memory_mb == 0.0
    assert stats.connected_clients == 0
    assert stats.redis_version == "unknown"
    assert stats.keyspace == {}


def test_collect_returns_none_without_connection():
    collector = RedisStatisticsCollector(RedisConnectionDiscovery({"files": FileCacheBackend()}))

    assert collector.collect() is None


def test_collect_returns_none_when_store_unreachable():
    client = make_client()
    client.info.side_effect = redis.ConnectionError("Connection refused")

    assert collector_for(client).collect() is None


def test_collect_returns_none_on_unexpected_reply_shape():
    assert collector_for(make_client(info="# Server\r\nredis_version:7.2.4")).collect() is None


def test_build_statistics_rejects_non_mapping():
    collector = collector_for(make_client())

    with pytest.raises(StatisticsParseError):
        collector.build_statistics(["used_memory", 1])
