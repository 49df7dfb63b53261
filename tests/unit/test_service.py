from unittest.mock import patch

import pytest

from redis_flush.backends import RedisBackend
from redis_flush.config import Settings
from redis_flush.events import FLUSH_AFTER_EVENT, FlushEventBus
from redis_flush.service import RedisFlushService, create_default_pool, create_flush_service
from tests.helpers import FileCacheBackend, StubSourceBackend, make_client, make_info


@pytest.fixture
def settings():
    return Settings(_env_file=None)


class TestRedisFlushService:
    def test_statistics_and_availability(self, redis_client):
        service = create_flush_service({"default": StubSourceBackend(redis_client)})

        assert service.is_available()
        assert service.get_statistics().total_keys == 1244

    def test_unavailable_pool(self):
        service = RedisFlushService({"files": FileCacheBackend()})

        assert not service.is_available()
        assert service.get_statistics() is None
        assert service.flush_all().success is False

    def test_flush_publishes_on_supplied_event_bus(self):
        client = make_client()
        client.info.side_effect = [make_info(500.0), make_info(10.0)]
        bus = FlushEventBus()
        seen = []
        bus.subscribe(FLUSH_AFTER_EVENT, lambda name, payload: seen.append(payload["result"]))

        service = create_flush_service({"default": StubSourceBackend(client)}, event_bus=bus)
        result = service.flush_all()

        assert service.events is bus
        assert seen == [result]
        assert result.memory_freed_mb == pytest.approx(490.0)

    def test_services_do_not_share_discovery(self, redis_client):
        pool = {"default": StubSourceBackend(redis_client)}

        first = RedisFlushService(pool)
        second = RedisFlushService(pool)

        assert first.discovery is not second.discovery
        assert first.events is not second.events


class TestDefaultPool:
    def test_keyed_by_configured_cache_id(self, settings):
        settings = settings.model_copy(update={"redis_cache_id": "sessions"})

        pool = create_default_pool(settings)

        assert list(pool) == ["sessions"]
        assert isinstance(pool["sessions"], RedisBackend)
        assert pool["sessions"].settings is settings

    def test_factory_uses_settings_when_no_pool_given(self, settings):
        client = make_client()

        with patch("redis_flush.backends.redis.Redis") as redis_cls:
            redis_cls.return_value = client
            service = create_flush_service(settings=settings)

            assert service.is_available()
            redis_cls.assert_called_once()


class TestRedisBackend:
    def test_uses_provided_client(self, settings, redis_client):
        backend = RedisBackend(settings, client=redis_client)

        assert backend.get_store_client() is redis_client

    def test_creates_client_from_host_settings(self, settings):
        settings = settings.model_copy(
            update={"redis_host": "cache.internal", "redis_port": 6380, "redis_db": 3}
        )

        with patch("redis_flush.backends.redis.Redis") as redis_cls:
            backend = RedisBackend(settings)
            client = backend.get_store_client()
            backend.get_store_client()

        assert client is redis_cls.return_value
        redis_cls.assert_called_once_with(
            host="cache.internal",
            port=6380,
            db=3,
            socket_timeout=5,
            socket_connect_timeout=5,
        )

    def test_password_is_passed_when_set(self, settings):
        settings = settings.model_copy(update={"redis_password": "s3cret"})

        with patch("redis_flush.backends.redis.Redis") as redis_cls:
            RedisBackend(settings).get_store_client()

        assert redis_cls.call_args.kwargs["password"] == "s3cret"

    def test_url_takes_precedence(self, settings):
        settings = settings.model_copy(update={"redis_url": "redis://cache:6379/1"})

        with patch("redis_flush.backends.redis.Redis") as redis_cls:
            RedisBackend(settings).get_store_client()

        redis_cls.from_url.assert_called_once_with(
            "redis://cache:6379/1", socket_timeout=5, socket_connect_timeout=5
        )
        redis_cls.assert_not_called()

    def test_close_releases_client(self, settings, redis_client):
        backend = RedisBackend(settings, client=redis_client)

        backend.close()

        redis_client.close.assert_called_once_with()
        assert backend._client is None

    def test_close_tolerates_errors(self, settings, redis_client):
        redis_client.close.side_effect = OSError("already closed")
        backend = RedisBackend(settings, client=redis_client)

        backend.close()

        assert backend._client is None
