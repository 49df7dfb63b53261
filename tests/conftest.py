import pytest

from redis_flush.config import reset_settings
from tests.helpers import make_client, make_info


@pytest.fixture(autouse=True)
def fresh_settings():
    """Each test reads settings from its own environment."""
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def info_reply():
    return make_info()


@pytest.fixture
def redis_client(info_reply):
    return make_client(info_reply)
