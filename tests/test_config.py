import pytest

from conftest import FakeClient
from gridfs_stream.client.config import DEFAULT_TIMEOUT_MS, ClientPool, StoreConfig
from gridfs_stream.client.exceptions import ConfigurationError

def test_defaults():
    config = StoreConfig.from_env({})
    assert config.timeout_ms == DEFAULT_TIMEOUT_MS
    assert config.username is None
    assert config.client_options() == {'serverSelectionTimeoutMS': DEFAULT_TIMEOUT_MS}

def test_from_env():
    config = StoreConfig.from_env({
        'GRIDFS_STREAM_USERNAME': 'alice',
        'GRIDFS_STREAM_PASSWORD': 'secret',
        'GRIDFS_STREAM_AUTH_SOURCE': 'admin',
        'GRIDFS_STREAM_TIMEOUT_MS': '250',
        'GRIDFS_STREAM_TLS': 'true',
    })
    assert config.client_options() == {
        'serverSelectionTimeoutMS': 250,
        'username': 'alice',
        'password': 'secret',
        'authSource': 'admin',
        'tls': True,
    }

@pytest.mark.parametrize("value", ["soon", "-5", "0"])
def test_invalid_timeout(value):
    with pytest.raises(ConfigurationError):
        StoreConfig.from_env({'GRIDFS_STREAM_TIMEOUT_MS': value})

def test_pool_reuses_clients_per_endpoint():
    pool = ClientPool(StoreConfig(timeout_ms=100), client_factory=FakeClient)

    first = pool.client("localhost:27017")
    assert pool.client("localhost:27017") is first
    assert pool.client("otherhost") is not first
    assert first.uri == "mongodb://localhost:27017"
    assert first.options == {'serverSelectionTimeoutMS': 100}

    pool.close()
    assert first.closed
    assert pool.client("localhost:27017") is not first
