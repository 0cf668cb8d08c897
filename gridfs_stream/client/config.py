# Copyright 2026 gridfs-stream contributors. All Rights Reserved.
"""
Connection configuration.

Credentials and driver options are read from the environment by
``StoreConfig.from_env``. ``ClientPool`` keeps one ``MongoClient`` per
endpoint so that sessions opened against the same host share a connection
pool.
"""

import os
import threading
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from pymongo import MongoClient

from .exceptions import ConfigurationError
from ..utils import logger

DEFAULT_TIMEOUT_MS = 5000

def _env_flag(value: Optional[str]) -> bool:
    return (value or '').lower() in ('true', '1', 'yes')

@dataclass
class StoreConfig:
    """Options passed to every MongoClient created by a ClientPool."""
    username: Optional[str] = None
    password: Optional[str] = None
    auth_source: Optional[str] = None
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    tls: bool = False

    @classmethod
    def from_env(cls, environ=None) -> "StoreConfig":
        """
        Build a configuration from GRIDFS_STREAM_* environment variables.

        Raises:
            ConfigurationError: If a numeric value cannot be parsed
        """
        environ = os.environ if environ is None else environ
        raw_timeout = environ.get('GRIDFS_STREAM_TIMEOUT_MS')
        timeout_ms = DEFAULT_TIMEOUT_MS
        if raw_timeout:
            try:
                timeout_ms = int(raw_timeout)
            except ValueError:
                raise ConfigurationError(f"GRIDFS_STREAM_TIMEOUT_MS must be an integer, got {raw_timeout!r}")
            if timeout_ms <= 0:
                raise ConfigurationError("GRIDFS_STREAM_TIMEOUT_MS must be positive")

        return cls(
            username=environ.get('GRIDFS_STREAM_USERNAME') or None,
            password=environ.get('GRIDFS_STREAM_PASSWORD') or None,
            auth_source=environ.get('GRIDFS_STREAM_AUTH_SOURCE') or None,
            timeout_ms=timeout_ms,
            tls=_env_flag(environ.get('GRIDFS_STREAM_TLS')),
        )

    def client_options(self) -> dict:
        options = {'serverSelectionTimeoutMS': self.timeout_ms}
        if self.username is not None:
            options['username'] = self.username
            options['password'] = self.password
        if self.auth_source is not None:
            options['authSource'] = self.auth_source
        if self.tls:
            options['tls'] = True
        return options

class ClientPool:
    """
    Lazily created MongoClient instances keyed by endpoint.

    Attributes:
        config (StoreConfig): Options for new clients
        client_factory (Callable): Called as ``client_factory(host, **options)``
    """

    def __init__(self, config: Optional[StoreConfig] = None, client_factory: Callable = MongoClient):
        self.config = config or StoreConfig.from_env()
        self.client_factory = client_factory
        self._clients: Dict[str, object] = {}
        self.lock = threading.Lock()

    def client(self, endpoint: str):
        with self.lock:
            client = self._clients.get(endpoint)
            if client is None:
                logger.info(f"Connecting to store at {endpoint}")
                client = self.client_factory(f"mongodb://{endpoint}", **self.config.client_options())
                self._clients[endpoint] = client
            return client

    def database(self, endpoint: str, database: str):
        return self.client(endpoint)[database]

    def close(self) -> None:
        """Close every client created by this pool."""
        with self.lock:
            for endpoint, client in self._clients.items():
                try:
                    client.close()
                except Exception as e:
                    logger.error(f"Error closing client for {endpoint}: {e}", exc_info=True)
            self._clients.clear()
