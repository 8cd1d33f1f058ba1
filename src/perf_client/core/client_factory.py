# src/perf_client/core/client_factory.py
"""
Factory for the pooled HTTP client shared by perf workers.

One requests.Session per PerfSession (unless reuse is disabled). The
session is used from many worker threads at once: connection pooling and
its locking live in urllib3, nothing extra is wrapped around it.
"""
import socket
import ssl
import threading
from typing import Any, List, Optional, Tuple

import requests
from requests.adapters import HTTPAdapter
from urllib3.connection import HTTPConnection

from .config import ClientConfig
from .error_handler import ErrorHandler
from .exceptions import ExitCode


def keepalive_socket_options(keep_alive: float) -> List[Tuple[int, int, int]]:
    """
    TCP keep-alive socket options for urllib3 connections.

    Platforms without TCP_KEEPIDLE/TCP_KEEPINTVL only get SO_KEEPALIVE.
    """
    options = [(socket.SOL_SOCKET, socket.SO_KEEPALIVE, 1)]
    interval = max(1, int(keep_alive))
    if hasattr(socket, 'TCP_KEEPIDLE'):
        options.append((socket.IPPROTO_TCP, socket.TCP_KEEPIDLE, interval))
    if hasattr(socket, 'TCP_KEEPINTVL'):
        options.append((socket.IPPROTO_TCP, socket.TCP_KEEPINTVL, interval))
    return options


class TransportAdapter(HTTPAdapter):
    """
    HTTPAdapter with keep-alive socket options and no urllib3 retries.

    Retries are done by the executor with a fresh request each attempt.
    """

    def __init__(self, config: ClientConfig, **kwargs: Any):
        self._socket_options = keepalive_socket_options(config.timeout.keep_alive)
        super().__init__(
            pool_connections=config.pool.pool_connections,
            pool_maxsize=config.pool.max_idle_connections,
            pool_block=False,
            max_retries=0,
            **kwargs
        )

    def init_poolmanager(self, *args: Any, **pool_kwargs: Any) -> None:
        pool_kwargs['socket_options'] = HTTPConnection.default_socket_options + self._socket_options
        super().init_poolmanager(*args, **pool_kwargs)


class HTTPClientFactory:
    """
    Builds and hands out the pooled client.

    Example:
        >>> factory = HTTPClientFactory(config, error_handler)
        >>> client = factory.get_client()
        >>> client is factory.get_client()
        True
    """

    def __init__(self, config: ClientConfig, error_handler: ErrorHandler):
        self._config = config
        self._errors = error_handler
        self._shared: Optional[requests.Session] = None
        self._lock = threading.Lock()
        self._created = 0

    def get_client(self) -> requests.Session:
        """
        Return the shared client, or a new one when reuse is disabled.

        Returns:
            requests.Session safe for concurrent use by worker threads
        """
        if not self._config.reuse_client:
            return self.new_client()

        if self._shared is None:
            with self._lock:
                if self._shared is None:
                    self._shared = self.new_client()
        return self._shared

    def new_client(self) -> requests.Session:
        """
        Build a new pooled client from the config.

        Raises:
            PerfRunAborted: If the CA bundle can not be loaded (HTTP_ERROR)
        """
        session = requests.Session()

        adapter = TransportAdapter(self._config)
        session.mount('http://', adapter)
        session.mount('https://', adapter)

        # Proxies/CA bundles from the environment are resolved by config, not requests
        session.trust_env = False

        security = self._config.security
        if security.ca_bundle_path:
            # An unreadable bundle is fatal even when verification is off
            self._load_ca_bundle(security.ca_bundle_path)
            session.verify = security.ca_bundle_path
        if security.skip_tls_verify:
            # Test environments or certificate emergencies only
            session.verify = False

        self._created += 1
        return session

    def _load_ca_bundle(self, ca_path: str) -> None:
        """Read the PEM bundle and make sure it yields a usable trust store."""
        try:
            with open(ca_path, 'r', encoding='utf-8') as f:
                pem = f.read()
            context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
            context.load_verify_locations(cadata=pem)
        except (OSError, ValueError, ssl.SSLError) as e:
            self._errors.fatal(
                ExitCode.HTTP_ERROR,
                f"Encountered error reading CA cert file {ca_path}: {e}"
            )

    @property
    def created_count(self) -> int:
        """How many clients this factory has built."""
        return self._created

    def close(self) -> None:
        """Close the shared client (if any)."""
        with self._lock:
            if self._shared is not None:
                self._shared.close()
                self._shared = None

    def release(self, client: requests.Session) -> None:
        """
        Return a client obtained from get_client().

        Per-call clients (reuse disabled) are closed here; the shared
        client stays open until close().
        """
        if client is not self._shared:
            client.close()
