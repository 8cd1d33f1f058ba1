"""Тесты HTTPClientFactory и TransportAdapter."""

import socket
import threading

import pytest
import requests

from src.perf_client.core.client_factory import (
    HTTPClientFactory,
    TransportAdapter,
    keepalive_socket_options,
)
from src.perf_client.core.config import ClientConfig, ConnectionPoolConfig, SecurityConfig
from src.perf_client.core.error_handler import ErrorHandler
from src.perf_client.core.exceptions import ExitCode, PerfRunAborted
from src.perf_client.core.logging import PerfLogger


@pytest.fixture
def error_handler(logging_config):
    logger = PerfLogger(logging_config, name="perf_client.test_client_factory")
    yield ErrorHandler(logger)
    logger.close()


def make_factory(error_handler, **kwargs):
    return HTTPClientFactory(ClientConfig(base_url="https://exchange.example.com/v1", **kwargs), error_handler)


def test_shared_client_reused(error_handler):
    """При reuse_client=True возвращается один и тот же клиент."""
    factory = make_factory(error_handler)
    client = factory.get_client()

    assert isinstance(client, requests.Session)
    assert factory.get_client() is client
    assert factory.created_count == 1
    factory.close()


def test_new_client_each_call_when_reuse_disabled(error_handler):
    """reuse_client=False - новый клиент на каждый вызов."""
    factory = make_factory(error_handler, reuse_client=False)

    first = factory.get_client()
    second = factory.get_client()

    assert first is not second
    assert factory.created_count == 2
    first.close()
    second.close()


def test_shared_client_created_once_under_concurrency(error_handler):
    """Параллельные воркеры получают один клиент."""
    factory = make_factory(error_handler)
    clients = []

    def worker():
        clients.append(factory.get_client())

    threads = [threading.Thread(target=worker) for _ in range(10)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len({id(c) for c in clients}) == 1
    assert factory.created_count == 1
    factory.close()


def test_client_ignores_environment(error_handler):
    """Прокси и CA bundle из окружения не подхватываются requests."""
    client = make_factory(error_handler).new_client()
    assert client.trust_env is False
    assert client.verify is True


def test_adapter_mounted_without_retries(error_handler):
    """Повторы делает executor, urllib3 не ретраит."""
    client = make_factory(
        error_handler, pool=ConnectionPoolConfig(max_idle_connections=50)
    ).new_client()

    adapter = client.get_adapter("https://exchange.example.com/v1")
    assert isinstance(adapter, TransportAdapter)
    assert adapter.max_retries.total == 0
    assert adapter._pool_maxsize == 50


def test_adapter_keepalive_socket_options():
    """SO_KEEPALIVE включён у соединений пула."""
    config = ClientConfig()
    adapter = TransportAdapter(config)

    socket_options = adapter.poolmanager.connection_pool_kw["socket_options"]
    assert (socket.SOL_SOCKET, socket.SO_KEEPALIVE, 1) in socket_options


def test_keepalive_interval():
    """Интервал keep-alive берётся из конфига."""
    options = keepalive_socket_options(60)
    if hasattr(socket, "TCP_KEEPIDLE"):
        assert (socket.IPPROTO_TCP, socket.TCP_KEEPIDLE, 60) in options


def test_skip_tls_verify(error_handler):
    """skip_tls_verify отключает проверку сертификатов."""
    client = make_factory(error_handler, security=SecurityConfig(skip_tls_verify=True)).new_client()
    assert client.verify is False


def test_ca_bundle_valid(error_handler):
    """Валидный PEM bundle подключается как verify."""
    ca_path = requests.certs.where()
    client = make_factory(error_handler, security=SecurityConfig(ca_bundle_path=ca_path)).new_client()
    assert client.verify == ca_path


def test_ca_bundle_missing_is_fatal(error_handler, tmp_path, read_report):
    """Отсутствующий CA файл - фатальная ошибка HTTP_ERROR."""
    missing = tmp_path / "missing.crt"
    factory = make_factory(error_handler, security=SecurityConfig(ca_bundle_path=str(missing)))

    with pytest.raises(PerfRunAborted) as exc_info:
        factory.new_client()

    assert exc_info.value.exit_code == ExitCode.HTTP_ERROR
    assert "Encountered error reading CA cert file" in read_report()


def test_ca_bundle_garbage_is_fatal(error_handler, tmp_path):
    """Файл без сертификатов - фатальная ошибка."""
    garbage = tmp_path / "garbage.crt"
    garbage.write_text("this is not a certificate\n")
    factory = make_factory(error_handler, security=SecurityConfig(ca_bundle_path=str(garbage)))

    with pytest.raises(PerfRunAborted):
        factory.new_client()


def test_close_releases_shared_client(error_handler):
    """После close() создаётся новый клиент."""
    factory = make_factory(error_handler)
    first = factory.get_client()
    factory.close()

    assert factory.get_client() is not first
    assert factory.created_count == 2
    factory.close()


def test_ca_bundle_checked_even_when_verify_skipped(error_handler, tmp_path):
    """Битый CA файл фатален и при skip_tls_verify."""
    missing = tmp_path / "missing.crt"
    factory = make_factory(
        error_handler,
        security=SecurityConfig(skip_tls_verify=True, ca_bundle_path=str(missing)),
    )

    with pytest.raises(PerfRunAborted) as exc_info:
        factory.new_client()

    assert exc_info.value.exit_code == ExitCode.HTTP_ERROR


def test_skip_tls_verify_wins_over_valid_ca_bundle(error_handler):
    client = make_factory(
        error_handler,
        security=SecurityConfig(skip_tls_verify=True, ca_bundle_path=requests.certs.where()),
    ).new_client()
    assert client.verify is False


def test_release_closes_per_call_client(error_handler, monkeypatch):
    """Клиент на один вызов закрывается при release()."""
    closed = []
    monkeypatch.setattr(requests.Session, "close", lambda self: closed.append(self))
    factory = make_factory(error_handler, reuse_client=False)

    client = factory.get_client()
    factory.release(client)

    assert closed == [client]


def test_release_keeps_shared_client_open(error_handler, monkeypatch):
    closed = []
    monkeypatch.setattr(requests.Session, "close", lambda self: closed.append(self))
    factory = make_factory(error_handler)

    client = factory.get_client()
    factory.release(client)

    assert closed == []
    assert factory.get_client() is client
    factory.close()
    assert closed == [client]
