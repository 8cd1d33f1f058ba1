"""Тесты для системы конфигурации."""

import pytest
from src.perf_client.core.config import (
    TimeoutConfig,
    RetryConfig,
    ConnectionPoolConfig,
    SecurityConfig,
    ClientConfig,
)

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# TimeoutConfig
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

def test_timeout_config_defaults():
    """Тест дефолтных значений."""
    config = TimeoutConfig()
    assert config.request == 30
    assert config.dial == 20
    assert config.keep_alive == 60
    assert config.tls_handshake == 20
    assert config.response_header == 20
    assert config.expect_continue == 8

def test_timeout_config_as_tuple():
    """connect = max(dial, tls_handshake), read = response_header."""
    config = TimeoutConfig(dial=5, tls_handshake=12, response_header=45)
    assert config.as_tuple() == (12, 45)

def test_timeout_config_validation_negative():
    """Тест валидации - отрицательный таймаут."""
    with pytest.raises(ValueError, match="request timeout must be positive"):
        TimeoutConfig(request=-1)

def test_timeout_config_immutable():
    """Тест immutability."""
    config = TimeoutConfig()
    with pytest.raises(Exception):  # frozen dataclass
        config.request = 10

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# RetryConfig
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

def test_retry_config_defaults():
    """Тест дефолтных значений."""
    config = RetryConfig()
    assert config.max_retries == 5
    assert config.sleep_seconds == 2

def test_retry_config_zero_retries_allowed():
    """max_retries=0 - одна попытка без повторов."""
    assert RetryConfig(max_retries=0).max_retries == 0

def test_retry_config_validation():
    """Тест валидации."""
    with pytest.raises(ValueError, match="max_retries must be non-negative"):
        RetryConfig(max_retries=-1)
    with pytest.raises(ValueError, match="sleep_seconds must be non-negative"):
        RetryConfig(sleep_seconds=-0.5)

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# ConnectionPoolConfig / SecurityConfig
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

def test_pool_config_defaults():
    """Тест дефолтных значений."""
    config = ConnectionPoolConfig()
    assert config.max_idle_connections == 20
    assert config.idle_timeout == 120

def test_pool_config_validation():
    """Тест валидации."""
    with pytest.raises(ValueError, match="max_idle_connections must be positive"):
        ConnectionPoolConfig(max_idle_connections=0)

def test_security_config_defaults():
    """Проверка сертификатов включена по умолчанию."""
    config = SecurityConfig()
    assert config.skip_tls_verify is False
    assert config.ca_bundle_path is None

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# ClientConfig
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

def test_client_config_defaults():
    """Тест дефолтных значений."""
    config = ClientConfig()
    assert config.base_url == ""
    assert config.reuse_client is True
    assert config.logging is None
    assert isinstance(config.retry, RetryConfig)

def test_client_config_strips_trailing_slash():
    """base_url нормализуется, "/" добавляет executor."""
    config = ClientConfig(base_url="https://exchange.example.com/v1/")
    assert config.base_url == "https://exchange.example.com/v1"

def test_client_config_create():
    """Тест удобного конструктора."""
    config = ClientConfig.create(
        base_url="https://exchange.example.com/v1",
        max_retries=3,
        sleep_seconds=1,
        request_timeout=60,
        skip_tls_verify=True,
        reuse_client=False,
    )
    assert config.retry.max_retries == 3
    assert config.retry.sleep_seconds == 1
    assert config.timeout.request == 60
    assert config.security.skip_tls_verify is True
    assert config.reuse_client is False

def test_client_config_with_retries():
    """with_retries создаёт новый конфиг, старый не меняется."""
    config = ClientConfig(base_url="https://a")
    new_config = config.with_retries(0, sleep_seconds=0)
    assert new_config.retry.max_retries == 0
    assert new_config.retry.sleep_seconds == 0
    assert config.retry.max_retries == 5

def test_client_config_with_retries_keeps_sleep():
    """Без sleep_seconds пауза остаётся прежней."""
    config = ClientConfig(retry=RetryConfig(max_retries=1, sleep_seconds=7))
    assert config.with_retries(4).retry.sleep_seconds == 7

def test_client_config_with_base_url():
    """Тест with_base_url."""
    config = ClientConfig(base_url="https://a")
    assert config.with_base_url("https://b/").base_url == "https://b"
