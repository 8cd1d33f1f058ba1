"""
Система конфигурации для perf client.

Все конфиги immutable (frozen dataclasses) для потокобезопасности:
клиент, построенный из конфига, не может увидеть его изменения.
"""

from dataclasses import dataclass, field, replace
from typing import Optional, Tuple, TYPE_CHECKING

if TYPE_CHECKING:
    from .logging import LoggingConfig

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# TIMEOUT CONFIG
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass(frozen=True)
class TimeoutConfig:
    """
    Конфигурация таймаутов.

    Args:
        request: Общий лимит на запрос, включая чтение тела ответа (сек)
        dial: Таймаут установки TCP соединения (сек)
        keep_alive: Интервал TCP keep-alive (сек)
        tls_handshake: Таймаут TLS handshake (сек)
        response_header: Таймаут ожидания заголовков ответа (сек)
        expect_continue: Таймаут ожидания 100-continue (сек)

    Examples:
        >>> TimeoutConfig()
        >>> TimeoutConfig(request=60, response_header=45)
    """
    request: float = 30
    dial: float = 20
    keep_alive: float = 60
    tls_handshake: float = 20
    response_header: float = 20
    expect_continue: float = 8

    def __post_init__(self):
        """Валидация."""
        for name in ('request', 'dial', 'keep_alive', 'tls_handshake', 'response_header', 'expect_continue'):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} timeout must be positive")

    def as_tuple(self) -> Tuple[float, float]:
        """Вернуть как (connect, read) для requests."""
        # urllib3 выполняет TLS handshake в рамках connect
        return (max(self.dial, self.tls_handshake), self.response_header)

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# RETRY CONFIG
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass(frozen=True)
class RetryConfig:
    """
    Конфигурация retry стратегии.

    Интервал фиксированный: каждая повторная попытка ждёт sleep_seconds.

    Args:
        max_retries: Повторять пока номер попытки <= max_retries
            (всего не более max_retries + 1 отправок)
        sleep_seconds: Пауза перед повторной попыткой (сек)

    Examples:
        >>> RetryConfig(max_retries=3, sleep_seconds=1)
    """
    max_retries: int = 5
    sleep_seconds: float = 2

    def __post_init__(self):
        """Валидация."""
        if self.max_retries < 0:
            raise ValueError("max_retries must be non-negative")
        if self.sleep_seconds < 0:
            raise ValueError("sleep_seconds must be non-negative")

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# CONNECTION POOL CONFIG
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass(frozen=True)
class ConnectionPoolConfig:
    """
    Конфигурация connection pool.

    Args:
        max_idle_connections: Максимум соединений, хранимых в пуле на хост
        idle_timeout: Сколько держать простаивающее соединение (сек)
        pool_connections: Количество пулов (хостов) для кеширования

    Examples:
        >>> ConnectionPoolConfig(max_idle_connections=50)
    """
    max_idle_connections: int = 20
    idle_timeout: float = 120
    pool_connections: int = 10

    def __post_init__(self):
        """Валидация."""
        if self.max_idle_connections <= 0:
            raise ValueError("max_idle_connections must be positive")
        if self.idle_timeout <= 0:
            raise ValueError("idle_timeout must be positive")
        if self.pool_connections <= 0:
            raise ValueError("pool_connections must be positive")

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# SECURITY CONFIG
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass(frozen=True)
class SecurityConfig:
    """
    Конфигурация TLS.

    Args:
        skip_tls_verify: Не проверять сертификаты. Только для тестовых
            окружений или аварийных ситуаций, никогда не по умолчанию.
        ca_bundle_path: PEM файл с дополнительными доверенными CA

    Examples:
        >>> SecurityConfig(ca_bundle_path="/etc/certs/icp.crt")
        >>> SecurityConfig(skip_tls_verify=True)  # Для тестов
    """
    skip_tls_verify: bool = False
    ca_bundle_path: Optional[str] = None

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# MAIN CONFIG
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass(frozen=True)
class ClientConfig:
    """
    Главная конфигурация perf client.

    Args:
        base_url: Базовый URL сервиса
        timeout: Конфигурация таймаутов
        retry: Конфигурация retry
        pool: Конфигурация connection pool
        security: Конфигурация TLS
        reuse_client: Один общий клиент на сессию (False = новый на каждый вызов)
        logging: Конфигурация логирования и файла отчёта

    Examples:
        >>> config = ClientConfig(base_url="https://exchange.example.com/v1")
        >>> config = ClientConfig.create(base_url="https://...", max_retries=3, sleep_seconds=1)
    """
    base_url: str = ""

    timeout: TimeoutConfig = field(default_factory=TimeoutConfig)
    retry: RetryConfig = field(default_factory=RetryConfig)
    pool: ConnectionPoolConfig = field(default_factory=ConnectionPoolConfig)
    security: SecurityConfig = field(default_factory=SecurityConfig)
    reuse_client: bool = True
    logging: Optional['LoggingConfig'] = None

    def __post_init__(self):
        """Normalize base_url."""
        if self.base_url:
            normalized = self.base_url.rstrip('/')
            if normalized != self.base_url:
                object.__setattr__(self, 'base_url', normalized)

    @classmethod
    def create(
        cls,
        base_url: str = "",
        max_retries: int = 5,
        sleep_seconds: float = 2,
        request_timeout: float = 30,
        max_idle_connections: int = 20,
        skip_tls_verify: bool = False,
        ca_bundle_path: Optional[str] = None,
        reuse_client: bool = True,
        logging: Optional['LoggingConfig'] = None,
    ) -> 'ClientConfig':
        """
        Удобный конструктор конфигурации.

        Args:
            base_url: Базовый URL
            max_retries: Количество повторных попыток
            sleep_seconds: Пауза между попытками
            request_timeout: Общий таймаут запроса
            max_idle_connections: Размер пула соединений
            skip_tls_verify: Отключить проверку сертификатов
            ca_bundle_path: Дополнительный CA bundle
            reuse_client: Переиспользовать общий клиент
            logging: Конфигурация логирования

        Returns:
            ClientConfig instance
        """
        return cls(
            base_url=base_url,
            timeout=TimeoutConfig(request=request_timeout),
            retry=RetryConfig(max_retries=max_retries, sleep_seconds=sleep_seconds),
            pool=ConnectionPoolConfig(max_idle_connections=max_idle_connections),
            security=SecurityConfig(skip_tls_verify=skip_tls_verify, ca_bundle_path=ca_bundle_path),
            reuse_client=reuse_client,
            logging=logging,
        )

    def with_retries(self, max_retries: int, sleep_seconds: Optional[float] = None) -> 'ClientConfig':
        """
        Создать новый конфиг с изменённым retry.

        Example:
            >>> new_config = config.with_retries(3, sleep_seconds=0)
        """
        if sleep_seconds is None:
            sleep_seconds = self.retry.sleep_seconds
        return replace(self, retry=RetryConfig(max_retries=max_retries, sleep_seconds=sleep_seconds))

    def with_base_url(self, base_url: str) -> 'ClientConfig':
        """Создать новый конфиг с другим base_url."""
        return replace(self, base_url=base_url)
