"""
Иерархия исключений и коды выхода perf client.

Классификация:
- TemporaryError (retryable=True) - можно ретраить
- FatalError (fatal=True) - НЕ ретраить никогда
- PerfRunAborted - завершение процесса с кодом выхода (fail-fast режим)
"""

from enum import IntEnum
from typing import Optional

import requests

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# EXIT CODES
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class ExitCode(IntEnum):
    """Коды выхода процесса драйвера."""
    CLI_INPUT_ERROR = 1
    JSON_PARSING_ERROR = 3
    FILE_IO_ERROR = 4
    HTTP_ERROR = 5
    CLI_GENERAL_ERROR = 7
    NOT_FOUND = 8
    EXEC_CMD_ERROR = 10
    INTERNAL_ERROR = 99


# Не HTTP статус сервера: ответ так и не был получен
HTTP_CLIENT_ERROR = 598

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# BASE
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class PerfClientException(Exception):
    """Базовое исключение perf client."""

    retryable: bool = False
    fatal: bool = False

    def __init__(self, message: str, **kwargs):
        self.message = message
        super().__init__(message)


class PerfRunAborted(SystemExit):
    """
    Прерывание прогона в fail-fast режиме.

    Наследуется от SystemExit: если никто не перехватил, процесс
    завершается с кодом ``exit_code``.

    Args:
        exit_code: Код выхода (ExitCode)
        message: Сообщение, которое уже записано в отчёт
    """

    def __init__(self, exit_code: int, message: str = ""):
        self.exit_code = int(exit_code)
        self.message = message
        super().__init__(self.exit_code)

    def __str__(self) -> str:
        return f"exit code {self.exit_code}: {self.message}"

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# ВРЕМЕННЫЕ ОШИБКИ (retryable=True)
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class TemporaryError(PerfClientException):
    """
    Временная ошибка - можно ретраить.

    Примеры: таймауты, отказ/сброс соединения, пустой ответ, 502/503/504.
    """
    retryable = True

class NetworkError(TemporaryError):
    """Сетевая ошибка."""

    def __init__(self, message: str, url: Optional[str] = None):
        self.url = url
        full_message = f"{message}"
        if url:
            full_message += f" (url: {url})"
        super().__init__(full_message)

class TimeoutError(NetworkError):
    """
    Таймаут запроса.

    Args:
        message: Сообщение об ошибке
        url: URL запроса
        timeout: Значение таймаута
        timeout_type: Тип таймаута ('connect', 'read' или 'request')
    """

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        timeout: Optional[float] = None,
        timeout_type: Optional[str] = None
    ):
        self.timeout = timeout
        self.timeout_type = timeout_type

        msg = message
        if timeout_type:
            msg += f" ({timeout_type} timeout"
            if timeout:
                msg += f": {timeout}s"
            msg += ")"

        super().__init__(msg, url)

class ConnectionError(NetworkError):
    """
    Ошибка подключения.

    Примеры:
    - Connection refused
    - Connection reset
    - Server closed connection with body length 0
    """
    pass

class ServerError(TemporaryError):
    """
    Временная ошибка сервера (502, 503, 504).

    Args:
        status_code: HTTP статус код
        url: URL
        message: Тело ответа или дополнительное сообщение
    """

    def __init__(self, status_code: int, url: str, message: str = ""):
        self.status_code = status_code
        self.url = url

        msg = f"HTTP {status_code} error for {url}"
        if message:
            msg += f": {message}"

        super().__init__(msg)

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# ФАТАЛЬНЫЕ ОШИБКИ (fatal=True)
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class FatalError(PerfClientException):
    """
    Фатальная ошибка - НЕ ретраить.

    Примеры: ошибки TLS, невалидный URL, код вне списка допустимых.
    """
    fatal = True

class HTTPError(FatalError):
    """
    HTTP код вне набора допустимых кодов.

    Args:
        status_code: HTTP статус
        url: URL
        message: Сообщение
    """

    def __init__(self, status_code: int, url: str, message: str = ""):
        self.status_code = status_code
        self.url = url

        msg = f"HTTP {status_code} error for {url}"
        if message:
            msg += f": {message}"

        super().__init__(msg)

class InvalidResponseError(FatalError):
    """
    Невалидный ответ.

    Примеры:
    - Битый JSON
    - JSON не соответствует ожидаемому типу
    """
    pass

class ConfigurationError(PerfClientException):
    """Ошибка конфигурации."""
    fatal = True

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# УТИЛИТЫ
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

def _chain(exc: BaseException):
    """Пройти по цепочке причин исключения (__cause__/__context__/args)."""
    seen = set()
    stack = [exc]
    while stack:
        current = stack.pop()
        if current is None or id(current) in seen:
            continue
        seen.add(id(current))
        yield current
        stack.append(current.__cause__)
        stack.append(current.__context__)
        # urllib3 кладёт исходную ошибку в reason / args
        reason = getattr(current, 'reason', None)
        if isinstance(reason, BaseException):
            stack.append(reason)
        for arg in getattr(current, 'args', ()):
            if isinstance(arg, BaseException):
                stack.append(arg)


def classify_requests_exception(
    exc: Exception,
    url: Optional[str] = None
) -> PerfClientException:
    """
    Конвертировать requests.exceptions в наши исключения.

    Сначала используются структурные признаки (типы исключений requests
    и встроенные ConnectionRefusedError/ConnectionResetError в цепочке
    причин), затем текст сообщения.

    Args:
        exc: Исключение из requests
        url: URL запроса

    Returns:
        Наше исключение с правильной классификацией

    Examples:
        >>> exc = requests.exceptions.ReadTimeout()
        >>> our_exc = classify_requests_exception(exc, "https://example.com")
        >>> assert isinstance(our_exc, TimeoutError)
        >>> assert our_exc.retryable == True
    """
    if isinstance(exc, PerfClientException):
        return exc

    text = str(exc)

    if isinstance(exc, requests.exceptions.ConnectTimeout):
        return TimeoutError(f"Request timeout: {text}", url, timeout_type="connect")

    if isinstance(exc, requests.exceptions.Timeout):
        return TimeoutError(f"Request timeout: {text}", url, timeout_type="read")

    for cause in _chain(exc):
        if isinstance(cause, (ConnectionRefusedError, ConnectionResetError)):
            return ConnectionError(f"Connection error: {text}", url)

    if isinstance(exc, requests.exceptions.ChunkedEncodingError):
        return ConnectionError(f"Incomplete response: {text}", url)

    if is_transient_message(text):
        if "time" in text.lower() and "out" in text.lower():
            return TimeoutError(f"Request timeout: {text}", url)
        return ConnectionError(f"Connection error: {text}", url)

    return FatalError(f"Request failed: {text}" + (f" (url: {url})" if url else ""))


def is_transient_message(text: str) -> bool:
    """
    Текстовая эвристика для ошибок без структурного признака.

    Args:
        text: Текст ошибки

    Returns:
        True если текст похож на таймаут, отказ/сброс соединения
        или пустое тело ответа
    """
    lowered = text.lower()
    if "time" in lowered and "out" in lowered:
        return True
    if "connection" in lowered and ("refused" in lowered or "reset" in lowered):
        return True
    if "body length 0" in lowered:
        return True
    return False
