"""
Retry engine для perf прогонов.

Включает:
- Классификацию ошибок транспорта и HTTP кодов (временная / фатальная)
- Конечный автомат попытки (AttemptState)
- Фиксированный интервал между попытками

Интервал намеренно не экспоненциальный: так ведут себя существующие
perf драйверы, и сравнение прогонов опирается на это поведение.
"""

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Optional

import requests

from .config import RetryConfig
from .error_handler import ErrorHandler
from .exceptions import (
    ExitCode,
    PerfClientException,
    ServerError,
    classify_requests_exception,
)
from .logging import PerfLogger

logger = logging.getLogger(__name__)

RETRYABLE_STATUS_CODES = frozenset({502, 503, 504})


class AttemptState(str, Enum):
    """
    Состояния одной логической операции.

    ATTEMPTING - начальное; RETRYING - ждём и повторяем;
    SUCCEEDED, FAILED_FATAL, FAILED_CONTINUABLE - конечные.
    SUCCEEDED означает только "ответ получен и его не надо повторять":
    проверка кода по списку допустимых выполняется отдельно.
    """
    ATTEMPTING = "attempting"
    RETRYING = "retrying"
    SUCCEEDED = "succeeded"
    FAILED_FATAL = "failed_fatal"
    FAILED_CONTINUABLE = "failed_continuable"

    @property
    def is_terminal(self) -> bool:
        return self in (AttemptState.SUCCEEDED, AttemptState.FAILED_FATAL, AttemptState.FAILED_CONTINUABLE)


@dataclass(frozen=True)
class RetryDecision:
    """
    Результат RetryClassifier.decide().

    Args:
        state: Следующее состояние автомата
        error: Классифицированная ошибка (если была)
        message: Сообщение, записанное в отчёт
    """
    state: AttemptState
    error: Optional[PerfClientException] = None
    message: str = ""

    @property
    def retry(self) -> bool:
        """Нужно повторить запрос."""
        return self.state is AttemptState.RETRYING

    @property
    def proceed(self) -> bool:
        """Ответ получен, можно переходить к проверке кода."""
        return self.state is AttemptState.SUCCEEDED


class RetryClassifier:
    """
    Решает, повторять ли запрос.

    Examples:
        >>> classifier = RetryClassifier(RetryConfig(max_retries=3), perf_logger)
        >>> decision = classifier.decide(response, None, attempt=1, continue_on_failure=True)
        >>> if decision.retry:
        ...     pass  # собрать новый запрос и отправить снова
    """

    def __init__(self, config: RetryConfig, perf_logger: PerfLogger):
        """
        Args:
            config: Конфигурация retry
            perf_logger: Логгер прогона (stdout + файл отчёта)
        """
        self.config = config
        self._logger = perf_logger
        self._errors = ErrorHandler(perf_logger)

    # ==================== Классификация ====================

    @staticmethod
    def is_retryable_error(error: BaseException) -> bool:
        """
        Временная ли ошибка транспорта.

        Таймауты, отказ или сброс соединения, пустой ответ сервера.
        """
        classified = classify_requests_exception(error) if isinstance(error, Exception) else None
        return bool(classified is not None and classified.retryable)

    @staticmethod
    def is_retryable_status(status_code: int) -> bool:
        """Временный ли HTTP код (502, 503, 504)."""
        return status_code in RETRYABLE_STATUS_CODES

    def can_retry(self, attempt: int) -> bool:
        """Остались ли попытки (attempt начинается с 1)."""
        return attempt <= self.config.max_retries

    def next_state(
        self,
        status_code: Optional[int],
        error: Optional[BaseException],
        attempt: int,
        continue_on_failure: bool
    ) -> AttemptState:
        """
        Переход автомата без побочных эффектов.

        Args:
            status_code: HTTP код ответа (None если ответа нет)
            error: Исключение транспорта (None если ответ получен)
            attempt: Номер текущей попытки, начиная с 1
            continue_on_failure: Режим continue (True) или fail-fast (False)

        Returns:
            Следующее состояние
        """
        failed = AttemptState.FAILED_CONTINUABLE if continue_on_failure else AttemptState.FAILED_FATAL

        if error is not None:
            if self.is_retryable_error(error) and self.can_retry(attempt):
                return AttemptState.RETRYING
            return failed

        if status_code is not None and self.is_retryable_status(status_code):
            if self.can_retry(attempt):
                return AttemptState.RETRYING
            return failed

        if status_code is None:
            return failed

        return AttemptState.SUCCEEDED

    # ==================== Решение ====================

    def decide(
        self,
        response: Optional[requests.Response],
        error: Optional[BaseException],
        attempt: int,
        continue_on_failure: bool,
        method: str = "",
        url: str = ""
    ) -> RetryDecision:
        """
        Решить судьбу попытки и выполнить побочные эффекты.

        - RETRYING: запись в отчёт, пауза sleep_seconds
        - FAILED_CONTINUABLE: запись ошибки в отчёт
        - FAILED_FATAL: запись ошибки в отчёт и PerfRunAborted(HTTP_ERROR)
        - SUCCEEDED: ничего

        Args:
            response: Ответ (если получен)
            error: Исключение транспорта (если было)
            attempt: Номер попытки, начиная с 1
            continue_on_failure: Режим continue
            method: HTTP метод для сообщений
            url: URL для сообщений

        Returns:
            RetryDecision

        Raises:
            PerfRunAborted: при FAILED_FATAL
        """
        status_code = response.status_code if response is not None and error is None else None
        state = self.next_state(status_code, error, attempt, continue_on_failure)

        if state is AttemptState.SUCCEEDED:
            return RetryDecision(state)

        classified: Optional[PerfClientException] = None
        if error is not None:
            classified = classify_requests_exception(error, url) if isinstance(error, Exception) else None
            detail = f"error from HTTP request {method} {url}: {error}"
        else:
            body = self._drain(response)
            classified = ServerError(status_code, url, body) if status_code is not None else None
            detail = f"bad HTTP code {status_code} from {method} {url}"
            if body:
                detail += f": {body}"

        if state is AttemptState.RETRYING:
            message = (
                f"{detail}. Attempt {attempt} so will sleep for "
                f"{self.config.sleep_seconds} s and retry..."
            )
            self._logger.warning(message, attempt=attempt, max_retries=self.config.max_retries)
            time.sleep(self.config.sleep_seconds)
            return RetryDecision(state, classified, message)

        if classified is not None and classified.retryable:
            message = f"{detail}. Over retry max of {self.config.max_retries}, returning error."
        else:
            message = detail

        self._errors.maybe_fatal(
            continue_on_failure,
            ExitCode.HTTP_ERROR,
            message,
            attempt=attempt,
        )
        return RetryDecision(state, classified, message)

    @staticmethod
    def _drain(response: Optional[requests.Response]) -> str:
        """Прочитать и закрыть тело ответа, который не будет использован."""
        if response is None:
            return ""
        try:
            return response.text
        except requests.exceptions.RequestException as e:
            logger.debug(f"Failed to read body of retryable response: {e}")
            return ""
        finally:
            response.close()
