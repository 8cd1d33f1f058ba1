# src/perf_client/core/error_handler.py

from typing import Any

from .exceptions import PerfRunAborted
from .logging import PerfLogger


class ErrorHandler:
    """
    Сообщает об ошибках в двух режимах.

    - fail-fast: записать в stdout и отчёт, затем прервать прогон
      (PerfRunAborted -> завершение процесса с кодом выхода)
    - continue: записать в stdout и отчёт и вернуть управление вызывающему
    """

    def __init__(self, logger: PerfLogger):
        self._logger = logger

    def error(self, message: str, **kwargs: Any) -> None:
        """Записывает ошибку, выполнение продолжается."""
        self._logger.error(message, **kwargs)

    def fatal(self, exit_code: int, message: str, **kwargs: Any) -> None:
        """
        Записывает ошибку и прерывает прогон.

        Raises:
            PerfRunAborted: всегда, с кодом exit_code
        """
        self._logger.error(message, exit_code=int(exit_code), **kwargs)
        raise PerfRunAborted(exit_code, message)

    def maybe_fatal(self, do_continue: bool, exit_code: int, message: str, **kwargs: Any) -> None:
        """
        fatal() в fail-fast режиме, error() в continue режиме.

        Args:
            do_continue: True - только записать ошибку
            exit_code: Код выхода для fail-fast режима
            message: Сообщение
        """
        if do_continue:
            self.error(message, **kwargs)
        else:
            self.fatal(exit_code, message, **kwargs)
