# src/perf_client/utils/commands.py
"""
Запуск внешних команд и работа с файлами для perf драйверов.

Драйверы вызывают CLI инструменты (hzn, curl, jq) между API вызовами.
Ошибки запуска фатальны (EXEC_CMD_ERROR), ненулевой код выхода команды
только возвращается вызывающему.
"""

import os
import shutil
import subprocess
from dataclasses import dataclass
from typing import Optional, Union

from ..core.error_handler import ErrorHandler
from ..core.exceptions import ExitCode
from ..core.logging import LoggingConfig, PerfLogger

_default_logger: Optional[PerfLogger] = None


@dataclass(frozen=True)
class CommandResult:
    """
    Результат команды.

    Args:
        success: Команда завершилась с кодом 0
        stdout: Вывод команды
        stderr: Поток ошибок команды
        returncode: Код выхода
    """
    success: bool
    stdout: bytes = b""
    stderr: bytes = b""
    returncode: int = 0


def _logger_or_default(logger: Optional[PerfLogger]) -> PerfLogger:
    global _default_logger
    if logger is not None:
        return logger
    if _default_logger is None:
        _default_logger = PerfLogger(LoggingConfig(), name="perf_client.commands")
    return _default_logger


def run_cmd(
    command: str,
    *args: str,
    stdin: Optional[Union[bytes, str]] = None,
    logger: Optional[PerfLogger] = None
) -> CommandResult:
    """
    Выполнить команду и собрать stdout/stderr.

    Args:
        command: Исполняемый файл
        *args: Аргументы
        stdin: Данные для stdin (None - stdin не подключается)
        logger: Логгер прогона

    Returns:
        CommandResult

    Raises:
        PerfRunAborted: если команду не удалось запустить (EXEC_CMD_ERROR)

    Example:
        >>> result = run_cmd("hzn", "exchange", "node", "list")
        >>> result.success
        True
    """
    perf_logger = _logger_or_default(logger)

    cmd_str = " ".join((command,) + args)
    if stdin is not None:
        cmd_str += " < stdin"
        if isinstance(stdin, str):
            stdin = stdin.encode('utf-8')
    perf_logger.verbose(f"running: {cmd_str}")

    try:
        completed = subprocess.run(
            [command, *args],
            input=stdin,
            stdin=None if stdin is not None else subprocess.DEVNULL,
            capture_output=True,
            check=False,
        )
    except (OSError, ValueError) as e:
        ErrorHandler(perf_logger).fatal(ExitCode.EXEC_CMD_ERROR, f"Unable to start command {command}, error: {e}")

    return CommandResult(
        success=completed.returncode == 0,
        stdout=completed.stdout,
        stderr=completed.stderr,
        returncode=completed.returncode,
    )


def run_cmd_and_check(command: str, *args: str, logger: Optional[PerfLogger] = None) -> CommandResult:
    """
    run_cmd() без stdin; ненулевой код выхода фатален (EXEC_CMD_ERROR).
    """
    perf_logger = _logger_or_default(logger)
    result = run_cmd(command, *args, logger=perf_logger)
    if result.success:
        return result

    message = f"Command {command} failed, stderr: {result.stderr.decode('utf-8', errors='replace')}"
    if result.stdout:
        message += f"\nstdout: {result.stdout.decode('utf-8', errors='replace')}"
    ErrorHandler(perf_logger).fatal(ExitCode.EXEC_CMD_ERROR, message)


def confirm_cmds_exist(*commands: str, logger: Optional[PerfLogger] = None) -> None:
    """
    Убедиться, что нужные инструменты есть в PATH.

    Raises:
        PerfRunAborted: первый отсутствующий инструмент (CLI_INPUT_ERROR)
    """
    for command in commands:
        if shutil.which(command) is None:
            ErrorHandler(_logger_or_default(logger)).fatal(
                ExitCode.CLI_INPUT_ERROR,
                f"{command} is not installed but required, exiting"
            )


def make_dir(path: str, logger: Optional[PerfLogger] = None) -> None:
    """mkdir -p; ошибка фатальна (EXEC_CMD_ERROR)."""
    try:
        os.makedirs(path, mode=0o755, exist_ok=True)
    except OSError as e:
        ErrorHandler(_logger_or_default(logger)).fatal(
            ExitCode.EXEC_CMD_ERROR, f"could not create directory {path}: {e}"
        )


def remove_file(path: str, logger: Optional[PerfLogger] = None) -> None:
    """rm -rf; отсутствующий путь не ошибка."""
    try:
        if os.path.isdir(path) and not os.path.islink(path):
            shutil.rmtree(path)
        elif os.path.lexists(path):
            os.remove(path)
    except OSError as e:
        ErrorHandler(_logger_or_default(logger)).fatal(
            ExitCode.EXEC_CMD_ERROR, f"could not remove {path}: {e}"
        )
