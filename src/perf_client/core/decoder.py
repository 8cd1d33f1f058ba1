"""
Декодирование тела успешного ответа.

Три формы результата:
- RAW_BYTES (или bytes) - тело как есть, без разбора
- JSON_TEXT (или str) - JSON, переформатированный с отступом 4
- любой другой тип - JSON, разобранный в этот тип через pydantic
"""

import json
from typing import Any, Optional

from pydantic import TypeAdapter, ValidationError

from .error_handler import ErrorHandler
from .exceptions import ExitCode

# Маркеры формы результата
RAW_BYTES = bytes
JSON_TEXT = str


class ResponseDecoder:
    """
    Преобразует байты тела ответа в нужную вызывающему форму.

    Ошибка разбора всегда фатальна, даже в continue режиме: испорченный
    payload нельзя молча представить вызывающему коду.

    Examples:
        >>> decoder = ResponseDecoder(error_handler)
        >>> decoder.decode(b'{"a": 1}', JSON_TEXT)
        '{\\n    "a": 1\\n}'
        >>> decoder.decode(b'{"nodes": []}', NodeList)
        NodeList(nodes=[])
    """

    def __init__(self, error_handler: ErrorHandler):
        self._errors = error_handler
        self._adapters = {}

    def decode(self, body: bytes, decode_as: Any, label: str = "") -> Optional[Any]:
        """
        Декодировать тело ответа.

        Args:
            body: Сырые байты тела
            decode_as: RAW_BYTES, JSON_TEXT, тип для pydantic или None
            label: "METHOD url" для сообщений об ошибках

        Returns:
            Декодированное значение или None если тело пустое
            (некоторые фронтенды сервиса отвечают пустым телом при ошибке
            авторизации) либо decode_as не задан

        Raises:
            PerfRunAborted: если тело не разбирается (HTTP_ERROR)
        """
        if not body or decode_as is None:
            return None

        if decode_as is RAW_BYTES:
            return bytes(body)

        if decode_as is JSON_TEXT:
            return self._reindent(body, label)

        return self._validate(body, decode_as, label)

    def _reindent(self, body: bytes, label: str) -> str:
        try:
            parsed = json.loads(body)
        except ValueError as e:
            self._errors.fatal(
                ExitCode.HTTP_ERROR,
                f"failed to unmarshal body response from {label}: {e}"
            )
        return json.dumps(parsed, indent=4, ensure_ascii=False)

    def _validate(self, body: bytes, decode_as: Any, label: str) -> Any:
        try:
            return self._adapter(decode_as).validate_json(body)
        except ValidationError as e:
            self._errors.fatal(
                ExitCode.HTTP_ERROR,
                f"failed to unmarshal body response from {label}: {e}"
            )

    def _adapter(self, decode_as: Any) -> TypeAdapter:
        try:
            return self._adapters[decode_as]
        except (KeyError, TypeError):
            pass
        adapter = TypeAdapter(decode_as)
        try:
            self._adapters[decode_as] = adapter
        except TypeError:
            # Нехешируемая аннотация, кешировать нельзя
            pass
        return adapter
