"""Иерархия исключений SDK.

Разделение исключений по слоям:
- протокольные ошибки (часы, подпись, декодирование позиционных массивов)
  возникают внутри SDK и не зависят от сети;
- транспортные ошибки отражают ответ биржи или сбой HTTP-соединения и
  пробрасываются вызывающему коду без повторов.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Коды ошибок SDK."""

    UNKNOWN = "unknown"
    TIMEOUT = "timeout"
    NETWORK = "network"
    EXCHANGE_ERROR = "exchange_error"
    VALIDATION = "validation"
    CLOCK = "clock"
    SIGNING = "signing"
    DECODE = "decode"
    INVALID_FLAGS = "invalid_flags"
    UNAUTHORIZED = "unauthorized"
    INTERNAL_SERVER = "internal_server"
    UNKNOWN_RESPONSE = "unknown_response"


@dataclass(slots=True, kw_only=True)
class SdkError(Exception):
    """Базовая ошибка SDK.

    Атрибуты
    ---------
    error_code: ErrorCode
        Машиночитаемый код класса ошибки для унификации обработки.
    retryable: bool
        Признак возможности безопасного повтора операции (со свежим nonce).
    """

    error_code: ErrorCode = ErrorCode.UNKNOWN
    retryable: bool = False


@dataclass(slots=True)
class ClockError(SdkError):
    """Системные часы вернули время раньше эпохи Unix."""

    reading: int = 0

    def __post_init__(self) -> None:
        """Установить код ошибки часов."""
        self.error_code = ErrorCode.CLOCK

    def __str__(self) -> str:
        """Вернуть человекочитаемое представление ошибки."""
        return f"Часы вернули время до эпохи: {self.reading} нс"


@dataclass(slots=True)
class SigningError(SdkError):
    """HMAC-примитив отверг ключ или ключи API не заданы."""

    reason: str = ""

    def __post_init__(self) -> None:
        """Установить код ошибки подписи."""
        self.error_code = ErrorCode.SIGNING

    def __str__(self) -> str:
        """Вернуть человекочитаемое представление ошибки."""
        return f"Не удалось подписать запрос: {self.reason}"


@dataclass(slots=True)
class DecodeError(SdkError):
    """Позиционный массив не соответствует схеме записи.

    field: путь поля через точку (``order.price``), index: позиция элемента
    во входном массиве, reason: описание нарушения.
    """

    field: str | None = None
    index: int | None = None
    reason: str = ""

    def __post_init__(self) -> None:
        """Установить код ошибки декодирования."""
        self.error_code = ErrorCode.DECODE

    def __str__(self) -> str:
        """Вернуть человекочитаемое представление ошибки."""
        where = self.field if self.field is not None else "<record>"
        if self.index is not None:
            where = f"{where}[{self.index}]"
        return f"Ошибка декодирования {where}: {self.reason}"


@dataclass(slots=True)
class InvalidFlagsError(DecodeError):
    """Значение битовых флагов имеет неверный тип или неизвестные биты."""

    value: object = None

    def __post_init__(self) -> None:
        """Установить код ошибки флагов."""
        self.error_code = ErrorCode.INVALID_FLAGS


@dataclass(slots=True)
class ExchangeClientError(SdkError):
    """Ошибки клиента биржи (HTTP и пр.).

    exchange: идентификатор биржи, symbol: торговый символ, method: имя метода SDK.
    Значения полей могут быть не заданы, если контекст недоступен.
    """

    exchange: str | None = None
    symbol: str | None = None
    method: str | None = None


@dataclass(slots=True)
class RetryableExchangeError(ExchangeClientError):
    """Временная (транзиентная) ошибка, попытку можно повторить позднее."""

    retryable: bool = True


@dataclass(slots=True)
class PermanentExchangeError(ExchangeClientError):
    """Постоянная ошибка, повтор не имеет смысла без изменения условий."""


@dataclass(slots=True)
class UnknownExchangeError(ExchangeClientError):
    """Неопознанная ошибка внешней библиотеки/сети."""

    def __post_init__(self) -> None:
        """Установить код ошибки по умолчанию для неизвестной ошибки."""
        self.error_code = ErrorCode.UNKNOWN


@dataclass(slots=True)
class TransportError(ExchangeClientError):
    """Биржа ответила статусом, отличным от 200; тело ответа сохраняется."""

    status_code: int = 0
    body: str = ""


@dataclass(slots=True)
class UnauthorizedError(TransportError):
    """Запрос отклонён как неавторизованный (HTTP 401)."""

    def __post_init__(self) -> None:
        """Установить код ошибки авторизации."""
        self.error_code = ErrorCode.UNAUTHORIZED

    def __str__(self) -> str:
        """Вернуть человекочитаемое представление ошибки."""
        return f"Неавторизованный запрос: {self.body}"


@dataclass(slots=True)
class InternalServerError(TransportError):
    """Внутренняя ошибка или недоступность сервера биржи (HTTP 5xx)."""

    retryable: bool = True

    def __post_init__(self) -> None:
        """Установить код внутренней ошибки сервера."""
        self.error_code = ErrorCode.INTERNAL_SERVER

    def __str__(self) -> str:
        """Вернуть человекочитаемое представление ошибки."""
        return f"Ошибка сервера {self.status_code}: {self.body}"


@dataclass(slots=True)
class UnknownResponseError(TransportError):
    """Ответ с неожиданным статусом HTTP."""

    def __post_init__(self) -> None:
        """Установить код неизвестного ответа."""
        self.error_code = ErrorCode.UNKNOWN_RESPONSE

    def __str__(self) -> str:
        """Вернуть человекочитаемое представление ошибки."""
        return f"Получен ответ {self.status_code}: {self.body}"
