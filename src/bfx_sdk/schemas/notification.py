from enum import StrEnum
from typing import Final

from pydantic import Field
from pydantic.dataclasses import dataclass as pdc_dataclass

from bfx_sdk.schemas.base import ResponseBase
from bfx_sdk.toolkit.positional import FieldRule, Nullable, Required, WireInt, WireStr


class ResponseStatus(StrEnum):
    """Статус уведомления биржи."""

    SUCCESS = "SUCCESS"
    ERROR = "ERROR"
    FAILURE = "FAILURE"
    INFO = "INFO"


# Хвост конверта после слота полезной нагрузки: [code, status, text]
NOTIFICATION_TRAILER: Final[tuple[FieldRule, ...]] = (
    Nullable("code", WireInt),
    Required("status", ResponseStatus),
    Required("text", WireStr),
)


@pdc_dataclass(slots=True, frozen=True)
class NotificationResponse(ResponseBase):
    """Общие поля конверта уведомления."""

    mts: int = Field(..., description="Метка времени уведомления (мс)")
    message_id: int | None = Field(..., description="Уникальный идентификатор сообщения")
    code: int | None = Field(..., description="Код ошибки биржи, если есть")
    status: ResponseStatus = Field(..., description="Статус обработки запроса")
    text: str = Field(..., description="Текст уведомления")
