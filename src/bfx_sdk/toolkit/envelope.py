"""Разбор конверта уведомлений Bitfinex.

Ответы на запросы записи (создание и отмена ордера, перевод между кошельками)
приходят в конверте ``[mts, kind, message_id, _, payload, code, status, text]``.
Слот ``payload`` бывает двух форм: сама последовательность полей записи или
одноэлементный список, оборачивающий её (одиночный ордер против пакетных и
устаревших ответов). Форма определяется на каждом вызове заново, а не по
типу записи.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Final

from bfx_sdk.contracts.errors import DecodeError
from bfx_sdk.toolkit.positional import (
    DecodeSchema,
    FieldRule,
    Nullable,
    Required,
    WireInt,
    WireStr,
    build_record,
    decode_fields,
    decode_record,
)

PAYLOAD_INDEX: Final = 4

HEADER_RULES: Final[tuple[FieldRule, ...]] = (
    Required("mts", WireInt),
    Required("kind", WireStr),
    Nullable("message_id", WireInt),
)


def is_double_nested(payload: list[Any]) -> bool:
    """Проверить, обёрнута ли последовательность полей в дополнительный список."""
    if not payload:
        raise DecodeError(field="payload", index=PAYLOAD_INDEX, reason="пустой массив полезной нагрузки")
    return isinstance(payload[0], list)


def unwrap_payload(payload: object) -> list[Any]:
    """Вернуть плоскую последовательность полей из слота ``payload``.

    ``[[f0, f1, ...]]`` ➜ ``[f0, f1, ...]`` (двойная вложенность);
    ``[f0, f1, ...]`` возвращается как есть (одинарная).
    """
    if not isinstance(payload, list):
        raise DecodeError(
            field="payload",
            index=PAYLOAD_INDEX,
            reason=f"ожидался массив полезной нагрузки, получено {type(payload).__name__}",
        )
    if is_double_nested(payload):
        return payload[0]
    return payload


def decode_envelope(
    array: object, header: tuple[FieldRule, ...] = HEADER_RULES
) -> tuple[dict[str, Any], list[Any]]:
    """Прочитать поля конверта по фиксированным индексам и развернуть полезную нагрузку.

    Возвращает пару (поля конверта, плоская последовательность полей записи).
    """
    outer = decode_fields(header, array)
    items: list[Any] = array  # type: ignore[assignment]
    if len(items) <= PAYLOAD_INDEX:
        raise DecodeError(
            field="payload", index=PAYLOAD_INDEX, reason=f"конверт из {len(items)} элементов без полезной нагрузки"
        )
    return outer, unwrap_payload(items[PAYLOAD_INDEX])


@dataclass(frozen=True, slots=True)
class NotificationSchema:
    """Схема уведомления: тип записи, перечисление видов, схема полезной нагрузки и хвост конверта."""

    record: type[Any]
    kind: type[Enum]
    payload_field: str
    payload: DecodeSchema
    trailer: tuple[FieldRule, ...]

    @property
    def header(self) -> tuple[FieldRule, ...]:
        """Правила заголовка с закрытым перечислением видов уведомления."""
        return (
            Required("mts", WireInt),
            Required("kind", self.kind),
            Nullable("message_id", WireInt),
        )


def decode_notification(schema: NotificationSchema, array: object) -> Any:  # noqa: ANN401
    """Декодировать уведомление целиком: заголовок, запись из полезной нагрузки и хвост."""
    values, inner = decode_envelope(array, schema.header)
    values[schema.payload_field] = decode_record(
        schema.payload, inner, path=schema.payload_field, index=PAYLOAD_INDEX
    )
    values |= decode_fields(schema.trailer, array, start=PAYLOAD_INDEX + 1)
    return build_record(schema.record, values)
