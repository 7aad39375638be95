"""Схемы ордеров.

Определяют закрытые перечисления типов ордеров и видов уведомлений, битовые
флаги ордера, неизменяемые записи и позиционные таблицы правил, по которым
декодер собирает записи из массивов биржи.
"""
from decimal import Decimal
from enum import IntFlag, StrEnum
from typing import Final

from pydantic import Field
from pydantic.dataclasses import dataclass as pdc_dataclass

from bfx_sdk.schemas.base import ResponseBase
from bfx_sdk.schemas.notification import NOTIFICATION_TRAILER, NotificationResponse
from bfx_sdk.toolkit.envelope import NotificationSchema
from bfx_sdk.toolkit.flags import BitflagCodec
from bfx_sdk.toolkit.positional import (
    DecodeSchema,
    Flags,
    Nullable,
    OptionalSentinel,
    Required,
    Skip,
    WireBool,
    WireDecimal,
    WireInt,
    WireStr,
)


class OrderKind(StrEnum):
    """Тип ордера в проводном представлении."""

    LIMIT = "LIMIT"
    EXCHANGE_LIMIT = "EXCHANGE LIMIT"
    MARKET = "MARKET"
    EXCHANGE_MARKET = "EXCHANGE MARKET"
    STOP = "STOP"
    EXCHANGE_STOP = "EXCHANGE STOP"
    STOP_LIMIT = "STOP LIMIT"
    EXCHANGE_STOP_LIMIT = "EXCHANGE STOP LIMIT"
    TRAILING_STOP = "TRAILING STOP"
    EXCHANGE_TRAILING_STOP = "EXCHANGE TRAILING STOP"
    FOK = "FOK"
    EXCHANGE_FOK = "EXCHANGE FOK"
    IOC = "IOC"
    EXCHANGE_IOC = "EXCHANGE IOC"


class OrderFlags(IntFlag):
    """Флаги ордера (см. таблицу flag values в документации Bitfinex)."""

    HIDDEN = 64
    CLOSE = 512
    REDUCE_ONLY = 1024
    POST_ONLY = 4096
    OCO = 16384
    NO_VAR_RATES = 524288


class OrderResponseKind(StrEnum):
    """Назначение уведомления об ордере."""

    NEW_ORDER_REQUEST = "on-req"
    UPDATE_ORDER_REQUEST = "ou-req"
    CANCEL_ORDER_REQUEST = "oc-req"
    UCA = "uca"
    FUNDING_NEW_ORDER_REQUEST = "fon-req"
    FUNDING_CANCEL_ORDER_REQUEST = "foc-req"


ORDER_FLAGS_CODEC: Final = BitflagCodec(OrderFlags)


@pdc_dataclass(slots=True, frozen=True)
class ActiveOrderResponse(ResponseBase):
    """Снимок ордера биржи."""

    id: int = Field(..., description="Идентификатор ордера")
    group_id: int | None = Field(..., description="Идентификатор группы ордеров")
    client_id: int = Field(..., description="Клиентский идентификатор ордера")
    symbol: str = Field(..., description="Пара (tBTCUSD, …)")
    creation_timestamp: int = Field(..., description="Время создания (мс)")
    update_timestamp: int = Field(..., description="Время обновления (мс)")
    amount: Decimal = Field(..., description="Остаток: положительный покупка, отрицательный продажа")
    amount_original: Decimal = Field(..., description="Исходный объём")
    order_type: OrderKind = Field(..., description="Тип ордера")
    previous_order_type: OrderKind | None = Field(..., description="Предыдущий тип ордера")
    mts_tif: int | None = Field(..., description="Время автоматической отмены (мс)")
    flags: OrderFlags = Field(..., description="Битовые флаги")
    order_status: str = Field(..., description="ACTIVE, EXECUTED @ PRICE(AMOUNT), CANCELED, …")
    price: Decimal = Field(..., description="Цена")
    price_avg: Decimal | None = Field(..., description="Средняя цена исполнения; 0 на проводе означает «нет»")
    price_trailing: Decimal | None = Field(..., description="Трейлинг-цена")
    price_aux_limit: Decimal | None = Field(..., description="Вспомогательная лимитная цена (STOP LIMIT)")
    notify: bool = Field(..., description="Уведомлять ли о событиях ордера")
    hidden: bool = Field(..., description="Скрытый ордер")
    placed_id: int | None = Field(..., description="Ордер, вызвавший размещение этого (OCO)")

    @property
    def is_buy(self) -> bool:
        """Положительный остаток означает покупку."""
        return self.amount > 0


ACTIVE_ORDER_SCHEMA: Final = DecodeSchema(
    ActiveOrderResponse,
    (
        Required("id", WireInt),
        Nullable("group_id", WireInt),
        Required("client_id", WireInt),
        Required("symbol", WireStr),
        Required("creation_timestamp", WireInt),
        Required("update_timestamp", WireInt),
        Required("amount", WireDecimal),
        Required("amount_original", WireDecimal),
        Required("order_type", OrderKind),
        Nullable("previous_order_type", OrderKind),
        Nullable("mts_tif", WireInt),
        Skip(),
        Flags("flags", ORDER_FLAGS_CODEC),
        Required("order_status", WireStr),
        Skip(),
        Skip(),
        Required("price", WireDecimal),
        OptionalSentinel("price_avg", WireDecimal),
        OptionalSentinel("price_trailing", WireDecimal),
        OptionalSentinel("price_aux_limit", WireDecimal),
        Skip(),
        Skip(),
        Skip(),
        Required("notify", WireBool),
        Required("hidden", WireBool),
        Nullable("placed_id", WireInt),
    ),
)

# В уведомлениях за placed_id следует ещё один зарезервированный слот (27 полей)
ORDER_SCHEMA: Final = ACTIVE_ORDER_SCHEMA.extend(Skip())


@pdc_dataclass(slots=True, frozen=True)
class OrderResponse(NotificationResponse):
    """Уведомление о размещении, изменении или отмене ордера."""

    kind: OrderResponseKind = Field(..., description="Назначение уведомления")
    order: ActiveOrderResponse = Field(..., description="Ордер из полезной нагрузки")


ORDER_NOTIFICATION: Final = NotificationSchema(
    record=OrderResponse,
    kind=OrderResponseKind,
    payload_field="order",
    payload=ORDER_SCHEMA,
    trailer=NOTIFICATION_TRAILER,
)
