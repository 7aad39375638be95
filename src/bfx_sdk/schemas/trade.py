from decimal import Decimal
from typing import Final

from pydantic import Field
from pydantic.dataclasses import dataclass as pdc_dataclass

from bfx_sdk.schemas.base import ResponseBase
from bfx_sdk.schemas.order import OrderKind
from bfx_sdk.toolkit.positional import DecodeSchema, Nullable, Required, Skip, WireBool, WireDecimal, WireInt, WireStr


@pdc_dataclass(slots=True, frozen=True)
class TradeResponse(ResponseBase):
    """Исполнение ордера аккаунта."""

    id: int = Field(..., description="Идентификатор сделки")
    symbol: str = Field(..., description="Пара")
    execution_timestamp: int = Field(..., description="Время исполнения (мс)")
    order_id: int = Field(..., description="Ордер, породивший сделку")
    execution_amount: Decimal = Field(..., description="Исполненный объём")
    execution_price: Decimal = Field(..., description="Цена исполнения")
    order_type: OrderKind | None = Field(..., description="Тип ордера")
    order_price: Decimal | None = Field(..., description="Цена ордера")
    is_maker: bool = Field(..., description="1 мейкер, -1 тейкер")
    fee: Decimal = Field(..., description="Комиссия")
    fee_currency: str = Field(..., description="Валюта комиссии")


TRADE_SCHEMA: Final = DecodeSchema(
    TradeResponse,
    (
        Required("id", WireInt),
        Required("symbol", WireStr),
        Required("execution_timestamp", WireInt),
        Required("order_id", WireInt),
        Required("execution_amount", WireDecimal),
        Required("execution_price", WireDecimal),
        Nullable("order_type", OrderKind),
        Nullable("order_price", WireDecimal),
        Required("is_maker", WireBool),
        Required("fee", WireDecimal),
        Required("fee_currency", WireStr),
    ),
)


@pdc_dataclass(slots=True, frozen=True)
class LedgerEntryResponse(ResponseBase):
    """Запись журнала движения средств."""

    id: int = Field(..., description="Идентификатор записи")
    currency: str = Field(..., description="Валюта")
    mts: int = Field(..., description="Время записи (мс)")
    amount: Decimal = Field(..., description="Изменение баланса")
    balance: Decimal = Field(..., description="Баланс после изменения")
    description: str = Field(..., description="Описание операции")


LEDGER_ENTRY_SCHEMA: Final = DecodeSchema(
    LedgerEntryResponse,
    (
        Required("id", WireInt),
        Required("currency", WireStr),
        Skip(),
        Required("mts", WireInt),
        Skip(),
        Required("amount", WireDecimal),
        Required("balance", WireDecimal),
        Skip(),
        Required("description", WireStr),
    ),
)
