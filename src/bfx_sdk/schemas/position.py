from decimal import Decimal
from typing import Final

from pydantic import Field
from pydantic.dataclasses import dataclass as pdc_dataclass

from bfx_sdk.schemas.base import ResponseBase
from bfx_sdk.toolkit.positional import (
    CoercibleNumeric,
    DecodeSchema,
    Nested,
    Nullable,
    Required,
    Skip,
    WireDecimal,
    WireInt,
    WireStr,
)


@pdc_dataclass(slots=True, frozen=True)
class PositionMetaResponse(ResponseBase):
    """Метаданные позиции: причина и сделка, изменившая позицию."""

    reason: str = Field(..., description="Причина изменения позиции")
    order_id: int = Field(..., description="Ордер, изменивший позицию")
    order_id_oppo: int = Field(..., description="Встречный ордер")
    liq_stage: str | None = Field(..., description="Стадия ликвидации")
    trade_price: Decimal = Field(..., description="Цена сделки (строкой на проводе)")
    trade_amount: Decimal = Field(..., description="Объём сделки (строкой на проводе)")


POSITION_META_SCHEMA: Final = DecodeSchema(
    PositionMetaResponse,
    (
        Required("reason", WireStr),
        Required("order_id", WireInt),
        Required("order_id_oppo", WireInt),
        Nullable("liq_stage", WireStr),
        CoercibleNumeric("trade_price", Decimal),
        CoercibleNumeric("trade_amount", Decimal),
    ),
)


@pdc_dataclass(slots=True, frozen=True)
class PositionResponse(ResponseBase):
    """Снимок открытой позиции."""

    symbol: str = Field(..., description="Пара (tBTCUSD, …)")
    status: str = Field(..., description="ACTIVE или CLOSED")
    amount: Decimal = Field(..., description="Размер: положительный лонг, отрицательный шорт")
    base_price: Decimal = Field(..., description="Цена входа")
    margin_funding: Decimal = Field(..., description="Начисленное финансирование маржи")
    margin_funding_type: int = Field(..., description="0 ежедневное, 1 срочное")
    pl: Decimal = Field(..., description="Прибыль/убыток")
    pl_perc: Decimal = Field(..., description="Прибыль/убыток в процентах")
    price_liq: Decimal = Field(..., description="Цена ликвидации")
    leverage: Decimal = Field(..., description="Кредитное плечо")
    position_id: int = Field(..., description="Идентификатор позиции")
    mts_create: int | None = Field(..., description="Время открытия (мс)")
    mts_update: int | None = Field(..., description="Время обновления (мс)")
    position_type: int = Field(..., description="0 маржинальная, 1 деривативная")
    collateral: Decimal = Field(..., description="Залог")
    collateral_min: Decimal = Field(..., description="Минимальный залог")
    meta: PositionMetaResponse | None = Field(..., description="Метаданные позиции")


POSITION_SCHEMA: Final = DecodeSchema(
    PositionResponse,
    (
        Required("symbol", WireStr),
        Required("status", WireStr),
        Required("amount", WireDecimal),
        Required("base_price", WireDecimal),
        Required("margin_funding", WireDecimal),
        Required("margin_funding_type", WireInt),
        Required("pl", WireDecimal),
        Required("pl_perc", WireDecimal),
        Required("price_liq", WireDecimal),
        Required("leverage", WireDecimal),
        Skip(),
        Required("position_id", WireInt),
        Nullable("mts_create", WireInt),
        Nullable("mts_update", WireInt),
        Skip(),
        Required("position_type", WireInt),
        Skip(),
        Required("collateral", WireDecimal),
        Required("collateral_min", WireDecimal),
        Nested("meta", POSITION_META_SCHEMA, nullable=True, allow_object=True),
    ),
)
