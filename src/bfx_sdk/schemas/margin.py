"""Схемы сводок маржи и финансирования аккаунта.

Ответы ``/auth/r/info/margin/<key>`` и ``/auth/r/info/funding/<symbol>``
начинаются с ключа сводки (``base`` или ``sym``), за которым для
символьных сводок следует символ, и заканчиваются вложенным массивом чисел.
"""
from decimal import Decimal
from typing import Final

from pydantic import Field
from pydantic.dataclasses import dataclass as pdc_dataclass

from bfx_sdk.schemas.base import ResponseBase
from bfx_sdk.toolkit.positional import DecodeSchema, Nested, Required, Skip, WireDecimal, WireStr

MARGIN_BASE_KEY: Final = "base"


@pdc_dataclass(frozen=True, slots=True)
class MarginBalanceResponse(ResponseBase):
    """Маржинальные показатели аккаунта в целом."""

    user_profit_loss: Decimal = Field(..., description="Нереализованная прибыль/убыток")
    user_swaps: Decimal = Field(..., description="Начисленные свопы")
    margin_balance: Decimal = Field(..., description="Баланс маржинального кошелька")
    margin_net: Decimal = Field(..., description="Баланс с учётом P/L")


@pdc_dataclass(frozen=True, slots=True)
class MarginBaseResponse(ResponseBase):
    """Сводка маржи по аккаунту (ключ ``base``)."""

    key: str = Field(...)
    margin: MarginBalanceResponse = Field(...)


MARGIN_BASE_SCHEMA: Final = DecodeSchema(
    MarginBaseResponse,
    (
        Required("key", WireStr),
        Nested(
            "margin",
            DecodeSchema(
                MarginBalanceResponse,
                (
                    Required("user_profit_loss", WireDecimal),
                    Required("user_swaps", WireDecimal),
                    Required("margin_balance", WireDecimal),
                    Required("margin_net", WireDecimal),
                ),
            ),
        ),
    ),
)


@pdc_dataclass(frozen=True, slots=True)
class SymbolMarginResponse(ResponseBase):
    """Доступный для торговли объём по одной паре."""

    tradable_balance: Decimal = Field(..., description="Доступно для торговли")
    gross_balance: Decimal = Field(..., description="Валовый баланс")
    buy: Decimal = Field(..., description="Максимальный объём покупки")
    sell: Decimal = Field(..., description="Максимальный объём продажи")


@pdc_dataclass(frozen=True, slots=True)
class MarginSymbolResponse(ResponseBase):
    """Сводка маржи по торговой паре (ключ ``sym``)."""

    key: str = Field(...)
    symbol: str = Field(..., description="Пара (tBTCUSD, …)")
    margin: SymbolMarginResponse = Field(...)


MARGIN_SYMBOL_SCHEMA: Final = DecodeSchema(
    MarginSymbolResponse,
    (
        Required("key", WireStr),
        Required("symbol", WireStr),
        Nested(
            "margin",
            DecodeSchema(
                SymbolMarginResponse,
                (
                    Required("tradable_balance", WireDecimal),
                    Required("gross_balance", WireDecimal),
                    Required("buy", WireDecimal),
                    Required("sell", WireDecimal),
                    Skip(),
                    Skip(),
                    Skip(),
                    Skip(),
                ),
            ),
        ),
    ),
)


@pdc_dataclass(frozen=True, slots=True)
class FundingStatsResponse(ResponseBase):
    """Средние доходность и срок займов по валюте финансирования."""

    yield_loan: Decimal = Field(..., description="Средняя ставка взятых займов")
    yield_lend: Decimal = Field(..., description="Средняя ставка выданных займов")
    duration_loan: Decimal = Field(..., description="Средний срок взятых займов (дни)")
    duration_lend: Decimal = Field(..., description="Средний срок выданных займов (дни)")


@pdc_dataclass(frozen=True, slots=True)
class FundingInfoResponse(ResponseBase):
    """Сводка финансирования по валюте (fUSD, …)."""

    key: str = Field(...)
    symbol: str = Field(...)
    funding: FundingStatsResponse = Field(...)


FUNDING_INFO_SCHEMA: Final = DecodeSchema(
    FundingInfoResponse,
    (
        Required("key", WireStr),
        Required("symbol", WireStr),
        Nested(
            "funding",
            DecodeSchema(
                FundingStatsResponse,
                (
                    Required("yield_loan", WireDecimal),
                    Required("yield_lend", WireDecimal),
                    Required("duration_loan", WireDecimal),
                    Required("duration_lend", WireDecimal),
                ),
            ),
        ),
    ),
)
