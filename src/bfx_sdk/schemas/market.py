"""Схемы публичных рыночных данных.

Тикер, свечи, стакан и лента сделок торговых пар и валют финансирования
(символы ``t...`` и ``f...``). Публичные ответы не
подписываются и не заворачиваются в конверт уведомления: это плоские
позиционные массивы либо массивы таких массивов.
"""
from decimal import Decimal
from enum import StrEnum
from typing import Final

from pydantic import Field
from pydantic.dataclasses import dataclass as pdc_dataclass

from bfx_sdk.schemas.base import ResponseBase
from bfx_sdk.toolkit.positional import DecodeSchema, Required, WireDecimal, WireInt


class CandleTimeFrame(StrEnum):
    """Интервал свечи."""

    ONE_MINUTE = "1m"
    FIVE_MINUTES = "5m"
    FIFTEEN_MINUTES = "15m"
    THIRTY_MINUTES = "30m"
    ONE_HOUR = "1h"
    THREE_HOURS = "3h"
    SIX_HOURS = "6h"
    TWELVE_HOURS = "12h"
    ONE_DAY = "1D"
    ONE_WEEK = "7D"
    TWO_WEEKS = "14D"


class CandleSection(StrEnum):
    """Последняя свеча или история."""

    LAST = "last"
    HIST = "hist"


class BookPrecision(StrEnum):
    """Уровень агрегации стакана."""

    P0 = "P0"
    P1 = "P1"
    P2 = "P2"
    P3 = "P3"
    P4 = "P4"


@pdc_dataclass(slots=True, frozen=True)
class TickerResponse(ResponseBase):
    """Тикер торговой пары."""

    bid: Decimal = Field(...)
    bid_size: Decimal = Field(...)
    ask: Decimal = Field(...)
    ask_size: Decimal = Field(...)
    daily_change: Decimal = Field(...)
    daily_change_relative: Decimal = Field(..., description="Доля, 0.05 = 5%")
    last_price: Decimal = Field(..., description="Последняя цена сделки")
    volume: Decimal = Field(...)
    high: Decimal = Field(...)
    low: Decimal = Field(...)


TICKER_SCHEMA: Final = DecodeSchema(
    TickerResponse,
    tuple(
        Required(name, WireDecimal)
        for name in (
            "bid",
            "bid_size",
            "ask",
            "ask_size",
            "daily_change",
            "daily_change_relative",
            "last_price",
            "volume",
            "high",
            "low",
        )
    ),
)


@pdc_dataclass(slots=True, frozen=True)
class CandleResponse(ResponseBase):
    """Свеча OHLCV."""

    mts: int = Field(..., description="Начало интервала (мс)")
    open: Decimal = Field(...)
    close: Decimal = Field(...)
    high: Decimal = Field(...)
    low: Decimal = Field(...)
    volume: Decimal = Field(...)


CANDLE_SCHEMA: Final = DecodeSchema(
    CandleResponse,
    (
        Required("mts", WireInt),
        Required("open", WireDecimal),
        Required("close", WireDecimal),
        Required("high", WireDecimal),
        Required("low", WireDecimal),
        Required("volume", WireDecimal),
    ),
)


@pdc_dataclass(slots=True, frozen=True)
class BookEntryResponse(ResponseBase):
    """Уровень стакана: amount > 0 заявка на покупку, иначе на продажу."""

    price: Decimal = Field(...)
    count: int = Field(..., description="Число ордеров на уровне")
    amount: Decimal = Field(...)

    @property
    def is_bid(self) -> bool:
        """Уровень относится к покупкам."""
        return self.amount > 0


BOOK_ENTRY_SCHEMA: Final = DecodeSchema(
    BookEntryResponse,
    (
        Required("price", WireDecimal),
        Required("count", WireInt),
        Required("amount", WireDecimal),
    ),
)


@pdc_dataclass(slots=True, frozen=True)
class PublicTradeResponse(ResponseBase):
    """Публичная сделка по торговой паре."""

    id: int = Field(...)
    mts: int = Field(...)
    amount: Decimal = Field(..., description="Положительный покупка, отрицательный продажа")
    price: Decimal = Field(...)


PUBLIC_TRADE_SCHEMA: Final = DecodeSchema(
    PublicTradeResponse,
    (
        Required("id", WireInt),
        Required("mts", WireInt),
        Required("amount", WireDecimal),
        Required("price", WireDecimal),
    ),
)


@pdc_dataclass(slots=True, frozen=True)
class FundingTickerResponse(ResponseBase):
    """Тикер валюты финансирования (fUSD, …)."""

    frr: Decimal = Field(..., description="Flash Return Rate, ставка в день")
    bid: Decimal = Field(...)
    bid_period: int = Field(..., description="Срок лучшей заявки (дни)")
    bid_size: Decimal = Field(...)
    ask: Decimal = Field(...)
    ask_period: int = Field(..., description="Срок лучшего предложения (дни)")
    ask_size: Decimal = Field(...)
    daily_change: Decimal = Field(...)
    daily_change_relative: Decimal = Field(...)
    last_price: Decimal = Field(...)
    volume: Decimal = Field(...)
    high: Decimal = Field(...)
    low: Decimal = Field(...)


FUNDING_TICKER_SCHEMA: Final = DecodeSchema(
    FundingTickerResponse,
    (
        Required("frr", WireDecimal),
        Required("bid", WireDecimal),
        Required("bid_period", WireInt),
        Required("bid_size", WireDecimal),
        Required("ask", WireDecimal),
        Required("ask_period", WireInt),
        Required("ask_size", WireDecimal),
        Required("daily_change", WireDecimal),
        Required("daily_change_relative", WireDecimal),
        Required("last_price", WireDecimal),
        Required("volume", WireDecimal),
        Required("high", WireDecimal),
        Required("low", WireDecimal),
    ),
)


@pdc_dataclass(slots=True, frozen=True)
class FundingBookEntryResponse(ResponseBase):
    """Уровень стакана финансирования: amount < 0 заявка на заём, иначе предложение."""

    rate: Decimal = Field(..., description="Ставка в день")
    period: int = Field(..., description="Срок (дни)")
    count: int = Field(...)
    amount: Decimal = Field(...)

    @property
    def is_bid(self) -> bool:
        return self.amount < 0


FUNDING_BOOK_ENTRY_SCHEMA: Final = DecodeSchema(
    FundingBookEntryResponse,
    (
        Required("rate", WireDecimal),
        Required("period", WireInt),
        Required("count", WireInt),
        Required("amount", WireDecimal),
    ),
)


@pdc_dataclass(slots=True, frozen=True)
class FundingTradeResponse(ResponseBase):
    """Публичная сделка по валюте финансирования."""

    id: int = Field(...)
    mts: int = Field(...)
    amount: Decimal = Field(...)
    rate: Decimal = Field(...)
    period: int = Field(..., description="Срок займа (дни)")


FUNDING_TRADE_SCHEMA: Final = DecodeSchema(
    FundingTradeResponse,
    (
        Required("id", WireInt),
        Required("mts", WireInt),
        Required("amount", WireDecimal),
        Required("rate", WireDecimal),
        Required("period", WireInt),
    ),
)
