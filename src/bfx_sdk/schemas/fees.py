"""Схема ставок комиссий аккаунта.

Ответ ``/auth/r/summary`` содержит в позиции 4 таблицу из двух строк по шесть
колонок: строка 0 с комиссиями мейкера, строка 1 с комиссиями тейкера.
"""
from decimal import Decimal
from typing import Final

from pydantic import Field
from pydantic.dataclasses import dataclass as pdc_dataclass

from bfx_sdk.schemas.base import ResponseBase
from bfx_sdk.toolkit.positional import DecodeSchema, Nested, Required, Skip, WireDecimal


@pdc_dataclass(frozen=True, slots=True)
class MakerFeesResponse(ResponseBase):
    """Строка комиссий мейкера."""

    maker_fee: Decimal = Field(..., description="Ставка мейкера")
    derivative_rebate: Decimal = Field(..., description="Ребейт мейкера на деривативах")


@pdc_dataclass(frozen=True, slots=True)
class TakerFeesResponse(ResponseBase):
    """Строка комиссий тейкера."""

    taker_to_crypto: Decimal = Field(..., description="Крипто ➜ крипто")
    taker_to_stable: Decimal = Field(..., description="Крипто ➜ стейблкоин")
    taker_to_fiat: Decimal = Field(..., description="Крипто ➜ фиат")
    derivative_taker: Decimal = Field(..., description="Тейкер на деривативах")


@pdc_dataclass(frozen=True, slots=True)
class FeeTableResponse(ResponseBase):
    """Таблица из двух строк: мейкер и тейкер."""

    maker: MakerFeesResponse = Field(...)
    taker: TakerFeesResponse = Field(...)


@pdc_dataclass(frozen=True, slots=True)
class AccountFeesResponse(ResponseBase):
    """Ставки комиссий аккаунта."""

    fees: FeeTableResponse = Field(...)

    @property
    def maker_fee(self) -> Decimal:
        """Ставка мейкера."""
        return self.fees.maker.maker_fee

    @property
    def derivative_rebate(self) -> Decimal:
        """Ребейт мейкера на деривативах."""
        return self.fees.maker.derivative_rebate

    @property
    def taker_to_crypto(self) -> Decimal:
        """Ставка тейкера крипто ➜ крипто."""
        return self.fees.taker.taker_to_crypto

    @property
    def taker_to_stable(self) -> Decimal:
        """Ставка тейкера крипто ➜ стейблкоин."""
        return self.fees.taker.taker_to_stable

    @property
    def taker_to_fiat(self) -> Decimal:
        """Ставка тейкера крипто ➜ фиат."""
        return self.fees.taker.taker_to_fiat

    @property
    def derivative_taker(self) -> Decimal:
        """Ставка тейкера на деривативах."""
        return self.fees.taker.derivative_taker


MAKER_FEES_SCHEMA: Final = DecodeSchema(
    MakerFeesResponse,
    (
        Required("maker_fee", WireDecimal),
        Skip(),
        Skip(),
        Skip(),
        Skip(),
        Required("derivative_rebate", WireDecimal),
    ),
)

TAKER_FEES_SCHEMA: Final = DecodeSchema(
    TakerFeesResponse,
    (
        Required("taker_to_crypto", WireDecimal),
        Required("taker_to_stable", WireDecimal),
        Required("taker_to_fiat", WireDecimal),
        Skip(),
        Skip(),
        Required("derivative_taker", WireDecimal),
    ),
)

ACCOUNT_FEES_SCHEMA: Final = DecodeSchema(
    AccountFeesResponse,
    (
        Skip(),
        Skip(),
        Skip(),
        Skip(),
        Nested(
            "fees",
            DecodeSchema(
                FeeTableResponse,
                (
                    Nested("maker", MAKER_FEES_SCHEMA),
                    Nested("taker", TAKER_FEES_SCHEMA),
                ),
            ),
        ),
    ),
)
