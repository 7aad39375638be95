from decimal import Decimal
from enum import StrEnum
from typing import Final

from pydantic import Field
from pydantic.dataclasses import dataclass as pdc_dataclass

from bfx_sdk.schemas.base import ResponseBase
from bfx_sdk.schemas.notification import NOTIFICATION_TRAILER, NotificationResponse
from bfx_sdk.toolkit.envelope import NotificationSchema
from bfx_sdk.toolkit.positional import DecodeSchema, Nullable, Required, Skip, WireDecimal, WireInt, WireStr


class WalletKind(StrEnum):
    """Тип кошелька."""

    EXCHANGE = "exchange"
    MARGIN = "margin"
    FUNDING = "funding"


class WalletTransferKind(StrEnum):
    """Вид уведомления о переводе."""

    ACCOUNT_TRANSFER = "acc_tf"


@pdc_dataclass(frozen=True, slots=True)
class WalletResponse(ResponseBase):
    """Баланс одного кошелька."""

    wallet_type: WalletKind = Field(..., description="Тип кошелька")
    currency: str = Field(..., description="Валюта")
    balance: Decimal = Field(..., description="Полный баланс")
    unsettled_interest: Decimal = Field(..., description="Неурегулированные проценты")
    balance_available: Decimal | None = Field(..., description="Доступный баланс (null, если не рассчитан)")


WALLET_SCHEMA: Final = DecodeSchema(
    WalletResponse,
    (
        Required("wallet_type", WalletKind),
        Required("currency", WireStr),
        Required("balance", WireDecimal),
        Required("unsettled_interest", WireDecimal),
        Nullable("balance_available", WireDecimal),
    ),
)


@pdc_dataclass(frozen=True, slots=True)
class WalletTransferEntry(ResponseBase):
    """Перевод между кошельками из полезной нагрузки уведомления."""

    mts_update: int = Field(..., description="Время создания перевода (мс)")
    wallet_from: WalletKind = Field(..., description="Исходный кошелёк")
    wallet_to: WalletKind = Field(..., description="Кошелёк назначения")
    currency: str = Field(..., description="Валюта")
    currency_to: str | None = Field(..., description="Валюта назначения")
    amount: Decimal = Field(..., description="Сумма перевода")


WALLET_TRANSFER_SCHEMA: Final = DecodeSchema(
    WalletTransferEntry,
    (
        Required("mts_update", WireInt),
        Required("wallet_from", WalletKind),
        Required("wallet_to", WalletKind),
        Skip(),
        Required("currency", WireStr),
        Nullable("currency_to", WireStr),
        Skip(),
        Required("amount", WireDecimal),
    ),
)


@pdc_dataclass(frozen=True, slots=True)
class WalletTransferResponse(NotificationResponse):
    """Уведомление о переводе между кошельками."""

    kind: WalletTransferKind = Field(..., description="Вид уведомления")
    transfer: WalletTransferEntry = Field(..., description="Перевод из полезной нагрузки")


WALLET_TRANSFER_NOTIFICATION: Final = NotificationSchema(
    record=WalletTransferResponse,
    kind=WalletTransferKind,
    payload_field="transfer",
    payload=WALLET_TRANSFER_SCHEMA,
    trailer=NOTIFICATION_TRAILER,
)
