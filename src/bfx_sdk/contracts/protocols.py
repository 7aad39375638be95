"""Контракты-протоколы сущностей, возвращаемых клиентом SDK.

Определяют минимально необходимый набор свойств для кошельков, ордеров,
уведомлений и ставок комиссий. Используются адаптером и приложением
для статической типизации и контрактного программирования.
"""

from decimal import Decimal
from typing import Protocol, runtime_checkable

from bfx_sdk.schemas.notification import ResponseStatus
from bfx_sdk.schemas.order import OrderFlags, OrderKind


@runtime_checkable
class WalletProtocol(Protocol):
    """Снимок баланса кошелька."""

    @property
    def currency(self) -> str:
        """Валюта кошелька."""
        ...

    @property
    def balance(self) -> Decimal:
        """Полный баланс."""
        ...

    @property
    def balance_available(self) -> Decimal | None:
        """Доступный баланс, если биржа его рассчитала."""
        ...


class ActiveOrderProtocol(Protocol):
    """Снимок ордера."""

    @property
    def id(self) -> int:
        """Идентификатор ордера на бирже."""
        ...

    @property
    def symbol(self) -> str:
        """Символ инструмента, например ``tBTCUSD``."""
        ...

    @property
    def amount(self) -> Decimal:
        """Остаток объёма: положительный покупка, отрицательный продажа."""
        ...

    @property
    def order_type(self) -> OrderKind:
        """Тип ордера."""
        ...

    @property
    def flags(self) -> OrderFlags:
        """Битовые флаги ордера."""
        ...

    @property
    def price(self) -> Decimal:
        """Цена ордера."""
        ...


class NotificationProtocol(Protocol):
    """Уведомление биржи о результате запроса на запись."""

    @property
    def mts(self) -> int:
        """Метка времени уведомления в миллисекундах Unix."""
        ...

    @property
    def message_id(self) -> int | None:
        """Идентификатор сообщения, если присвоен."""
        ...

    @property
    def status(self) -> ResponseStatus:
        """Статус обработки запроса."""
        ...

    @property
    def text(self) -> str:
        """Текст уведомления."""
        ...


class AccountFeesProtocol(Protocol):
    """Ставки комиссий аккаунта."""

    @property
    def maker_fee(self) -> Decimal:
        """Ставка мейкера."""
        ...

    @property
    def derivative_taker(self) -> Decimal:
        """Ставка тейкера для деривативов."""
        ...
