"""Порт клиента Bitfinex и его конфигурация.

Определяет неизменяемые учётные данные, конфигурацию клиента и интерфейс,
который реализует инфраструктурный адаптер: подписанные запросы к приватным
эндпоинтам и чтение публичных рыночных данных. Ответы возвращаются в виде
типизированных записей, декодированных из позиционных массивов.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass, field
from decimal import Decimal

from bfx_sdk.contracts.errors import SigningError
from bfx_sdk.contracts.protocols import (
    AccountFeesProtocol,
    ActiveOrderProtocol,
    NotificationProtocol,
    WalletProtocol,
)
from bfx_sdk.schemas.market import (
    BookEntryResponse,
    BookPrecision,
    CandleResponse,
    CandleSection,
    CandleTimeFrame,
    FundingBookEntryResponse,
    FundingTickerResponse,
    FundingTradeResponse,
    PublicTradeResponse,
    TickerResponse,
)
from bfx_sdk.schemas.margin import FundingInfoResponse, MarginBaseResponse, MarginSymbolResponse
from bfx_sdk.schemas.order import OrderFlags, OrderKind
from bfx_sdk.schemas.position import PositionResponse
from bfx_sdk.schemas.trade import LedgerEntryResponse, TradeResponse
from bfx_sdk.schemas.wallet import WalletKind
from bfx_sdk.toolkit.endpoints import AUTH_HOST, PUBLIC_HOST

DEFAULT_USER_AGENT = "bfx-sdk"
DEFAULT_NONCE_JITTER = 0.0005


@dataclass(frozen=True, slots=True)
class Credentials:
    """Пара ключей API; секрет не попадает в ``repr``."""

    api_key: str
    secret_key: str = field(repr=False)


@dataclass(frozen=True, slots=True)
class BfxClientConfig:
    """Конфигурация клиента Bitfinex.

    Содержит ключи API, идентификатор клиента для ``User-Agent``, таймаут
    HTTP, адреса хостов и верхнюю границу случайной задержки перед выборкой
    nonce (в секундах).
    """

    api_key: str | None = None
    api_secret: str | None = field(default=None, repr=False)
    user_agent: str = DEFAULT_USER_AGENT
    timeout: float = 10.0
    auth_host: str = AUTH_HOST
    public_host: str = PUBLIC_HOST
    nonce_jitter: float = DEFAULT_NONCE_JITTER

    @property
    def credentials(self) -> Credentials:
        """Вернуть учётные данные; без ключей подписанный вызов невозможен."""
        if not self.api_key or not self.api_secret:
            raise SigningError(reason="ключи API не заданы")
        return Credentials(api_key=self.api_key, secret_key=self.api_secret)


class CexIdentifiable(ABC):
    """Интерфейс для получения строкового идентификатора биржи."""

    @property
    @abstractmethod
    def cex_id(self) -> str:
        """Возвращает строковый идентификатор биржи."""
        ...


class BfxClientPort(CexIdentifiable, ABC):
    """Порт клиента Bitfinex: приватные (подписанные) и публичные операции."""

    def __init__(self, config: BfxClientConfig) -> None:
        """Инициализировать клиента.

        Параметры
        ----------
        config: BfxClientConfig
            Конфигурация подключения и параметров клиента.
        """
        self.config = config

    @abstractmethod
    async def get_wallets(self) -> Sequence[WalletProtocol]:
        """Получить балансы всех кошельков аккаунта."""
        ...

    @abstractmethod
    async def get_active_orders(self) -> Sequence[ActiveOrderProtocol]:
        """Получить активные ордера."""
        ...

    @abstractmethod
    async def get_orders_history(self, symbol: str | None = None) -> Sequence[ActiveOrderProtocol]:
        """Получить историю ордеров, при необходимости по одному ``symbol``."""
        ...

    @abstractmethod
    async def submit_order(
        self,
        symbol: str,
        order_type: OrderKind,
        amount: Decimal,
        price: Decimal | None = None,
        flags: OrderFlags = OrderFlags(0),
    ) -> NotificationProtocol:
        """Разместить ордер; положительный ``amount`` покупка, отрицательный продажа."""
        ...

    @abstractmethod
    async def cancel_order(self, order_id: int) -> NotificationProtocol:
        """Отменить ордер по идентификатору."""
        ...

    @abstractmethod
    async def transfer_between_wallets(
        self,
        source: WalletKind,
        destination: WalletKind,
        currency: str,
        amount: Decimal,
        currency_to: str | None = None,
    ) -> NotificationProtocol:
        """Перевести средства между кошельками аккаунта."""
        ...

    @abstractmethod
    async def get_account_fees(self) -> AccountFeesProtocol:
        """Получить ставки комиссий мейкера и тейкера."""
        ...

    @abstractmethod
    async def get_positions(self) -> Sequence[PositionResponse]:
        """Получить открытые позиции."""
        ...

    @abstractmethod
    async def get_trades_history(self, symbol: str) -> Sequence[TradeResponse]:
        """Получить историю сделок по ``symbol``."""
        ...

    @abstractmethod
    async def get_order_trades(self, symbol: str, order_id: int) -> Sequence[TradeResponse]:
        """Получить сделки, порождённые ордером ``order_id``."""
        ...

    @abstractmethod
    async def get_ledger(
        self, currency: str, start: int | None = None, end: int | None = None, limit: int | None = None
    ) -> Sequence[LedgerEntryResponse]:
        """Получить записи журнала движения средств по ``currency``."""
        ...

    @abstractmethod
    async def get_margin_base(self) -> MarginBaseResponse:
        """Получить сводку маржи по аккаунту."""
        ...

    @abstractmethod
    async def get_margin_symbol(self, symbol: str) -> MarginSymbolResponse:
        """Получить доступный для маржинальной торговли объём по паре ``symbol``."""
        ...

    @abstractmethod
    async def get_funding_info(self, symbol: str) -> FundingInfoResponse:
        """Получить доходность и сроки займов по валюте финансирования ``symbol``."""
        ...

    @abstractmethod
    async def get_ticker(self, symbol: str) -> TickerResponse:
        """Получить тикер торговой пары ``symbol``."""
        ...

    @abstractmethod
    async def get_candles(
        self,
        symbol: str,
        timeframe: CandleTimeFrame,
        section: CandleSection = CandleSection.HIST,
        funding_period: str | None = None,
    ) -> Sequence[CandleResponse]:
        """Получить свечи ``symbol``; для валюты финансирования нужен срок ``funding_period`` (``p30``)."""
        ...

    @abstractmethod
    async def get_book(self, symbol: str, precision: BookPrecision = BookPrecision.P0) -> Sequence[BookEntryResponse]:
        """Получить стакан торговой пары ``symbol``."""
        ...

    @abstractmethod
    async def get_public_trades(self, symbol: str) -> Sequence[PublicTradeResponse]:
        """Получить последние публичные сделки по ``symbol``."""
        ...

    @abstractmethod
    async def get_funding_ticker(self, symbol: str) -> FundingTickerResponse:
        """Получить тикер валюты финансирования ``symbol`` (fUSD, …)."""
        ...

    @abstractmethod
    async def get_funding_book(
        self, symbol: str, precision: BookPrecision = BookPrecision.P0
    ) -> Sequence[FundingBookEntryResponse]:
        """Получить стакан финансирования по ``symbol``."""
        ...

    @abstractmethod
    async def get_funding_trades(self, symbol: str) -> Sequence[FundingTradeResponse]:
        """Получить последние сделки финансирования по ``symbol``."""
        ...

    @abstractmethod
    async def close(self) -> None:
        """Закрыть сетевые ресурсы клиента и освободить связанные объекты."""
        ...
