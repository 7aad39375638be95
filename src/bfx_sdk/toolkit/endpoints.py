"""Разрешение адресов эндпоинтов Bitfinex.

Приватные эндпоинты живут на ``api.bitfinex.com`` в трёх областях
(``/v2/auth/r`` чтение, ``/v2/auth/w`` запись, ``/v2/auth/calc`` расчёты);
в подпись входит путь без хоста с префиксом ``/api``. Публичные эндпоинты
живут на ``api-pub.bitfinex.com`` под ``/v2`` и не подписываются.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Final

from bfx_sdk.schemas.market import BookPrecision, CandleSection, CandleTimeFrame

AUTH_HOST: Final = "https://api.bitfinex.com"
PUBLIC_HOST: Final = "https://api-pub.bitfinex.com"
PUBLIC_PATH: Final = "/v2"
SIGNATURE_PREFIX: Final = "/api"


class AuthScope(StrEnum):
    """Область приватного эндпоинта."""

    READ = "/v2/auth/r"
    WRITE = "/v2/auth/w"
    CALC = "/v2/auth/calc"


@dataclass(frozen=True, slots=True)
class AuthenticatedEndpoint:
    """Приватный эндпоинт: путь без хоста, например ``/v2/auth/r/wallets``."""

    scope: AuthScope
    resource: str

    @property
    def path(self) -> str:
        return f"{self.scope}/{self.resource}"

    @property
    def canonical_path(self) -> str:
        """Путь в том виде, в каком он входит в подписываемую строку."""
        return f"{SIGNATURE_PREFIX}{self.path}"

    def url(self, host: str = AUTH_HOST) -> str:
        return f"{host.rstrip('/')}{self.path}"

    @classmethod
    def wallets(cls) -> AuthenticatedEndpoint:
        return cls(AuthScope.READ, "wallets")

    @classmethod
    def active_orders(cls) -> AuthenticatedEndpoint:
        return cls(AuthScope.READ, "orders")

    @classmethod
    def orders_history(cls, symbol: str | None = None) -> AuthenticatedEndpoint:
        """История ордеров по всем символам или по одному ``symbol``."""
        if symbol is None:
            return cls(AuthScope.READ, "orders/hist")
        return cls(AuthScope.READ, f"orders/{symbol}/hist")

    @classmethod
    def order_trades(cls, symbol: str, order_id: int) -> AuthenticatedEndpoint:
        return cls(AuthScope.READ, f"order/{symbol}:{order_id}/trades")

    @classmethod
    def trades_history(cls, symbol: str) -> AuthenticatedEndpoint:
        return cls(AuthScope.READ, f"trades/{symbol}/hist")

    @classmethod
    def ledgers(cls, currency: str) -> AuthenticatedEndpoint:
        return cls(AuthScope.READ, f"ledgers/{currency}/hist")

    @classmethod
    def positions(cls) -> AuthenticatedEndpoint:
        return cls(AuthScope.READ, "positions")

    @classmethod
    def summary(cls) -> AuthenticatedEndpoint:
        return cls(AuthScope.READ, "summary")

    @classmethod
    def margin_info(cls, key: str) -> AuthenticatedEndpoint:
        """Сводка маржи: ``base`` по аккаунту или символ пары."""
        return cls(AuthScope.READ, f"info/margin/{key}")

    @classmethod
    def funding_info(cls, symbol: str) -> AuthenticatedEndpoint:
        return cls(AuthScope.READ, f"info/funding/{symbol}")

    @classmethod
    def submit_order(cls) -> AuthenticatedEndpoint:
        return cls(AuthScope.WRITE, "order/submit")

    @classmethod
    def cancel_order(cls) -> AuthenticatedEndpoint:
        return cls(AuthScope.WRITE, "order/cancel")

    @classmethod
    def wallet_transfer(cls) -> AuthenticatedEndpoint:
        return cls(AuthScope.WRITE, "transfer")


@dataclass(frozen=True, slots=True)
class PublicEndpoint:
    """Публичный эндпоинт: путь относительно ``/v2``."""

    resource: str

    @property
    def path(self) -> str:
        return f"{PUBLIC_PATH}/{self.resource}"

    def url(self, host: str = PUBLIC_HOST) -> str:
        return f"{host.rstrip('/')}{self.path}"

    @classmethod
    def ticker(cls, symbol: str) -> PublicEndpoint:
        return cls(f"ticker/{symbol}")

    @classmethod
    def trades(cls, symbol: str) -> PublicEndpoint:
        return cls(f"trades/{symbol}/hist")

    @classmethod
    def book(cls, symbol: str, precision: BookPrecision) -> PublicEndpoint:
        return cls(f"book/{symbol}/{precision}")

    @classmethod
    def candles(
        cls,
        symbol: str,
        timeframe: CandleTimeFrame,
        section: CandleSection,
        funding_period: str | None = None,
    ) -> PublicEndpoint:
        """Свечи: ключ ``trade:<timeframe>:<symbol>[:<period>]`` и секция ``last``/``hist``."""
        key = f"trade:{timeframe}:{symbol}"
        if funding_period is not None:
            key = f"{key}:{funding_period}"
        return cls(f"candles/{key}/{section}")
