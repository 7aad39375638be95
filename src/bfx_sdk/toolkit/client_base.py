"""Реализация клиента Bitfinex REST v2 на базе ``httpx``.

``BfxClient`` реализует абстракцию ``BfxClientPort``: приватные запросы
подписываются свежим nonce, публичные отправляются без подписи; ответы
разбираются в JSON с сохранением десятичной точности и декодируются из
позиционных массивов в неизменяемые записи.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping, Sequence
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Final, final, override

import httpx

from bfx_sdk.contracts.errors import InternalServerError, UnauthorizedError, UnknownResponseError
from bfx_sdk.contracts.ports.bfx_client import BfxClientConfig, BfxClientPort
from bfx_sdk.schemas.fees import ACCOUNT_FEES_SCHEMA, AccountFeesResponse
from bfx_sdk.schemas.market import (
    BOOK_ENTRY_SCHEMA,
    CANDLE_SCHEMA,
    FUNDING_BOOK_ENTRY_SCHEMA,
    FUNDING_TICKER_SCHEMA,
    FUNDING_TRADE_SCHEMA,
    PUBLIC_TRADE_SCHEMA,
    TICKER_SCHEMA,
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
from bfx_sdk.schemas.margin import (
    FUNDING_INFO_SCHEMA,
    MARGIN_BASE_KEY,
    MARGIN_BASE_SCHEMA,
    MARGIN_SYMBOL_SCHEMA,
    FundingInfoResponse,
    MarginBaseResponse,
    MarginSymbolResponse,
)
from bfx_sdk.schemas.order import (
    ACTIVE_ORDER_SCHEMA,
    ORDER_FLAGS_CODEC,
    ORDER_NOTIFICATION,
    ActiveOrderResponse,
    OrderFlags,
    OrderKind,
    OrderResponse,
)
from bfx_sdk.schemas.position import POSITION_SCHEMA, PositionResponse
from bfx_sdk.schemas.trade import LEDGER_ENTRY_SCHEMA, TRADE_SCHEMA, LedgerEntryResponse, TradeResponse
from bfx_sdk.schemas.wallet import WALLET_SCHEMA, WALLET_TRANSFER_NOTIFICATION, WalletResponse, WalletTransferResponse
from bfx_sdk.toolkit.auth import NonceGenerator, RequestSigner
from bfx_sdk.toolkit.endpoints import AuthenticatedEndpoint, PublicEndpoint
from bfx_sdk.toolkit.envelope import decode_notification
from bfx_sdk.toolkit.error_mapper import map_sdk_errors
from bfx_sdk.toolkit.positional import decode_record, decode_records

if TYPE_CHECKING:
    from bfx_sdk.schemas.wallet import WalletKind

logger = logging.getLogger(__name__)

CEX_ID: Final = "bitfinex"
EMPTY_BODY: Final = "{}"

_INTERNAL_SERVER_STATUSES: Final = frozenset({
    httpx.codes.INTERNAL_SERVER_ERROR,
    httpx.codes.BAD_GATEWAY,
    httpx.codes.SERVICE_UNAVAILABLE,
})


def dump_body(payload: Mapping[str, Any] | None) -> str:
    """Компактный JSON тела запроса; подписывается ровно эта строка."""
    if not payload:
        return EMPTY_BODY
    return json.dumps(payload, separators=(",", ":"))


def parse_body(text: str) -> Any:  # noqa: ANN401
    """Разобрать JSON ответа, сохранив дробные числа как ``Decimal``."""
    return json.loads(text, parse_float=Decimal)


@final
class BfxClient(BfxClientPort):
    """Реализация ``BfxClientPort`` поверх ``httpx.AsyncClient``.

    Один экземпляр владеет одним генератором nonce: все приватные запросы
    через него получают строго возрастающие значения. Повторов нет; каждый
    вызов подписывается заново, поэтому повтор на стороне приложения всегда
    идёт со свежим nonce.
    """

    def __init__(
        self,
        config: BfxClientConfig,
        *,
        http_client: httpx.AsyncClient | None = None,
        nonce_generator: NonceGenerator | None = None,
    ) -> None:
        """Инициализировать клиента.

        Параметры
        ----------
        config: BfxClientConfig
            Ключи API, таймаут, адреса хостов и параметры nonce.
        http_client: httpx.AsyncClient | None
            Готовый HTTP-клиент; если не передан, создаётся собственный и
            закрывается в ``close()``.
        nonce_generator: NonceGenerator | None
            Источник nonce; по умолчанию с паузой ``config.nonce_jitter``.
        """
        super().__init__(config)
        self._owns_http = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=config.timeout)
        self._nonces = nonce_generator or NonceGenerator(max_jitter=config.nonce_jitter)
        self._signer: RequestSigner | None = None

    @property
    @override
    def cex_id(self) -> str:
        return CEX_ID

    def _request_signer(self) -> RequestSigner:
        # ключи проверяются при первом приватном вызове, публичные работают без них
        if self._signer is None:
            self._signer = RequestSigner(self.config.credentials, self.config.user_agent)
        return self._signer

    async def _post_signed(
        self,
        endpoint: AuthenticatedEndpoint,
        payload: Mapping[str, Any] | None = None,
        params: Mapping[str, Any] | None = None,
    ) -> Any:  # noqa: ANN401
        signer = self._request_signer()
        body = dump_body(payload)
        nonce = await self._nonces.next()
        headers = signer.headers(endpoint.canonical_path, nonce, body)
        logger.debug("POST %s nonce=%s", endpoint.path, nonce)
        response = await self._http.post(
            endpoint.url(self.config.auth_host),
            content=body,
            headers=headers,
            params=dict(params) if params else None,
        )
        return self._handle_response(response)

    async def _get(self, endpoint: PublicEndpoint, params: Mapping[str, Any] | None = None) -> Any:  # noqa: ANN401
        logger.debug("GET %s", endpoint.path)
        response = await self._http.get(
            endpoint.url(self.config.public_host),
            headers={"User-Agent": self.config.user_agent},
            params=dict(params) if params else None,
        )
        return self._handle_response(response)

    def _handle_response(self, response: httpx.Response) -> Any:  # noqa: ANN401
        status = response.status_code
        if status == httpx.codes.OK:
            return parse_body(response.text)

        context = {"exchange": self.cex_id, "status_code": status, "body": response.text}
        logger.debug("Ответ %s от %s: %s", status, response.request.url, response.text)
        if status == httpx.codes.UNAUTHORIZED:
            raise UnauthorizedError(**context)
        if status in _INTERNAL_SERVER_STATUSES:
            raise InternalServerError(**context)
        raise UnknownResponseError(**context)

    @override
    @map_sdk_errors
    async def get_wallets(self) -> Sequence[WalletResponse]:
        data = await self._post_signed(AuthenticatedEndpoint.wallets())
        return decode_records(WALLET_SCHEMA, data)

    @override
    @map_sdk_errors
    async def get_active_orders(self) -> Sequence[ActiveOrderResponse]:
        data = await self._post_signed(AuthenticatedEndpoint.active_orders())
        return decode_records(ACTIVE_ORDER_SCHEMA, data)

    @override
    @map_sdk_errors
    async def get_orders_history(self, symbol: str | None = None) -> Sequence[ActiveOrderResponse]:
        data = await self._post_signed(AuthenticatedEndpoint.orders_history(symbol))
        return decode_records(ACTIVE_ORDER_SCHEMA, data)

    @override
    @map_sdk_errors
    async def submit_order(
        self,
        symbol: str,
        order_type: OrderKind,
        amount: Decimal,
        price: Decimal | None = None,
        flags: OrderFlags = OrderFlags(0),
    ) -> OrderResponse:
        payload: dict[str, Any] = {
            "type": str(order_type),
            "symbol": symbol,
            "amount": str(amount),
        }
        if price is not None:
            payload["price"] = str(price)
        if flags:
            payload["flags"] = ORDER_FLAGS_CODEC.encode(flags)
        data = await self._post_signed(AuthenticatedEndpoint.submit_order(), payload)
        return decode_notification(ORDER_NOTIFICATION, data)

    @override
    @map_sdk_errors
    async def cancel_order(self, order_id: int) -> OrderResponse:
        data = await self._post_signed(AuthenticatedEndpoint.cancel_order(), {"id": order_id})
        return decode_notification(ORDER_NOTIFICATION, data)

    @override
    @map_sdk_errors
    async def transfer_between_wallets(
        self,
        source: WalletKind,
        destination: WalletKind,
        currency: str,
        amount: Decimal,
        currency_to: str | None = None,
    ) -> WalletTransferResponse:
        payload: dict[str, Any] = {
            "from": str(source),
            "to": str(destination),
            "currency": currency,
            "amount": str(amount),
        }
        if currency_to is not None:
            payload["currency_to"] = currency_to
        data = await self._post_signed(AuthenticatedEndpoint.wallet_transfer(), payload)
        return decode_notification(WALLET_TRANSFER_NOTIFICATION, data)

    @override
    @map_sdk_errors
    async def get_account_fees(self) -> AccountFeesResponse:
        data = await self._post_signed(AuthenticatedEndpoint.summary())
        return decode_record(ACCOUNT_FEES_SCHEMA, data)

    @override
    @map_sdk_errors
    async def get_positions(self) -> Sequence[PositionResponse]:
        data = await self._post_signed(AuthenticatedEndpoint.positions())
        return decode_records(POSITION_SCHEMA, data)

    @override
    @map_sdk_errors
    async def get_trades_history(self, symbol: str) -> Sequence[TradeResponse]:
        data = await self._post_signed(AuthenticatedEndpoint.trades_history(symbol))
        return decode_records(TRADE_SCHEMA, data)

    @override
    @map_sdk_errors
    async def get_order_trades(self, symbol: str, order_id: int) -> Sequence[TradeResponse]:
        data = await self._post_signed(AuthenticatedEndpoint.order_trades(symbol, order_id))
        return decode_records(TRADE_SCHEMA, data)

    @override
    @map_sdk_errors
    async def get_ledger(
        self, currency: str, start: int | None = None, end: int | None = None, limit: int | None = None
    ) -> Sequence[LedgerEntryResponse]:
        params = {
            name: value
            for name, value in (("start", start), ("end", end), ("limit", limit))
            if value is not None
        }
        data = await self._post_signed(AuthenticatedEndpoint.ledgers(currency), params=params)
        return decode_records(LEDGER_ENTRY_SCHEMA, data)

    @override
    @map_sdk_errors
    async def get_margin_base(self) -> MarginBaseResponse:
        data = await self._post_signed(AuthenticatedEndpoint.margin_info(MARGIN_BASE_KEY))
        return decode_record(MARGIN_BASE_SCHEMA, data)

    @override
    @map_sdk_errors
    async def get_margin_symbol(self, symbol: str) -> MarginSymbolResponse:
        data = await self._post_signed(AuthenticatedEndpoint.margin_info(symbol))
        return decode_record(MARGIN_SYMBOL_SCHEMA, data)

    @override
    @map_sdk_errors
    async def get_funding_info(self, symbol: str) -> FundingInfoResponse:
        data = await self._post_signed(AuthenticatedEndpoint.funding_info(symbol))
        return decode_record(FUNDING_INFO_SCHEMA, data)

    @override
    @map_sdk_errors
    async def get_ticker(self, symbol: str) -> TickerResponse:
        data = await self._get(PublicEndpoint.ticker(symbol))
        return decode_record(TICKER_SCHEMA, data)

    @override
    @map_sdk_errors
    async def get_candles(
        self,
        symbol: str,
        timeframe: CandleTimeFrame,
        section: CandleSection = CandleSection.HIST,
        funding_period: str | None = None,
    ) -> Sequence[CandleResponse]:
        data = await self._get(PublicEndpoint.candles(symbol, timeframe, section, funding_period))
        if section is CandleSection.LAST:
            # секция last возвращает одну свечу, а не список
            return [decode_record(CANDLE_SCHEMA, data)]
        return decode_records(CANDLE_SCHEMA, data)

    @override
    @map_sdk_errors
    async def get_book(self, symbol: str, precision: BookPrecision = BookPrecision.P0) -> Sequence[BookEntryResponse]:
        data = await self._get(PublicEndpoint.book(symbol, precision))
        return decode_records(BOOK_ENTRY_SCHEMA, data)

    @override
    @map_sdk_errors
    async def get_public_trades(self, symbol: str) -> Sequence[PublicTradeResponse]:
        data = await self._get(PublicEndpoint.trades(symbol))
        return decode_records(PUBLIC_TRADE_SCHEMA, data)

    @override
    @map_sdk_errors
    async def get_funding_ticker(self, symbol: str) -> FundingTickerResponse:
        data = await self._get(PublicEndpoint.ticker(symbol))
        return decode_record(FUNDING_TICKER_SCHEMA, data)

    @override
    @map_sdk_errors
    async def get_funding_book(
        self, symbol: str, precision: BookPrecision = BookPrecision.P0
    ) -> Sequence[FundingBookEntryResponse]:
        data = await self._get(PublicEndpoint.book(symbol, precision))
        return decode_records(FUNDING_BOOK_ENTRY_SCHEMA, data)

    @override
    @map_sdk_errors
    async def get_funding_trades(self, symbol: str) -> Sequence[FundingTradeResponse]:
        data = await self._get(PublicEndpoint.trades(symbol))
        return decode_records(FUNDING_TRADE_SCHEMA, data)

    @override
    async def close(self) -> None:
        if not self._owns_http:
            return
        try:
            await self._http.aclose()
        except Exception as exc:  # noqa: BLE001 – лишь логируем
            logger.warning("Не удалось корректно закрыть HTTP-клиент %s: %s", self._http, exc)
