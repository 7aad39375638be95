from __future__ import annotations

from decimal import Decimal
from typing import Any

import pytest
from pydantic import TypeAdapter

from bfx_sdk.contracts.errors import DecodeError, InvalidFlagsError
from bfx_sdk.contracts.protocols import WalletProtocol
from bfx_sdk.schemas.fees import ACCOUNT_FEES_SCHEMA
from bfx_sdk.schemas.market import (
    BOOK_ENTRY_SCHEMA,
    CANDLE_SCHEMA,
    FUNDING_BOOK_ENTRY_SCHEMA,
    FUNDING_TICKER_SCHEMA,
    FUNDING_TRADE_SCHEMA,
    PUBLIC_TRADE_SCHEMA,
    TICKER_SCHEMA,
)
from bfx_sdk.schemas.margin import FUNDING_INFO_SCHEMA, MARGIN_BASE_SCHEMA, MARGIN_SYMBOL_SCHEMA
from bfx_sdk.schemas.notification import ResponseStatus
from bfx_sdk.schemas.order import ACTIVE_ORDER_SCHEMA, ORDER_SCHEMA, ActiveOrderResponse, OrderFlags, OrderKind
from bfx_sdk.schemas.position import POSITION_SCHEMA
from bfx_sdk.schemas.trade import LEDGER_ENTRY_SCHEMA, TRADE_SCHEMA
from bfx_sdk.schemas.wallet import WALLET_SCHEMA, WALLET_TRANSFER_NOTIFICATION, WalletKind
from bfx_sdk.toolkit.client_base import parse_body
from bfx_sdk.toolkit.envelope import decode_notification
from bfx_sdk.toolkit.positional import decode_record, decode_records

ACTIVE_ORDER_JSON = (
    '[1, null, 0, "tBTCUSD", 100, 200, -10.5, -12.0, "LIMIT", null, null, null, 1024, "ACTIVE",'
    " null, null, 50000.0, 0.0, 0.0, 0.0, null, null, null, 0, 0, null]"
)


def test_active_order_literal_array(active_order: list[Any]) -> None:
    order = decode_record(ACTIVE_ORDER_SCHEMA, active_order)

    assert order.id == 1
    assert order.group_id is None
    assert order.client_id == 0
    assert order.symbol == "tBTCUSD"
    assert order.creation_timestamp == 100
    assert order.update_timestamp == 200
    assert order.amount == Decimal("-10.5")
    assert order.amount_original == Decimal("-12.0")
    assert order.order_type is OrderKind.LIMIT
    assert order.previous_order_type is None
    assert order.flags == OrderFlags.REDUCE_ONLY
    assert order.order_status == "ACTIVE"
    assert order.price == Decimal("50000.0")
    assert order.price_avg is None
    assert order.price_trailing is None
    assert order.price_aux_limit is None
    assert order.notify is False
    assert order.hidden is False
    assert order.placed_id is None
    assert order.is_buy is False


def test_active_order_from_json_keeps_decimal_text() -> None:
    order = decode_record(ACTIVE_ORDER_SCHEMA, parse_body(ACTIVE_ORDER_JSON))

    assert str(order.amount) == "-10.5"
    assert str(order.price) == "50000.0"


def test_active_order_one_element_short(active_order: list[Any]) -> None:
    with pytest.raises(DecodeError) as exc_info:
        decode_record(ACTIVE_ORDER_SCHEMA, active_order[:-1])

    assert exc_info.value.field == "placed_id"
    assert exc_info.value.index == 25


def test_active_order_string_flags(active_order: list[Any]) -> None:
    active_order[12] = "4160"

    order = decode_record(ACTIVE_ORDER_SCHEMA, active_order)

    assert order.flags == OrderFlags.HIDDEN | OrderFlags.POST_ONLY


def test_active_order_unknown_flag_bit(active_order: list[Any]) -> None:
    active_order[12] = 2**31

    with pytest.raises(InvalidFlagsError) as exc_info:
        decode_record(ACTIVE_ORDER_SCHEMA, active_order)

    assert exc_info.value.field == "flags"
    assert exc_info.value.index == 12


def test_unknown_order_type_is_rejected(active_order: list[Any]) -> None:
    active_order[8] = "ICEBERG"

    with pytest.raises(DecodeError) as exc_info:
        decode_record(ACTIVE_ORDER_SCHEMA, active_order)

    assert exc_info.value.field == "order_type"


def test_order_schema_has_reserved_tail(active_order: list[Any]) -> None:
    assert len(ORDER_SCHEMA.rules) == len(ACTIVE_ORDER_SCHEMA.rules) + 1 == 27
    assert decode_record(ORDER_SCHEMA, [*active_order, None]) == decode_record(ACTIVE_ORDER_SCHEMA, active_order)


def test_zero_price_avg_is_indistinguishable_from_absent(active_order: list[Any]) -> None:
    # Биржа кодирует «нет значения» нулём; настоящая нулевая цена теряется так же
    filled_at_zero = list(active_order)
    filled_at_zero[17] = 0
    unset = list(active_order)
    unset[17] = None

    assert decode_record(ACTIVE_ORDER_SCHEMA, filled_at_zero).price_avg is None
    assert decode_record(ACTIVE_ORDER_SCHEMA, unset).price_avg is None


def test_nonzero_optional_prices_survive(active_order: list[Any]) -> None:
    active_order[17] = 49999.5
    active_order[19] = 48000

    order = decode_record(ACTIVE_ORDER_SCHEMA, active_order)

    assert order.price_avg == Decimal("49999.5")
    assert order.price_aux_limit == Decimal(48000)


def test_wallets() -> None:
    wallets = decode_records(
        WALLET_SCHEMA,
        [["exchange", "USD", 1000.5, 0, 900.25], ["margin", "BTC", 0.5, 0.001, None]],
    )

    assert wallets[0].wallet_type is WalletKind.EXCHANGE
    assert wallets[0].balance_available == Decimal("900.25")
    assert wallets[1].balance_available is None
    assert wallets[1].unsettled_interest == Decimal("0.001")
    assert isinstance(wallets[0], WalletProtocol)


def test_unknown_wallet_kind_is_rejected() -> None:
    with pytest.raises(DecodeError) as exc_info:
        decode_records(WALLET_SCHEMA, [["savings", "USD", 1, 0, None]])

    assert exc_info.value.field == "[0].wallet_type"


@pytest.mark.parametrize("nested", [False, True])
def test_wallet_transfer_notification(nested: bool) -> None:
    inner = [1568736745789, "margin", "exchange", None, "USD", None, None, 50]
    envelope = [
        1568736745789, "acc_tf", None, None, [inner] if nested else inner,
        None, "SUCCESS", "50.0 US Dollar transfered from Margin to Exchange",
    ]  # fmt: skip

    result = decode_notification(WALLET_TRANSFER_NOTIFICATION, envelope)

    assert result.status is ResponseStatus.SUCCESS
    assert result.transfer.wallet_from is WalletKind.MARGIN
    assert result.transfer.wallet_to is WalletKind.EXCHANGE
    assert result.transfer.currency == "USD"
    assert result.transfer.currency_to is None
    assert result.transfer.amount == Decimal(50)


def test_account_fees() -> None:
    summary = [
        None, None, None, None,
        [[0.001, 0.001, 0.001, None, None, -0.0002], [0.002, 0.0021, 0.0022, None, None, 0.00075]],
        None, None, None, None, {"leo_lev": 0},
    ]  # fmt: skip

    fees = decode_record(ACCOUNT_FEES_SCHEMA, summary)

    assert fees.maker_fee == Decimal("0.001")
    assert fees.derivative_rebate == Decimal("-0.0002")
    assert fees.taker_to_crypto == Decimal("0.002")
    assert fees.taker_to_stable == Decimal("0.0021")
    assert fees.taker_to_fiat == Decimal("0.0022")
    assert fees.derivative_taker == Decimal("0.00075")


def test_account_fees_missing_taker_row() -> None:
    summary = [None, None, None, None, [[0.001, 0.001, 0.001, None, None, -0.0002]]]

    with pytest.raises(DecodeError) as exc_info:
        decode_record(ACCOUNT_FEES_SCHEMA, summary)

    assert exc_info.value.field == "fees.taker"


def _position(meta: object) -> list[Any]:
    return [
        "tBTCUSD", "ACTIVE", 0.0195, 8565.0267, 0, 0, -0.33455568705, -0.00031175501, 7045.876419729,
        3.06730018958, None, 142355652, 1574002216000, 1574002216000, None, 0, None, 0, 0.1, meta,
    ]  # fmt: skip


def test_position_with_meta() -> None:
    position = decode_record(
        POSITION_SCHEMA, _position(["trade", 142355652, 142355653, None, "9300.5", "0.0195"])
    )

    assert position.symbol == "tBTCUSD"
    assert position.amount == Decimal("0.0195")
    assert position.position_id == 142355652
    assert position.collateral == Decimal(0)
    assert position.meta is not None
    assert position.meta.trade_price == Decimal("9300.5")
    assert position.meta.trade_amount == Decimal("0.0195")
    assert position.meta.liq_stage is None


def test_position_with_meta_object() -> None:
    meta = {
        "reason": "TRADE",
        "order_id": 142355652,
        "order_id_oppo": 142355653,
        "liq_stage": None,
        "trade_price": "50000.0",
        "trade_amount": "0.1",
    }

    position = decode_record(POSITION_SCHEMA, _position(meta))

    assert position.meta is not None
    assert position.meta.reason == "TRADE"
    assert position.meta.order_id_oppo == 142355653
    assert position.meta.trade_price == Decimal("50000.0")
    assert position.meta.trade_amount == Decimal("0.1")
    assert position.meta.liq_stage is None


def test_position_meta_object_without_liq_stage() -> None:
    meta = {"reason": "TRADE", "order_id": 1, "order_id_oppo": 2, "trade_price": "1", "trade_amount": "2"}

    assert decode_record(POSITION_SCHEMA, _position(meta)).meta.liq_stage is None


def test_position_meta_object_numbers_must_be_strings() -> None:
    meta = {"reason": "TRADE", "order_id": 1, "order_id_oppo": 2, "trade_price": 50000.0, "trade_amount": "0.1"}

    with pytest.raises(DecodeError) as exc_info:
        decode_record(POSITION_SCHEMA, _position(meta))

    assert exc_info.value.field == "meta.trade_price"
    assert exc_info.value.index == 19


def test_position_without_meta() -> None:
    assert decode_record(POSITION_SCHEMA, _position(None)).meta is None


def test_position_meta_numbers_must_be_strings() -> None:
    with pytest.raises(DecodeError) as exc_info:
        decode_record(POSITION_SCHEMA, _position(["trade", 1, 2, None, 9300.5, "0.0195"]))

    assert exc_info.value.field == "meta.trade_price"


def test_trades() -> None:
    trades = decode_records(
        TRADE_SCHEMA,
        [
            [402088407, "tETHUST", 1574963975602, 34938060782, -0.2, 153.57, "MARKET", 0, -1, -0.061668, "USD"],
            [402088408, "tETHUST", 1574963975603, 34938060783, 0.2, 153.5, None, None, 1, -0.01, "UST"],
        ],
    )

    assert trades[0].is_maker is False
    assert trades[0].order_type is OrderKind.MARKET
    assert trades[0].execution_amount == Decimal("-0.2")
    assert trades[1].is_maker is True
    assert trades[1].order_type is None
    assert trades[1].order_price is None


def test_ledger_entry() -> None:
    entry = decode_record(
        LEDGER_ENTRY_SCHEMA,
        [2531822314, "USD", None, 1573665403000, None, -0.0005, 1.74, None, "Exchange 0.1 ETH for USD"],
    )

    assert entry.currency == "USD"
    assert entry.mts == 1573665403000
    assert entry.amount == Decimal("-0.0005")
    assert entry.balance == Decimal("1.74")
    assert entry.description == "Exchange 0.1 ETH for USD"


def test_public_market_records() -> None:
    ticker = decode_record(
        TICKER_SCHEMA, [10645, 73.93854271, 10647, 75.22266119, 731.60645389, 0.0738, 10644.006, 14480.898, 10766, 9889.14]
    )
    candle = decode_record(CANDLE_SCHEMA, [1678465320000, 20097, 20094, 20097, 20094, 0.07870586])
    book = decode_records(BOOK_ENTRY_SCHEMA, [[8744.9, 2, 0.45603413], [8745.0, 1, -0.25]])
    trade = decode_records(PUBLIC_TRADE_SCHEMA, [[388063448, 1567526214876, 1.918524, 10682]])

    assert ticker.bid == Decimal(10645)
    assert ticker.daily_change_relative == Decimal("0.0738")
    assert candle.mts == 1678465320000
    assert candle.volume == Decimal("0.07870586")
    assert book[0].is_bid is True
    assert book[1].is_bid is False
    assert trade[0].price == Decimal(10682)


def test_funding_market_records() -> None:
    ticker = decode_record(
        FUNDING_TICKER_SCHEMA,
        [0.0002, 0.00019, 30, 5000000, 0.00021, 2, 120000, 0.00001, 0.05, 0.0002, 80000000, 0.0003, 0.0001, None, None, 1e6],
    )
    book = decode_records(FUNDING_BOOK_ENTRY_SCHEMA, [[0.00019, 30, 4, -12000.5], [0.00021, 2, 1, 500]])
    trades = decode_records(FUNDING_TRADE_SCHEMA, [[124486873, 1567526287066, -1000, 0.0002, 7]])

    assert ticker.frr == Decimal("0.0002")
    assert ticker.bid_period == 30
    assert ticker.ask_period == 2
    assert ticker.low == Decimal("0.0001")
    assert book[0].period == 30
    assert book[0].is_bid is True
    assert book[1].is_bid is False
    assert trades[0].rate == Decimal("0.0002")
    assert trades[0].period == 7


def test_funding_ticker_period_must_be_integer() -> None:
    with pytest.raises(DecodeError) as exc_info:
        decode_record(
            FUNDING_TICKER_SCHEMA,
            [0.0002, 0.00019, 30.5, 5000000, 0.00021, 2, 120000, 0.00001, 0.05, 0.0002, 80000000, 0.0003, 0.0001],
        )

    assert exc_info.value.field == "bid_period"
    assert exc_info.value.index == 2


def test_margin_base() -> None:
    info = decode_record(MARGIN_BASE_SCHEMA, ["base", [-13.01, 0, 49331.7, 49318.7, 27]])

    assert info.key == "base"
    assert info.margin.user_profit_loss == Decimal("-13.01")
    assert info.margin.margin_net == Decimal("49318.7")


def test_margin_symbol_has_reserved_slots() -> None:
    margin = [149361.09, 149639.26, 149361.09, 151111.91]

    info = decode_record(MARGIN_SYMBOL_SCHEMA, ["sym", "tBTCUSD", [*margin, None, None, None, None]])

    assert info.symbol == "tBTCUSD"
    assert info.margin.tradable_balance == Decimal("149361.09")
    assert info.margin.sell == Decimal("151111.91")
    with pytest.raises(DecodeError) as exc_info:
        decode_record(MARGIN_SYMBOL_SCHEMA, ["sym", "tBTCUSD", margin])
    assert exc_info.value.field == "margin[4]"


def test_funding_info() -> None:
    info = decode_record(FUNDING_INFO_SCHEMA, ["sym", "fUSD", [0.0004, 0.0002, 1.5, 2.25]])

    assert info.symbol == "fUSD"
    assert info.funding.yield_lend == Decimal("0.0002")
    assert info.funding.duration_lend == Decimal("2.25")


def test_records_are_frozen(active_order: list[Any]) -> None:
    order = decode_record(ACTIVE_ORDER_SCHEMA, active_order)

    with pytest.raises(AttributeError):
        order.price = Decimal(1)  # type: ignore[misc]


def test_json_dump_uses_wire_values(active_order: list[Any]) -> None:
    order = decode_record(ACTIVE_ORDER_SCHEMA, active_order)

    dumped = TypeAdapter(ActiveOrderResponse).dump_python(order, mode="json")

    assert dumped["price"] == "50000.0"
    assert dumped["order_type"] == "LIMIT"
    assert dumped["flags"] == 1024
    assert dumped["price_avg"] is None
