from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

from bfx_sdk.contracts.ports.bfx_client import BfxClientConfig, Credentials

API_KEY = "test-key"
API_SECRET = "test-secret"

# Активный ордер в том виде, в каком его присылает /v2/auth/r/orders
ACTIVE_ORDER: list[Any] = [
    1, None, 0, "tBTCUSD", 100, 200, -10.5, -12.0, "LIMIT", None, None, None, 1024, "ACTIVE",
    None, None, 50000.0, 0.0, 0.0, 0.0, None, None, None, 0, 0, None,
]  # fmt: skip


@pytest.fixture
def active_order() -> list[Any]:
    return list(ACTIVE_ORDER)


@pytest.fixture
def order_fields(active_order: list[Any]) -> list[Any]:
    """Поля ордера из уведомления: активный ордер плюс зарезервированный хвост."""
    return [*active_order, None]


@pytest.fixture
def order_notification() -> Callable[..., list[Any]]:
    def build(payload: object, kind: str = "on-req", status: str = "SUCCESS") -> list[Any]:
        return [1700000000000, kind, None, None, payload, None, status, "Submitting 1 orders."]

    return build


@pytest.fixture
def credentials() -> Credentials:
    return Credentials(api_key=API_KEY, secret_key=API_SECRET)


@pytest.fixture
def config() -> BfxClientConfig:
    return BfxClientConfig(api_key=API_KEY, api_secret=API_SECRET, user_agent="bfx-sdk-tests", nonce_jitter=0)
