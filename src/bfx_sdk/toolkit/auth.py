"""Аутентификация приватных запросов Bitfinex.

Каждый приватный запрос несёт nonce (строго возрастающее число микросекунд)
и HMAC-SHA384 подпись строки ``/api + path + nonce + body`` секретным ключом.
"""

from __future__ import annotations

import asyncio
import hashlib
import hmac
import logging
import random
import time
from collections.abc import Callable
from typing import Final

from bfx_sdk.contracts.errors import ClockError, SigningError
from bfx_sdk.contracts.ports.bfx_client import DEFAULT_NONCE_JITTER, DEFAULT_USER_AGENT, Credentials

logger = logging.getLogger(__name__)

HEADER_NONCE: Final = "bfx-nonce"
HEADER_API_KEY: Final = "bfx-apikey"
HEADER_SIGNATURE: Final = "bfx-signature"


class NonceGenerator:
    """Источник nonce: микросекунды Unix, строго возрастающие в пределах экземпляра.

    Перед чтением часов выжидается случайная пауза до ``max_jitter`` секунд,
    чтобы параллельные вызовы расходились по времени. Если часы не успели
    сдвинуться (или пошли назад), выдаётся предыдущее значение плюс один.
    """

    def __init__(
        self,
        max_jitter: float = DEFAULT_NONCE_JITTER,
        clock: Callable[[], int] = time.time_ns,
        rng: random.Random | None = None,
    ) -> None:
        """Инициализировать генератор.

        Параметры
        ----------
        max_jitter: float
            Верхняя граница случайной паузы в секундах; ``0`` отключает паузу.
        clock: Callable[[], int]
            Источник времени в наносекундах Unix.
        rng: random.Random | None
            Генератор случайных чисел для паузы.
        """
        if max_jitter < 0:
            msg = f"max_jitter не может быть отрицательным: {max_jitter}"
            raise ValueError(msg)
        self._max_jitter = max_jitter
        self._clock = clock
        self._rng = rng or random.Random()  # noqa: S311
        self._last = 0

    @property
    def last(self) -> int:
        """Последний выданный nonce (0, если ещё не выдавался)."""
        return self._last

    def _read_clock(self) -> int:
        reading = self._clock()
        if reading < 0:
            raise ClockError(reading=reading)
        return reading // 1000

    async def next(self) -> str:
        """Выдать следующий nonce в виде десятичной строки."""
        if self._max_jitter > 0:
            await asyncio.sleep(self._rng.uniform(0, self._max_jitter))
        # между чтением часов и записью _last нет точек переключения
        nonce = max(self._read_clock(), self._last + 1)
        self._last = nonce
        return str(nonce)


def sign(secret_key: bytes, canonical_path: str, nonce: str, payload: str | bytes) -> str:
    """Подписать запрос: HMAC-SHA384 над ``canonical_path + nonce + payload``, hex в нижнем регистре.

    ``canonical_path`` уже содержит префикс ``/api`` (``/api/v2/auth/r/wallets``).
    """
    if not isinstance(secret_key, bytes):
        raise SigningError(reason=f"ключ должен быть байтами, получено {type(secret_key).__name__}")
    if not secret_key:
        raise SigningError(reason="пустой секретный ключ")
    if isinstance(payload, str):
        payload = payload.encode()
    message = f"{canonical_path}{nonce}".encode() + payload
    return hmac.new(secret_key, message, hashlib.sha384).hexdigest()


class RequestSigner:
    """Сборка заголовков приватного запроса."""

    def __init__(self, credentials: Credentials, user_agent: str = DEFAULT_USER_AGENT) -> None:
        """Инициализировать подписчика.

        Параметры
        ----------
        credentials: Credentials
            Ключ API и секрет; секрет кодируется в байты один раз.
        user_agent: str
            Значение заголовка ``User-Agent``.
        """
        self._credentials = credentials
        self._secret = credentials.secret_key.encode()
        self._user_agent = user_agent

    def headers(self, canonical_path: str, nonce: str, payload: str) -> dict[str, str]:
        """Заголовки для тела ``payload``, подписанного вместе с ``nonce``."""
        signature = sign(self._secret, canonical_path, nonce, payload)
        logger.debug("Подписан запрос %s (nonce=%s)", canonical_path, nonce)
        return {
            HEADER_NONCE: nonce,
            HEADER_API_KEY: self._credentials.api_key,
            HEADER_SIGNATURE: signature,
            "Content-Type": "application/json",
            "User-Agent": self._user_agent,
        }
