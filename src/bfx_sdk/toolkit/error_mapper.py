"""Перевод исключений внешних библиотек в ошибки SDK на границе клиента.

Ошибки SDK (декодирование, подпись, статусы HTTP) проходят границу без
изменений; исключения httpx, json и pydantic переводятся в иерархию SDK с
признаком повторяемости и контекстом вызова.
"""

from __future__ import annotations

import inspect
import json
import logging
from dataclasses import dataclass
from functools import wraps
from threading import RLock
from typing import TYPE_CHECKING, Any, Concatenate, overload

import httpx
from pydantic import ValidationError

from bfx_sdk.contracts.errors import (
    DecodeError,
    ErrorCode,
    ExchangeClientError,
    PermanentExchangeError,
    RetryableExchangeError,
    SdkError,
    UnknownExchangeError,
)
from bfx_sdk.contracts.ports.bfx_client import CexIdentifiable

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable
    from types import CoroutineType

logger = logging.getLogger(__name__)

# Аргументы метода, из которых берётся торговый символ для контекста ошибки
_SYMBOL_ARGUMENTS = ("symbol", "currency")

type ErrorRule = Callable[[BaseException, ErrorContext], SdkError | None]


@dataclass(slots=True)
class ErrorContext:
    """Контекст метода SDK для обогащения ошибок."""

    exchange: str | None = None
    symbol: str | None = None
    method: str | None = None


class ErrorMapper:
    """Маппер внешних ошибок в иерархию SDK.

    Пользовательские правила, зарегистрированные через ``register()``,
    применяются раньше правил по умолчанию.
    """

    def __init__(self) -> None:
        """Создать экземпляр маппера ошибок."""
        self._rules: list[ErrorRule] = []
        self._rule_ids: set[tuple[str, str]] = set()
        self._lock = RLock()

    def register(self, rule: ErrorRule) -> None:
        """Зарегистрировать правило; повторная регистрация того же правила игнорируется."""
        rule_id = self._rule_id(rule)

        with self._lock:
            if rule_id in self._rule_ids:
                return
            self._rules.append(rule)
            self._rule_ids.add(rule_id)

    def translate(self, exc: BaseException, ctx: ErrorContext) -> SdkError:
        """Преобразовать исключение внешней библиотеки в SdkError."""
        with self._lock:
            rules_snapshot = tuple(self._rules)

        for rule in rules_snapshot:
            mapped = rule(exc, ctx)
            if mapped is not None:
                return self._enrich(mapped, ctx)

        mapped: SdkError
        if isinstance(exc, httpx.TimeoutException | TimeoutError):
            mapped = RetryableExchangeError(error_code=ErrorCode.TIMEOUT)
        elif isinstance(exc, httpx.NetworkError | httpx.RemoteProtocolError):
            mapped = RetryableExchangeError(error_code=ErrorCode.NETWORK)
        elif isinstance(exc, json.JSONDecodeError):
            mapped = DecodeError(index=exc.pos, reason=f"некорректный JSON: {exc.msg}")
        elif isinstance(exc, ValidationError):
            mapped = PermanentExchangeError(error_code=ErrorCode.VALIDATION)
        else:
            mapped = UnknownExchangeError()

        return self._enrich(mapped, ctx)

    @staticmethod
    def _enrich(err: SdkError, ctx: ErrorContext) -> SdkError:
        if isinstance(err, ExchangeClientError):
            err.exchange = ctx.exchange
            err.symbol = ctx.symbol
            err.method = ctx.method
        return err

    @staticmethod
    def _rule_id(rule: ErrorRule) -> tuple[str, str]:
        module = getattr(rule, "__module__", "")
        qualname = getattr(rule, "__qualname__", getattr(rule, "__name__", ""))
        return module, qualname


default_error_mapper = ErrorMapper()


def _context(sig: inspect.Signature, method_name: str, args: tuple[Any, ...], kwargs: dict[str, Any]) -> ErrorContext:
    self_obj = args[0] if args else None
    bound = sig.bind_partial(*args, **kwargs)
    bound.apply_defaults()
    symbol = next(
        (bound.arguments[name] for name in _SYMBOL_ARGUMENTS if bound.arguments.get(name) is not None),
        None,
    )
    return ErrorContext(exchange=getattr(self_obj, "cex_id", None), symbol=symbol, method=method_name)


def _wrap_sync[**P, R](fn: Callable[P, R]) -> Callable[P, R]:
    sig = inspect.signature(fn)
    method_name = getattr(fn, "__name__", "unknown")

    @wraps(fn)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        try:
            return fn(*args, **kwargs)
        except SdkError:
            raise
        except Exception as exc:
            ctx = _context(sig, method_name, args, kwargs)
            logger.exception("Исключение на границе SDK: %s.%s", ctx.exchange, method_name)
            raise default_error_mapper.translate(exc, ctx) from exc

    return wrapper


def _wrap_async[**P, R](fn: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
    sig = inspect.signature(fn)
    method_name = getattr(fn, "__name__", "unknown")

    @wraps(fn)
    async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        try:
            return await fn(*args, **kwargs)
        except SdkError:
            raise
        except Exception as exc:
            ctx = _context(sig, method_name, args, kwargs)
            logger.exception("Исключение на границе SDK: %s.%s", ctx.exchange, method_name)
            raise default_error_mapper.translate(exc, ctx) from exc

    return wrapper


@overload
def map_sdk_errors[**P, R, T: CexIdentifiable](
    fn: Callable[Concatenate[T, P], Awaitable[R]],
) -> Callable[Concatenate[T, P], CoroutineType[Any, Any, R]]: ...
@overload
def map_sdk_errors[**P, R, T: CexIdentifiable](
    fn: Callable[Concatenate[T, P], R],
) -> Callable[Concatenate[T, P], R]: ...


def map_sdk_errors[**P, R, T: CexIdentifiable](
    fn: Callable[Concatenate[T, P], R] | Callable[Concatenate[T, P], Awaitable[R]],
):
    """Декоратор границы SDK.

    Сохраняет форму функции (async или sync) и переводит внешние исключения.
    """
    if inspect.iscoroutinefunction(fn):
        return _wrap_async(fn)
    return _wrap_sync(fn)
