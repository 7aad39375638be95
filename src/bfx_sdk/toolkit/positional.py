"""Декодер позиционных массивов Bitfinex.

Ответы биржи приходят не объектами, а массивами, в которых поле определяется
своим индексом. Каждая запись описывается декларативной таблицей правил
(``DecodeSchema``); единственный обходчик ``decode_record`` применяет правила
слева направо, по одному элементу массива на правило, и собирает
неизменяемую pydantic-запись.

Декодирование строгое: нехватка элементов или неверный тип JSON завершают
разбор ``DecodeError`` с путём поля; лишние элементы в хвосте игнорируются,
чтобы новые поля биржи не ломали клиента.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from decimal import Decimal
from functools import cache
from typing import TYPE_CHECKING, Annotated, Any

from pydantic import BeforeValidator, Strict, TypeAdapter, ValidationError

from bfx_sdk.contracts.errors import DecodeError, InvalidFlagsError

if TYPE_CHECKING:
    from enum import IntFlag

    from bfx_sdk.toolkit.flags import BitflagCodec


def _json_number(v: object) -> object:
    """Число JSON ➜ Decimal без потерь двоичного float; прочие типы отвергаются."""
    if isinstance(v, bool) or not isinstance(v, (int, float, Decimal)):
        msg = f"ожидалось число JSON, получено {type(v).__name__}"
        raise ValueError(msg)  # noqa: TRY004
    return v if isinstance(v, Decimal) else Decimal(str(v))


def _int_as_bool(v: object) -> object:
    """Признаки 0/1 (и -1 у maker) ➜ bool: истина только для положительных значений."""
    if isinstance(v, bool):
        return v
    if not isinstance(v, int):
        msg = f"ожидался целочисленный признак, получено {type(v).__name__}"
        raise ValueError(msg)  # noqa: TRY004
    return v > 0


# Проводные типы: строгое соответствие типу JSON
WireInt = Annotated[int, Strict()]
WireStr = Annotated[str, Strict()]
WireDecimal = Annotated[Decimal, BeforeValidator(_json_number)]
WireBool = Annotated[bool, BeforeValidator(_int_as_bool)]


@cache
def _adapter(kind: Any) -> TypeAdapter[Any]:  # noqa: ANN401
    return TypeAdapter(kind)


def _reason(exc: ValidationError) -> str:
    errors = exc.errors(include_url=False)
    return errors[0]["msg"] if errors else str(exc)


def convert(kind: Any, value: object, path: str | None = None, index: int | None = None) -> Any:  # noqa: ANN401
    """Привести элемент JSON к ``kind``; ошибка валидации ➜ ``DecodeError`` с путём поля."""
    try:
        return _adapter(kind).validate_python(value)
    except ValidationError as e:
        raise DecodeError(field=path, index=index, reason=_reason(e)) from e


def join_path(prefix: str, name: str) -> str:
    """Склеить путь вложенного поля: ``meta`` + ``trade_price`` ➜ ``meta.trade_price``."""
    if not prefix:
        return name
    if name.startswith("["):
        return f"{prefix}{name}"
    return f"{prefix}.{name}"


class FieldRule(ABC):
    """Правило извлечения одного позиционного элемента.

    ``name`` задаёт поле записи; правило без имени потребляет элемент, ничего
    не сохраняя.
    """

    __slots__ = ()

    name: str | None

    @abstractmethod
    def extract(self, value: object, path: str, index: int) -> Any:  # noqa: ANN401
        """Преобразовать элемент ``value`` с позиции ``index``."""
        ...


@dataclass(frozen=True, slots=True)
class Required(FieldRule):
    """Обязательное поле заданного типа."""

    name: str
    kind: Any

    def extract(self, value: object, path: str, index: int) -> Any:  # noqa: ANN401, D102
        return convert(self.kind, value, path, index)


@dataclass(frozen=True, slots=True)
class Nullable(FieldRule):
    """Поле, отсутствие которого передаётся как ``null``."""

    name: str
    kind: Any

    def extract(self, value: object, path: str, index: int) -> Any:  # noqa: ANN401, D102
        if value is None:
            return None
        return convert(self.kind, value, path, index)


@dataclass(frozen=True, slots=True)
class OptionalSentinel(FieldRule):
    """Поле, отсутствие которого биржа кодирует значением-маркером (обычно ``0``).

    Настоящий ноль неотличим от «не задано»: соглашение биржи с потерей
    информации сохраняется как есть. ``null`` тоже считается отсутствием.
    """

    name: str
    kind: Any
    sentinel: Any = Decimal(0)

    def extract(self, value: object, path: str, index: int) -> Any:  # noqa: ANN401, D102
        if value is None:
            return None
        converted = convert(self.kind, value, path, index)
        if converted == self.sentinel:
            return None
        return converted


@dataclass(frozen=True, slots=True)
class Skip(FieldRule):
    """Зарезервированный слот биржи: элемент любой формы потребляется и отбрасывается."""

    name: None = None

    def extract(self, value: object, path: str, index: int) -> None:  # noqa: D102
        return None


@dataclass(frozen=True, slots=True)
class Flags(FieldRule):
    """Битовые флаги: целое число или строка с десятичным числом."""

    name: str
    codec: BitflagCodec[Any]

    def extract(self, value: object, path: str, index: int) -> IntFlag:  # noqa: D102
        try:
            return self.codec.decode(value)
        except InvalidFlagsError as e:
            e.field = path
            e.index = index
            raise


@dataclass(frozen=True, slots=True)
class Nested(FieldRule):
    """Вложенная запись, разбираемая дочерней схемой.

    Обычно это позиционный массив. При ``allow_object=True`` принимается и
    объект JSON: значения берутся по именам правил дочерней схемы.
    """

    name: str
    schema: DecodeSchema
    nullable: bool = False
    allow_object: bool = False

    def extract(self, value: object, path: str, index: int) -> Any:  # noqa: ANN401, D102
        if value is None and self.nullable:
            return None
        if self.allow_object and isinstance(value, Mapping):
            return decode_keyed_record(self.schema, value, path=path, index=index)
        return decode_record(self.schema, value, path=path, index=index)


@dataclass(frozen=True, slots=True)
class CoercibleNumeric(FieldRule):
    """Число, которое биржа присылает строкой JSON (``"9300.5"``)."""

    name: str
    kind: Any = Decimal

    def extract(self, value: object, path: str, index: int) -> Any:  # noqa: ANN401, D102
        if not isinstance(value, str):
            raise DecodeError(
                field=path, index=index, reason=f"ожидалась строка с числом, получено {type(value).__name__}"
            )
        return convert(self.kind, value.strip(), path, index)


@dataclass(frozen=True, slots=True)
class DecodeSchema:
    """Таблица правил одной позиционной записи и тип собираемой записи."""

    record: type[Any]
    rules: tuple[FieldRule, ...]

    def extend(self, *rules: FieldRule) -> DecodeSchema:
        """Схема той же записи с дополнительными правилами в хвосте."""
        return DecodeSchema(self.record, self.rules + rules)


def _is_array(value: object) -> bool:
    return isinstance(value, (list, tuple))


def decode_fields(
    rules: Sequence[FieldRule], array: object, *, path: str = "", start: int = 0
) -> dict[str, Any]:
    """Применить ``rules`` к ``array`` начиная с позиции ``start``; вернуть значения именованных полей."""
    if not _is_array(array):
        raise DecodeError(field=path or None, reason=f"ожидался массив JSON, получено {type(array).__name__}")
    items: Sequence[object] = array  # type: ignore[assignment]

    values: dict[str, Any] = {}
    for offset, rule in enumerate(rules):
        index = start + offset
        field_path = join_path(path, rule.name or f"[{index}]")
        if index >= len(items):
            raise DecodeError(
                field=field_path,
                index=index,
                reason=f"массив из {len(items)} элементов короче схемы ({start + len(rules)})",
            )
        value = rule.extract(items[index], field_path, index)
        if rule.name is not None:
            values[rule.name] = value
    return values


def build_record(record: type[Any], values: dict[str, Any], *, path: str = "") -> Any:  # noqa: ANN401
    """Собрать неизменяемую запись из уже приведённых значений."""
    try:
        return _adapter(record).validate_python(values)
    except ValidationError as e:
        errors = e.errors(include_url=False)
        loc = ".".join(str(p) for p in errors[0]["loc"]) if errors else ""
        raise DecodeError(field=join_path(path, loc) if loc else path or None, reason=_reason(e)) from e


def decode_record(schema: DecodeSchema, array: object, *, path: str = "", index: int | None = None) -> Any:  # noqa: ANN401
    """Декодировать позиционный массив ``array`` по схеме ``schema``.

    Параметры
    ----------
    schema: DecodeSchema
        Таблица правил записи.
    array: object
        Разобранный JSON; должен быть массивом.
    path: str
        Префикс пути поля для сообщений об ошибках (для вложенных записей).
    index: int | None
        Позиция вложенного массива в родительском массиве.
    """
    if not _is_array(array):
        raise DecodeError(
            field=path or None, index=index, reason=f"ожидался массив JSON, получено {type(array).__name__}"
        )
    values = decode_fields(schema.rules, array, path=path)
    return build_record(schema.record, values, path=path)


def decode_keyed_fields(
    rules: Sequence[FieldRule], obj: Mapping[str, object], *, path: str = "", index: int | None = None
) -> dict[str, Any]:
    """Применить ``rules`` к объекту JSON, читая значения по именам правил.

    Безымянные правила (``Skip``) не участвуют; лишние ключи игнорируются.
    Отсутствующий ключ допустим только для ``Nullable`` и ``OptionalSentinel``.
    Ошибки полей несут ``index`` самого объекта в родительском массиве.
    """
    values: dict[str, Any] = {}
    for rule in rules:
        if rule.name is None:
            continue
        field_path = join_path(path, rule.name)
        if rule.name not in obj:
            if isinstance(rule, (Nullable, OptionalSentinel)):
                values[rule.name] = None
                continue
            raise DecodeError(field=field_path, index=index, reason=f"в объекте нет ключа {rule.name!r}")
        values[rule.name] = rule.extract(obj[rule.name], field_path, index)  # type: ignore[arg-type]
    return values


def decode_keyed_record(
    schema: DecodeSchema, obj: Mapping[str, object], *, path: str = "", index: int | None = None
) -> Any:  # noqa: ANN401
    """Декодировать запись, присланную объектом JSON, по той же таблице правил."""
    values = decode_keyed_fields(schema.rules, obj, path=path, index=index)
    return build_record(schema.record, values, path=path)


def decode_records(schema: DecodeSchema, array: object) -> list[Any]:
    """Декодировать массив однотипных записей (списки ордеров, кошельков и т.п.)."""
    if not _is_array(array):
        raise DecodeError(reason=f"ожидался массив записей, получено {type(array).__name__}")
    return [decode_record(schema, item, path=f"[{i}]", index=i) for i, item in enumerate(array)]  # type: ignore[arg-type]
