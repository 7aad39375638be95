"""Кодек битовых флагов.

Биржа присылает флаги то числом JSON, то строкой с десятичным числом. Обе формы
разбираются одинаково; биты вне известного набора считаются ошибкой, чтобы
расхождение с таблицей флагов биржи обнаруживалось сразу, а не маскировалось.
"""

from enum import IntFlag
from functools import reduce
from operator import or_

from bfx_sdk.contracts.errors import InvalidFlagsError


class BitflagCodec[F: IntFlag]:
    """Кодирование и декодирование фиксированного набора флагов ``F``."""

    def __init__(self, flag_type: type[F]) -> None:
        """Запомнить тип флагов и маску всех известных битов."""
        self._flag_type = flag_type
        self._mask: int = reduce(or_, (member.value for member in flag_type), 0)

    @property
    def mask(self) -> int:
        """Объединение всех известных битов."""
        return self._mask

    def decode(self, value: object) -> F:
        """Разобрать флаги из числа JSON или строки с десятичным числом."""
        if isinstance(value, bool):
            raise InvalidFlagsError(value=value, reason="логическое значение вместо флагов")
        if isinstance(value, str):
            if not (value.isascii() and value.isdigit()):
                raise InvalidFlagsError(value=value, reason=f"строка не является десятичным числом: {value!r}")
            bits = int(value)
        elif isinstance(value, int):
            bits = value
        else:
            raise InvalidFlagsError(value=value, reason=f"неподдерживаемый тип флагов: {type(value).__name__}")

        if bits < 0:
            raise InvalidFlagsError(value=value, reason=f"отрицательное значение флагов: {bits}")
        unknown = bits & ~self._mask
        if unknown:
            raise InvalidFlagsError(value=value, reason=f"неизвестные биты флагов: {unknown:#x}")
        return self._flag_type(bits)

    def encode(self, flags: F) -> int:
        """Вернуть числовое представление флагов для тела запроса."""
        return int(flags)
