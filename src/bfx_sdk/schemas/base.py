from abc import ABC
from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic import ConfigDict, field_serializer
from pydantic.dataclasses import dataclass as pdc_dataclass


@pdc_dataclass(
    config=ConfigDict(
        extra="ignore",
        arbitrary_types_allowed=True,  # IntFlag и прочие нестандартные типы
    ),
    frozen=True
)
class ResponseBase(ABC):
    """Базовая неизменяемая запись, собираемая только декодером."""

    @field_serializer("*", when_used="json")
    def _serialize_wire(self, v: Any) -> Any:  # noqa: ANN401, PLR6301
        """Преобразует Decimal ➜ str и перечисления ➜ их проводные значения при выгрузке в JSON."""
        if isinstance(v, Decimal):
            return str(v)
        if isinstance(v, Enum):
            return v.value
        return v
