from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Union

from fieldform.field_types import ValueShape


@dataclass(frozen=True)
class ScalarValue:
    text: str

    @property
    def shape(self) -> ValueShape:
        return ValueShape.SCALAR


@dataclass(frozen=True)
class FlagValue:
    checked: bool

    @property
    def shape(self) -> ValueShape:
        return ValueShape.FLAG


@dataclass(frozen=True)
class ListValue:
    items: tuple[str, ...] = ()

    @classmethod
    def of(cls, items: Iterable[str]) -> ListValue:
        return cls(tuple(items))

    @property
    def shape(self) -> ValueShape:
        return ValueShape.LIST

    def __len__(self) -> int:
        return len(self.items)


FieldValue = Union[ScalarValue, FlagValue, ListValue]
