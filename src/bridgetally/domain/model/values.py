"""Ledger value model.

The ledger transmits contract arguments as a generic tagged value. Each tag is a
frozen dataclass here and ``Value`` is the closed union of all of them, so decoding
code can branch on the concrete class instead of probing dictionaries.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date as _date


@dataclass(frozen=True, slots=True)
class Unit:
    pass


@dataclass(frozen=True, slots=True)
class Bool:
    value: bool


@dataclass(frozen=True, slots=True)
class Int64:
    value: int


@dataclass(frozen=True, slots=True)
class Numeric:
    """Fixed-point decimal kept in its textual ledger form."""

    value: str


@dataclass(frozen=True, slots=True)
class Text:
    value: str


@dataclass(frozen=True, slots=True)
class Party:
    value: str


@dataclass(frozen=True, slots=True)
class ContractId:
    value: str


@dataclass(frozen=True, slots=True)
class Timestamp:
    """Microseconds since the Unix epoch, UTC."""

    micros: int


@dataclass(frozen=True, slots=True)
class Date:
    """Days since the Unix epoch."""

    days: int

    @property
    def as_date(self) -> _date:
        return _date.fromordinal(_EPOCH_ORDINAL + self.days)


@dataclass(frozen=True, slots=True)
class RecordField:
    label: str
    value: Value


@dataclass(frozen=True, slots=True)
class Record:
    fields: tuple[RecordField, ...] = field(default_factory=tuple)


@dataclass(frozen=True, slots=True)
class List:
    elements: tuple[Value, ...] = field(default_factory=tuple)


@dataclass(frozen=True, slots=True)
class Optional:
    value: Value | None = None


@dataclass(frozen=True, slots=True)
class TextMapEntry:
    key: str
    value: Value


@dataclass(frozen=True, slots=True)
class TextMap:
    entries: tuple[TextMapEntry, ...] = field(default_factory=tuple)


@dataclass(frozen=True, slots=True)
class Variant:
    constructor: str
    value: Value = field(default_factory=Unit)


@dataclass(frozen=True, slots=True)
class Enum:
    constructor: str


type Value = (
    Unit
    | Bool
    | Int64
    | Numeric
    | Text
    | Party
    | ContractId
    | Timestamp
    | Date
    | Record
    | List
    | Optional
    | TextMap
    | Variant
    | Enum
)

_EPOCH_ORDINAL = _date(1970, 1, 1).toordinal()


def record(**fields: Value) -> Record:
    """Build a record from keyword fields, preserving their order."""

    return Record(fields=tuple(RecordField(label=label, value=v) for label, v in fields.items()))


__all__ = [
    "Bool",
    "ContractId",
    "Date",
    "Enum",
    "Int64",
    "List",
    "Numeric",
    "Optional",
    "Party",
    "Record",
    "RecordField",
    "Text",
    "TextMap",
    "TextMapEntry",
    "Timestamp",
    "Unit",
    "Value",
    "Variant",
    "record",
]
