"""Typed extraction of scalars from ledger values.

Every helper tolerates ``None`` and kind mismatches by returning the zero value of its
result type. A missing or mistyped field is not an error for reporting purposes; the
corresponding output field simply stays empty.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

from .model.values import (
    Bool,
    ContractId,
    Date,
    Enum,
    Int64,
    List,
    Numeric,
    Optional,
    Party,
    Record,
    Text,
    TextMap,
    Timestamp,
    Unit,
    Variant,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from .model.values import Value

META_KEY_SYMBOL = "splice.chainsafe.io/symbol"

_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


def numeric(value: Value | None) -> str:
    if isinstance(value, Numeric):
        return value.value
    return ""


def text(value: Value | None) -> str:
    if isinstance(value, Text):
        return value.value
    return ""


def party(value: Value | None) -> str:
    if isinstance(value, Party):
        return value.value
    return ""


def contract_id(value: Value | None) -> str:
    if isinstance(value, ContractId):
        return value.value
    return ""


def int64(value: Value | None) -> int | None:
    if isinstance(value, Int64):
        return value.value
    return None


def timestamp(value: Value | None) -> datetime | None:
    if isinstance(value, Timestamp):
        return _EPOCH + timedelta(microseconds=value.micros)
    return None


def variant_constructor(value: Value | None) -> str:
    if isinstance(value, Variant):
        return value.constructor
    return ""


def enum_constructor(value: Value | None) -> str:
    if isinstance(value, Enum):
        return value.constructor
    return ""


def optional(value: Value | None) -> Value | None:
    """Unwrap ``Optional``; any other value is returned unchanged."""

    if isinstance(value, Optional):
        return value.value
    return value


def is_none(value: Value | None) -> bool:
    if value is None:
        return True
    return isinstance(value, Optional) and value.value is None


def record_fields(value: Value | None) -> dict[str, Value]:
    """Map a record's labelled fields by label. Unlabelled fields are ignored."""

    if not isinstance(value, Record):
        return {}
    return {f.label: f.value for f in value.fields if f.label}


def list_elements(value: Value | None) -> tuple[Value, ...]:
    if isinstance(value, List):
        return value.elements
    return ()


def party_list(value: Value | None) -> list[str]:
    return [p for p in (party(element) for element in list_elements(value)) if p]


def text_map(value: Value | None) -> dict[str, str]:
    if not isinstance(value, TextMap):
        return {}
    return {entry.key: text(entry.value) for entry in value.entries}


def metadata(value: Value | None) -> dict[str, str]:
    """Decode a Splice ``Metadata { values : TextMap Text }`` record."""

    return text_map(record_fields(value).get("values"))


def meta_symbol(value: Value | None) -> str:
    return metadata(value).get(META_KEY_SYMBOL, "")


def first_text(fields: Mapping[str, Value], labels: Iterable[str]) -> str:
    """Return the first non-empty text among ``labels``, in the given priority order."""

    for label in labels:
        found = text(fields.get(label))
        if found:
            return found
    return ""


def first_party(fields: Mapping[str, Value], labels: Iterable[str]) -> str:
    for label in labels:
        found = party(fields.get(label))
        if found:
            return found
    return ""


def describe(value: Value | None) -> str:
    """Render any value on one line for debug output."""

    if value is None:
        return "<nil>"
    if isinstance(value, Text):
        return value.value
    if isinstance(value, Numeric):
        return value.value
    if isinstance(value, Int64):
        return str(value.value)
    if isinstance(value, Bool):
        return "true" if value.value else "false"
    if isinstance(value, Party):
        return truncate_party(value.value)
    if isinstance(value, ContractId):
        return truncate_hash(value.value)
    if isinstance(value, Timestamp):
        return f"ts:{value.micros}"
    if isinstance(value, Date):
        return value.as_date.isoformat()
    if isinstance(value, Record):
        return "<record>"
    if isinstance(value, List):
        return f"<list:{len(value.elements)}>"
    if isinstance(value, TextMap):
        return f"<textmap:{len(value.entries)}>"
    if isinstance(value, Optional):
        if value.value is None:
            return "None"
        return f"Some({describe(value.value)})"
    if isinstance(value, Variant):
        return f"{value.constructor}(...)"
    if isinstance(value, Enum):
        return value.constructor
    if isinstance(value, Unit):
        return "()"
    return "<unknown>"


def describe_fields(fields: Mapping[str, Value]) -> str:
    """``label=value`` pairs for every field, rendered with ``describe``."""

    return ", ".join(f"{label}={describe(value)}" for label, value in fields.items())


def truncate_party(value: str) -> str:
    """Shorten a party id to ``hint::1220abcdef12...`` for display."""

    if len(value) <= 50:
        return value
    index = value.find("::")
    if 0 < index < len(value) - 10:
        prefix = value[:index]
        suffix = value[index + 2 :]
        if len(suffix) > 12:
            return f"{prefix}::{suffix[:12]}..."
    return value[:47] + "..."


def truncate_hash(value: str) -> str:
    if len(value) <= 20:
        return value
    return value[:17] + "..."
