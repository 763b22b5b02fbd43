"""Translate ledger gateway payloads into domain objects."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from bridgetally.domain.model import values
from bridgetally.domain.model.ledger import (
    ActiveContract,
    CreatedEvent,
    LedgerUpdate,
    TemplateId,
    Transaction,
)

if TYPE_CHECKING:
    from bridgetally.domain.model.values import Value

    from .schema import (
        ActiveContractPayload,
        CreatedEventPayload,
        IdentifierPayload,
        RecordPayload,
        UpdatePayload,
        ValuePayload,
    )

log = getLogger(__name__)


def parse_value(payload: ValuePayload | None) -> Value:
    """Convert one tagged value; unset or unsupported members become ``Unit``."""

    if payload is None:
        return values.Unit()
    if payload.record is not None:
        return parse_record(payload.record)
    if payload.text is not None:
        return values.Text(payload.text)
    if payload.party is not None:
        return values.Party(payload.party)
    if payload.numeric is not None:
        return values.Numeric(payload.numeric)
    if payload.contract_id is not None:
        return values.ContractId(payload.contract_id)
    if payload.variant is not None:
        return values.Variant(
            constructor=payload.variant.constructor,
            value=parse_value(payload.variant.value),
        )
    if payload.optional is not None:
        inner = payload.optional.value
        return values.Optional(parse_value(inner) if inner is not None else None)
    if payload.list_ is not None:
        return values.List(tuple(parse_value(element) for element in payload.list_.elements))
    if payload.text_map is not None:
        return values.TextMap(
            tuple(
                values.TextMapEntry(key=entry.key, value=parse_value(entry.value))
                for entry in payload.text_map.entries
            )
        )
    if payload.enum is not None:
        return values.Enum(payload.enum.constructor)
    if payload.int64 is not None:
        return values.Int64(payload.int64)
    if payload.timestamp is not None:
        return values.Timestamp(payload.timestamp)
    if payload.date is not None:
        return values.Date(payload.date)
    if payload.bool_ is not None:
        return values.Bool(payload.bool_)
    if payload.unit is None:
        log.debug("Unsupported ledger value kind, treating as unit")
    return values.Unit()


def parse_record(payload: RecordPayload) -> values.Record:
    return values.Record(
        tuple(
            values.RecordField(label=field.label, value=parse_value(field.value))
            for field in payload.fields
        )
    )


def parse_template_id(payload: IdentifierPayload) -> TemplateId:
    return TemplateId(
        module_name=payload.module_name,
        entity_name=payload.entity_name,
        package_id=payload.package_id,
    )


def parse_created_event(payload: CreatedEventPayload) -> CreatedEvent:
    return CreatedEvent(
        contract_id=payload.contract_id,
        template_id=parse_template_id(payload.template_id),
        arguments=parse_record(payload.create_arguments),
    )


def parse_update(payload: UpdatePayload) -> LedgerUpdate:
    """Keep transactions and their created events; other update kinds carry no transaction."""

    transaction = payload.transaction
    if transaction is None:
        return LedgerUpdate()
    created = tuple(
        parse_created_event(event.created)
        for event in transaction.events
        if event.created is not None
    )
    return LedgerUpdate(
        transaction=Transaction(
            update_id=transaction.update_id,
            offset=transaction.offset,
            effective_at=transaction.effective_at,
            created_events=created,
        )
    )


def parse_active_contract(payload: ActiveContractPayload) -> ActiveContract:
    return ActiveContract(
        created_event=parse_created_event(payload.created_event),
        synchronizer_id=payload.synchronizer_id,
    )
