"""Pydantic models describing the ledger JSON gateway payloads.

Payloads follow the protobuf JSON mapping of the Ledger API v2: camelCase keys,
64-bit integers as strings, one key per ``oneof`` member.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator


class LedgerBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class RecordFieldPayload(LedgerBaseModel):
    label: str = ""
    value: ValuePayload


class RecordPayload(LedgerBaseModel):
    fields: list[RecordFieldPayload] = Field(default_factory=list)


class ListPayload(LedgerBaseModel):
    elements: list[ValuePayload] = Field(default_factory=list)


class OptionalPayload(LedgerBaseModel):
    value: ValuePayload | None = None


class TextMapEntryPayload(LedgerBaseModel):
    key: str
    value: ValuePayload


class TextMapPayload(LedgerBaseModel):
    entries: list[TextMapEntryPayload] = Field(default_factory=list)


class VariantPayload(LedgerBaseModel):
    constructor: str
    value: ValuePayload | None = None


class EnumPayload(LedgerBaseModel):
    constructor: str


class ValuePayload(LedgerBaseModel):
    """One ``Value`` message; exactly one member is expected to be set."""

    unit: dict[str, object] | None = None
    bool_: bool | None = Field(default=None, alias="bool")
    int64: int | None = None
    numeric: str | None = None
    text: str | None = None
    party: str | None = None
    contract_id: str | None = Field(default=None, alias="contractId")
    timestamp: int | None = None
    date: int | None = None
    optional: OptionalPayload | None = None
    list_: ListPayload | None = Field(default=None, alias="list")
    text_map: TextMapPayload | None = Field(default=None, alias="textMap")
    record: RecordPayload | None = None
    variant: VariantPayload | None = None
    enum: EnumPayload | None = None


class IdentifierPayload(LedgerBaseModel):
    package_id: str = Field(default="", alias="packageId")
    module_name: str = Field(alias="moduleName")
    entity_name: str = Field(alias="entityName")

    @model_validator(mode="before")
    @classmethod
    def _parse_compact_identifier(cls, value: object) -> object:
        # "<package>:<Module.Path>:<Entity>" as used by the native JSON API
        if isinstance(value, str):
            package_id, _, rest = value.partition(":")
            module_name, _, entity_name = rest.partition(":")
            return {
                "packageId": package_id,
                "moduleName": module_name,
                "entityName": entity_name,
            }
        return value


class CreatedEventPayload(LedgerBaseModel):
    contract_id: str = Field(alias="contractId")
    template_id: IdentifierPayload = Field(alias="templateId")
    create_arguments: RecordPayload = Field(
        default_factory=RecordPayload, alias="createArguments"
    )
    offset: int | None = None


class EventPayload(LedgerBaseModel):
    created: CreatedEventPayload | None = None
    archived: dict[str, object] | None = None
    exercised: dict[str, object] | None = None

    @model_validator(mode="before")
    @classmethod
    def _unwrap_named_events(cls, value: object) -> object:
        # the native JSON API names the members CreatedEvent / ArchivedEvent
        if isinstance(value, Mapping) and "CreatedEvent" in value:
            return {"created": value["CreatedEvent"]}
        return value


class TransactionPayload(LedgerBaseModel):
    update_id: str = Field(default="", alias="updateId")
    offset: int
    effective_at: datetime | None = Field(default=None, alias="effectiveAt")
    events: list[EventPayload] = Field(default_factory=list)


class UpdatePayload(LedgerBaseModel):
    """``GetUpdatesResponse``; only transactions are of interest."""

    transaction: TransactionPayload | None = None


class ActiveContractPayload(LedgerBaseModel):
    created_event: CreatedEventPayload = Field(alias="createdEvent")
    synchronizer_id: str = Field(default="", alias="synchronizerId")


class ActiveContractsPayload(LedgerBaseModel):
    """``GetActiveContractsResponse``; incomplete reassignments are ignored."""

    active_contract: ActiveContractPayload | None = Field(default=None, alias="activeContract")


class StatusPayload(LedgerBaseModel):
    code: int | None = None
    message: str = ""


class UpdateFrame(LedgerBaseModel):
    result: UpdatePayload | None = None
    error: StatusPayload | None = None


class ActiveContractsFrame(LedgerBaseModel):
    result: ActiveContractsPayload | None = None
    error: StatusPayload | None = None


class LedgerEndPayload(LedgerBaseModel):
    offset: int = 0


for _model in (
    RecordFieldPayload,
    RecordPayload,
    ListPayload,
    OptionalPayload,
    TextMapEntryPayload,
    TextMapPayload,
    VariantPayload,
):
    _model.model_rebuild()
