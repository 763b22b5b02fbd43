"""Classify created events by template identity."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from .model.ledger import TemplateId

FINGERPRINT_AUTH_MODULE: Final = "Common.FingerprintAuth"
BRIDGE_CONTRACTS_MODULE: Final = "Bridge.Contracts"
HOLDING_MODULE: Final = "CIP56.Token"

PENDING_DEPOSIT: Final = "PendingDeposit"
DEPOSIT_EVENT: Final = "DepositEvent"
WITHDRAWAL_REQUEST: Final = "WithdrawalRequest"
WITHDRAWAL_EVENT: Final = "WithdrawalEvent"
HOLDING: Final = "CIP56Holding"


def is_deposit_event(template_id: TemplateId) -> bool:
    # DepositEvent matches on entity name alone; the name is unique to the bridge.
    return (
        template_id.module_name == FINGERPRINT_AUTH_MODULE
        and template_id.entity_name == PENDING_DEPOSIT
    ) or template_id.entity_name == DEPOSIT_EVENT


def is_withdrawal_event(template_id: TemplateId) -> bool:
    return template_id.module_name == BRIDGE_CONTRACTS_MODULE and template_id.entity_name in {
        WITHDRAWAL_REQUEST,
        WITHDRAWAL_EVENT,
    }


def is_holding_contract(template_id: TemplateId) -> bool:
    return template_id.module_name == HOLDING_MODULE and template_id.entity_name == HOLDING
