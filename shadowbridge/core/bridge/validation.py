"""Form validation for the bridge operation form."""

from __future__ import annotations

from typing import Mapping, Optional

from ...services.address import is_valid_address_for_chain
from .amount import to_base_units
from .errors import InvalidAmount
from .models import (
    BRIDGE_AMOUNT_FIELD,
    RECIPIENT_FIELD,
    Direction,
    FieldStatus,
    TransferFormState,
    TransferSide,
    ValidateResult,
)


def _validate_recipient(
    state: TransferFormState,
    native_chain: str,
    counterpart_chain: str,
) -> Optional[str]:
    recipient = (state.recipient or "").strip()
    if not recipient:
        return "Recipient address is required"

    chain = recipient_chain_for(state.direction, native_chain=native_chain, counterpart_chain=counterpart_chain)
    if not is_valid_address_for_chain(recipient, chain):
        return f"Recipient is not a valid {chain} address"
    return None


def _validate_amount(state: TransferFormState) -> Optional[str]:
    text = (state.bridge_from_amount or "").strip()
    if not text:
        return "Amount is required"

    asset = state.selected_asset
    if asset is None:
        return "Select an asset to bridge"
    decimals = asset.decimals
    if decimals is None:
        return "Asset details are still loading"

    try:
        amount = to_base_units(text, decimals)
    except InvalidAmount:
        return f"Amount must be a number with at most {decimals} decimal places"
    if amount <= 0:
        return "Amount must be greater than 0"
    if amount > asset.amount:
        return f"Insufficient {asset.symbol} balance"
    return None


def validate_form(
    state: TransferFormState,
    *,
    native_chain: str,
    counterpart_chain: str,
) -> ValidateResult:
    """Map the current selection to field-level errors."""
    errors = {}
    message = _validate_amount(state)
    if message:
        errors[BRIDGE_AMOUNT_FIELD] = message
    message = _validate_recipient(state, native_chain, counterpart_chain)
    if message:
        errors[RECIPIENT_FIELD] = message
    return ValidateResult(errors=errors)


def field_status(name: str, result: Optional[ValidateResult], touched: Mapping[str, bool]) -> FieldStatus:
    """Inline status for a field: an error only shows once the field is touched."""
    message = result.get(name) if result is not None else None
    if touched.get(name) and message:
        return FieldStatus(validate_status="error", help=message)
    return FieldStatus()


def recipient_chain_for(direction: Direction, *, native_chain: str, counterpart_chain: str) -> str:
    if direction.side.recipient_chain is TransferSide.COUNTERPART:
        return counterpart_chain
    return native_chain


__all__ = [
    "validate_form",
    "field_status",
    "recipient_chain_for",
]
