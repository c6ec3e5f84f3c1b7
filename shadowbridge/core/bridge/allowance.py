"""Allowance evaluation: does the spendable token need an approval first?"""

from __future__ import annotations

from typing import Collection, Optional

from .amount import to_base_units
from .errors import InvalidAmount
from .models import (
    AllowanceStatus,
    Asset,
    Direction,
    NeedApprove,
    Sufficient,
    TransferSide,
)


DEFAULT_APPROVAL_DIRECTIONS = frozenset({Direction.OUT})


def spendable_asset(selected: Asset, direction: Direction) -> Optional[Asset]:
    """The half of the pair that leaves the user's wallet in ``direction``."""
    if direction.side is TransferSide.NATIVE:
        return selected
    return selected.shadow


def requested_amount(asset: Asset, human_amount: str) -> int:
    """Base units the user is asking to move; 0 when not yet expressible."""
    decimals = asset.decimals
    if decimals is None or not human_amount or not human_amount.strip():
        return 0
    try:
        return to_base_units(human_amount, decimals)
    except InvalidAmount:
        return 0


def evaluate_allowance(
    asset: Asset,
    direction: Direction,
    approved: int,
    requested: int,
    *,
    approval_directions: Collection[Direction] = DEFAULT_APPROVAL_DIRECTIONS,
) -> AllowanceStatus:
    """Pure allowance policy.

    ``asset`` is the selected asset (with its shadow). Only directions listed
    in ``approval_directions`` consume an allowance, and only for tokens that
    require one.
    """
    if direction not in approval_directions:
        return Sufficient()

    token = spendable_asset(asset, direction)
    if token is None:
        return Sufficient()
    if token.info is not None and not token.info.requires_approval:
        return Sufficient()

    if approved < requested:
        return NeedApprove(add_approve=requested - approved)
    return Sufficient()


def parse_approval_directions(names: Collection[str]) -> frozenset:
    return frozenset(Direction(name) for name in names)


__all__ = [
    "DEFAULT_APPROVAL_DIRECTIONS",
    "evaluate_allowance",
    "parse_approval_directions",
    "requested_amount",
    "spendable_asset",
]
