"""Conversion between human decimal strings and integer base units.

All arithmetic is done on integers and digit strings. Floats never touch an
amount, so ``to_human_string(to_base_units(s, d), d, separator=False)``
reproduces ``normalize(s)`` exactly for any ``s`` within ``d`` decimals.
"""

from __future__ import annotations

import re
from typing import Tuple

from .errors import InvalidAmount

_HUMAN_AMOUNT_RE = re.compile(r"^(?P<whole>[0-9]*)(?:\.(?P<frac>[0-9]*))?$")


def _check_decimals(decimals: int) -> None:
    if isinstance(decimals, bool) or not isinstance(decimals, int) or decimals < 0:
        raise ValueError(f"decimals must be a non-negative integer, got {decimals!r}")


def _split(human: str) -> Tuple[str, str]:
    if not isinstance(human, str):
        raise InvalidAmount(f"Amount must be a string, got {type(human).__name__}")
    text = human.strip()
    match = _HUMAN_AMOUNT_RE.fullmatch(text)
    if match is None:
        raise InvalidAmount(f"Not a valid amount: {human!r}")
    whole = match.group("whole")
    frac = match.group("frac") or ""
    if not whole and not frac:
        raise InvalidAmount(f"Not a valid amount: {human!r}")
    return whole, frac


def to_base_units(human: str, decimals: int) -> int:
    """Convert ``"1.5"`` with 18 decimals into ``1500000000000000000``."""
    _check_decimals(decimals)
    whole, frac = _split(human)
    if len(frac) > decimals:
        raise InvalidAmount(
            f"Amount {human.strip()!r} has {len(frac)} decimal places, at most {decimals} allowed"
        )
    scale = 10 ** decimals
    return int(whole or "0") * scale + int(frac.ljust(decimals, "0") or "0")


def to_human_string(amount: int, decimals: int, *, separator: bool = True) -> str:
    """Render base units as a human string.

    With ``separator`` the integer part is grouped by thousands (``1,234.5``);
    without it the output is accepted back by ``to_base_units``.
    """
    _check_decimals(decimals)
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise TypeError(f"amount must be an int, got {type(amount).__name__}")
    if amount < 0:
        raise InvalidAmount(f"Amount cannot be negative: {amount}")

    whole, frac = divmod(amount, 10 ** decimals)
    whole_text = f"{whole:,}" if separator else str(whole)
    frac_text = str(frac).rjust(decimals, "0").rstrip("0") if decimals else ""
    return f"{whole_text}.{frac_text}" if frac_text else whole_text


def normalize(human: str) -> str:
    """Canonical form of a human amount: no padding zeros, no separators."""
    whole, frac = _split(human)
    whole = whole.lstrip("0") or "0"
    frac = frac.rstrip("0")
    return f"{whole}.{frac}" if frac else whole


def is_valid_amount(human: str, decimals: int) -> bool:
    try:
        to_base_units(human, decimals)
    except InvalidAmount:
        return False
    return True


__all__ = [
    "to_base_units",
    "to_human_string",
    "normalize",
    "is_valid_amount",
]
