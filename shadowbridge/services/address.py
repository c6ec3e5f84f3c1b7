"""Helpers for normalizing chain identifiers and validating recipient addresses."""

from __future__ import annotations

import re
from functools import lru_cache

_BECH32_CHARSET = "qpzry9x8gf2tvdw0s3jn54khce6mua7l"

_EVM_ADDRESS_RE = re.compile(r"^0x[a-fA-F0-9]{40}$")
_CKB_ADDRESS_RE = re.compile(rf"^ck[bt]1[{_BECH32_CHARSET}]{{42,}}$")

_CHAIN_ALIASES = {
    "eth": "ethereum",
    "ethereum": "ethereum",
    "bsc": "bsc",
    "bnb": "bsc",
    "binance": "bsc",
    "ckb": "ckb",
    "nervos": "ckb",
}

_EVM_CHAINS = {
    "ethereum",
    "bsc",
}


def normalize_chain(chain: str) -> str:
    """Collapse chain names and network labels (``Nervos``, ``BNB``) into canonical slugs."""

    slug = chain.lower().strip()
    return _CHAIN_ALIASES.get(slug, slug)


def is_supported_chain(chain: str) -> bool:
    """Return True for chains the bridge has an address family for."""

    return normalize_chain(chain) in _EVM_CHAINS | {"ckb"}


def is_evm_chain(chain: str) -> bool:
    return normalize_chain(chain) in _EVM_CHAINS


@lru_cache(maxsize=128)
def is_valid_ckb_address(address: str) -> bool:
    # bech32 is single-case; mixed case is never a valid encoding
    if not address or address != address.lower():
        return False
    return bool(_CKB_ADDRESS_RE.fullmatch(address))


def is_valid_address_for_chain(address: str, chain: str) -> bool:
    if not address:
        return False
    chain = normalize_chain(chain)
    if is_evm_chain(chain):
        return bool(_EVM_ADDRESS_RE.fullmatch(address))
    if chain == "ckb":
        return is_valid_ckb_address(address)
    return False


__all__ = [
    "normalize_chain",
    "is_supported_chain",
    "is_evm_chain",
    "is_valid_address_for_chain",
    "is_valid_ckb_address",
]
