"""Service layer helpers"""

from .address import (
    is_evm_chain,
    is_supported_chain,
    is_valid_address_for_chain,
    is_valid_ckb_address,
    normalize_chain,
)

__all__ = [
    "normalize_chain",
    "is_supported_chain",
    "is_evm_chain",
    "is_valid_address_for_chain",
    "is_valid_ckb_address",
]
