"""Supported networks and direction-dependent metadata."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from ...config import Settings
from .models import Asset, AssetQueryResult, Direction, NetworkPair

NETWORK_SYMBOLS: Dict[str, str] = {
    "Ethereum": "ETH",
    "BSC": "BNB",
}

SUPPORTED_NETWORKS: Tuple[str, ...] = tuple(NETWORK_SYMBOLS)


@dataclass(frozen=True)
class NetworkSpec:
    name: str
    chain_id: int
    symbol: str
    bridge_contract: str = ""

    @property
    def hex_chain_id(self) -> str:
        """Chain id in the ``0x``-prefixed form wallets expect for a network switch."""
        return f"0x{self.chain_id:x}"


def network_specs(settings: Settings) -> Dict[str, NetworkSpec]:
    chain_ids = settings.network_chain_ids()
    contracts = settings.bridge_contracts()
    return {
        name: NetworkSpec(
            name=name,
            chain_id=chain_ids[name],
            symbol=symbol,
            bridge_contract=contracts.get(name, ""),
        )
        for name, symbol in NETWORK_SYMBOLS.items()
    }


def network_direction(pair: NetworkPair, counterpart_network: str) -> Tuple[str, str]:
    """(from, to) network names for display."""
    if pair.direction is Direction.IN:
        return pair.network, counterpart_network
    return counterpart_network, pair.network


def recipient_label(pair: NetworkPair, spec: NetworkSpec, counterpart_symbol: str) -> str:
    symbol = counterpart_symbol if pair.direction is Direction.IN else spec.symbol
    return f"To {symbol} Address"


def requires_network_switch(wallet_chain_id: Optional[int], spec: NetworkSpec) -> bool:
    """True when a connected wallet sits on a different chain than the network needs."""
    return wallet_chain_id is not None and wallet_chain_id != spec.chain_id


def asset_list_for(pair: NetworkPair, result: Optional[AssetQueryResult]) -> List[Asset]:
    """Assets selectable for ``pair``: native assets of the network for In,
    counterpart assets whose shadow lives on the network for Out."""
    if result is None:
        return []
    if pair.direction is Direction.IN:
        return [asset for asset in result.native_chain_assets if asset.network == pair.network]
    return [
        asset
        for asset in result.counterpart_chain_assets
        if asset.shadow is None or asset.shadow.network == pair.network
    ]


__all__ = [
    "NETWORK_SYMBOLS",
    "SUPPORTED_NETWORKS",
    "NetworkSpec",
    "network_specs",
    "network_direction",
    "recipient_label",
    "requires_network_switch",
    "asset_list_for",
]
