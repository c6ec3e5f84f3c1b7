"""Async JSON-RPC client for the bridge service and EVM allowance reads."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..config import Settings, settings as default_settings
from ..core.bridge.errors import AssetQueryError
from ..core.bridge.models import Asset, AssetInfo, AssetQueryResult
from .base import AllowanceSource, AssetQueryService, SignerProvider

logger = logging.getLogger(__name__)

ERC20_ALLOWANCE_SELECTOR = "0xdd62ed3e"  # allowance(address,address)
NATIVE_PLACEHOLDER = "0x0000000000000000000000000000000000000000"


def _encode_address(address: str) -> str:
    """Encode an address as a 32-byte hex string (without 0x prefix)."""
    addr = address.lower().replace("0x", "")
    return addr.zfill(64)


class RpcShadow(BaseModel):
    network: str
    ident: str


class RpcAssetInfo(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    symbol: str
    name: str = ""
    decimals: Optional[int] = None
    logo_uri: Optional[str] = Field(default=None, alias="logoURI")
    shadow: Optional[RpcShadow] = None


class RpcAsset(BaseModel):
    network: str
    ident: str
    info: RpcAssetInfo


class RpcBalance(BaseModel):
    network: str
    ident: str
    amount: int = 0

    @field_validator("amount", mode="before")
    @classmethod
    def _base_units(cls, value: Any) -> int:
        # base units arrive as decimal integer strings
        if isinstance(value, int) and not isinstance(value, bool) and value >= 0:
            return value
        if isinstance(value, str) and value.isascii() and value.isdigit():
            return int(value)
        raise ValueError(f"balance must be a non-negative integer, got {value!r}")


class BridgeRpcClient(AssetQueryService, AllowanceSource):
    """Thin wrapper around the bridge JSON-RPC (asset list, balances) and
    ``eth_call`` allowance reads on the EVM networks."""

    def __init__(
        self,
        *,
        base_url: Optional[str] = None,
        rpc_urls: Optional[Dict[str, str]] = None,
        config: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._config = config or default_settings
        self.base_url = (base_url or self._config.bridge_rpc_url).rstrip("/")
        self._rpc_urls = rpc_urls or self._config.network_rpc_urls()
        self.timeout_s = self._config.request_timeout_seconds
        self._transport = transport
        self._signer: Optional[SignerProvider] = None
        self._request_id = 0

    def set_signer(self, signer: Optional[SignerProvider]) -> None:
        """Balances are only fetched while a signer is known."""
        self._signer = signer

    async def _rpc_call(self, url: str, method: str, params: Any) -> Any:
        if not url:
            raise AssetQueryError(f"No RPC URL configured for {method}")
        self._request_id += 1
        payload = {
            "jsonrpc": "2.0",
            "method": method,
            "params": params,
            "id": self._request_id,
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout_s, transport=self._transport) as client:
                response = await client.post(url, json=payload)
                response.raise_for_status()
                result = response.json()
        except httpx.HTTPError as exc:
            raise AssetQueryError(f"{method} request failed: {exc}") from exc
        except ValueError as exc:
            raise AssetQueryError(f"{method} returned invalid JSON") from exc

        if not isinstance(result, dict):
            raise AssetQueryError(f"{method} returned a non-object reply: {type(result).__name__}")
        if "error" in result:
            raise AssetQueryError(f"RPC error from {method}: {result['error']}")
        return result.get("result")

    # ------------------------------------------------------------------
    # Asset list
    # ------------------------------------------------------------------

    async def get_asset_list(self) -> List[RpcAsset]:
        raw = await self._rpc_call(self.base_url, "getAssetList", [])
        if not isinstance(raw, list):
            raise AssetQueryError(f"Malformed asset list: expected a list, got {type(raw).__name__}")
        try:
            return [RpcAsset.model_validate(item) for item in raw]
        except ValidationError as exc:
            raise AssetQueryError(f"Malformed asset list: {exc}") from exc

    async def get_balances(self, queries: List[Dict[str, str]]) -> List[RpcBalance]:
        if not queries:
            return []
        raw = await self._rpc_call(self.base_url, "getBalance", queries)
        if not isinstance(raw, list):
            raise AssetQueryError(f"Malformed balance response: expected a list, got {type(raw).__name__}")
        try:
            return [RpcBalance.model_validate(item) for item in raw]
        except ValidationError as exc:
            raise AssetQueryError(f"Malformed balance response: {exc}") from exc

    def _to_asset(self, entry: RpcAsset) -> Asset:
        on_counterpart = entry.network == self._config.counterpart_network
        return Asset(
            network=entry.network,
            address=entry.ident,
            symbol=entry.info.symbol,
            info=AssetInfo(
                decimals=entry.info.decimals,
                name=entry.info.name,
                logo_uri=entry.info.logo_uri,
                requires_approval=not on_counterpart and entry.ident.lower() != NATIVE_PLACEHOLDER,
            ),
        )

    def _user_ident(self, network: str) -> Optional[str]:
        if self._signer is None:
            return None
        if network == self._config.counterpart_network:
            return self._signer.identity_counterpart()
        return self._signer.identity_native()

    async def query_assets(self) -> AssetQueryResult:
        entries = await self.get_asset_list()
        bases: Dict[str, Asset] = {}
        shadows: Dict[str, RpcShadow] = {}
        for entry in entries:
            asset = self._to_asset(entry)
            bases[asset.identity()] = asset
            if entry.info.shadow is not None:
                shadows[asset.identity()] = entry.info.shadow

        queries = []
        for asset in bases.values():
            user_ident = self._user_ident(asset.network)
            if user_ident:
                queries.append({"network": asset.network, "userIdent": user_ident, "assetIdent": asset.address})
        balances = {
            f"{item.network}/{item.ident.lower()}": item.amount
            for item in await self.get_balances(queries)
        }
        for key, asset in bases.items():
            asset.amount = balances.get(key, 0)

        result = AssetQueryResult()
        for key, asset in bases.items():
            shadow_ref = shadows.get(key)
            partner = None
            if shadow_ref is not None:
                partner = bases.get(f"{shadow_ref.network}/{shadow_ref.ident.lower()}")
            linked = asset.copy(shadow=partner.copy() if partner is not None else None)
            if asset.network == self._config.counterpart_network:
                result.counterpart_chain_assets.append(linked)
            else:
                result.native_chain_assets.append(linked)

        logger.info(
            "Loaded %d native and %d counterpart bridge assets",
            len(result.native_chain_assets),
            len(result.counterpart_chain_assets),
        )
        return result

    # ------------------------------------------------------------------
    # Allowance
    # ------------------------------------------------------------------

    async def get_allowance(self, owner: str, spender: str, asset: Asset) -> int:
        """ERC20 ``allowance(owner, spender)`` on the asset's network."""
        calldata = ERC20_ALLOWANCE_SELECTOR + _encode_address(owner) + _encode_address(spender)
        result = await self._rpc_call(
            self._rpc_urls.get(asset.network, ""),
            "eth_call",
            [{"to": asset.address, "data": calldata}, "latest"],
        )
        if not result or result == "0x":
            return 0
        try:
            return int(result, 16)
        except (TypeError, ValueError) as exc:
            raise AssetQueryError(f"Unreadable allowance value: {result!r}") from exc
