"""Operator CLI for inspecting the bridge RPC"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

import httpx

from .config import Settings, settings as default_settings
from .core.bridge.amount import to_human_string
from .core.bridge.errors import BridgeError
from .core.bridge.models import Asset, Direction, NetworkPair
from .core.bridge.networks import SUPPORTED_NETWORKS, asset_list_for, network_specs
from .logging_config import setup_logging
from .providers.base import SignerProvider
from .providers.bridge_rpc import BridgeRpcClient
from .services.address import is_valid_address_for_chain

logger = logging.getLogger(__name__)


class AddressSigner(SignerProvider):
    """Identities passed on the command line; only used to look up balances."""

    def __init__(self, native: str = "", counterpart: str = ""):
        self._native = native
        self._counterpart = counterpart

    def identity_native(self) -> str:
        return self._native

    def identity_counterpart(self) -> str:
        return self._counterpart


def format_asset(asset: Asset) -> str:
    if asset.decimals is not None:
        balance = to_human_string(asset.amount, asset.decimals)
    else:
        balance = str(asset.amount)
    shadow = asset.shadow.identity() if asset.shadow is not None else "-"
    return f"{asset.symbol:<8} {balance:>24}  {asset.identity()} -> {shadow}"


async def cli_assets(
    client: BridgeRpcClient,
    network: str,
    direction: Direction,
    native_address: Optional[str] = None,
    counterpart_address: Optional[str] = None,
) -> int:
    """List the assets selectable for one network pair"""
    if native_address or counterpart_address:
        client.set_signer(AddressSigner(native_address or "", counterpart_address or ""))

    result = await client.query_assets()
    assets = asset_list_for(NetworkPair(network=network, direction=direction), result)

    print(f"Bridge assets for {network} ({direction.value}): {len(assets)}")
    for asset in assets:
        print(format_asset(asset))
    return 0


async def cli_allowance(
    client: BridgeRpcClient,
    config: Settings,
    owner: str,
    token: str,
    network: str,
) -> int:
    """Print what the bridge contract may currently spend for ``owner``"""
    if not (is_valid_address_for_chain(owner, network) and is_valid_address_for_chain(token, network)):
        print(f"❌ Error: owner and token must be {network} addresses")
        return 2
    spender = network_specs(config)[network].bridge_contract
    if not spender:
        print(f"❌ Error: no bridge contract configured for {network}")
        return 2

    approved = await client.get_allowance(owner, spender, Asset(network=network, address=token, symbol=""))
    print(f"Allowance of {owner} for {spender} on {network}: {approved}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="shadowbridge", description="Bridge asset and allowance queries")
    parser.add_argument("--log-level", help="Override LOG_LEVEL for this run")
    subparsers = parser.add_subparsers(dest="command")

    assets_parser = subparsers.add_parser("assets", help="List bridgeable assets for a network pair")
    assets_parser.add_argument("--network", choices=SUPPORTED_NETWORKS, default="Ethereum")
    assets_parser.add_argument(
        "--direction",
        choices=[direction.value for direction in Direction],
        default=Direction.IN.value,
    )
    assets_parser.add_argument("--native-address", help="Fetch balances for this native-chain address")
    assets_parser.add_argument("--counterpart-address", help="Fetch balances for this counterpart-chain address")

    allowance_parser = subparsers.add_parser("allowance", help="Read a token allowance granted to the bridge")
    allowance_parser.add_argument("owner", help="Token holder address")
    allowance_parser.add_argument("token", help="ERC20 token address")
    allowance_parser.add_argument("--network", choices=SUPPORTED_NETWORKS, default="Ethereum")

    return parser


async def main(
    argv: Optional[List[str]] = None,
    *,
    config: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    config = config or default_settings
    setup_logging(args.log_level or config.log_level)

    if not args.command:
        parser.print_help()
        return 0

    client = BridgeRpcClient(config=config, transport=transport)
    try:
        if args.command == "assets":
            return await cli_assets(
                client,
                args.network,
                Direction(args.direction),
                args.native_address,
                args.counterpart_address,
            )
        return await cli_allowance(client, config, args.owner, args.token, args.network)
    except BridgeError as exc:
        logger.error("%s command failed: %s", args.command, exc)
        print(f"❌ Error: {exc}")
        return 1


def run() -> None:
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
