"""
Tests for the bridge JSON-RPC client, using httpx.MockTransport.
"""

import json

import httpx
import pytest

from shadowbridge.config import Settings
from shadowbridge.core.bridge.errors import AssetQueryError
from shadowbridge.core.bridge.models import Asset, AssetInfo
from shadowbridge.providers.base import SignerProvider
from shadowbridge.providers.bridge_rpc import BridgeRpcClient

BRIDGE_URL = "https://bridge.example/rpc"
ETH_RPC_URL = "https://eth.example/rpc"
DAI = "0x6B175474E89094C44Da98b954EedeAC495271d0F"
CK_DAI = "0x" + "cd" * 32
OWNER = "0x1111111111111111111111111111111111111111"
SPENDER = "0x" + "b" * 40

ASSET_LIST = [
    {
        "network": "Ethereum",
        "ident": DAI,
        "info": {
            "decimals": 18,
            "name": "Dai",
            "symbol": "DAI",
            "logoURI": "https://logo.example/dai.png",
            "shadow": {"network": "Nervos", "ident": CK_DAI},
        },
    },
    {
        "network": "Ethereum",
        "ident": "0x0000000000000000000000000000000000000000",
        "info": {"decimals": 18, "name": "Ether", "symbol": "ETH"},
    },
    {
        "network": "Nervos",
        "ident": CK_DAI,
        "info": {
            "decimals": 18,
            "name": "Dai",
            "symbol": "ckDAI",
            "shadow": {"network": "Ethereum", "ident": DAI},
        },
    },
]


class DummySigner(SignerProvider):

    def identity_native(self) -> str:
        return OWNER

    def identity_counterpart(self) -> str:
        return "ckt1qyqrdsefa43s6m882pcj53m4gdnj4k440axqswmu83"


def _client(handler) -> BridgeRpcClient:
    config = Settings(
        bridge_rpc_url=BRIDGE_URL,
        ethereum_rpc_url=ETH_RPC_URL,
        counterpart_network="Nervos",
    )
    return BridgeRpcClient(config=config, transport=httpx.MockTransport(handler))


def _rpc_result(request: httpx.Request, result) -> httpx.Response:
    body = json.loads(request.content)
    return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], "result": result})


class TestQueryAssets:

    @pytest.mark.asyncio
    async def test_pairs_assets_with_shadows(self):
        methods = []

        def handler(request: httpx.Request) -> httpx.Response:
            body = json.loads(request.content)
            methods.append(body["method"])
            assert str(request.url) == BRIDGE_URL
            return _rpc_result(request, ASSET_LIST)

        result = await _client(handler).query_assets()

        assert methods == ["getAssetList"]
        assert [a.symbol for a in result.native_chain_assets] == ["DAI", "ETH"]
        assert [a.symbol for a in result.counterpart_chain_assets] == ["ckDAI"]

        dai = result.native_chain_assets[0]
        assert dai.decimals == 18
        assert dai.info.logo_uri == "https://logo.example/dai.png"
        assert dai.info.requires_approval is True
        assert dai.shadow.identity() == f"Nervos/{CK_DAI}"
        assert dai.shadow.shadow is None

        eth = result.native_chain_assets[1]
        assert eth.shadow is None
        assert eth.info.requires_approval is False

        ck_dai = result.counterpart_chain_assets[0]
        assert ck_dai.info.requires_approval is False
        assert ck_dai.shadow.identity() == f"Ethereum/{DAI.lower()}"

    @pytest.mark.asyncio
    async def test_balances_fetched_with_signer(self):
        def handler(request: httpx.Request) -> httpx.Response:
            body = json.loads(request.content)
            if body["method"] == "getAssetList":
                return _rpc_result(request, ASSET_LIST[:1] + ASSET_LIST[2:])
            assert body["method"] == "getBalance"
            assert {q["userIdent"] for q in body["params"]} == {
                OWNER,
                "ckt1qyqrdsefa43s6m882pcj53m4gdnj4k440axqswmu83",
            }
            return _rpc_result(
                request,
                [
                    {"network": "Ethereum", "ident": DAI, "amount": "2000000000000000000"},
                    {"network": "Nervos", "ident": CK_DAI, "amount": "5"},
                ],
            )

        client = _client(handler)
        client.set_signer(DummySigner())
        result = await client.query_assets()

        assert result.native_chain_assets[0].amount == 2 * 10 ** 18
        assert result.native_chain_assets[0].shadow.amount == 5
        assert result.counterpart_chain_assets[0].amount == 5

    @pytest.mark.asyncio
    async def test_rpc_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "error": {"code": -32000, "message": "down"}})

        with pytest.raises(AssetQueryError):
            await _client(handler).query_assets()

    @pytest.mark.asyncio
    async def test_http_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(502)

        with pytest.raises(AssetQueryError):
            await _client(handler).query_assets()

    @pytest.mark.asyncio
    async def test_malformed_payload(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return _rpc_result(request, [{"network": "Ethereum"}])

        with pytest.raises(AssetQueryError):
            await _client(handler).query_assets()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("reply", [["oops"], "oops", 42])
    async def test_non_object_reply(self, reply):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=reply)

        with pytest.raises(AssetQueryError):
            await _client(handler).query_assets()

    @pytest.mark.asyncio
    async def test_asset_list_must_be_a_list(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return _rpc_result(request, {"network": "Ethereum"})

        with pytest.raises(AssetQueryError):
            await _client(handler).query_assets()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("amount", ["1.5", "-1", "0x10", "", None])
    async def test_fractional_or_garbled_balance(self, amount):
        def handler(request: httpx.Request) -> httpx.Response:
            body = json.loads(request.content)
            if body["method"] == "getAssetList":
                return _rpc_result(request, ASSET_LIST[:1])
            return _rpc_result(request, [{"network": "Ethereum", "ident": DAI, "amount": amount}])

        client = _client(handler)
        client.set_signer(DummySigner())
        with pytest.raises(AssetQueryError):
            await client.query_assets()


class TestAllowance:

    @pytest.mark.asyncio
    async def test_eth_call_encoding(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            body = json.loads(request.content)
            seen["url"] = str(request.url)
            seen["body"] = body
            return _rpc_result(request, hex(12345))

        asset = Asset(network="Ethereum", address=DAI, symbol="DAI", info=AssetInfo(decimals=18))
        approved = await _client(handler).get_allowance(OWNER, SPENDER, asset)

        assert approved == 12345
        assert seen["url"] == ETH_RPC_URL
        assert seen["body"]["method"] == "eth_call"
        call, block = seen["body"]["params"]
        assert block == "latest"
        assert call["to"] == DAI
        assert call["data"] == "0xdd62ed3e" + OWNER[2:].zfill(64) + SPENDER[2:].zfill(64)

    @pytest.mark.asyncio
    async def test_empty_result_is_zero(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return _rpc_result(request, "0x")

        asset = Asset(network="Ethereum", address=DAI, symbol="DAI")
        assert await _client(handler).get_allowance(OWNER, SPENDER, asset) == 0

    @pytest.mark.asyncio
    async def test_unconfigured_network(self):
        def handler(request: httpx.Request) -> httpx.Response:  # pragma: no cover
            raise AssertionError("no request expected")

        asset = Asset(network="BSC", address=DAI, symbol="DAI")
        with pytest.raises(AssetQueryError):
            await _client(handler).get_allowance(OWNER, SPENDER, asset)
