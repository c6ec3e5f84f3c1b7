"""
Tests for the shadowbridge operator CLI, with the RPC stubbed by httpx.MockTransport.
"""

import json

import httpx
import pytest

from shadowbridge import cli
from shadowbridge.config import Settings

BRIDGE_URL = "https://bridge.example/rpc"
ETH_RPC_URL = "https://eth.example/rpc"
BRIDGE_CONTRACT = "0x" + "b" * 40
DAI = "0x6B175474E89094C44Da98b954EedeAC495271d0F"
CK_DAI = "0x" + "cd" * 32
OWNER = "0x1111111111111111111111111111111111111111"

ASSET_LIST = [
    {
        "network": "Ethereum",
        "ident": DAI,
        "info": {"decimals": 18, "symbol": "DAI", "shadow": {"network": "Nervos", "ident": CK_DAI}},
    },
    {
        "network": "Nervos",
        "ident": CK_DAI,
        "info": {"decimals": 18, "symbol": "ckDAI", "shadow": {"network": "Ethereum", "ident": DAI}},
    },
]


@pytest.fixture
def config() -> Settings:
    return Settings(
        bridge_rpc_url=BRIDGE_URL,
        ethereum_rpc_url=ETH_RPC_URL,
        ethereum_bridge_contract=BRIDGE_CONTRACT,
        counterpart_network="Nervos",
    )


@pytest.fixture(autouse=True)
def log_levels(monkeypatch):
    levels = []
    monkeypatch.setattr(cli, "setup_logging", lambda level=None: levels.append(level))
    return levels


def _rpc_result(request: httpx.Request, result) -> httpx.Response:
    body = json.loads(request.content)
    return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], "result": result})


# =============================================================================
# assets
# =============================================================================

class TestAssetsCommand:

    @pytest.mark.asyncio
    async def test_lists_native_assets_for_in(self, config, capsys, log_levels):
        def handler(request: httpx.Request) -> httpx.Response:
            return _rpc_result(request, ASSET_LIST)

        code = await cli.main(["assets"], config=config, transport=httpx.MockTransport(handler))

        out = capsys.readouterr().out
        assert code == 0
        assert "Bridge assets for Ethereum (In): 1" in out
        assert f"Ethereum/{DAI.lower()} -> Nervos/{CK_DAI}" in out
        assert log_levels == ["INFO"]

    @pytest.mark.asyncio
    async def test_out_lists_counterpart_assets_with_balances(self, config, capsys):
        def handler(request: httpx.Request) -> httpx.Response:
            body = json.loads(request.content)
            if body["method"] == "getAssetList":
                return _rpc_result(request, ASSET_LIST)
            assert [q["userIdent"] for q in body["params"]] == [OWNER]
            return _rpc_result(request, [{"network": "Ethereum", "ident": DAI, "amount": "1500000000000000000"}])

        code = await cli.main(
            ["--log-level", "DEBUG", "assets", "--direction", "Out", "--native-address", OWNER],
            config=config,
            transport=httpx.MockTransport(handler),
        )

        lines = capsys.readouterr().out.splitlines()
        assert code == 0
        assert lines[0] == "Bridge assets for Ethereum (Out): 1"
        assert lines[1].startswith("ckDAI")
        assert f"Nervos/{CK_DAI} -> Ethereum/{DAI.lower()}" in lines[1]

    @pytest.mark.asyncio
    async def test_rpc_failure_exits_nonzero(self, config, capsys):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(503)

        code = await cli.main(["assets"], config=config, transport=httpx.MockTransport(handler))

        assert code == 1
        assert "❌ Error" in capsys.readouterr().out


# =============================================================================
# allowance
# =============================================================================

class TestAllowanceCommand:

    @pytest.mark.asyncio
    async def test_prints_allowance_for_bridge_contract(self, config, capsys):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["call"] = json.loads(request.content)["params"][0]
            return _rpc_result(request, hex(42))

        code = await cli.main(["allowance", OWNER, DAI], config=config, transport=httpx.MockTransport(handler))

        assert code == 0
        assert seen["url"] == ETH_RPC_URL
        assert seen["call"]["to"] == DAI
        assert seen["call"]["data"].endswith(BRIDGE_CONTRACT[2:])
        assert capsys.readouterr().out.strip().endswith(": 42")

    @pytest.mark.asyncio
    async def test_rejects_non_evm_owner(self, config, capsys):
        def handler(request: httpx.Request) -> httpx.Response:  # pragma: no cover
            raise AssertionError("no request expected")

        code = await cli.main(
            ["allowance", "ckt1qyqrdsefa43s6m882pcj53m4gdnj4k440axqswmu83", DAI],
            config=config,
            transport=httpx.MockTransport(handler),
        )

        assert code == 2
        assert "must be Ethereum addresses" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_missing_bridge_contract(self, config, capsys):
        code = await cli.main(["allowance", OWNER, DAI, "--network", "BSC"], config=config)

        assert code == 2
        assert "no bridge contract configured for BSC" in capsys.readouterr().out


@pytest.mark.asyncio
async def test_no_command_prints_help(config, capsys):
    assert await cli.main([], config=config) == 0
    assert "usage: shadowbridge" in capsys.readouterr().out
