from shadowbridge.config import Settings
from shadowbridge.core.bridge.models import (
    Asset,
    AssetInfo,
    AssetQueryResult,
    Direction,
    NetworkPair,
)
from shadowbridge.core.bridge.networks import (
    SUPPORTED_NETWORKS,
    asset_list_for,
    network_direction,
    network_specs,
    recipient_label,
    requires_network_switch,
)


def _settings() -> Settings:
    return Settings(
        ethereum_chain_id=5,
        bsc_chain_id=97,
        ethereum_bridge_contract="0x" + "e" * 40,
    )


def test_supported_networks():
    assert SUPPORTED_NETWORKS == ("Ethereum", "BSC")


def test_network_specs_from_settings():
    specs = network_specs(_settings())

    assert specs["Ethereum"].chain_id == 5
    assert specs["Ethereum"].hex_chain_id == "0x5"
    assert specs["Ethereum"].bridge_contract == "0x" + "e" * 40
    assert specs["BSC"].hex_chain_id == "0x61"
    assert specs["BSC"].symbol == "BNB"


def test_network_direction_labels():
    assert network_direction(NetworkPair("Ethereum", Direction.IN), "Nervos") == ("Ethereum", "Nervos")
    assert network_direction(NetworkPair("BSC", Direction.OUT), "Nervos") == ("Nervos", "BSC")


def test_recipient_label():
    specs = network_specs(_settings())
    assert recipient_label(NetworkPair("BSC", Direction.IN), specs["BSC"], "CKB") == "To CKB Address"
    assert recipient_label(NetworkPair("BSC", Direction.OUT), specs["BSC"], "CKB") == "To BNB Address"


def test_requires_network_switch():
    spec = network_specs(_settings())["Ethereum"]
    assert requires_network_switch(None, spec) is False
    assert requires_network_switch(5, spec) is False
    assert requires_network_switch(1, spec) is True


def test_asset_list_for_pair():
    eth = Asset(network="Ethereum", address="0x" + "1" * 40, symbol="USDT", info=AssetInfo(decimals=6))
    bsc = Asset(network="BSC", address="0x" + "2" * 40, symbol="USDT", info=AssetInfo(decimals=18))
    ck_eth = Asset(network="Nervos", address="0x" + "3" * 64, symbol="ckUSDT", shadow=eth.copy())
    ck_bsc = Asset(network="Nervos", address="0x" + "4" * 64, symbol="bscUSDT", shadow=bsc.copy())
    result = AssetQueryResult(native_chain_assets=[eth, bsc], counterpart_chain_assets=[ck_eth, ck_bsc])

    assert asset_list_for(NetworkPair("Ethereum", Direction.IN), result) == [eth]
    assert asset_list_for(NetworkPair("BSC", Direction.IN), result) == [bsc]
    assert asset_list_for(NetworkPair("BSC", Direction.OUT), result) == [ck_bsc]
    assert asset_list_for(NetworkPair("BSC", Direction.OUT), None) == []
