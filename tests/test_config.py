"""Tests for network profiles and credentials."""

from decimal import Decimal

import pytest

from cosmos_adapter.config import Credentials, get_network_profile
from cosmos_adapter.exceptions import ConfigurationError


def test_known_networks():
    mainnet = get_network_profile("mainnet")
    assert mainnet.chain_id == "cosmoshub-4"
    assert mainnet.min_denom == "uatom"
    assert mainnet.decimals == 6
    assert mainnet.validator_prefix == "cosmosvaloper"
    assert mainnet.consensus_prefix == "cosmosvalcons"
    assert get_network_profile("testnet").chain_id == "theta-testnet-001"


def test_unknown_network_falls_back_to_mainnet():
    assert get_network_profile("nowhere") is get_network_profile("mainnet")


def test_custom_profile_uses_overrides(credentials):
    profile = credentials.profile
    assert profile.name == "custom"
    assert profile.lcd_endpoint == "http://lcd.test"
    assert profile.rpc_endpoint == "http://rpc.test"
    assert profile.ws_endpoint == "ws://rpc.test/websocket"
    assert profile.gas_price == Decimal("0.025")


def test_endpoint_override_on_named_network():
    credentials = Credentials.create(network="mainnet", lcd_endpoint="https://lcd.example.org")
    assert credentials.profile.lcd_endpoint == "https://lcd.example.org"
    assert credentials.profile.chain_id == "cosmoshub-4"


def test_gas_price_override():
    credentials = Credentials.create(gas_price="0.1", gas_adjustment="1.5")
    assert credentials.profile.gas_price == Decimal("0.1")
    assert credentials.gas_adjustment == 1.5


def test_mnemonic_whitespace_is_normalized(mnemonic):
    credentials = Credentials.create(mnemonic="  " + mnemonic.replace(" ", "   ") + "\n")
    assert credentials.mnemonic == mnemonic


def test_mnemonic_hidden_from_repr(mnemonic):
    credentials = Credentials.create(mnemonic=mnemonic)
    assert "abandon" not in repr(credentials)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"mnemonic": "not a valid phrase"},
        {"hd_path": "44'/118'/0'/0/0"},
        {"hd_path": "m/44'/x"},
        {"prefix": "Bad-Prefix"},
        {"gas_price": "cheap"},
        {"gas_price": "-1"},
        {"gas_adjustment": 0},
        {"network": "custom", "lcd_endpoint": "lcd.test"},
        {"network": "custom", "rpc_endpoint": "ftp://rpc.test"},
        {"network": "custom", "ws_endpoint": "http://rpc.test/websocket"},
    ],
)
def test_create_rejects_malformed(kwargs):
    """Malformed values fail at construction, not at first use."""
    with pytest.raises(ConfigurationError):
        Credentials.create(**kwargs)


def test_from_mapping(mnemonic):
    credentials = Credentials.from_mapping(
        {
            "network": "custom",
            "mnemonic": mnemonic,
            "lcdEndpoint": "http://lcd.test",
            "rpcEndpoint": "http://rpc.test",
            "wsEndpoint": "ws://rpc.test/websocket",
            "gasPrice": "0.05",
            "prefix": "osmo",
        }
    )
    assert credentials.mnemonic == mnemonic
    assert credentials.profile.prefix == "osmo"
    assert credentials.profile.gas_price == Decimal("0.05")


def test_from_env(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    for name in ("MNEMONIC", "HD_PATH", "WS_ENDPOINT", "GAS_PRICE", "PREFIX"):
        monkeypatch.delenv(f"COSMOS_{name}", raising=False)
    monkeypatch.setenv("COSMOS_NETWORK", "custom")
    monkeypatch.setenv("COSMOS_LCD_ENDPOINT", "http://lcd.env")
    monkeypatch.setenv("COSMOS_RPC_ENDPOINT", "http://rpc.env")
    monkeypatch.setenv("COSMOS_GAS_ADJUSTMENT", "2")

    credentials = Credentials.from_env()
    assert credentials.profile.lcd_endpoint == "http://lcd.env"
    assert credentials.profile.rpc_endpoint == "http://rpc.env"
    assert credentials.gas_adjustment == 2.0
    assert credentials.mnemonic == ""
