"""Tests for chain configuration."""

import json

import pytest

from ethexec.common.config import (
    BASE_FEE,
    DEFAULT_CHAIN_ID,
    DEFAULT_COINBASE,
    DEV_CONFIG,
    DIFFICULTY,
    ChainConfig,
    load_chain_config,
)


class TestChainConfig:
    def test_defaults(self):
        assert DEV_CONFIG.chain_id == DEFAULT_CHAIN_ID
        assert DEV_CONFIG.coinbase == DEFAULT_COINBASE
        assert DIFFICULTY == 0
        assert BASE_FEE == 0

    def test_chain_id_range(self):
        ChainConfig(chain_id=2**64 - 1)
        with pytest.raises(ValueError):
            ChainConfig(chain_id=2**64)
        with pytest.raises(ValueError):
            ChainConfig(chain_id=-1)

    def test_coinbase_length(self):
        with pytest.raises(ValueError):
            ChainConfig(coinbase=b"\x01" * 19)

    def test_frozen(self):
        with pytest.raises(AttributeError):
            DEV_CONFIG.chain_id = 5


class TestFromJson:
    def test_hex_chain_id_and_checksummed_coinbase(self):
        config = ChainConfig.from_json({
            "chainId": "0x123",
            "chainName": "testnet",
            "coinbase": "0x5B38Da6a701c568545dCfcB03FcB875f56beddC4",
        })
        assert config.chain_id == 0x123
        assert config.chain_name == "testnet"
        assert config.coinbase == bytes.fromhex("5b38da6a701c568545dcfcb03fcb875f56beddc4")

    def test_defaults_when_missing(self):
        config = ChainConfig.from_json({})
        assert config == DEV_CONFIG

    def test_invalid_coinbase(self):
        with pytest.raises(ValueError):
            ChainConfig.from_json({"coinbase": "0x1234"})

    def test_load_from_file(self, tmp_path):
        path = tmp_path / "chain.json"
        path.write_text(json.dumps({"chainId": 10, "chainName": "op"}))
        config = load_chain_config(path)
        assert config.chain_id == 10
        assert config.chain_name == "op"
