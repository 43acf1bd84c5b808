"""Tests for MarketConfig and the network helpers."""

from __future__ import annotations

from pathlib import Path

import pytest

from nftmarket.config import (
    DEVELOPMENT_CHAINS,
    NETWORK_CONFIG,
    MarketConfig,
    config as module_config,
    is_development_chain,
)


class TestNetworks:
    def test_development_chains(self):
        assert DEVELOPMENT_CHAINS == ("hardhat", "localhost")
        assert is_development_chain("hardhat")
        assert not is_development_chain("sepolia")

    def test_known_chain_ids(self):
        assert NETWORK_CONFIG["hardhat"].chain_id == 31337
        assert NETWORK_CONFIG["localhost"].chain_id == 31337
        assert NETWORK_CONFIG["sepolia"].chain_id == 11155111
        assert NETWORK_CONFIG["sepolia"].block_confirmations == 6


class TestMarketConfig:
    def test_defaults(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
        monkeypatch.chdir(tmp_path)
        cfg = MarketConfig()
        assert cfg.network == "hardhat"
        assert cfg.update_front_end is False
        assert cfg.front_end_contract_name == "NftMarketplace"
        assert cfg.gas_price_wei == 10**9
        assert cfg.front_end_addresses_file == Path(
            "../../nextjs-nft-marketplace/constants/networkMapping.json"
        )

    def test_env_overrides(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("NFTMARKET_NETWORK", "localhost")
        monkeypatch.setenv("NFTMARKET_UPDATE_FRONT_END", "true")
        monkeypatch.setenv("NFTMARKET_FRONT_END_ADDRESSES_FILE", "web/map.json")
        cfg = MarketConfig()
        assert cfg.network == "localhost"
        assert cfg.update_front_end is True
        assert cfg.front_end_addresses_file == Path("web/map.json")

    def test_dotenv_file(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
        monkeypatch.chdir(tmp_path)
        (tmp_path / ".env").write_text("NFTMARKET_LOG_LEVEL=DEBUG\n", encoding="utf-8")
        assert MarketConfig().log_level == "DEBUG"

    def test_resolved_chain_id_from_network(self):
        assert MarketConfig(network="sepolia").resolved_chain_id == 11155111

    def test_explicit_chain_id_wins(self):
        assert MarketConfig(network="hardhat", chain_id=1337).resolved_chain_id == 1337

    def test_unknown_network_needs_chain_id(self):
        with pytest.raises(ValueError, match="Unknown network"):
            MarketConfig(network="mainnet-fork").resolved_chain_id

    def test_is_development(self):
        assert MarketConfig(network="localhost").is_development
        assert not MarketConfig(network="sepolia").is_development

    def test_module_singleton(self):
        assert isinstance(module_config, MarketConfig)
