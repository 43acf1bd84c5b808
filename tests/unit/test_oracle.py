"""Tests for the behavioural oracle — scenarios, runner, and report."""

from __future__ import annotations

import pytest

from nftmarket.config import MarketConfig
from nftmarket.contracts.base import external
from nftmarket.contracts.basic_nft import BasicNft
from nftmarket.contracts.marketplace import NftMarketplace
from nftmarket.core.chain import LocalChain
from nftmarket.core.errors import NotListed, NotOwner
from nftmarket.models.events import ItemBought
from nftmarket.oracle import (
    SCENARIOS,
    TOKEN_ID,
    OracleFixture,
    OracleReport,
    ScenarioResult,
    ScenarioStatus,
    build_fixture,
    reverts,
    run_oracle,
    run_scenario,
)


class UnderpricedMarketplace(NftMarketplace):
    """A broken marketplace that sells at any price."""

    @external(payable=True, gas=110_000)
    def buy_item(self, nft_address: str, token_id: int) -> None:
        listing = self._require_listed(nft_address, token_id)
        buyer = self.msg.sender
        self._proceeds[listing.seller] = self._proceeds.get(listing.seller, 0) + self.msg.value
        del self._listings[self._key(nft_address, token_id)]
        self.chain.internal_call(
            self.address, listing.nft_address, "safe_transfer_from",
            listing.seller, buyer, token_id,
        )
        self.emit(ItemBought(
            buyer=buyer, nft_address=listing.nft_address, token_id=token_id, price=listing.price,
        ))


def broken_fixture(config: MarketConfig) -> OracleFixture:
    chain = LocalChain.from_config(config)
    deployer, player = chain.accounts[0], chain.accounts[1]
    marketplace = chain.deploy(UnderpricedMarketplace(), deployer)
    nft = chain.deploy(BasicNft(), deployer)
    fixture = OracleFixture(chain, marketplace, nft, deployer, player)
    fixture.nft_as(deployer).mint_nft()
    fixture.nft_as(deployer).approve(marketplace.address, TOKEN_ID)
    return fixture


class TestFixture:
    def test_token_minted_and_approved(self, config):
        fx = build_fixture(config)
        assert fx.nft.owner_of(TOKEN_ID) == fx.deployer
        assert fx.nft.get_approved(TOKEN_ID) == fx.marketplace.address
        assert fx.deployer != fx.player

    def test_fixtures_are_independent(self, config):
        a, b = build_fixture(config), build_fixture(config)
        assert a.chain is not b.chain
        a.market_as(a.deployer).list_item(a.nft.address, TOKEN_ID, 1)
        assert not b.marketplace.get_listing(b.nft.address, TOKEN_ID).exists


class TestReverts:
    def test_expected_revert_passes(self):
        with reverts(NotOwner):
            raise NotOwner()

    def test_no_revert_fails(self):
        with pytest.raises(AssertionError, match="call succeeded"):
            with reverts(NotOwner):
                pass

    def test_wrong_revert_fails(self):
        with pytest.raises(AssertionError, match="expected revert NotOwner, got NotListed"):
            with reverts(NotOwner):
                raise NotListed()


class TestScenarios:
    @pytest.mark.parametrize("name", list(SCENARIOS))
    def test_reference_marketplace_passes(self, name, config):
        result = run_scenario(name, config)
        assert result.status == ScenarioStatus.PASSED, result.detail

    def test_registry_order(self):
        assert list(SCENARIOS)[0] == "lists_and_can_be_bought"
        assert list(SCENARIOS)[-1] == "withdraw_proceeds_accounting"
        assert len(SCENARIOS) == 9

    def test_description_from_docstring(self, config):
        result = run_scenario("rejects_zero_price", config)
        assert result.description == "Listing at price zero is rejected."

    def test_unknown_scenario(self, config):
        with pytest.raises(KeyError, match="Unknown scenario"):
            run_scenario("does_not_exist", config)

    def test_broken_marketplace_fails_underpayment(self, config):
        result = run_scenario("rejects_underpayment", config, fixture_factory=broken_fixture)
        assert result.status == ScenarioStatus.FAILED
        assert "PriceNotMet" in result.detail

    def test_broken_marketplace_passes_unrelated_scenarios(self, config):
        result = run_scenario("rejects_zero_price", config, fixture_factory=broken_fixture)
        assert result.status == ScenarioStatus.PASSED


class TestRunOracle:
    def test_full_run_passes(self, config):
        report = run_oracle(config)
        assert report.passed == len(SCENARIOS)
        assert report.failed == 0
        assert report.all_passed
        assert [r.name for r in report.results] == list(SCENARIOS)
        assert report.chain_id == 31337

    def test_subset(self, config):
        report = run_oracle(config, scenarios=["rejects_zero_price"])
        assert [r.name for r in report.results] == ["rejects_zero_price"]

    def test_non_development_network_skips(self, addresses_file):
        cfg = MarketConfig(network="sepolia", front_end_addresses_file=addresses_file)
        report = run_oracle(cfg)
        assert report.skipped == len(SCENARIOS)
        assert report.passed == 0
        assert not report.all_passed
        assert report.chain_id == 11155111
        assert "not a development chain" in report.results[0].detail

    def test_unregistered_network_skips_without_chain_id(self, addresses_file):
        cfg = MarketConfig(network="mainnet", front_end_addresses_file=addresses_file)
        report = run_oracle(cfg)
        assert report.skipped == len(SCENARIOS)
        assert report.chain_id is None
        assert report.network == "mainnet"

    def test_broken_marketplace_report(self, config):
        report = run_oracle(config, fixture_factory=broken_fixture)
        failed = [r.name for r in report.results if r.status == ScenarioStatus.FAILED]
        assert failed == ["rejects_underpayment"]
        assert not report.all_passed


class TestReportModel:
    def test_empty_report_not_passed(self):
        assert not OracleReport(network="hardhat", chain_id=31337).all_passed

    def test_counts(self):
        report = OracleReport(
            network="hardhat",
            chain_id=31337,
            results=[
                ScenarioResult(name="a", status=ScenarioStatus.PASSED),
                ScenarioResult(name="b", status=ScenarioStatus.FAILED),
                ScenarioResult(name="c", status=ScenarioStatus.SKIPPED),
            ],
        )
        assert (report.passed, report.failed, report.skipped) == (1, 1, 1)
        assert not report.all_passed
