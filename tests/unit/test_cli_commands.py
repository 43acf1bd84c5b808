"""Unit tests for the CLI — Typer command registration and basic behavior.

Exercises every command through typer.testing.CliRunner against temporary
address-map files.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from nftmarket.cli.app import app
from nftmarket.cli.commands import addresses, demo, deploy, verify

runner = CliRunner()

ADDR = "0x" + "c" * 40


@pytest.fixture(autouse=True)
def wide_console(monkeypatch: pytest.MonkeyPatch) -> None:
    """Render command output wide enough that table cells never wrap."""
    for module in (addresses, demo, deploy, verify):
        monkeypatch.setattr(module.console, "width", 200)


# ---------------------------------------------------------------------------
# Test: CLI help and registration
# ---------------------------------------------------------------------------


class TestCliApp:
    """The CLI must register all expected commands and show help."""

    def test_no_args_shows_help(self):
        result = runner.invoke(app, [])
        # Typer's no_args_is_help may exit with 0 or 2 depending on version
        assert result.exit_code in (0, 2)
        assert "Usage" in result.output or "usage" in result.output.lower()

    def test_help_lists_commands(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        for command in ("deploy", "update-front-end", "addresses", "verify", "demo"):
            assert command in result.output

    def test_log_level_option(self):
        result = runner.invoke(app, ["--log-level", "WARNING", "verify", "-s", "rejects_zero_price"])
        assert result.exit_code == 0


# ---------------------------------------------------------------------------
# Test: deploy
# ---------------------------------------------------------------------------


class TestDeployCommand:
    def test_deploys(self):
        result = runner.invoke(app, ["deploy"])
        assert result.exit_code == 0
        assert "NftMarketplace" in result.output
        assert "BasicNft" in result.output
        assert "Deploy complete" in result.output

    def test_update_front_end_writes_map(self, addresses_file: Path):
        result = runner.invoke(
            app, ["deploy", "--update-front-end", "-f", str(addresses_file)]
        )
        assert result.exit_code == 0
        data = json.loads(addresses_file.read_text())
        assert list(data) == ["31337"]
        assert len(data["31337"]["NftMarketplace"]) == 1

    def test_no_update_leaves_map_alone(self, addresses_file: Path):
        result = runner.invoke(app, ["deploy", "-f", str(addresses_file)])
        assert result.exit_code == 0
        assert not addresses_file.exists()

    def test_tag_subset(self):
        result = runner.invoke(app, ["deploy", "-t", "basicnft"])
        assert result.exit_code == 0
        assert "BasicNft" in result.output
        assert "NftMarketplace" not in result.output

    def test_rejects_live_network(self):
        result = runner.invoke(app, ["deploy", "-n", "sepolia"])
        assert result.exit_code == 1
        assert "not a development chain" in result.output

    def test_rejects_unknown_tag(self):
        result = runner.invoke(app, ["deploy", "-t", "nope"])
        assert result.exit_code == 1
        assert "Deploy failed" in result.output


# ---------------------------------------------------------------------------
# Test: address map commands
# ---------------------------------------------------------------------------


class TestAddressCommands:
    def test_update_front_end_records(self, addresses_file: Path):
        result = runner.invoke(
            app, ["update-front-end", ADDR, "-c", "31337", "-f", str(addresses_file)]
        )
        assert result.exit_code == 0
        assert json.loads(addresses_file.read_text()) == {"31337": {"NftMarketplace": [ADDR]}}

    def test_update_front_end_custom_contract(self, addresses_file: Path):
        result = runner.invoke(
            app,
            ["update-front-end", ADDR, "-c", "5", "--contract", "BasicNft", "-f", str(addresses_file)],
        )
        assert result.exit_code == 0
        assert json.loads(addresses_file.read_text()) == {"5": {"BasicNft": [ADDR]}}

    def test_update_front_end_bad_file(self, addresses_file: Path):
        addresses_file.parent.mkdir(parents=True)
        addresses_file.write_text("[1, 2")
        result = runner.invoke(app, ["update-front-end", ADDR, "-f", str(addresses_file)])
        assert result.exit_code == 1
        assert "Cannot update address map" in result.output

    def test_update_front_end_unknown_network(
        self, addresses_file: Path, monkeypatch: pytest.MonkeyPatch
    ):
        monkeypatch.setenv("NFTMARKET_NETWORK", "mainnet")
        result = runner.invoke(app, ["update-front-end", ADDR, "-f", str(addresses_file)])
        assert result.exit_code == 2
        assert "Cannot resolve chain id" in result.output
        assert not addresses_file.exists()

    def test_addresses_empty(self, addresses_file: Path):
        result = runner.invoke(app, ["addresses", "-f", str(addresses_file)])
        assert result.exit_code == 0
        assert "No addresses recorded" in result.output

    def test_addresses_lists_map(self, addresses_file: Path):
        runner.invoke(app, ["update-front-end", ADDR, "-c", "31337", "-f", str(addresses_file)])
        result = runner.invoke(app, ["addresses", "-f", str(addresses_file)])
        assert result.exit_code == 0
        assert "31337" in result.output
        assert "NftMarketplace" in result.output

    def test_addresses_bad_file(self, addresses_file: Path):
        addresses_file.parent.mkdir(parents=True)
        addresses_file.write_text('{"31337": 7}')
        result = runner.invoke(app, ["addresses", "-f", str(addresses_file)])
        assert result.exit_code == 1
        assert "Cannot read address map" in result.output


# ---------------------------------------------------------------------------
# Test: verify and demo
# ---------------------------------------------------------------------------


class TestVerifyCommand:
    def test_all_scenarios_pass(self):
        result = runner.invoke(app, ["verify"])
        assert result.exit_code == 0
        assert "all scenarios passed" in result.output

    def test_single_scenario(self):
        result = runner.invoke(app, ["verify", "-s", "rejects_underpayment"])
        assert result.exit_code == 0
        assert "rejects_underpayment" in result.output

    def test_unknown_scenario(self):
        result = runner.invoke(app, ["verify", "-s", "bogus"])
        assert result.exit_code == 2
        assert "Unknown scenario" in result.output

    def test_live_network_skips(self):
        result = runner.invoke(app, ["verify", "-n", "sepolia"])
        assert result.exit_code == 0
        assert "SKIPPED" in result.output

    def test_unregistered_network_skips(self):
        result = runner.invoke(app, ["verify", "-n", "mainnet"])
        assert result.exit_code == 0
        assert "SKIPPED" in result.output
        assert "unknown chain" in result.output


class TestDemoCommand:
    def test_demo_runs(self):
        result = runner.invoke(app, ["demo"])
        assert result.exit_code == 0
        assert "Demo complete" in result.output
        assert "withdraw_proceeds" in result.output

    def test_demo_custom_price(self):
        result = runner.invoke(app, ["demo", "-p", "1.5"])
        assert result.exit_code == 0
        assert "1.5 ETH" in result.output

    def test_demo_invalid_price(self):
        result = runner.invoke(app, ["demo", "-p", "lots"])
        assert result.exit_code == 2
        assert "Invalid price" in result.output

    def test_demo_zero_price(self):
        result = runner.invoke(app, ["demo", "-p", "0"])
        assert result.exit_code == 2
        assert "above zero" in result.output
