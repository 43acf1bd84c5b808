"""Behavioural oracle — acceptance scenarios for a marketplace deployment.

Modules
-------
scenarios
    The fixed call/assert scenarios and the fixture they run against.
runner
    ``run_oracle`` executes scenarios and produces an ``OracleReport``.
"""

from nftmarket.oracle.runner import (
    OracleReport,
    ScenarioResult,
    ScenarioStatus,
    run_oracle,
    run_scenario,
)
from nftmarket.oracle.scenarios import (
    PRICE,
    SCENARIOS,
    TOKEN_ID,
    OracleFixture,
    build_fixture,
    reverts,
)

__all__ = [
    "OracleReport",
    "ScenarioResult",
    "ScenarioStatus",
    "run_oracle",
    "run_scenario",
    "OracleFixture",
    "build_fixture",
    "reverts",
    "SCENARIOS",
    "PRICE",
    "TOKEN_ID",
]
