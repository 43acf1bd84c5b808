"""Runs behavioural scenarios and collects a frozen report.

Every scenario gets its own freshly deployed fixture, so scenarios are
independent and may run in any order.  On non-development networks every
scenario is reported as skipped.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterable
from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from nftmarket.config import MarketConfig
from nftmarket.core.errors import ContractRevert
from nftmarket.oracle.scenarios import SCENARIOS, OracleFixture, build_fixture

logger = logging.getLogger(__name__)


class ScenarioStatus(str, Enum):
    PASSED = "passed"
    FAILED = "failed"
    SKIPPED = "skipped"


class ScenarioResult(BaseModel):
    """Outcome of a single scenario."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: str = ""
    status: ScenarioStatus
    detail: str = ""
    duration_ms: float = 0.0


class OracleReport(BaseModel):
    """Outcome of an oracle run."""

    model_config = ConfigDict(frozen=True)

    network: str
    chain_id: int | None = None  # None when the network has no known id
    results: list[ScenarioResult] = Field(default_factory=list)
    started_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )

    def _count(self, status: ScenarioStatus) -> int:
        return sum(1 for r in self.results if r.status == status)

    @property
    def passed(self) -> int:
        return self._count(ScenarioStatus.PASSED)

    @property
    def failed(self) -> int:
        return self._count(ScenarioStatus.FAILED)

    @property
    def skipped(self) -> int:
        return self._count(ScenarioStatus.SKIPPED)

    @property
    def all_passed(self) -> bool:
        return self.failed == 0 and self.passed > 0


def _describe(fn: Callable[..., None]) -> str:
    doc = (fn.__doc__ or "").strip()
    return doc.splitlines()[0] if doc else ""


def run_scenario(
    name: str,
    config: MarketConfig | None = None,
    fixture_factory: Callable[[MarketConfig], OracleFixture] = build_fixture,
) -> ScenarioResult:
    """Run one registered scenario against a fresh fixture.

    Assertion failures and unexpected reverts are recorded as FAILED.
    """
    try:
        scenario = SCENARIOS[name]
    except KeyError:
        raise KeyError(
            f"Unknown scenario {name!r}. Registered scenarios: {sorted(SCENARIOS)}"
        ) from None

    cfg = config or MarketConfig()
    description = _describe(scenario)
    started = time.perf_counter()
    try:
        scenario(fixture_factory(cfg))
    except (AssertionError, ContractRevert) as exc:
        elapsed = (time.perf_counter() - started) * 1000
        logger.warning("Scenario %s FAILED: %s", name, exc)
        return ScenarioResult(
            name=name,
            description=description,
            status=ScenarioStatus.FAILED,
            detail=f"{type(exc).__name__}: {exc}",
            duration_ms=elapsed,
        )

    elapsed = (time.perf_counter() - started) * 1000
    logger.info("Scenario %s passed (%.1f ms).", name, elapsed)
    return ScenarioResult(
        name=name,
        description=description,
        status=ScenarioStatus.PASSED,
        duration_ms=elapsed,
    )


def run_oracle(
    config: MarketConfig | None = None,
    scenarios: Iterable[str] | None = None,
    fixture_factory: Callable[[MarketConfig], OracleFixture] = build_fixture,
) -> OracleReport:
    """Run ``scenarios`` (default: all, in registry order) and return the report."""
    cfg = config or MarketConfig()
    names = list(scenarios) if scenarios is not None else list(SCENARIOS)

    if not cfg.is_development:
        logger.info("Network %s is not a development chain; skipping oracle.", cfg.network)
        results = [
            ScenarioResult(
                name=name,
                description=_describe(SCENARIOS[name]),
                status=ScenarioStatus.SKIPPED,
                detail=f"{cfg.network} is not a development chain",
            )
            for name in names
        ]
    else:
        results = [run_scenario(name, cfg, fixture_factory) for name in names]

    try:
        chain_id: int | None = cfg.resolved_chain_id
    except ValueError:
        chain_id = None

    return OracleReport(
        network=cfg.network,
        chain_id=chain_id,
        results=results,
    )
