"""Tests for stress scenarios applied to backtests."""

import pytest

from fxhedge.backtest.models import BacktestConfig, MonthlyStats
from fxhedge.backtest.stress import (
    DEFAULT_STRESS_SCENARIOS,
    StressScenario,
    apply_stress_scenario,
    get_stress_scenario,
    run_stress_test,
)
from fxhedge.exceptions import ConfigurationError
from fxhedge.models import ComponentType, ForexParams, StrategyComponent


@pytest.fixture
def config(atm_call: StrategyComponent) -> BacktestConfig:
    forward = StrategyComponent(type=ComponentType.FORWARD, strike=100.0, quantity=50.0)
    return BacktestConfig(
        components=(atm_call, forward),
        spot_rate=1.10,
        params=ForexParams(domestic_rate=5.0, foreign_rate=3.0, months_to_hedge=2),
        total_volume=2_000_000.0,
    )


@pytest.fixture
def stats() -> list[MonthlyStats]:
    return [
        MonthlyStats("2023-01", 1.10, 0.08, 21),
        MonthlyStats("2023-02", 1.12, 0.09, 20),
    ]


class TestApplyStressScenario:
    """Shocks to spot, differential and volatility."""

    def test_spot_shock(self, config: BacktestConfig) -> None:
        stressed = apply_stress_scenario(config, DEFAULT_STRESS_SCENARIOS["rate_depreciation"])
        assert stressed.spot_rate == pytest.approx(1.045)
        assert stressed.initial_spot_rate == 1.10

    def test_differential_split(self, config: BacktestConfig) -> None:
        stressed = apply_stress_scenario(config, DEFAULT_STRESS_SCENARIOS["diff_widens"])
        assert stressed.params.domestic_rate == pytest.approx(5.5)
        assert stressed.params.foreign_rate == pytest.approx(2.5)
        assert stressed.params.domestic_rate - stressed.params.foreign_rate == pytest.approx(3.0)

    def test_volatility_override_skips_forwards(self, config: BacktestConfig) -> None:
        stressed = apply_stress_scenario(config, DEFAULT_STRESS_SCENARIOS["high_vol"])
        assert stressed.components[0].volatility == pytest.approx(15.0)
        assert stressed.components[1].volatility == 0.0

    def test_zero_volatility_keeps_legs(self, config: BacktestConfig) -> None:
        stressed = apply_stress_scenario(config, DEFAULT_STRESS_SCENARIOS["diff_narrows"])
        assert stressed.components == config.components

    def test_original_untouched(self, config: BacktestConfig) -> None:
        apply_stress_scenario(config, DEFAULT_STRESS_SCENARIOS["rate_appreciation"])
        assert config.spot_rate == 1.10


class TestRunStressTest:
    """Baseline and stressed runs side by side."""

    def test_base_case_matches_baseline_at_same_vol(
        self, config: BacktestConfig, stats: list[MonthlyStats]
    ) -> None:
        """A scenario at the legs' own volatility and no shocks changes nothing."""
        neutral = StressScenario(name="Neutral", description="", volatility=0.10, rate_shock=0.0)
        result = run_stress_test(config, stats, neutral)
        assert result.pnl_impact == pytest.approx(0.0, abs=1e-9)

    def test_high_vol_costs_more(self, config: BacktestConfig, stats: list[MonthlyStats]) -> None:
        result = run_stress_test(config, stats, DEFAULT_STRESS_SCENARIOS["high_vol"])
        assert result.stressed.summary.total_premium > result.baseline.summary.total_premium
        assert result.pnl_impact < 0

    def test_to_dict(self, config: BacktestConfig, stats: list[MonthlyStats]) -> None:
        data = run_stress_test(config, stats, DEFAULT_STRESS_SCENARIOS["base"]).to_dict()
        assert data["scenario"]["name"] == "Base Case"
        assert len(data["stressed"]["results"]) == 2

    def test_unknown_scenario(self) -> None:
        with pytest.raises(ConfigurationError):
            get_stress_scenario("meteor")
