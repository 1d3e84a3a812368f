"""Tests for the forward schedule driver."""

import math
from datetime import date

import numpy as np
import pytest

from fxhedge.config import PricingSettings
from fxhedge.exceptions import ValidationError
from fxhedge.forecast.engine import add_months, hedge_schedule, run_forecast
from fxhedge.forecast.models import ForecastConfig, RealRateSource
from fxhedge.models import ComponentType, ForexParams, StrategyComponent
from fxhedge.pricing.strategy import aggregate


@pytest.fixture
def config(atm_call: StrategyComponent, otm_put: StrategyComponent) -> ForecastConfig:
    return ForecastConfig(
        components=(otm_put, atm_call.with_overrides(quantity=-100.0, strike=105.0)),
        spot_rate=1.10,
        params=ForexParams(domestic_rate=5.0, foreign_rate=3.0, months_to_hedge=6),
        start_date="2024-01-31",
        total_volume=6_000_000.0,
    )


class TestSchedule:
    """Monthly settlement dates."""

    def test_clamps_to_month_end(self) -> None:
        assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)
        assert add_months(date(2023, 1, 31), 1) == date(2023, 2, 28)
        assert add_months(date(2024, 1, 31), 3) == date(2024, 4, 30)

    def test_crosses_year(self) -> None:
        assert add_months(date(2023, 11, 15), 2) == date(2024, 1, 15)

    def test_schedule(self) -> None:
        dates = hedge_schedule(date(2024, 1, 31), 3)
        assert dates == [date(2024, 1, 31), date(2024, 2, 29), date(2024, 3, 31)]


class TestSpotSource:
    """Every month settles at the current spot."""

    def test_rows(self, config: ForecastConfig) -> None:
        result = run_forecast(config)

        assert len(result.results) == 6
        assert result.results[0].date == "2024-01-31"
        assert result.results[1].date == "2024-02-29"
        assert all(r.real_rate == 1.10 for r in result.results)
        assert all(r.monthly_volume == 1_000_000.0 for r in result.results)
        assert result.simulated_rates == []

    def test_time_to_maturity(self, config: ForecastConfig) -> None:
        rows = run_forecast(config).results
        assert rows[0].time_to_maturity == pytest.approx(1 / 365.25)
        assert rows[1].time_to_maturity == pytest.approx(30 / 365.25)

    def test_forward_rate(self, config: ForecastConfig) -> None:
        row = run_forecast(config).results[3]
        assert row.forward_rate == pytest.approx(1.10 * math.exp(0.02 * row.time_to_maturity))

    def test_premium_uses_month_maturity(self, config: ForecastConfig) -> None:
        row = run_forecast(config).results[4]
        priced = aggregate(
            config.components, 1.10, config.params, time_to_maturity=row.time_to_maturity
        )
        assert row.strategy_price == pytest.approx(priced.premium_per_unit)
        assert sum(row.leg_premiums.values()) == pytest.approx(row.strategy_price)

    def test_effective_rate_identity(self, config: ForecastConfig) -> None:
        for row in run_forecast(config).results:
            assert row.effective_rate == row.real_rate + row.total_payoff - row.strategy_price
            assert row.hedged_revenue == row.unhedged_revenue + row.payoff_from_hedge - row.premium_paid

    def test_summaries(self, config: ForecastConfig) -> None:
        result = run_forecast(config)
        assert list(result.yearly) == ["2024"]
        assert result.summary.periods == 6
        assert result.summary.total_volume == pytest.approx(6_000_000.0)

    def test_zero_horizon_uses_default_maturity(self, config: ForecastConfig) -> None:
        open_ended = config.with_overrides(
            params=config.params.with_overrides(months_to_hedge=0)
        )
        result = run_forecast(open_ended, PricingSettings(default_maturity_months=2))
        assert len(result.results) == 2
        assert result.results[0].monthly_volume == 3_000_000.0


class TestOverrides:
    """Per-month maps replace the computed values of their month only."""

    def test_manual_real_rate(self, config: ForecastConfig) -> None:
        rows = run_forecast(config.with_overrides(manual_real_rates={"2024-02": 1.25})).results
        assert rows[1].real_rate == 1.25
        assert rows[0].real_rate == 1.10
        assert rows[1].unhedged_revenue == rows[1].monthly_volume * 1.25

    def test_manual_forward(self, config: ForecastConfig) -> None:
        rows = run_forecast(config.with_overrides(manual_forwards={"2024-03": 1.2})).results
        assert rows[2].forward_rate == 1.2
        assert rows[3].forward_rate != 1.2

    def test_custom_volume(self, config: ForecastConfig) -> None:
        result = run_forecast(config.with_overrides(custom_volumes={"2024-01": 250_000.0}))
        assert result.results[0].monthly_volume == 250_000.0
        assert result.results[1].monthly_volume == 1_000_000.0
        assert result.summary.total_volume == pytest.approx(5_250_000.0)

    def test_implied_volatility(self, atm_call: StrategyComponent, config: ForecastConfig) -> None:
        """A 30% implied vol month prices an ATM call above its own 10%."""
        call_only = config.with_overrides(components=(atm_call,))
        base = run_forecast(call_only).results
        implied = run_forecast(
            call_only.with_overrides(implied_volatilities={"2024-04": 30.0})
        ).results
        assert implied[3].strategy_price > base[3].strategy_price * 2
        assert implied[2].strategy_price == base[2].strategy_price

    def test_forward_leg_settles_against_override(self) -> None:
        forward = StrategyComponent(type=ComponentType.FORWARD, strike=1.12, strike_type="absolute")
        config = ForecastConfig(
            components=(forward,),
            spot_rate=1.10,
            params=ForexParams(5.0, 3.0, 2),
            start_date="2024-05-01",
            total_volume=2.0,
            manual_real_rates={"2024-06": 1.05},
        )
        rows = run_forecast(config).results
        assert rows[1].total_payoff == pytest.approx(1.12 - 1.05)
        assert rows[1].effective_rate == pytest.approx(1.12)


class TestSimulationSource:
    """Real rates from the mean of seeded GBM paths."""

    @pytest.fixture
    def simulated(self, config: ForecastConfig) -> ForecastConfig:
        return config.with_overrides(
            real_rate_source=RealRateSource.SIMULATION,
            simulation_volatility=10.0,
            num_simulations=500,
            seed=42,
        )

    def test_seeded_runs_repeat(self, simulated: ForecastConfig) -> None:
        first = run_forecast(simulated)
        second = run_forecast(simulated)
        assert first.simulated_rates == second.simulated_rates
        assert [r.real_rate for r in first.results] == first.simulated_rates

    def test_explicit_generator_matches_seed(self, simulated: ForecastConfig) -> None:
        seeded = run_forecast(simulated)
        explicit = run_forecast(simulated, rng=np.random.default_rng(42))
        assert explicit.simulated_rates == seeded.simulated_rates

    def test_different_seeds_differ(self, simulated: ForecastConfig) -> None:
        first = run_forecast(simulated).simulated_rates
        other = run_forecast(simulated.with_overrides(seed=7)).simulated_rates
        assert first[1:] != other[1:]

    def test_first_month_is_spot(self, simulated: ForecastConfig) -> None:
        """The start date sits on grid step 0, where every path equals spot."""
        assert run_forecast(simulated).simulated_rates[0] == pytest.approx(1.10)

    def test_mean_tracks_forward(self, simulated: ForecastConfig) -> None:
        """With many paths the simulated mean lands near S exp((r_d - r_f) t)."""
        result = run_forecast(simulated.with_overrides(num_simulations=20_000))
        last = result.results[-1]
        years = last.time_to_maturity - 1 / 365.25
        assert last.real_rate == pytest.approx(1.10 * math.exp(0.02 * years), rel=0.01)

    def test_manual_rate_wins(self, simulated: ForecastConfig) -> None:
        result = run_forecast(simulated.with_overrides(manual_real_rates={"2024-03": 1.3}))
        assert result.results[2].real_rate == 1.3
        assert result.simulated_rates[2] != 1.3

    def test_to_dict(self, simulated: ForecastConfig) -> None:
        data = run_forecast(simulated).to_dict()
        assert len(data["simulated_rates"]) == 6
        assert data["config"]["real_rate_source"] == "simulation"
        assert data["config"]["seed"] == 42


class TestConfigValidation:
    """Malformed forecast inputs are rejected on construction."""

    @pytest.mark.parametrize(
        "overrides",
        [
            {"start_date": "2024/01/31"},
            {"start_date": "2024-02-30"},
            {"spot_rate": 0.0},
            {"spot_rate": math.nan},
            {"num_simulations": 0},
            {"simulation_volatility": -5.0},
            {"manual_forwards": {"2024-1": 1.1}},
            {"manual_forwards": {"2024-01": -1.1}},
            {"manual_real_rates": {"2024-01": math.inf}},
            {"custom_volumes": {"2024-01": -10.0}},
            {"implied_volatilities": {"2024-01": math.nan}},
        ],
    )
    def test_rejected(self, config: ForecastConfig, overrides: dict) -> None:
        with pytest.raises(ValidationError):
            config.with_overrides(**overrides)

    def test_source_from_string(self, config: ForecastConfig) -> None:
        assert config.with_overrides(real_rate_source="simulation").real_rate_source is (
            RealRateSource.SIMULATION
        )
