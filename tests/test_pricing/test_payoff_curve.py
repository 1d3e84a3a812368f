"""Tests for the strategy payoff curve."""

import pytest

from fxhedge.models import ComponentType, ForexParams, StrategyComponent
from fxhedge.pricing.payoff import payoff_curve


class TestPayoffCurve:
    """Evenly spaced rates around spot with hedged and effective rates."""

    def test_band_and_spacing(self, atm_call: StrategyComponent, params: ForexParams) -> None:
        curve = payoff_curve([atm_call], 100.0, params, points=7, span=0.30)
        assert len(curve) == 7
        assert curve[0].realized_rate == pytest.approx(70.0)
        assert curve[-1].realized_rate == pytest.approx(130.0)
        assert curve[3].realized_rate == pytest.approx(100.0)

    def test_forward_flattens_hedged_rate(self, params: ForexParams) -> None:
        """A full forward locks the hedged rate at its strike."""
        leg = StrategyComponent(type=ComponentType.FORWARD, strike=100.0)
        curve = payoff_curve([leg], 1.10, params, points=5)
        for point in curve:
            assert point.hedged_rate == pytest.approx(1.10)
            assert point.effective_rate == pytest.approx(1.10)
            assert point.unhedged_rate == point.realized_rate

    def test_premium_shifts_effective_rate(
        self, otm_put: StrategyComponent, params: ForexParams
    ) -> None:
        curve = payoff_curve([otm_put], 1.10, params, points=3)
        for point in curve:
            assert point.effective_rate < point.hedged_rate

    def test_too_few_points(self, atm_call: StrategyComponent, params: ForexParams) -> None:
        with pytest.raises(ValueError):
            payoff_curve([atm_call], 1.10, params, points=1)
