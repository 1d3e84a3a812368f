"""Payoff curve of a strategy across a band of realized rates."""

from __future__ import annotations

from dataclasses import dataclass

from fxhedge.config import PricingSettings
from fxhedge.models import ForexParams, StrategyComponent
from fxhedge.pricing.strategy import aggregate


@dataclass(frozen=True)
class PayoffPoint:
    """One point of the payoff curve.

    Attributes:
        realized_rate: Rate at maturity.
        unhedged_rate: Rate obtained without the hedge (= realized_rate).
        hedged_rate: Rate with the hedge payoff, premium excluded.
        effective_rate: Rate with the hedge payoff, premium included.
    """

    realized_rate: float
    unhedged_rate: float
    hedged_rate: float
    effective_rate: float

    def to_dict(self) -> dict:
        return {
            "realized_rate": self.realized_rate,
            "unhedged_rate": self.unhedged_rate,
            "hedged_rate": self.hedged_rate,
            "effective_rate": self.effective_rate,
        }


def payoff_curve(
    components: list[StrategyComponent] | tuple[StrategyComponent, ...],
    spot: float,
    params: ForexParams,
    coverage_ratio: float = 100.0,
    points: int = 50,
    span: float = 0.30,
    settings: PricingSettings | None = None,
) -> list[PayoffPoint]:
    """Evaluate a strategy on evenly spaced rates around spot.

    Args:
        components: Strategy legs.
        spot: Spot rate, centre of the band.
        params: Market parameters.
        coverage_ratio: Percent of notional hedged.
        points: Number of rates in [spot * (1 - span), spot * (1 + span)].
        span: Half-width of the band as a fraction of spot.
        settings: Pricing settings forwarded to the aggregator.

    Returns:
        PayoffPoints ordered by increasing realized rate.
    """
    if points < 2:
        raise ValueError("points must be >= 2")

    strategy = aggregate(components, spot, params, coverage_ratio, settings=settings)
    low = spot * (1 - span)
    step = (spot * (1 + span) - low) / (points - 1)

    curve = []
    for i in range(points):
        rate = low + i * step
        payoff = strategy.payoff_given_rate(rate)
        curve.append(
            PayoffPoint(
                realized_rate=rate,
                unhedged_rate=rate,
                hedged_rate=rate + payoff,
                effective_rate=rate + payoff - strategy.premium_per_unit,
            )
        )
    return curve
