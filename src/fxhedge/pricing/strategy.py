"""Strategy aggregation: combine weighted legs into one premium and one payoff.

Every leg is weighted by quantity/100 and the strategy total is scaled by
coverage_ratio/100. Barrier legs are priced at the vanilla premium of their
call/put side; only their payoff is conditioned on the barrier.

A leg whose pricing fails (NumericError or a non-finite value) contributes
zero so that one bad leg does not invalidate the whole strategy. Every such
suppression is logged at warning level.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from fxhedge.config import PricingSettings
from fxhedge.exceptions import NumericError
from fxhedge.logging import get_logger
from fxhedge.models import ComponentType, ForexParams, StrategyComponent
from fxhedge.pricing.barrier import evaluate_barrier_payoff
from fxhedge.pricing.garman_kohlhagen import price_option
from fxhedge.pricing.rate_math import resolve_strike

logger = get_logger(__name__)


def leg_vanilla_payoff(component: StrategyComponent, strike: float, realized_rate: float) -> float:
    """Unweighted payoff of one leg before any barrier condition."""
    if component.type is ComponentType.FORWARD:
        return strike - realized_rate
    if component.type.is_call:
        return max(0.0, realized_rate - strike)
    return max(0.0, strike - realized_rate)


@dataclass(frozen=True)
class AggregatedStrategy:
    """Priced strategy, ready to be evaluated at any realized rate.

    Attributes:
        components: Legs in declaration order.
        reference_spot: Spot against which strikes and barriers were resolved.
        coverage_ratio: Percent of the notional hedged.
        premium_per_unit: Weighted, coverage-scaled premium.
        leg_premiums: Unweighted premium of each leg (0.0 when suppressed).
        suppressed_legs: Number of legs whose premium was absorbed as zero.
    """

    components: tuple[StrategyComponent, ...]
    reference_spot: float
    coverage_ratio: float
    premium_per_unit: float
    leg_premiums: tuple[float, ...]
    suppressed_legs: int = 0

    @property
    def coverage_factor(self) -> float:
        return self.coverage_ratio / 100

    def strike_of(self, index: int) -> float:
        """Absolute strike of the leg at index."""
        component = self.components[index]
        return resolve_strike(component.strike, component.strike_type, self.reference_spot)

    def weighted_leg_premiums(self) -> dict[str, float]:
        """Per-leg premium scaled by leg quantity, keyed "Leg<n>_<type>"."""
        return {
            f"Leg{index + 1}_{component.type.value}": premium * component.quantity / 100
            for index, (component, premium) in enumerate(zip(self.components, self.leg_premiums))
        }

    def payoff_given_rate(self, realized_rate: float) -> float:
        """Weighted, coverage-scaled payoff per unit at a realized rate."""
        total = 0.0
        for index, component in enumerate(self.components):
            vanilla = leg_vanilla_payoff(component, self.strike_of(index), realized_rate)
            payoff = evaluate_barrier_payoff(
                component, realized_rate, vanilla, self.reference_spot
            )
            if not math.isfinite(payoff):
                logger.warning(
                    "leg_payoff_suppressed",
                    leg_index=index,
                    leg_type=component.type.value,
                    realized_rate=realized_rate,
                )
                continue
            total += payoff * component.quantity / 100
        return total * self.coverage_factor

    def pnl_per_unit(self, realized_rate: float) -> float:
        """Payoff net of premium at a realized rate."""
        return self.payoff_given_rate(realized_rate) - self.premium_per_unit

    def effective_rate(self, realized_rate: float) -> float:
        """Realized rate adjusted for hedge payoff and premium cost."""
        payoff = self.payoff_given_rate(realized_rate)
        return realized_rate + payoff - self.premium_per_unit


def _leg_premium(
    component: StrategyComponent,
    strike: float,
    spot: float,
    params: ForexParams,
    time_to_maturity: float,
    volatility_override: float | None,
) -> float:
    if component.type is ComponentType.FORWARD:
        return 0.0
    volatility = component.volatility if volatility_override is None else volatility_override
    return price_option(
        component.type.option_kind,  # type: ignore[arg-type]
        spot,
        strike,
        params.r_d,
        params.r_f,
        time_to_maturity,
        volatility / 100,
    )


def aggregate(
    components: list[StrategyComponent] | tuple[StrategyComponent, ...],
    spot: float,
    params: ForexParams,
    coverage_ratio: float = 100.0,
    *,
    time_to_maturity: float | None = None,
    volatility_override: float | None = None,
    reference_spot: float | None = None,
    settings: PricingSettings | None = None,
) -> AggregatedStrategy:
    """Price a strategy and return its aggregated view.

    Args:
        components: Strategy legs.
        spot: Spot rate used by the pricer.
        params: Market parameters (percent rates, hedge horizon).
        coverage_ratio: Percent of notional hedged.
        time_to_maturity: Maturity in years. Defaults to the horizon of params.
        volatility_override: Volatility in percent applied to every option
            leg instead of its own (e.g. a month's realized volatility).
        reference_spot: Spot used to resolve percent strikes and barriers.
            Defaults to spot.
        settings: Pricing settings. Defaults to PricingSettings().

    Returns:
        AggregatedStrategy carrying the premium and the payoff function.
    """
    if settings is None:
        settings = PricingSettings()
    if time_to_maturity is None:
        time_to_maturity = params.time_to_maturity(settings.default_maturity_months)
    if reference_spot is None:
        reference_spot = spot

    legs = tuple(components)
    leg_premiums: list[float] = []
    suppressed = 0
    total = 0.0

    for index, component in enumerate(legs):
        strike = resolve_strike(component.strike, component.strike_type, reference_spot)
        try:
            premium = _leg_premium(
                component, strike, spot, params, time_to_maturity, volatility_override
            )
        except NumericError as e:
            premium = math.nan
            error = str(e)
        else:
            error = "non-finite premium"

        if not math.isfinite(premium):
            logger.warning(
                "leg_premium_suppressed",
                leg_index=index,
                leg_type=component.type.value,
                strike=strike,
                spot=spot,
                error=error,
            )
            suppressed += 1
            premium = 0.0

        leg_premiums.append(premium)
        total += premium * component.quantity / 100

    return AggregatedStrategy(
        components=legs,
        reference_spot=reference_spot,
        coverage_ratio=coverage_ratio,
        premium_per_unit=total * coverage_ratio / 100,
        leg_premiums=tuple(leg_premiums),
        suppressed_legs=suppressed,
    )
