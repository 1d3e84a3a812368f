"""Point-in-time barrier condition evaluation.

The realized rate of a period is treated as if it were the path extremum:
no intermediate path is simulated. Barrier levels are fixed at strategy
definition time, relative to the reference (inception) spot.
"""

from fxhedge.models import StrategyComponent
from fxhedge.pricing.rate_math import resolve_strike


def barrier_levels(
    component: StrategyComponent, reference_spot: float
) -> tuple[float | None, float | None]:
    """Resolve a component's (lower, upper) barrier levels to absolute rates."""
    lower = None
    upper = None
    if component.lower_barrier is not None:
        lower = resolve_strike(
            component.lower_barrier, component.lower_barrier_type, reference_spot
        )
    if component.upper_barrier is not None:
        upper = resolve_strike(
            component.upper_barrier, component.upper_barrier_type, reference_spot
        )
    return lower, upper


def is_barrier_crossed(
    component: StrategyComponent, realized_rate: float, reference_spot: float
) -> bool:
    """Return True when the realized rate triggers the component's barrier.

    Single barriers: calls trigger at or above the level, puts at or below.
    Reverse variants flip that direction. Double barriers trigger strictly
    outside [lower, upper].
    """
    lower, upper = barrier_levels(component, reference_spot)
    leg_type = component.type

    if leg_type.is_double:
        return realized_rate < lower or realized_rate > upper  # type: ignore[operator]

    # Single barrier: the upper slot takes precedence when both are set
    level = upper if upper is not None else lower
    triggers_upward = leg_type.is_call != leg_type.is_reverse
    if triggers_upward:
        return realized_rate >= level  # type: ignore[operator]
    return realized_rate <= level  # type: ignore[operator]


def evaluate_barrier_payoff(
    component: StrategyComponent,
    realized_rate: float,
    vanilla_payoff: float,
    reference_spot: float,
) -> float:
    """Apply a component's knock condition to its vanilla payoff.

    Args:
        component: Strategy leg. Non-barrier legs pass through unchanged.
        realized_rate: Rate observed for the period.
        vanilla_payoff: Payoff of the underlying call/put at realized_rate.
        reference_spot: Spot used to resolve percent-quoted barriers.

    Returns:
        vanilla_payoff when the leg is alive, 0.0 when it is knocked out
        or not knocked in.
    """
    if not component.type.is_barrier:
        return vanilla_payoff

    crossed = is_barrier_crossed(component, realized_rate, reference_spot)
    if component.type.is_knock_out:
        return 0.0 if crossed else vanilla_payoff
    return vanilla_payoff if crossed else 0.0
