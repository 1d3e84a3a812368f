"""Zero-cost collar strike solver.

A collar buys a put and sells a call (or the reverse). Fixing one strike,
the other is bisected until both premia match, so the package costs
nothing upfront. Call premia fall as the strike rises and put premia rise,
which makes both searches monotone.
"""

from __future__ import annotations

from dataclasses import dataclass

from fxhedge.exceptions import ConfigurationError
from fxhedge.logging import get_logger
from fxhedge.models import ComponentType, ForexParams, StrategyComponent, StrikeType
from fxhedge.pricing.garman_kohlhagen import price_option

logger = get_logger(__name__)


@dataclass(frozen=True)
class CollarQuote:
    """Solved collar strikes with their premia (per unit)."""

    put_strike: float
    call_strike: float
    put_price: float
    call_price: float

    @property
    def net_premium(self) -> float:
        """Premium paid for the long put net of the short call."""
        return self.put_price - self.call_price

    def to_components(
        self, volatility: float, quantity: float = 100.0
    ) -> tuple[StrategyComponent, StrategyComponent]:
        """Express the collar as a long put and a short call with absolute strikes.

        Args:
            volatility: Leg volatility in percent.
            quantity: Notional percent covered by each leg.
        """
        return (
            StrategyComponent(
                type=ComponentType.PUT,
                strike=self.put_strike,
                strike_type=StrikeType.ABSOLUTE,
                volatility=volatility,
                quantity=quantity,
            ),
            StrategyComponent(
                type=ComponentType.CALL,
                strike=self.call_strike,
                strike_type=StrikeType.ABSOLUTE,
                volatility=volatility,
                quantity=-quantity,
            ),
        )

    def to_dict(self) -> dict:
        return {
            "put_strike": self.put_strike,
            "call_strike": self.call_strike,
            "put_price": self.put_price,
            "call_price": self.call_price,
            "net_premium": self.net_premium,
        }


def _check_bracket(
    leg: str, left: float, right: float, price_left: float, price_right: float, target: float
) -> None:
    low, high = sorted((price_left, price_right))
    if left < right and low <= target <= high:
        return
    logger.warning(
        "collar_not_bracketed",
        solved_leg=leg,
        bracket=(round(left, 6), round(right, 6)),
        target_premium=target,
    )
    raise ConfigurationError(
        f"No zero-cost {leg} strike in [{left:.6f}, {right:.6f}] "
        f"for a premium of {target:.6f}"
    )


def solve_zero_cost_collar(
    spot: float,
    params: ForexParams,
    volatility: float,
    *,
    put_strike: float | None = None,
    call_strike: float | None = None,
    tolerance: float = 1e-4,
    time_to_maturity: float | None = None,
) -> CollarQuote:
    """Find the strike that makes a collar premium-neutral.

    With put_strike fixed, the call strike is searched in
    [put_strike, 1.2 * spot]. With only call_strike fixed, the put strike
    is searched in [0.8 * spot, call_strike]. With neither, the put strike
    defaults to 95% of spot.

    Args:
        spot: Current spot rate.
        params: Market parameters (percent rates, hedge horizon).
        volatility: Volatility in percent.
        put_strike: Absolute put strike to hold fixed.
        call_strike: Absolute call strike to hold fixed.
        tolerance: Width of the final bisection bracket.
        time_to_maturity: Maturity in years. Defaults to the horizon of params.

    Returns:
        CollarQuote with both strikes and premia.

    Raises:
        ConfigurationError: If no strike in the search bracket balances the
            fixed leg's premium.
    """
    t = params.time_to_maturity() if time_to_maturity is None else time_to_maturity
    sigma = volatility / 100

    def call_price(strike: float) -> float:
        return price_option("call", spot, strike, params.r_d, params.r_f, t, sigma)

    def put_price(strike: float) -> float:
        return price_option("put", spot, strike, params.r_d, params.r_f, t, sigma)

    if call_strike is not None and put_strike is None:
        target = call_price(call_strike)
        left, right = 0.8 * spot, call_strike
        _check_bracket("put", left, right, put_price(left), put_price(right), target)
        while right - left > tolerance:
            mid = (left + right) / 2
            if put_price(mid) > target:
                right = mid
            else:
                left = mid
        solved = (left + right) / 2
        return CollarQuote(
            put_strike=solved,
            call_strike=call_strike,
            put_price=put_price(solved),
            call_price=target,
        )

    if put_strike is None:
        put_strike = 0.95 * spot

    target = put_price(put_strike)
    left, right = put_strike, 1.2 * spot
    _check_bracket("call", left, right, call_price(left), call_price(right), target)
    while right - left > tolerance:
        mid = (left + right) / 2
        if call_price(mid) > target:
            left = mid
        else:
            right = mid
    solved = (left + right) / 2
    return CollarQuote(
        put_strike=put_strike,
        call_strike=solved,
        put_price=target,
        call_price=call_price(solved),
    )
