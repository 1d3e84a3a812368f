"""Garman-Kohlhagen closed-form pricing for vanilla FX options.

The two-currency Black-Scholes variant: the foreign rate plays the role of
a continuous dividend yield.

    d1 = (ln(S/K) + (r_d - r_f + sigma^2/2) t) / (sigma sqrt(t))
    d2 = d1 - sigma sqrt(t)
    call = S e^{-r_f t} N(d1) - K e^{-r_d t} N(d2)
    put  = K e^{-r_d t} N(-d2) - S e^{-r_f t} N(-d1)

All rates and volatilities here are decimals (0.05 = 5%). Conversion from
the percent units of the data model happens in the callers.
"""

import math
from typing import Literal

from fxhedge.exceptions import NumericError

OptionKind = Literal["call", "put"]

_SQRT2 = math.sqrt(2.0)


def norm_cdf(x: float) -> float:
    """Standard normal cumulative distribution function (erf-based)."""
    return 0.5 * (1.0 + math.erf(x / _SQRT2))


def d1(
    spot: float,
    strike: float,
    domestic_rate: float,
    foreign_rate: float,
    time_to_maturity: float,
    volatility: float,
) -> float:
    """Garman-Kohlhagen d1 term. Requires positive spot, strike, t and sigma."""
    return (
        math.log(spot / strike)
        + (domestic_rate - foreign_rate + volatility**2 / 2) * time_to_maturity
    ) / (volatility * math.sqrt(time_to_maturity))


def d2(
    spot: float,
    strike: float,
    domestic_rate: float,
    foreign_rate: float,
    time_to_maturity: float,
    volatility: float,
) -> float:
    """Garman-Kohlhagen d2 term (d1 - sigma sqrt(t))."""
    return d1(
        spot, strike, domestic_rate, foreign_rate, time_to_maturity, volatility
    ) - volatility * math.sqrt(time_to_maturity)


def intrinsic_value(kind: OptionKind, spot: float, strike: float) -> float:
    """Undiscounted exercise value of a call or put."""
    if kind == "call":
        return max(0.0, spot - strike)
    return max(0.0, strike - spot)


def price_option(
    kind: OptionKind,
    spot: float,
    strike: float,
    domestic_rate: float,
    foreign_rate: float,
    time_to_maturity: float,
    volatility: float,
) -> float:
    """Price a vanilla FX call or put.

    Degenerate inputs (t <= 0 or sigma <= 0) return the intrinsic value
    without discounting.

    Args:
        kind: "call" or "put".
        spot: Spot rate S (domestic per foreign).
        strike: Absolute strike K.
        domestic_rate: r_d as a decimal.
        foreign_rate: r_f as a decimal.
        time_to_maturity: t in years.
        volatility: sigma as a decimal.

    Returns:
        Option premium per unit of foreign notional.

    Raises:
        ValueError: If kind is not "call" or "put".
        NumericError: If spot/strike are not positive or the formula
            does not produce a finite number.
    """
    if kind not in ("call", "put"):
        raise ValueError(f"Unknown option kind: {kind!r}")

    if time_to_maturity <= 0 or volatility <= 0:
        return intrinsic_value(kind, spot, strike)

    if not (spot > 0 and strike > 0):
        raise NumericError(
            f"spot and strike must be positive (spot={spot}, strike={strike})"
        )

    try:
        d_1 = d1(spot, strike, domestic_rate, foreign_rate, time_to_maturity, volatility)
        d_2 = d_1 - volatility * math.sqrt(time_to_maturity)
        df_domestic = math.exp(-domestic_rate * time_to_maturity)
        df_foreign = math.exp(-foreign_rate * time_to_maturity)
    except (ValueError, OverflowError, ZeroDivisionError) as e:
        raise NumericError(f"Garman-Kohlhagen evaluation failed: {e}") from e

    if kind == "call":
        value = spot * df_foreign * norm_cdf(d_1) - strike * df_domestic * norm_cdf(d_2)
    else:
        value = strike * df_domestic * norm_cdf(-d_2) - spot * df_foreign * norm_cdf(-d_1)

    if not math.isfinite(value):
        raise NumericError(f"Garman-Kohlhagen produced a non-finite {kind} price")
    return value


def forward_rate(
    spot: float,
    domestic_rate: float,
    foreign_rate: float,
    time_to_maturity: float,
    compounding: Literal["continuous", "simple"] = "continuous",
) -> float:
    """No-arbitrage forward rate from interest-rate parity.

    Continuous: S e^{(r_d - r_f) t}. Simple: S (1 + r_d t) / (1 + r_f t).
    """
    if compounding == "simple":
        return spot * (1 + domestic_rate * time_to_maturity) / (
            1 + foreign_rate * time_to_maturity
        )
    return spot * math.exp((domestic_rate - foreign_rate) * time_to_maturity)
