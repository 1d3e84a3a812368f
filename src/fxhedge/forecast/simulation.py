"""Monte-Carlo rate paths under geometric Brownian motion.

    S(t + dt) = S(t) exp((mu - sigma^2/2) dt + sigma sqrt(dt) Z)

with drift mu = r_d - r_f (decimals). Paths share one time grid of at
least 100 steps (100 per year beyond one year) covering the latest
settlement date; each settlement date reads the grid step nearest to it.
"""

import math

import numpy as np

from fxhedge.logging import get_logger

logger = get_logger(__name__)

MIN_STEPS = 100
STEPS_PER_YEAR = 100
MIN_HORIZON_YEARS = 0.1


def simulation_grid(time_points: list[float]) -> tuple[float, int, list[int]]:
    """Time grid covering the settlement times.

    Args:
        time_points: Settlement times in years from the start date.

    Returns:
        (horizon in years, number of steps, grid index of each time point).
    """
    horizon = max([*time_points, MIN_HORIZON_YEARS])
    num_steps = max(MIN_STEPS, math.ceil(STEPS_PER_YEAR * horizon))
    # round half up
    indices = [min(int(tp / horizon * num_steps + 0.5), num_steps) for tp in time_points]
    return horizon, num_steps, indices


def simulate_price_paths(
    spot: float,
    drift: float,
    volatility: float,
    horizon: float,
    num_steps: int,
    num_paths: int,
    rng: np.random.Generator,
) -> np.ndarray:
    """Simulate GBM paths.

    Args:
        spot: Starting rate.
        drift: Annual drift as a decimal.
        volatility: Annual volatility as a decimal.
        horizon: Length of the grid in years.
        num_steps: Number of time steps.
        num_paths: Number of paths.
        rng: Random generator.

    Returns:
        Array of shape (num_paths, num_steps + 1); column 0 is spot.
    """
    dt = horizon / num_steps
    shocks = rng.standard_normal((num_paths, num_steps))
    log_steps = (drift - 0.5 * volatility**2) * dt + volatility * math.sqrt(dt) * shocks
    paths = np.empty((num_paths, num_steps + 1))
    paths[:, 0] = spot
    paths[:, 1:] = spot * np.exp(np.cumsum(log_steps, axis=1))
    return paths


def mean_simulated_rates(
    spot: float,
    drift: float,
    volatility: float,
    time_points: list[float],
    num_paths: int,
    rng: np.random.Generator,
) -> list[float]:
    """Average simulated rate at each settlement time."""
    horizon, num_steps, indices = simulation_grid(time_points)
    paths = simulate_price_paths(spot, drift, volatility, horizon, num_steps, num_paths, rng)
    means = paths[:, indices].mean(axis=0)

    logger.debug(
        "forecast_paths_simulated",
        paths=num_paths,
        steps=num_steps,
        horizon_years=round(horizon, 4),
        volatility=volatility,
    )
    return [float(m) for m in means]
