"""Tests for the Garman-Kohlhagen pricer."""

import math

import pytest

from fxhedge.exceptions import NumericError
from fxhedge.pricing import garman_kohlhagen
from fxhedge.pricing.garman_kohlhagen import (
    d1,
    d2,
    forward_rate,
    norm_cdf,
    price_option,
)


class TestNormCdf:
    """erf-based standard normal CDF."""

    def test_symmetry(self) -> None:
        assert norm_cdf(0.0) == pytest.approx(0.5, abs=1e-15)
        assert norm_cdf(1.3) + norm_cdf(-1.3) == pytest.approx(1.0, abs=1e-15)

    def test_known_value(self) -> None:
        """N(1.96) is 0.9750021048517795."""
        assert norm_cdf(1.96) == pytest.approx(0.9750021048517795, abs=1e-12)


class TestPutCallParity:
    """call - put == S e^{-r_f t} - K e^{-r_d t}."""

    @pytest.mark.parametrize(
        "spot,strike,r_d,r_f,t,sigma",
        [
            (1.10, 1.10, 0.05, 0.03, 1.0, 0.10),
            (1.10, 1.20, 0.01, 0.04, 0.25, 0.15),
            (148.5, 140.0, 0.005, 0.05, 2.0, 0.12),
            (0.65, 0.60, 0.0, 0.0, 0.0833, 0.30),
        ],
    )
    def test_parity_holds(
        self, spot: float, strike: float, r_d: float, r_f: float, t: float, sigma: float
    ) -> None:
        """Parity within 1e-6 for positive maturity and volatility."""
        call = price_option("call", spot, strike, r_d, r_f, t, sigma)
        put = price_option("put", spot, strike, r_d, r_f, t, sigma)
        expected = spot * math.exp(-r_f * t) - strike * math.exp(-r_d * t)
        assert call - put == pytest.approx(expected, abs=1e-6)


class TestKnownPrice:
    """Reference values computed from the closed form."""

    def test_atm_call(self) -> None:
        """ATM call, r_d=5%, r_f=3%, 1y, 10% vol."""
        s, k, r_d, r_f, t, sigma = 1.10, 1.10, 0.05, 0.03, 1.0, 0.10
        d_1 = (math.log(s / k) + (r_d - r_f + sigma**2 / 2) * t) / (sigma * math.sqrt(t))
        d_2 = d_1 - sigma * math.sqrt(t)
        expected = s * math.exp(-r_f * t) * norm_cdf(d_1) - k * math.exp(-r_d * t) * norm_cdf(d_2)
        assert price_option("call", s, k, r_d, r_f, t, sigma) == pytest.approx(expected, rel=1e-12)
        assert d1(s, k, r_d, r_f, t, sigma) == pytest.approx(d_1)
        assert d2(s, k, r_d, r_f, t, sigma) == pytest.approx(d_2)

    def test_prices_positive(self) -> None:
        assert price_option("call", 1.1, 1.2, 0.05, 0.03, 1.0, 0.1) > 0
        assert price_option("put", 1.1, 1.0, 0.05, 0.03, 1.0, 0.1) > 0

    def test_price_reuses_d1(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """The pricer derives d2 from the shared d1 term."""
        calls = []
        original = garman_kohlhagen.d1

        def counting_d1(*args: float) -> float:
            calls.append(args)
            return original(*args)

        monkeypatch.setattr(garman_kohlhagen, "d1", counting_d1)
        price_option("put", 1.10, 1.05, 0.05, 0.03, 0.5, 0.12)
        assert calls == [(1.10, 1.05, 0.05, 0.03, 0.5, 0.12)]


class TestDegenerateInputs:
    """t <= 0 or sigma <= 0 gives the undiscounted intrinsic value exactly."""

    def test_zero_time_call(self) -> None:
        assert price_option("call", 1.2, 1.1, 0.05, 0.03, 0.0, 0.1) == pytest.approx(0.1)
        assert price_option("call", 1.2, 1.1, 0.05, 0.03, 0.0, 0.1) == max(0.0, 1.2 - 1.1)

    def test_zero_vol_put(self) -> None:
        assert price_option("put", 1.0, 1.1, 0.05, 0.03, 1.0, 0.0) == max(0.0, 1.1 - 1.0)

    def test_negative_time_out_of_money(self) -> None:
        assert price_option("call", 1.0, 1.1, 0.05, 0.03, -1.0, 0.1) == 0.0
        assert price_option("put", 1.2, 1.1, 0.05, 0.03, 1.0, -0.1) == 0.0


class TestErrors:
    """Invalid inputs surface as typed errors."""

    def test_non_positive_strike(self) -> None:
        with pytest.raises(NumericError):
            price_option("call", 1.1, 0.0, 0.05, 0.03, 1.0, 0.1)

    def test_non_positive_spot(self) -> None:
        with pytest.raises(NumericError):
            price_option("put", -1.0, 1.1, 0.05, 0.03, 1.0, 0.1)

    def test_non_finite_result(self) -> None:
        with pytest.raises(NumericError):
            price_option("call", 1.1, 1.1, math.nan, 0.03, 1.0, 0.1)

    def test_unknown_kind(self) -> None:
        with pytest.raises(ValueError):
            price_option("straddle", 1.1, 1.1, 0.05, 0.03, 1.0, 0.1)  # type: ignore[arg-type]


class TestForwardRate:
    """Interest-rate parity forward."""

    def test_continuous(self) -> None:
        assert forward_rate(1.10, 0.05, 0.03, 1.0) == pytest.approx(1.10 * math.exp(0.02))

    def test_simple(self) -> None:
        assert forward_rate(1.10, 0.05, 0.03, 1.0, "simple") == pytest.approx(1.10 * 1.05 / 1.03)

    def test_zero_time_is_spot(self) -> None:
        assert forward_rate(1.10, 0.05, 0.03, 0.0) == 1.10
