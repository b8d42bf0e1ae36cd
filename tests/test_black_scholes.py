"""
Unit tests for the Black-Scholes pricing engine.
"""
import math
import unittest

import numpy as np

from options_explorer.valuation import black_scholes
from options_explorer.valuation.black_scholes import (
    BlackScholesCalculator,
    calculate_d1,
    standard_normal_cdf,
    standard_normal_pdf,
)
from options_explorer.valuation.models import OptionParameters, OptionType


def _params(**changes):
    base = OptionParameters(spot=100.0, strike=100.0, risk_free_rate=0.05,
                            volatility=0.20, time_to_expiry=1.0)
    return base.replace(**changes)


class TestNormalDistribution(unittest.TestCase):
    """Test CDF/PDF primitives."""

    def test_cdf_known_values(self):
        self.assertAlmostEqual(standard_normal_cdf(0.0), 0.5, places=12)
        self.assertAlmostEqual(standard_normal_cdf(1.96), 0.9750021, places=6)
        self.assertAlmostEqual(standard_normal_cdf(-1.0), 0.1586553, places=6)

    def test_cdf_tails_clamped(self):
        self.assertEqual(standard_normal_cdf(-10.5), 0.0)
        self.assertEqual(standard_normal_cdf(10.5), 1.0)

    def test_cdf_non_finite_returns_half(self):
        for x in (math.nan, math.inf, -math.inf):
            self.assertEqual(standard_normal_cdf(x), 0.5)

    def test_pdf(self):
        self.assertAlmostEqual(standard_normal_pdf(0.0), 1 / math.sqrt(2 * math.pi))
        self.assertEqual(standard_normal_pdf(math.nan), 0.0)


class TestReferenceValues(unittest.TestCase):
    """S=100, K=100, r=5%, sigma=20%, T=1."""

    def test_call_price_and_greeks(self):
        params = _params()
        g = black_scholes.greeks(params)

        self.assertAlmostEqual(black_scholes.price(params), 10.4506, places=3)
        self.assertAlmostEqual(g.delta, 0.6368, places=3)
        self.assertAlmostEqual(g.gamma, 0.018762, places=4)
        self.assertAlmostEqual(g.vega, 0.3752, places=3)
        self.assertAlmostEqual(g.theta, -0.01757, places=4)
        self.assertAlmostEqual(g.rho, 0.5323, places=3)

    def test_put_price_and_greeks(self):
        params = _params(option_type=OptionType.PUT)
        g = black_scholes.greeks(params)

        self.assertAlmostEqual(black_scholes.price(params), 5.5735, places=3)
        self.assertAlmostEqual(g.delta, -0.3632, places=3)
        self.assertAlmostEqual(g.gamma, 0.018762, places=4)
        self.assertAlmostEqual(g.vega, 0.3752, places=3)
        self.assertAlmostEqual(g.rho, -0.4189, places=3)

    def test_put_call_parity(self):
        for spot in (60.0, 95.0, 100.0, 130.0):
            for strike in (80.0, 100.0, 120.0):
                call = black_scholes.price(_params(spot=spot, strike=strike))
                put = black_scholes.price(_params(spot=spot, strike=strike,
                                                  option_type=OptionType.PUT))
                expected = spot - strike * math.exp(-0.05)
                self.assertAlmostEqual(call - put, expected, places=8)


class TestProperties(unittest.TestCase):
    """Bounds, symmetry and monotonicity."""

    def test_delta_bounds(self):
        for spot in (1.0, 50.0, 100.0, 150.0, 1000.0):
            call_delta = black_scholes.greeks(_params(spot=spot)).delta
            put_delta = black_scholes.greeks(_params(spot=spot, option_type=OptionType.PUT)).delta
            self.assertGreaterEqual(call_delta, 0.0)
            self.assertLessEqual(call_delta, 1.0)
            self.assertGreaterEqual(put_delta, -1.0)
            self.assertLessEqual(put_delta, 0.0)
            self.assertAlmostEqual(call_delta - put_delta, 1.0, places=12)

    def test_gamma_and_vega_same_for_calls_and_puts(self):
        call = black_scholes.greeks(_params(spot=93.0))
        put = black_scholes.greeks(_params(spot=93.0, option_type=OptionType.PUT))
        self.assertAlmostEqual(call.gamma, put.gamma, places=12)
        self.assertAlmostEqual(call.vega, put.vega, places=12)

    def test_call_increases_with_spot_and_volatility(self):
        prices = [black_scholes.price(_params(spot=s)) for s in (80, 90, 100, 110, 120)]
        self.assertEqual(prices, sorted(prices))

        prices = [black_scholes.price(_params(volatility=v)) for v in (0.1, 0.2, 0.3, 0.5)]
        self.assertEqual(prices, sorted(prices))

    def test_atm_price_increases_with_time(self):
        times = (0.01, 0.1, 0.5, 1.0, 2.0, 5.0, 10.0)
        for rate in (0.0, 0.05):
            with self.subTest(rate=rate):
                prices = [black_scholes.price(_params(risk_free_rate=rate, time_to_expiry=t))
                          for t in times]
                self.assertEqual(prices, sorted(prices))

        prices = [black_scholes.price(_params(risk_free_rate=0.0, time_to_expiry=t,
                                              option_type=OptionType.PUT)) for t in times]
        self.assertEqual(prices, sorted(prices))

        # with r > 0 the discounted strike caps the put at long maturities
        short_times = (0.01, 0.1, 0.5, 1.0, 2.0)
        prices = [black_scholes.price(_params(time_to_expiry=t, option_type=OptionType.PUT))
                  for t in short_times]
        self.assertEqual(prices, sorted(prices))

    def test_price_above_intrinsic_lower_bound(self):
        params = _params(spot=120.0)
        self.assertGreaterEqual(black_scholes.price(params),
                                120.0 - 100.0 * math.exp(-0.05))

    def test_atm_theta_negative(self):
        self.assertLess(black_scholes.greeks(_params()).theta, 0)


class TestDegenerateInputs(unittest.TestCase):
    """Invalid inputs produce finite numbers, never exceptions."""

    DEGENERATE = [
        {'spot': 0.0},
        {'spot': -5.0},
        {'spot': math.nan},
        {'strike': 0.0},
        {'strike': math.inf},
        {'volatility': 0.0},
        {'volatility': -0.2},
        {'volatility': math.inf},
        {'time_to_expiry': 0.0},
        {'time_to_expiry': -1.0},
        {'time_to_expiry': math.nan},
        {'risk_free_rate': math.nan},
        {'risk_free_rate': math.inf},
    ]

    def test_all_outputs_finite(self):
        for changes in self.DEGENERATE:
            for option_type in (OptionType.CALL, OptionType.PUT):
                with self.subTest(changes=changes, option_type=option_type):
                    params = _params(option_type=option_type, **changes)
                    self.assertFalse(params.is_valid())
                    self.assertTrue(math.isfinite(black_scholes.price(params)))
                    self.assertTrue(black_scholes.greeks(params).is_finite())

    def test_d1_sentinel(self):
        self.assertEqual(calculate_d1(0.0, 100.0, 0.05, 0.2, 1.0), 0.0)
        self.assertEqual(calculate_d1(100.0, 100.0, 0.05, 0.0, 1.0), 0.0)
        self.assertEqual(calculate_d1(100.0, 100.0, 0.05, 0.2, math.nan), 0.0)

    def test_zero_time_uses_sentinel_not_intrinsic(self):
        # d1 = d2 = 0 at T=0, so price = 0.5 * (S - K)
        price = black_scholes.price(_params(spot=110.0, time_to_expiry=0.0))
        self.assertAlmostEqual(price, 5.0)

        g = black_scholes.greeks(_params(spot=110.0, time_to_expiry=0.0))
        self.assertEqual(g.gamma, 0.0)
        self.assertEqual(g.vega, 0.0)

    def test_zero_volatility_gamma_is_zero(self):
        self.assertEqual(black_scholes.greeks(_params(volatility=0.0)).gamma, 0.0)


class TestBlackScholesCalculator(unittest.TestCase):
    """Test Black-Scholes calculator."""

    def setUp(self):
        """Set up test calculator."""
        self.calc = BlackScholesCalculator(risk_free_rate=0.05)

    def test_call_option_pricing(self):
        price = self.calc.calculate_option_price(
            spot=100,
            strike=100,
            time_to_expiry=1.0,
            volatility=0.20,
            option_type='C'
        )
        self.assertAlmostEqual(price, 10.4506, places=3)

    def test_put_option_pricing(self):
        price = self.calc.calculate_option_price(100, 100, 1.0, 0.20, option_type='put')
        self.assertAlmostEqual(price, 5.5735, places=3)

    def test_greeks_calculation(self):
        greeks = self.calc.calculate_greeks(
            spot=100,
            strike=100,
            time_to_expiry=1.0,
            volatility=0.30,
            option_type='C'
        )

        # ATM call delta should be around 0.5
        self.assertGreater(greeks['delta'], 0.5)
        self.assertLess(greeks['delta'], 0.7)
        self.assertGreater(greeks['gamma'], 0)
        self.assertGreater(greeks['vega'], 0)
        self.assertLess(greeks['theta'], 0)
        self.assertEqual(set(greeks), {'delta', 'gamma', 'theta', 'vega', 'rho'})

    def test_batch_matches_scalar(self):
        spots = np.array([0.0, 50.0, 100.0, 150.0, np.nan, -10.0])
        for option_type in ('C', 'P'):
            batch = self.calc.calculate_batch(spots, 100.0, 0.5, 0.25, option_type)
            for spot, value in zip(spots, batch):
                expected = self.calc.calculate_option_price(spot, 100.0, 0.5, 0.25, option_type)
                self.assertAlmostEqual(value, expected, places=10)

    def test_batch_mixed_types_and_broadcasting(self):
        strikes = np.array([90.0, 100.0, 110.0])
        types = ['C', 'P', 'C']
        batch = self.calc.calculate_batch(100.0, strikes, 1.0, 0.2, types)

        self.assertEqual(batch.shape, (3,))
        self.assertAlmostEqual(batch[1], 5.5735, places=3)
        self.assertTrue(np.all(np.isfinite(batch)))


class TestOptionType(unittest.TestCase):

    def test_from_value(self):
        self.assertIs(OptionType.from_value('call'), OptionType.CALL)
        self.assertIs(OptionType.from_value('P'), OptionType.PUT)
        self.assertIs(OptionType.from_value(OptionType.PUT), OptionType.PUT)
        with self.assertRaises(ValueError):
            OptionType.from_value('straddle')


if __name__ == '__main__':
    unittest.main()
