"""
Black-Scholes pricing engine for European options.

Every function is total: invalid or non-finite inputs never raise and never
return NaN/Infinity. Invalid parameters collapse d1 to a 0.0 sentinel in
calculate_d1(), and every downstream formula inherits that guard. Results for
invalid inputs are finite but not meaningful; callers validate parameters
(OptionParameters.is_valid) before trusting them.

Scaling conventions:
    theta  per calendar day (annual theta / 365)
    vega   per 1 percentage point of volatility (/ 100)
    rho    per 1 percentage point of rate (/ 100)
"""
import math
import logging
from typing import Dict

import numpy as np
from scipy.special import erf

from .models import Greeks, OptionParameters, OptionType

logger = logging.getLogger(__name__)

SQRT_2PI = math.sqrt(2 * math.pi)
SQRT_2 = math.sqrt(2)
DAYS_PER_YEAR = 365
PERCENT_DIVISOR = 100

# Beyond +/-10 standard deviations the CDF is 0 or 1 to double precision
CDF_CUTOFF = 10.0


def _is_finite(value) -> bool:
    try:
        return math.isfinite(value)
    except TypeError:
        return False


def _is_positive(value) -> bool:
    return _is_finite(value) and value > 0


def _finite_or_zero(value: float) -> float:
    return float(value) if _is_finite(value) else 0.0


def _sqrt_time(time_to_expiry: float) -> float:
    """sqrt(T), or 0.0 when T is not a finite positive number."""
    return math.sqrt(time_to_expiry) if _is_positive(time_to_expiry) else 0.0


def _vol_sqrt_time(volatility: float, time_to_expiry: float) -> float:
    if not _is_positive(volatility):
        return 0.0
    return volatility * _sqrt_time(time_to_expiry)


def _safe_divide(numerator: float, denominator: float) -> float:
    if not _is_finite(denominator) or denominator == 0:
        return 0.0
    return numerator / denominator


def _discount_factor(risk_free_rate: float, time_to_expiry: float) -> float:
    """exp(-r*T); 1.0 when r*T is not finite."""
    exponent = -risk_free_rate * time_to_expiry if (
        _is_finite(risk_free_rate) and _is_finite(time_to_expiry)) else math.nan
    if not _is_finite(exponent):
        return 1.0
    try:
        return math.exp(exponent)
    except OverflowError:
        return math.inf


# ---------------------------------------------------------------------------
# Normal distribution primitives
# ---------------------------------------------------------------------------

def standard_normal_cdf(x: float) -> float:
    """
    Standard normal CDF via the error function.

    Non-finite x returns 0.5. This is a fallback for degenerate intermediate
    values, not a meaningful probability.
    """
    if not _is_finite(x):
        return 0.5
    if x < -CDF_CUTOFF:
        return 0.0
    if x > CDF_CUTOFF:
        return 1.0
    return float((1.0 + erf(x / SQRT_2)) / 2.0)


def standard_normal_pdf(x: float) -> float:
    """Standard normal density; 0.0 for non-finite x."""
    if not _is_finite(x):
        return 0.0
    return math.exp(-x * x / 2.0) / SQRT_2PI


# ---------------------------------------------------------------------------
# d1 / d2
# ---------------------------------------------------------------------------

def calculate_d1(spot: float, strike: float, risk_free_rate: float,
                 volatility: float, time_to_expiry: float) -> float:
    """
    Calculate d1.

    Returns 0.0 when any input is non-finite, when spot, strike, volatility or
    time_to_expiry is not positive, or when the result overflows.
    """
    inputs = (spot, strike, risk_free_rate, volatility, time_to_expiry)
    if not all(_is_finite(v) for v in inputs):
        logger.debug(f"Non-finite input to d1 {inputs}, using sentinel 0")
        return 0.0

    if spot <= 0 or strike <= 0 or volatility <= 0 or time_to_expiry <= 0:
        logger.debug(f"Non-positive input to d1 {inputs}, using sentinel 0")
        return 0.0

    numerator = (math.log(spot) - math.log(strike) +
                 (risk_free_rate + volatility * volatility / 2.0) * time_to_expiry)
    denominator = volatility * math.sqrt(time_to_expiry)

    result = numerator / denominator
    return result if _is_finite(result) else 0.0


def calculate_d2(spot: float, strike: float, risk_free_rate: float,
                 volatility: float, time_to_expiry: float) -> float:
    """d2 = d1 - sigma * sqrt(T), using the (possibly sentinel) d1."""
    d1 = calculate_d1(spot, strike, risk_free_rate, volatility, time_to_expiry)
    return d1 - _vol_sqrt_time(volatility, time_to_expiry)


# ---------------------------------------------------------------------------
# Prices
# ---------------------------------------------------------------------------

def call_price(spot: float, strike: float, risk_free_rate: float,
               volatility: float, time_to_expiry: float) -> float:
    d1 = calculate_d1(spot, strike, risk_free_rate, volatility, time_to_expiry)
    d2 = calculate_d2(spot, strike, risk_free_rate, volatility, time_to_expiry)
    discount = _discount_factor(risk_free_rate, time_to_expiry)

    value = (spot * standard_normal_cdf(d1) -
             strike * discount * standard_normal_cdf(d2))
    return _finite_or_zero(value)


def put_price(spot: float, strike: float, risk_free_rate: float,
              volatility: float, time_to_expiry: float) -> float:
    d1 = calculate_d1(spot, strike, risk_free_rate, volatility, time_to_expiry)
    d2 = calculate_d2(spot, strike, risk_free_rate, volatility, time_to_expiry)
    discount = _discount_factor(risk_free_rate, time_to_expiry)

    value = (strike * discount * standard_normal_cdf(-d2) -
             spot * standard_normal_cdf(-d1))
    return _finite_or_zero(value)


def option_price(spot: float, strike: float, risk_free_rate: float,
                 volatility: float, time_to_expiry: float,
                 option_type=OptionType.CALL) -> float:
    """Call or put price depending on option_type."""
    if OptionType.from_value(option_type) is OptionType.CALL:
        return call_price(spot, strike, risk_free_rate, volatility, time_to_expiry)
    return put_price(spot, strike, risk_free_rate, volatility, time_to_expiry)


# ---------------------------------------------------------------------------
# Greeks
# ---------------------------------------------------------------------------

def delta(spot: float, strike: float, risk_free_rate: float,
          volatility: float, time_to_expiry: float,
          option_type=OptionType.CALL) -> float:
    d1 = calculate_d1(spot, strike, risk_free_rate, volatility, time_to_expiry)
    if OptionType.from_value(option_type) is OptionType.CALL:
        return standard_normal_cdf(d1)
    return standard_normal_cdf(d1) - 1.0


def gamma(spot: float, strike: float, risk_free_rate: float,
          volatility: float, time_to_expiry: float) -> float:
    """Same for calls and puts."""
    d1 = calculate_d1(spot, strike, risk_free_rate, volatility, time_to_expiry)
    denominator = spot * _vol_sqrt_time(volatility, time_to_expiry)
    return _finite_or_zero(_safe_divide(standard_normal_pdf(d1), denominator))


def theta(spot: float, strike: float, risk_free_rate: float,
          volatility: float, time_to_expiry: float,
          option_type=OptionType.CALL) -> float:
    """Time decay per calendar day."""
    d1 = calculate_d1(spot, strike, risk_free_rate, volatility, time_to_expiry)
    d2 = calculate_d2(spot, strike, risk_free_rate, volatility, time_to_expiry)
    discount = _discount_factor(risk_free_rate, time_to_expiry)

    time_decay = _safe_divide(-spot * volatility * standard_normal_pdf(d1),
                              2.0 * _sqrt_time(time_to_expiry))

    if OptionType.from_value(option_type) is OptionType.CALL:
        interest = -risk_free_rate * strike * discount * standard_normal_cdf(d2)
    else:
        interest = risk_free_rate * strike * discount * standard_normal_cdf(-d2)

    return _finite_or_zero((time_decay + interest) / DAYS_PER_YEAR)


def vega(spot: float, strike: float, risk_free_rate: float,
         volatility: float, time_to_expiry: float) -> float:
    """Price change per 1 vol point. Same for calls and puts."""
    d1 = calculate_d1(spot, strike, risk_free_rate, volatility, time_to_expiry)
    value = spot * _sqrt_time(time_to_expiry) * standard_normal_pdf(d1)
    return _finite_or_zero(value / PERCENT_DIVISOR)


def rho(spot: float, strike: float, risk_free_rate: float,
        volatility: float, time_to_expiry: float,
        option_type=OptionType.CALL) -> float:
    """Price change per 1 rate point."""
    d2 = calculate_d2(spot, strike, risk_free_rate, volatility, time_to_expiry)
    discount = _discount_factor(risk_free_rate, time_to_expiry)
    basis = strike * time_to_expiry * discount

    if OptionType.from_value(option_type) is OptionType.CALL:
        value = basis * standard_normal_cdf(d2)
    else:
        value = -basis * standard_normal_cdf(-d2)

    return _finite_or_zero(value / PERCENT_DIVISOR)


# ---------------------------------------------------------------------------
# Public parameter-object API
# ---------------------------------------------------------------------------

def price(params: OptionParameters) -> float:
    """Black-Scholes price for one parameter set."""
    return option_price(params.spot, params.strike, params.risk_free_rate,
                        params.volatility, params.time_to_expiry, params.option_type)


def greeks(params: OptionParameters) -> Greeks:
    """All five Greeks for one parameter set."""
    args = (params.spot, params.strike, params.risk_free_rate,
            params.volatility, params.time_to_expiry)

    return Greeks(
        delta=delta(*args, option_type=params.option_type),
        gamma=gamma(*args),
        theta=theta(*args, option_type=params.option_type),
        vega=vega(*args),
        rho=rho(*args, option_type=params.option_type),
    )


def _normal_cdf_array(x: np.ndarray) -> np.ndarray:
    x = np.asarray(x, dtype=float)
    with np.errstate(invalid='ignore'):
        cdf = (1.0 + erf(x / SQRT_2)) / 2.0
    cdf = np.where(x < -CDF_CUTOFF, 0.0, cdf)
    cdf = np.where(x > CDF_CUTOFF, 1.0, cdf)
    return np.where(np.isfinite(x), cdf, 0.5)


class BlackScholesCalculator:
    """Black-Scholes pricing bound to a fixed risk-free rate, with vectorization."""

    def __init__(self, risk_free_rate: float = 0.05):
        """
        Initialize Black-Scholes calculator.

        Args:
            risk_free_rate: Annual continuously-compounded risk-free rate (default 5%)
        """
        self.risk_free_rate = risk_free_rate

    def calculate_option_price(self, spot: float, strike: float, time_to_expiry: float,
                               volatility: float, option_type='C') -> float:
        """
        Calculate option price using Black-Scholes formula.

        Args:
            spot: Current underlying price
            strike: Strike price
            time_to_expiry: Time to expiration in years
            volatility: Volatility (as decimal, e.g., 0.30 for 30%)
            option_type: 'C' for call, 'P' for put

        Returns:
            Option price
        """
        return option_price(spot, strike, self.risk_free_rate, volatility,
                            time_to_expiry, option_type)

    def calculate_greeks(self, spot: float, strike: float, time_to_expiry: float,
                         volatility: float, option_type='C') -> Dict[str, float]:
        """
        Calculate option Greeks.

        Returns:
            Dictionary with delta, gamma, theta, vega, rho
        """
        params = OptionParameters(
            spot=spot,
            strike=strike,
            risk_free_rate=self.risk_free_rate,
            volatility=volatility,
            time_to_expiry=time_to_expiry,
            option_type=OptionType.from_value(option_type)
        )
        return greeks(params).to_dict()

    def calculate_batch(self, spots, strikes, times_to_expiry, volatilities,
                        option_types) -> np.ndarray:
        """
        Vectorized batch calculation of option prices.

        Inputs broadcast against each other. Elements with invalid parameters
        go through the scalar engine so the degenerate-input policy matches
        option_price() exactly.

        Args:
            spots: Array of spot prices
            strikes: Array of strike prices
            times_to_expiry: Array of times to expiry (in years)
            volatilities: Array of volatilities
            option_types: Array (or single value) of option types ('C' or 'P')

        Returns:
            Array of option prices
        """
        spots, strikes, times_to_expiry, volatilities = np.broadcast_arrays(
            *(np.asarray(x, dtype=float)
              for x in (spots, strikes, times_to_expiry, volatilities))
        )
        shape = spots.shape
        types = np.broadcast_to(np.asarray(option_types, dtype=object), shape)
        is_call = np.array(
            [OptionType.from_value(t) is OptionType.CALL for t in types.flat],
            dtype=bool
        ).reshape(shape)

        rate = self.risk_free_rate
        with np.errstate(invalid='ignore'):
            valid = (np.isfinite(spots) & np.isfinite(strikes) &
                     np.isfinite(times_to_expiry) & np.isfinite(volatilities) &
                     (spots > 0) & (strikes > 0) &
                     (times_to_expiry > 0) & (volatilities > 0))
        if not _is_finite(rate):
            valid[...] = False

        prices = np.zeros(shape, dtype=float)

        if valid.any():
            s = spots[valid]
            k = strikes[valid]
            t = times_to_expiry[valid]
            v = volatilities[valid]

            with np.errstate(all='ignore'):
                vol_sqrt_t = v * np.sqrt(t)
                d1 = (np.log(s) - np.log(k) + (rate + 0.5 * v * v) * t) / vol_sqrt_t
                d1 = np.where(np.isfinite(d1), d1, 0.0)
                d2 = d1 - vol_sqrt_t
                discount = np.exp(-rate * t)

                calls = s * _normal_cdf_array(d1) - k * discount * _normal_cdf_array(d2)
                puts = k * discount * _normal_cdf_array(-d2) - s * _normal_cdf_array(-d1)

            prices[valid] = np.where(is_call[valid], calls, puts)

        invalid_idx = np.argwhere(~valid)
        if len(invalid_idx):
            logger.debug(f"Batch pricing {len(invalid_idx)} invalid entries via scalar fallback")
        for idx in invalid_idx:
            idx = tuple(idx)
            prices[idx] = option_price(
                spots[idx], strikes[idx], rate, volatilities[idx],
                times_to_expiry[idx], OptionType.CALL if is_call[idx] else OptionType.PUT
            )

        return np.where(np.isfinite(prices), prices, 0.0)
