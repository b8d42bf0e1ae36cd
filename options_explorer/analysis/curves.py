"""
Data series for option charts: price curves, Greeks curves, volatility
comparison and time decay.

Every function returns a list of row dictionaries, one per chart point.
"""
import math
import logging
from typing import Dict, List, Optional

import numpy as np
import pandas as pd

from ..strategy.aggregator import build_spot_sweep
from ..valuation import black_scholes
from ..valuation.black_scholes import BlackScholesCalculator, DAYS_PER_YEAR
from ..valuation.models import OptionParameters, OptionType

logger = logging.getLogger(__name__)

TIME_SCENARIOS = [
    {'days': 90, 'label': '3 months', 'value': 90 / DAYS_PER_YEAR},
    {'days': 60, 'label': '2 months', 'value': 60 / DAYS_PER_YEAR},
    {'days': 30, 'label': '1 month', 'value': 30 / DAYS_PER_YEAR},
    {'days': 14, 'label': '2 weeks', 'value': 14 / DAYS_PER_YEAR},
    {'days': 7, 'label': '1 week', 'value': 7 / DAYS_PER_YEAR},
    {'days': 3, 'label': '3 days', 'value': 3 / DAYS_PER_YEAR},
    {'days': 1, 'label': '1 day', 'value': 1 / DAYS_PER_YEAR},
]


def _symmetric_spots(current_spot: float, range_fraction: float, points: int) -> np.ndarray:
    """current_spot +/- current_spot*range_fraction in steps of range/points."""
    if points < 1:
        raise ValueError(f"points must be >= 1, got {points}")
    if not math.isfinite(current_spot) or current_spot <= 0:
        logger.warning(f"Cannot build price range around spot {current_spot}")
        return np.array([], dtype=float)

    price_range = current_spot * range_fraction
    step = price_range / points
    return current_spot - price_range + step * np.arange(2 * points + 1)


def price_curve(params: OptionParameters, range_fraction: float = 0.5,
                points: int = 50) -> List[Dict]:
    """
    Call and put prices with intrinsic values across a spot range.

    Args:
        params: Option parameters (spot is the centre, option_type ignored)
        range_fraction: Half-width as a fraction of spot
        points: Steps per half-width

    Returns:
        Rows with spot, call_price, put_price, intrinsic_call, intrinsic_put
    """
    spots = _symmetric_spots(params.spot, range_fraction, points)
    calculator = BlackScholesCalculator(params.risk_free_rate)

    calls = calculator.calculate_batch(spots, params.strike, params.time_to_expiry,
                                       params.volatility, OptionType.CALL)
    puts = calculator.calculate_batch(spots, params.strike, params.time_to_expiry,
                                      params.volatility, OptionType.PUT)

    rows = []
    for spot, call, put in zip(spots, calls, puts):
        rows.append({
            'spot': float(spot),
            'call_price': float(call),
            'put_price': float(put),
            'intrinsic_call': max(0.0, float(spot) - params.strike),
            'intrinsic_put': max(0.0, params.strike - float(spot))
        })

    return rows


def greeks_curve(params: OptionParameters, range_fraction: float = 0.6,
                 min_range: float = 30.0, points: int = 100,
                 floor: float = 0.1) -> List[Dict]:
    """
    All five Greeks across a spot sweep for one option.

    Returns:
        Rows with spot, delta, gamma, theta, vega, rho
    """
    spots = build_spot_sweep(params.spot, range_fraction=range_fraction,
                             min_range=min_range, points=points, floor=floor)

    rows = []
    for spot in spots:
        greeks = black_scholes.greeks(params.replace(spot=float(spot)))
        rows.append({'spot': float(spot), **greeks.to_dict()})

    return rows


def volatility_comparison(params: OptionParameters, low: float = 0.10,
                          high: float = 0.50, range_fraction: float = 0.5,
                          points: int = 50) -> Dict:
    """
    Option price across spot at low, current and high volatility.

    Args:
        params: Option parameters (volatility is the 'current' level)
        low: Low volatility level
        high: High volatility level
        range_fraction: Half-width of the spot range as a fraction of spot
        points: Steps per half-width

    Returns:
        Dictionary with 'levels' (name, volatility, price, vega at the current
        spot) and 'curve' (rows with spot and one price column per level)
    """
    levels = [
        {'name': f"Low Vol ({low:.0%})", 'volatility': low},
        {'name': 'Current Vol', 'volatility': params.volatility},
        {'name': f"High Vol ({high:.0%})", 'volatility': high},
    ]

    for level in levels:
        level_params = params.replace(volatility=level['volatility'])
        level['price'] = black_scholes.price(level_params)
        level['vega'] = black_scholes.greeks(level_params).vega

    spots = _symmetric_spots(params.spot, range_fraction, points)
    calculator = BlackScholesCalculator(params.risk_free_rate)

    columns = {}
    for level in levels:
        columns[level['name']] = calculator.calculate_batch(
            spots, params.strike, params.time_to_expiry,
            level['volatility'], params.option_type
        )

    curve = []
    for i, spot in enumerate(spots):
        row = {'spot': float(spot)}
        for name, values in columns.items():
            row[name] = float(values[i])
        curve.append(row)

    return {'levels': levels, 'curve': curve}


def time_decay_series(params: OptionParameters, start_days: Optional[int] = None,
                      end_days: int = 1) -> List[Dict]:
    """
    Price and Greeks as expiry approaches, one calendar day at a time.

    Args:
        params: Option parameters
        start_days: First day count (default: params.time_to_expiry in days)
        end_days: Last day count

    Returns:
        Rows with days, time_to_expiry, price and the five Greeks
    """
    if start_days is None:
        start_days = int(round(params.time_to_expiry * DAYS_PER_YEAR))

    day_counts = list(range(start_days, end_days - 1, -1)) or [end_days]

    rows = []
    for days in day_counts:
        day_params = params.replace(time_to_expiry=days / DAYS_PER_YEAR)
        rows.append({
            'days': days,
            'time_to_expiry': day_params.time_to_expiry,
            'price': black_scholes.price(day_params),
            **black_scholes.greeks(day_params).to_dict()
        })

    return rows


def to_dataframe(rows: List[Dict]) -> pd.DataFrame:
    """Chart rows as a DataFrame."""
    return pd.DataFrame(rows)
