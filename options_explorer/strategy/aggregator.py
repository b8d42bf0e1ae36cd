"""
Multi-leg strategy aggregation and payoff profiles.
"""
import math
import logging
from typing import Dict, Iterable, List, Optional

import numpy as np
import pandas as pd

from ..valuation import black_scholes
from ..valuation.models import Greeks
from .leg import (
    ProfilePoint,
    StrategyContext,
    StrategyEvaluation,
    StrategyLeg,
    cost_basis_sign,
    mark_to_market_sign,
)

logger = logging.getLogger(__name__)


def _valid_legs(legs: Iterable[StrategyLeg]) -> List[StrategyLeg]:
    legs = list(legs)
    valid = [leg for leg in legs if leg.is_valid()]
    skipped = len(legs) - len(valid)
    if skipped:
        logger.warning(f"Skipping {skipped} invalid leg(s) (bad strike or quantity)")
    return valid


def _is_positive(value) -> bool:
    try:
        return math.isfinite(value) and value > 0
    except TypeError:
        return False


def _context_is_valid(context: StrategyContext, current_spot: float) -> bool:
    """Spot, volatility and time must be finite and positive; the rate only finite."""
    try:
        rate_ok = math.isfinite(context.risk_free_rate)
    except TypeError:
        rate_ok = False
    return (rate_ok and _is_positive(current_spot) and
            _is_positive(context.volatility) and _is_positive(context.time_to_expiry))


def _leg_price(leg: StrategyLeg, context: StrategyContext, spot: float) -> float:
    return black_scholes.price(context.parameters_for(leg, spot))


def _leg_greeks(leg: StrategyLeg, context: StrategyContext, spot: float) -> Greeks:
    return black_scholes.greeks(context.parameters_for(leg, spot))


def _cost_basis(legs: List[StrategyLeg], context: StrategyContext,
                current_spot: float) -> float:
    total = 0.0
    for leg in legs:
        total += cost_basis_sign(leg) * _leg_price(leg, context, current_spot) * leg.quantity
    return total


def calculate_initial_cost(legs: Iterable[StrategyLeg], context: StrategyContext,
                           current_spot: float) -> float:
    """
    Net cash flow at strategy inception.

    Negative means a net debit was paid, positive a net credit received.
    Invalid legs are skipped.

    Args:
        legs: Strategy legs
        context: Shared rate / volatility / time
        current_spot: Spot price at inception

    Returns:
        Initial cost
    """
    return _cost_basis(_valid_legs(legs), context, current_spot)


def _mark_to_market_point(legs: List[StrategyLeg], context: StrategyContext,
                          spot: float, initial_cost: float) -> Optional[ProfilePoint]:
    """Aggregate one sweep point, or None if any leg produced a non-finite value."""
    if not math.isfinite(spot):
        return None

    total_value = 0.0
    total_delta = 0.0
    total_gamma = 0.0
    total_theta = 0.0
    total_vega = 0.0

    for leg in legs:
        sign = mark_to_market_sign(leg)
        option_price = _leg_price(leg, context, spot)
        leg_greeks = _leg_greeks(leg, context, spot)

        if not (math.isfinite(option_price) and leg_greeks.is_finite()):
            logger.debug(f"Non-finite valuation for {leg} at spot {spot}, dropping point")
            return None

        total_value += sign * option_price * leg.quantity
        total_delta += sign * leg_greeks.delta * leg.quantity
        total_gamma += sign * leg_greeks.gamma * leg.quantity
        total_theta += sign * leg_greeks.theta * leg.quantity
        total_vega += sign * leg_greeks.vega * leg.quantity

    point = ProfilePoint(
        spot=float(spot),
        total_value=initial_cost + total_value,
        total_delta=total_delta,
        total_gamma=total_gamma,
        total_theta=total_theta,
        total_vega=total_vega
    )

    if not all(math.isfinite(v) for v in point.to_dict().values()):
        logger.debug(f"Non-finite aggregate at spot {spot}, dropping point")
        return None

    return point


def evaluate_strategy(legs: Iterable[StrategyLeg], context: StrategyContext,
                      current_spot: float, sweep_spots: Iterable[float]) -> StrategyEvaluation:
    """
    Evaluate a strategy's running P&L and aggregate Greeks across spot prices.

    total_value at each swept spot is the initial cost plus the
    mark-to-market value of every leg. Invalid legs are skipped; sweep points
    with any non-finite result are dropped. An unusable context (spot,
    volatility or time not finite and positive, or a non-finite rate) gives
    a zero initial cost and an empty profile. Negative rates are accepted.

    Args:
        legs: Strategy legs
        context: Shared rate / volatility / time
        current_spot: Spot price used for the initial cost
        sweep_spots: Spot prices to evaluate, in output order

    Returns:
        StrategyEvaluation with initial cost and profile points
    """
    if not _context_is_valid(context, current_spot):
        logger.warning(f"Cannot evaluate strategy at spot {current_spot} with {context}, "
                       f"returning empty profile")
        return StrategyEvaluation(initial_cost=0.0, profile=[])

    valid = _valid_legs(legs)
    initial_cost = _cost_basis(valid, context, current_spot)

    profile = []
    dropped = 0
    for spot in sweep_spots:
        point = _mark_to_market_point(valid, context, spot, initial_cost)
        if point is None:
            dropped += 1
            continue
        profile.append(point)

    if dropped:
        logger.debug(f"Dropped {dropped} sweep point(s) with non-finite values")

    return StrategyEvaluation(initial_cost=initial_cost, profile=profile)


def find_current_metrics(profile: List[ProfilePoint], current_spot: float,
                         tolerance: Optional[float] = None) -> ProfilePoint:
    """
    Profile point nearest to the current spot.

    Returns a zero point at current_spot when the profile is empty, or when
    tolerance is given and the nearest point is further away than that.
    """
    empty = ProfilePoint(spot=current_spot, total_value=0.0, total_delta=0.0,
                         total_gamma=0.0, total_theta=0.0, total_vega=0.0)
    if not profile or not math.isfinite(current_spot):
        return empty

    nearest = min(profile, key=lambda p: abs(p.spot - current_spot))
    if tolerance is not None and abs(nearest.spot - current_spot) > tolerance:
        return empty

    return nearest


def build_spot_sweep(current_spot: float, range_fraction: float = 0.6,
                     min_range: float = 30.0, points: int = 100,
                     floor: float = 0.01) -> np.ndarray:
    """
    Spot prices around the current spot.

    Spans current_spot +/- max(current_spot * range_fraction, min_range) in
    steps of range / points, floored at `floor`. current_spot itself is
    always one of the returned values.

    Args:
        current_spot: Centre of the sweep
        range_fraction: Half-width as a fraction of spot
        min_range: Minimum half-width
        points: Number of steps per half-width
        floor: Lowest spot in the sweep

    Returns:
        Sorted array of spot prices
    """
    if points < 1:
        raise ValueError(f"points must be >= 1, got {points}")

    if not math.isfinite(current_spot) or current_spot <= 0:
        logger.warning(f"Cannot build sweep around spot {current_spot}")
        return np.array([], dtype=float)

    price_range = max(current_spot * range_fraction, min_range)
    step = price_range / points
    start = max(current_spot - price_range, floor)
    stop = current_spot + price_range

    count = int(math.floor((stop - start) / step + 1e-9)) + 1
    spots = start + step * np.arange(count)

    close = np.abs(spots - current_spot) <= 1e-9 * max(1.0, current_spot)
    if close.any():
        spots[close] = current_spot
    else:
        spots = np.sort(np.append(spots, current_spot))

    return spots


def find_breakevens(profile: List[ProfilePoint]) -> List[float]:
    """Spots where total_value crosses zero, by linear interpolation."""
    breakevens = []
    for prev, curr in zip(profile, profile[1:]):
        if prev.total_value == 0:
            breakevens.append(prev.spot)
        elif prev.total_value * curr.total_value < 0:
            weight = prev.total_value / (prev.total_value - curr.total_value)
            breakevens.append(prev.spot + weight * (curr.spot - prev.spot))

    if profile and profile[-1].total_value == 0:
        breakevens.append(profile[-1].spot)

    return breakevens


def summarize_profile(profile: List[ProfilePoint]) -> Dict:
    """
    Max profit, max loss and breakevens over a profile.

    Returns:
        Dictionary with max_profit, max_profit_spot, max_loss, max_loss_spot,
        breakevens (values are None for an empty profile)
    """
    if not profile:
        return {
            'max_profit': None,
            'max_profit_spot': None,
            'max_loss': None,
            'max_loss_spot': None,
            'breakevens': []
        }

    best = max(profile, key=lambda p: p.total_value)
    worst = min(profile, key=lambda p: p.total_value)

    return {
        'max_profit': best.total_value,
        'max_profit_spot': best.spot,
        'max_loss': worst.total_value,
        'max_loss_spot': worst.spot,
        'breakevens': find_breakevens(profile)
    }


class StrategyAggregator:
    """Evaluates multi-leg strategies under one shared market context."""

    def __init__(self, context: StrategyContext, sweep_config: Optional[Dict] = None):
        """
        Initialize strategy aggregator.

        Args:
            context: Shared rate / volatility / time for all legs
            sweep_config: Optional build_spot_sweep keyword overrides
                (range_fraction, min_range, points, floor)
        """
        self.context = context
        self.sweep_config = dict(sweep_config or {})

    def calculate_initial_cost(self, legs: List[StrategyLeg], current_spot: float) -> float:
        return calculate_initial_cost(legs, self.context, current_spot)

    def build_spot_sweep(self, current_spot: float) -> np.ndarray:
        return build_spot_sweep(current_spot, **self.sweep_config)

    def evaluate(self, legs: List[StrategyLeg], current_spot: float,
                 sweep_spots: Optional[Iterable[float]] = None) -> StrategyEvaluation:
        """
        Evaluate a strategy, building the default sweep when none is given.

        Args:
            legs: Strategy legs
            current_spot: Current underlying price
            sweep_spots: Optional explicit spot prices

        Returns:
            StrategyEvaluation
        """
        if sweep_spots is None:
            sweep_spots = self.build_spot_sweep(current_spot)

        evaluation = evaluate_strategy(legs, self.context, current_spot, sweep_spots)
        logger.debug(f"Evaluated {len(legs)} leg(s): initial cost {evaluation.initial_cost:.4f}, "
                     f"{len(evaluation.profile)} profile point(s)")
        return evaluation

    def current_metrics(self, evaluation: StrategyEvaluation, current_spot: float,
                        tolerance: Optional[float] = None) -> ProfilePoint:
        return find_current_metrics(evaluation.profile, current_spot, tolerance)

    def summarize(self, evaluation: StrategyEvaluation) -> Dict:
        summary = summarize_profile(evaluation.profile)
        summary['initial_cost'] = evaluation.initial_cost
        return summary

    def create_legs_df(self, legs: List[StrategyLeg], current_spot: float) -> pd.DataFrame:
        """
        Per-leg table of price, cash flow and Greeks at the current spot.

        Args:
            legs: Strategy legs
            current_spot: Current underlying price

        Returns:
            DataFrame with one row per leg (invalid legs flagged, not priced)
        """
        rows = []

        for leg in legs:
            row = {
                'Type': leg.option_type.name,
                'Strike': leg.strike,
                'Quantity': leg.quantity,
                'Direction': 'Long' if mark_to_market_sign(leg) > 0 else 'Short',
                'Valid': leg.is_valid()
            }

            if leg.is_valid():
                option_price = _leg_price(leg, self.context, current_spot)
                leg_greeks = _leg_greeks(leg, self.context, current_spot)
                sign = mark_to_market_sign(leg)
                row.update({
                    'Price': option_price,
                    'Cash Flow': cost_basis_sign(leg) * option_price * leg.quantity,
                    'Delta': sign * leg_greeks.delta * leg.quantity,
                    'Gamma': sign * leg_greeks.gamma * leg.quantity,
                    'Theta': sign * leg_greeks.theta * leg.quantity,
                    'Vega': sign * leg_greeks.vega * leg.quantity
                })

            rows.append(row)

        return pd.DataFrame(rows)
