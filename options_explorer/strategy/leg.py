"""
Strategy legs, shared context and profile records.
"""
import math
from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Dict, List

import pandas as pd

from ..valuation.models import OptionParameters, OptionType


class Direction(str, Enum):
    """Side of a leg."""
    LONG = 'buy'
    SHORT = 'sell'

    @classmethod
    def from_value(cls, value) -> 'Direction':
        if isinstance(value, cls):
            return value

        text = str(value).strip().lower()
        if text in ('long', 'buy', 'b'):
            return cls.LONG
        if text in ('short', 'sell', 's'):
            return cls.SHORT

        raise ValueError(f"Unknown direction {value!r}, expected 'long' or 'short'")


@dataclass(frozen=True)
class StrategyLeg:
    """One option position within a multi-leg strategy."""
    option_type: OptionType
    strike: float
    quantity: int = 1
    direction: Direction = Direction.LONG

    @classmethod
    def from_dict(cls, data: Dict) -> 'StrategyLeg':
        """
        Build a leg from a plain dict.

        Accepts 'direction' or 'action' ('buy'/'sell') for the side.
        """
        direction = data.get('direction', data.get('action', Direction.LONG))
        return cls(
            option_type=OptionType.from_value(data['option_type']),
            strike=data.get('strike'),
            quantity=data.get('quantity'),
            direction=Direction.from_value(direction)
        )

    def is_valid(self) -> bool:
        """Strike must be a finite positive number, quantity an integer >= 1."""
        if isinstance(self.strike, bool) or isinstance(self.quantity, bool):
            return False
        try:
            if not math.isfinite(self.strike) or self.strike <= 0:
                return False
            if not math.isfinite(self.quantity) or self.quantity < 1:
                return False
        except TypeError:
            return False
        return float(self.quantity).is_integer()

    def to_dict(self) -> Dict:
        return {
            'option_type': self.option_type.value,
            'strike': self.strike,
            'quantity': self.quantity,
            'direction': self.direction.value
        }

    def __repr__(self) -> str:
        side = 'Long' if self.direction is Direction.LONG else 'Short'
        return f"StrategyLeg({side} {self.quantity} x {self.option_type.name} {self.strike})"


def cost_basis_sign(leg: StrategyLeg) -> int:
    """
    Cash-flow sign at inception.

    A long leg pays premium (-1), a short leg receives it (+1).
    """
    return -1 if leg.direction is Direction.LONG else 1


def mark_to_market_sign(leg: StrategyLeg) -> int:
    """
    Sign of the leg's current worth.

    A long leg gains with the option price (+1), a short leg loses (-1).
    """
    return 1 if leg.direction is Direction.LONG else -1


@dataclass(frozen=True)
class StrategyContext:
    """Market parameters shared by every leg of a strategy."""
    risk_free_rate: float
    volatility: float
    time_to_expiry: float

    def parameters_for(self, leg: StrategyLeg, spot: float) -> OptionParameters:
        """Option parameters for a leg at the given spot."""
        return OptionParameters(
            spot=spot,
            strike=leg.strike,
            risk_free_rate=self.risk_free_rate,
            volatility=self.volatility,
            time_to_expiry=self.time_to_expiry,
            option_type=leg.option_type
        )


@dataclass(frozen=True)
class ProfilePoint:
    """Aggregate strategy value and Greeks at one spot price."""
    spot: float
    total_value: float
    total_delta: float
    total_gamma: float
    total_theta: float
    total_vega: float

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


@dataclass
class StrategyEvaluation:
    """Result of evaluating a strategy across a spot sweep."""
    initial_cost: float
    profile: List[ProfilePoint] = field(default_factory=list)

    def to_dataframe(self) -> pd.DataFrame:
        """Profile as a DataFrame, one row per surviving sweep point."""
        columns = ['spot', 'total_value', 'total_delta', 'total_gamma',
                   'total_theta', 'total_vega']
        return pd.DataFrame([p.to_dict() for p in self.profile], columns=columns)
