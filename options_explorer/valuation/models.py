"""
Value types shared by the pricing engine and its callers.
"""
import math
from dataclasses import dataclass, asdict, replace
from enum import Enum
from typing import Dict


class OptionType(str, Enum):
    """European option type."""
    CALL = 'C'
    PUT = 'P'

    @classmethod
    def from_value(cls, value) -> 'OptionType':
        """
        Parse an option type.

        Args:
            value: OptionType, or one of 'C', 'P', 'call', 'put' (any case)

        Returns:
            Matching OptionType
        """
        if isinstance(value, cls):
            return value

        text = str(value).strip().lower()
        if text in ('c', 'call'):
            return cls.CALL
        if text in ('p', 'put'):
            return cls.PUT

        raise ValueError(f"Unknown option type {value!r}, expected 'call' or 'put'")


@dataclass(frozen=True)
class OptionParameters:
    """
    Inputs for one Black-Scholes evaluation.

    No validation happens here: the engine accepts any float and applies its
    degenerate-input policy. Use is_valid() before trusting results.
    """
    spot: float
    strike: float
    risk_free_rate: float
    volatility: float
    time_to_expiry: float  # years
    option_type: OptionType = OptionType.CALL

    def is_valid(self) -> bool:
        """True when all numbers are finite and spot/strike/vol/time are positive."""
        values = (self.spot, self.strike, self.risk_free_rate,
                  self.volatility, self.time_to_expiry)
        try:
            if not all(math.isfinite(v) for v in values):
                return False
        except TypeError:
            return False

        return (self.spot > 0 and self.strike > 0 and
                self.volatility > 0 and self.time_to_expiry > 0)

    def replace(self, **changes) -> 'OptionParameters':
        """Return a copy with the given fields changed."""
        return replace(self, **changes)

    def __repr__(self) -> str:
        return (f"OptionParameters({self.option_type.name} S={self.spot} K={self.strike} "
                f"r={self.risk_free_rate} sigma={self.volatility} T={self.time_to_expiry})")


@dataclass(frozen=True)
class Greeks:
    """
    Option sensitivities.

    theta is per calendar day, vega per 1 vol point, rho per 1 rate point.
    """
    delta: float
    gamma: float
    theta: float
    vega: float
    rho: float

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)

    def is_finite(self) -> bool:
        return all(math.isfinite(v) for v in self.to_dict().values())
