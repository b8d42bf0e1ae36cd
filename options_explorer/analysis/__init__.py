"""Chart data series built on the pricing engine."""
from .curves import (
    TIME_SCENARIOS,
    price_curve,
    greeks_curve,
    volatility_comparison,
    time_decay_series,
    to_dataframe,
)

__all__ = ['TIME_SCENARIOS', 'price_curve', 'greeks_curve',
           'volatility_comparison', 'time_decay_series', 'to_dataframe']
