"""Options Explorer: Black-Scholes pricing, Greeks and multi-leg strategy profiles."""
from .valuation import OptionType, OptionParameters, Greeks, price, greeks
from .strategy import (
    Direction,
    StrategyLeg,
    StrategyContext,
    ProfilePoint,
    StrategyEvaluation,
    evaluate_strategy,
)

__version__ = '0.1.0'

__all__ = ['OptionType', 'OptionParameters', 'Greeks', 'price', 'greeks',
           'Direction', 'StrategyLeg', 'StrategyContext', 'ProfilePoint',
           'StrategyEvaluation', 'evaluate_strategy']
