"""Multi-leg strategy evaluation."""
from .leg import (
    Direction,
    StrategyLeg,
    StrategyContext,
    ProfilePoint,
    StrategyEvaluation,
    cost_basis_sign,
    mark_to_market_sign,
)
from .aggregator import StrategyAggregator, evaluate_strategy, build_spot_sweep
from .strategy_templates import StrategyTemplates

__all__ = ['Direction', 'StrategyLeg', 'StrategyContext', 'ProfilePoint',
           'StrategyEvaluation', 'cost_basis_sign', 'mark_to_market_sign',
           'StrategyAggregator', 'evaluate_strategy', 'build_spot_sweep',
           'StrategyTemplates']
