"""
Pre-built option strategy templates.
"""
from typing import Dict, List

from ..valuation.models import OptionType
from .leg import Direction, StrategyLeg


def _leg(option_type: OptionType, strike: float, direction: Direction,
         quantity: int = 1) -> StrategyLeg:
    return StrategyLeg(option_type=option_type, strike=strike,
                       quantity=quantity, direction=direction)


CALL = OptionType.CALL
PUT = OptionType.PUT
LONG = Direction.LONG
SHORT = Direction.SHORT


class StrategyTemplates:
    """Pre-defined multi-leg strategies, with strikes relative to a base strike."""

    @staticmethod
    def get_all_strategies(base_strike: float = 100.0) -> Dict[str, Dict]:
        """
        Get all predefined strategies.

        Args:
            base_strike: Strike the templates are centred on

        Returns:
            Dictionary of strategy name -> strategy
        """
        k = base_strike
        return {
            'Long Straddle': StrategyTemplates.long_straddle(k),
            'Short Straddle': StrategyTemplates.short_straddle(k),
            'Long Strangle': StrategyTemplates.long_strangle(k),
            'Bull Call Spread': StrategyTemplates.bull_call_spread(k),
            'Bear Put Spread': StrategyTemplates.bear_put_spread(k),
            'Bull Put Spread': StrategyTemplates.bull_put_spread(k),
            'Bear Call Spread': StrategyTemplates.bear_call_spread(k),
            'Iron Condor': StrategyTemplates.iron_condor(k),
            'Iron Butterfly': StrategyTemplates.iron_butterfly(k),
            'Protective Put': StrategyTemplates.protective_put(k),
            'Covered Call': StrategyTemplates.covered_call(k),
            'Collar': StrategyTemplates.collar(k),
            'Calendar Spread': StrategyTemplates.calendar_spread(k),
            'Jade Lizard': StrategyTemplates.jade_lizard(k),
            'Ratio Call Spread': StrategyTemplates.ratio_call_spread(k),
        }

    @staticmethod
    def get_strategy(name: str, base_strike: float = 100.0) -> Dict:
        """
        Look up a strategy by name (case-insensitive).

        Raises:
            KeyError: If no strategy has that name
        """
        strategies = StrategyTemplates.get_all_strategies(base_strike)
        for strategy_name, strategy in strategies.items():
            if strategy_name.lower() == name.strip().lower():
                return strategy

        raise KeyError(f"Unknown strategy {name!r}. Available: {', '.join(strategies)}")

    @staticmethod
    def long_straddle(k: float) -> Dict:
        """Buy call + buy put at the same strike."""
        return {
            'name': 'Long Straddle',
            'legs': [_leg(CALL, k, LONG), _leg(PUT, k, LONG)],
            'description': 'Buy call + Buy put at same strike (volatility play)'
        }

    @staticmethod
    def short_straddle(k: float) -> Dict:
        return {
            'name': 'Short Straddle',
            'legs': [_leg(CALL, k, SHORT), _leg(PUT, k, SHORT)],
            'description': 'Sell call + Sell put at same strike (collect premium)'
        }

    @staticmethod
    def long_strangle(k: float) -> Dict:
        return {
            'name': 'Long Strangle',
            'legs': [_leg(CALL, k + 5, LONG), _leg(PUT, k - 5, LONG)],
            'description': 'Buy OTM call + Buy OTM put (cheaper volatility play)'
        }

    @staticmethod
    def bull_call_spread(k: float) -> Dict:
        return {
            'name': 'Bull Call Spread',
            'legs': [_leg(CALL, k - 5, LONG), _leg(CALL, k + 5, SHORT)],
            'description': 'Buy lower strike call + Sell higher strike call'
        }

    @staticmethod
    def bear_put_spread(k: float) -> Dict:
        return {
            'name': 'Bear Put Spread',
            'legs': [_leg(PUT, k + 5, LONG), _leg(PUT, k - 5, SHORT)],
            'description': 'Buy higher strike put + Sell lower strike put'
        }

    @staticmethod
    def bull_put_spread(k: float) -> Dict:
        return {
            'name': 'Bull Put Spread',
            'legs': [_leg(PUT, k + 5, SHORT), _leg(PUT, k - 5, LONG)],
            'description': 'Sell higher strike put + Buy lower strike put'
        }

    @staticmethod
    def bear_call_spread(k: float) -> Dict:
        return {
            'name': 'Bear Call Spread',
            'legs': [_leg(CALL, k - 5, SHORT), _leg(CALL, k + 5, LONG)],
            'description': 'Sell lower strike call + Buy higher strike call'
        }

    @staticmethod
    def iron_condor(k: float) -> Dict:
        """Short strangle inside protective long wings."""
        return {
            'name': 'Iron Condor',
            'legs': [
                _leg(PUT, k - 10, LONG),
                _leg(PUT, k - 5, SHORT),
                _leg(CALL, k + 5, SHORT),
                _leg(CALL, k + 10, LONG),
            ],
            'description': 'Sell OTM strangle + Buy protective wings'
        }

    @staticmethod
    def iron_butterfly(k: float) -> Dict:
        return {
            'name': 'Iron Butterfly',
            'legs': [
                _leg(PUT, k - 10, LONG),
                _leg(PUT, k, SHORT),
                _leg(CALL, k, SHORT),
                _leg(CALL, k + 10, LONG),
            ],
            'description': 'Sell ATM straddle + Buy equidistant wings'
        }

    @staticmethod
    def protective_put(k: float) -> Dict:
        """Option leg only; the stock holding is not modelled."""
        return {
            'name': 'Protective Put',
            'legs': [_leg(PUT, k - 5, LONG)],
            'description': 'Long stock + Long put (insurance strategy)'
        }

    @staticmethod
    def covered_call(k: float) -> Dict:
        """Option leg only; the stock holding is not modelled."""
        return {
            'name': 'Covered Call',
            'legs': [_leg(CALL, k + 5, SHORT)],
            'description': 'Long stock + Short call (income strategy)'
        }

    @staticmethod
    def collar(k: float) -> Dict:
        return {
            'name': 'Collar',
            'legs': [_leg(PUT, k - 5, LONG), _leg(CALL, k + 5, SHORT)],
            'description': 'Long stock + Long put + Short call'
        }

    @staticmethod
    def calendar_spread(k: float) -> Dict:
        """Both legs share one expiry here, so they offset exactly."""
        return {
            'name': 'Calendar Spread',
            'legs': [_leg(CALL, k, SHORT), _leg(CALL, k, LONG)],
            'description': 'Sell short-term + Buy long-term same strike'
        }

    @staticmethod
    def jade_lizard(k: float) -> Dict:
        return {
            'name': 'Jade Lizard',
            'legs': [
                _leg(PUT, k - 10, SHORT),
                _leg(CALL, k + 5, SHORT),
                _leg(CALL, k + 15, LONG),
            ],
            'description': 'Short put + Short call spread (high probability)'
        }

    @staticmethod
    def ratio_call_spread(k: float) -> Dict:
        return {
            'name': 'Ratio Call Spread',
            'legs': [_leg(CALL, k, LONG), _leg(CALL, k + 10, SHORT, quantity=2)],
            'description': 'Buy 1 call + Sell 2 higher strike calls'
        }

    @staticmethod
    def create_custom_strategy(name: str, legs: List, description: str = '') -> Dict:
        """
        Create a custom strategy.

        Args:
            name: Strategy name
            legs: StrategyLeg objects or dicts accepted by StrategyLeg.from_dict
            description: Strategy description

        Returns:
            Strategy dictionary
        """
        return {
            'name': name,
            'legs': [leg if isinstance(leg, StrategyLeg) else StrategyLeg.from_dict(leg)
                     for leg in legs],
            'description': description or 'Custom strategy'
        }
