"""
Unit tests for strategy templates.
"""
import unittest

from options_explorer.strategy import Direction, StrategyLeg, StrategyTemplates
from options_explorer.valuation.models import OptionType


class TestStrategyTemplates(unittest.TestCase):
    """Test strategy templates."""

    def test_get_all_strategies(self):
        strategies = StrategyTemplates.get_all_strategies()

        self.assertEqual(len(strategies), 15)
        self.assertIn('Iron Condor', strategies)
        self.assertIn('Long Straddle', strategies)
        self.assertIn('Ratio Call Spread', strategies)

        for name, strategy in strategies.items():
            self.assertEqual(strategy['name'], name)
            self.assertTrue(strategy['description'])
            self.assertTrue(strategy['legs'])
            for leg in strategy['legs']:
                self.assertTrue(leg.is_valid(), f"{name}: {leg}")

    def test_iron_condor_strikes(self):
        legs = StrategyTemplates.iron_condor(200.0)['legs']

        self.assertEqual([(leg.option_type, leg.strike, leg.direction) for leg in legs], [
            (OptionType.PUT, 190.0, Direction.LONG),
            (OptionType.PUT, 195.0, Direction.SHORT),
            (OptionType.CALL, 205.0, Direction.SHORT),
            (OptionType.CALL, 210.0, Direction.LONG),
        ])

    def test_ratio_call_spread_quantities(self):
        legs = StrategyTemplates.ratio_call_spread(100.0)['legs']
        self.assertEqual([leg.quantity for leg in legs], [1, 2])
        self.assertEqual(legs[1].strike, 110.0)
        self.assertIs(legs[1].direction, Direction.SHORT)

    def test_get_strategy_case_insensitive(self):
        strategy = StrategyTemplates.get_strategy('  iron condor ', base_strike=50.0)
        self.assertEqual(strategy['name'], 'Iron Condor')
        self.assertEqual(strategy['legs'][0].strike, 40.0)

    def test_unknown_strategy(self):
        with self.assertRaises(KeyError) as ctx:
            StrategyTemplates.get_strategy('Butterfly Effect')
        self.assertIn('Iron Condor', str(ctx.exception))

    def test_custom_strategy(self):
        strategy = StrategyTemplates.create_custom_strategy(
            name='Test Strategy',
            legs=[
                {'option_type': 'call', 'strike': 100, 'quantity': 1, 'action': 'buy'},
                StrategyLeg(OptionType.PUT, 90.0, 1, Direction.SHORT),
            ]
        )

        self.assertEqual(strategy['name'], 'Test Strategy')
        self.assertEqual(strategy['description'], 'Custom strategy')
        self.assertEqual(len(strategy['legs']), 2)
        self.assertIs(strategy['legs'][0].direction, Direction.LONG)
        self.assertIs(strategy['legs'][1].option_type, OptionType.PUT)


if __name__ == '__main__':
    unittest.main()
