"""
Unit tests for scenario runner.
"""
import unittest

from options_explorer.scenario import ScenarioRunner, ScenarioTemplates
from options_explorer.valuation import black_scholes
from options_explorer.valuation.models import OptionParameters, OptionType


class TestScenarioRunner(unittest.TestCase):
    """Test scenario runner."""

    def setUp(self):
        self.runner = ScenarioRunner()
        self.params = OptionParameters(spot=100.0, strike=100.0, risk_free_rate=0.05,
                                       volatility=0.20, time_to_expiry=0.25)

    def test_time_decay_demo(self):
        result = self.runner.run_scenario(self.params, ScenarioTemplates.time_decay())

        self.assertEqual(result['scenario_name'], 'Time Decay Demo')
        self.assertAlmostEqual(result['base_price'], black_scholes.price(self.params))

        prices = [stage['price'] for stage in result['stage_results']]
        thetas = [stage['greeks'].theta for stage in result['stage_results']]

        # ATM option loses value and decays faster as expiry approaches
        self.assertGreater(prices[0], prices[1])
        self.assertGreater(prices[1], prices[2])
        self.assertGreater(thetas[0], thetas[1])
        self.assertGreater(thetas[1], thetas[2])

        for stage in result['stage_results']:
            self.assertAlmostEqual(stage['price_change'], stage['price'] - result['base_price'])
            self.assertLess(stage['price_change'], 0)

    def test_market_crash_put_gains(self):
        put = self.params.replace(option_type=OptionType.PUT)
        result = self.runner.run_scenario(put, ScenarioTemplates.market_crash())

        prices = [stage['price'] for stage in result['stage_results']]
        self.assertLess(prices[0], prices[1])
        self.assertLess(prices[1], prices[2])

    def test_invalid_stage_logged(self):
        scenario = ScenarioTemplates.create_custom_scenario(
            'Broken', [{'name': 'Zero vol', 'volatility': 0.0}]
        )

        with self.assertLogs('options_explorer.scenario.scenario_runner', level='WARNING'):
            result = self.runner.run_scenario(self.params, scenario)

        self.assertEqual(len(result['stage_results']), 1)
        self.assertTrue(result['stage_results'][0]['greeks'].is_finite())

    def test_summary_df(self):
        result = self.runner.run_scenario(self.params, ScenarioTemplates.gamma_scalping())
        df = self.runner.create_scenario_summary_df(result)

        self.assertEqual(len(df), 3)
        for column in ('Stage', 'Spot', 'Volatility', 'Days', 'Price', 'Change',
                       'Delta', 'Gamma', 'Theta', 'Vega', 'Rho'):
            self.assertIn(column, df.columns)

        self.assertEqual(df['Spot'].tolist(), [100.0, 110.0, 90.0])
        # gamma peaks at the money
        self.assertEqual(df['Gamma'].idxmax(), 0)

    def test_comparison_df(self):
        scenarios = {name: ScenarioTemplates.get_scenario(name)
                     for name in ('Weekend Time Decay', 'Implied Volatility Rank')}
        results = self.runner.run_multiple_scenarios(self.params, scenarios)
        df = self.runner.create_comparison_df(results)

        self.assertEqual(len(df), 6)
        self.assertEqual(list(df.columns[:2]), ['Scenario', 'Stage'])
        self.assertTrue(self.runner.create_comparison_df({}).empty)


if __name__ == '__main__':
    unittest.main()
