"""
Unit tests for report generation.
"""
import contextlib
import io
import json
import os
import tempfile
import unittest

import pandas as pd

from options_explorer.output import ReportGenerator
from options_explorer.scenario import ScenarioRunner, ScenarioTemplates
from options_explorer.strategy import StrategyAggregator, StrategyContext, StrategyTemplates
from options_explorer.valuation import black_scholes
from options_explorer.valuation.models import OptionParameters


class TestReportGenerator(unittest.TestCase):
    """Test report generator."""

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.export_path = os.path.join(self.tmpdir.name, 'reports')
        self.generator = ReportGenerator(export_path=self.export_path, decimals=2)
        self.params = OptionParameters(spot=100.0, strike=100.0, risk_free_rate=0.05,
                                       volatility=0.20, time_to_expiry=1.0)

    def tearDown(self):
        self.tmpdir.cleanup()

    def test_option_report(self):
        report = self.generator.generate_option_report(
            self.params, black_scholes.price(self.params), black_scholes.greeks(self.params)
        )

        self.assertEqual(list(report), ['Inputs', 'Price and Greeks'])
        greeks_df = report['Price and Greeks']
        self.assertEqual(greeks_df['Metric'].tolist(),
                         ['Price', 'Delta', 'Gamma', 'Theta', 'Vega', 'Rho'])
        self.assertEqual(greeks_df.loc[0, 'Value'], '10.45')
        self.assertFalse(os.path.exists(self.export_path))

    def test_strategy_report(self):
        strategy = StrategyTemplates.get_strategy('Bull Call Spread')
        aggregator = StrategyAggregator(StrategyContext(0.05, 0.2, 0.25), {'points': 10})
        evaluation = aggregator.evaluate(strategy['legs'], 100.0)

        report = self.generator.generate_strategy_report(
            strategy['name'],
            aggregator.create_legs_df(strategy['legs'], 100.0),
            evaluation,
            aggregator.summarize(evaluation),
            aggregator.current_metrics(evaluation, 100.0)
        )

        self.assertEqual(list(report), ['Bull Call Spread Legs', 'Bull Call Spread Summary',
                                        'Bull Call Spread Profile'])
        summary = report['Bull Call Spread Summary']
        self.assertIn('debit', summary.loc[0, 'Value'])
        self.assertEqual(len(report['Bull Call Spread Profile']), 21)

    def test_scenario_report(self):
        runner = ScenarioRunner()
        result = runner.run_scenario(self.params, ScenarioTemplates.time_decay())
        report = self.generator.generate_scenario_report(
            result, runner.create_scenario_summary_df(result)
        )

        notes = report['Time Decay Demo Notes']
        self.assertEqual(len(notes), 3)
        self.assertEqual(notes.loc[0, 'Stage'], '30 Days Out')

    def test_save_full_report(self):
        report = {
            'First Section': pd.DataFrame({'a': [1, 2], 'b': [0.5, 0.25]}),
            'A Very Long Section Name That Exceeds Excel Limits': pd.DataFrame({'c': ['x']}),
        }
        saved = self.generator.save_full_report(report, base_filename='unit')

        self.assertIsInstance(saved['excel'], str)
        self.assertTrue(os.path.isfile(saved['excel']))
        self.assertIsInstance(saved['json'], str)
        self.assertIsInstance(saved['csv'], list)
        self.assertEqual(len(saved['csv']), 2)
        for path in saved['csv']:
            self.assertTrue(os.path.isfile(path))

        with open(saved['json']) as f:
            data = json.load(f)
        self.assertEqual(data['First Section'], [{'a': 1, 'b': 0.5}, {'a': 2, 'b': 0.25}])

        sheets = pd.read_excel(saved['excel'], sheet_name=None)
        self.assertIn('A Very Long Section Name That E', sheets)

    def test_print_report(self):
        report = {'Section': pd.DataFrame({'Metric': ['Price'], 'Value': ['1.00']})}
        buffer = io.StringIO()
        with contextlib.redirect_stdout(buffer):
            self.generator.print_report(report, title='TEST')

        output = buffer.getvalue()
        self.assertIn('TEST', output)
        self.assertIn('Price', output)


if __name__ == '__main__':
    unittest.main()
