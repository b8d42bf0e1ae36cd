"""
Staged scenario evaluation.
"""
import logging
from typing import Dict

import pandas as pd

from ..valuation import black_scholes
from ..valuation.models import OptionParameters
from .scenario_templates import DAYS_PER_YEAR, ScenarioTemplates

logger = logging.getLogger(__name__)


class ScenarioRunner:
    """Evaluates option price and Greeks at each stage of a scenario."""

    def run_scenario(self, params: OptionParameters, scenario: Dict) -> Dict:
        """
        Run a scenario against the current parameters.

        Args:
            params: Current option parameters
            scenario: Scenario dictionary (see ScenarioTemplates)

        Returns:
            Dictionary with scenario metadata and per-stage results
        """
        scenario_name = scenario.get('name', 'Unknown')
        logger.debug(f"Running scenario: {scenario_name}")

        base_price = black_scholes.price(params)
        stage_results = []

        for stage in scenario.get('stages', []):
            stage_params = ScenarioTemplates.apply_stage(params, stage)
            if not stage_params.is_valid():
                logger.warning(f"Stage '{stage['name']}' of {scenario_name} has invalid "
                               f"parameters {stage_params!r}")

            stage_price = black_scholes.price(stage_params)
            stage_greeks = black_scholes.greeks(stage_params)

            stage_results.append({
                'stage': stage['name'],
                'explanation': stage.get('explanation', ''),
                'parameters': stage_params,
                'price': stage_price,
                'price_change': stage_price - base_price,
                'greeks': stage_greeks
            })

        return {
            'scenario_name': scenario_name,
            'description': scenario.get('description', ''),
            'story': scenario.get('story', ''),
            'base_price': base_price,
            'stage_results': stage_results
        }

    def run_multiple_scenarios(self, params: OptionParameters,
                               scenarios: Dict[str, Dict]) -> Dict[str, Dict]:
        """
        Run multiple scenarios.

        Args:
            params: Current option parameters
            scenarios: Dictionary of scenario name -> scenario

        Returns:
            Dictionary of scenario name -> results
        """
        results = {}

        for scenario_name, scenario in scenarios.items():
            results[scenario_name] = self.run_scenario(params, scenario)
            logger.debug(f"Completed scenario: {scenario_name}")

        return results

    def create_scenario_summary_df(self, result: Dict) -> pd.DataFrame:
        """
        Create a stage-by-stage table for one scenario result.

        Args:
            result: Output of run_scenario

        Returns:
            DataFrame with one row per stage
        """
        rows = []

        for stage in result['stage_results']:
            params: OptionParameters = stage['parameters']
            rows.append({
                'Stage': stage['stage'],
                'Spot': params.spot,
                'Volatility': params.volatility,
                'Days': params.time_to_expiry * DAYS_PER_YEAR,
                'Rate': params.risk_free_rate,
                'Price': stage['price'],
                'Change': stage['price_change'],
                **{name.capitalize(): value for name, value in stage['greeks'].to_dict().items()}
            })

        return pd.DataFrame(rows)

    def create_comparison_df(self, results: Dict[str, Dict]) -> pd.DataFrame:
        """
        Flatten several scenario results into one table.

        Args:
            results: Output of run_multiple_scenarios

        Returns:
            DataFrame with Scenario column prepended
        """
        frames = []
        for scenario_name, result in results.items():
            df = self.create_scenario_summary_df(result)
            df.insert(0, 'Scenario', scenario_name)
            frames.append(df)

        if not frames:
            return pd.DataFrame()

        return pd.concat(frames, ignore_index=True)
