"""
Educational market scenario templates.

Each scenario is a short story told in stages. A stage overrides some of the
current option parameters: absolute values for volatility, time to expiry or
rate, and a spot expressed as an offset from the strike.
"""
from typing import Dict, Optional

from ..valuation.black_scholes import DAYS_PER_YEAR
from ..valuation.models import OptionParameters



def _stage(name: str, explanation: str, spot_offset: Optional[float] = None,
           **overrides) -> Dict:
    stage = {
        'name': name,
        'overrides': overrides,
        'explanation': explanation
    }
    if spot_offset is not None:
        stage['spot_offset'] = spot_offset
    return stage


def _days(days: float) -> float:
    return days / DAYS_PER_YEAR


class ScenarioTemplates:
    """Pre-defined educational scenarios."""

    @staticmethod
    def get_all_scenarios() -> Dict[str, Dict]:
        """
        Get all predefined scenarios.

        Returns:
            Dictionary of scenario name -> parameters
        """
        return {
            'Earnings Play': ScenarioTemplates.earnings_play(),
            'Time Decay Demo': ScenarioTemplates.time_decay(),
            'Gamma Scalping': ScenarioTemplates.gamma_scalping(),
            'Volatility Impact': ScenarioTemplates.volatility_impact(),
            'Market Crash Scenario': ScenarioTemplates.market_crash(),
            'Interest Rate Changes': ScenarioTemplates.interest_rate_changes(),
            'Ex-Dividend Impact': ScenarioTemplates.ex_dividend(),
            'Weekend Time Decay': ScenarioTemplates.weekend_decay(),
            'Expiration Friday': ScenarioTemplates.expiration_friday(),
            'Implied Volatility Rank': ScenarioTemplates.iv_rank(),
        }

    @staticmethod
    def get_scenario(name: str) -> Dict:
        """
        Look up a scenario by name or id (case-insensitive).

        Raises:
            KeyError: If no scenario matches
        """
        key = name.strip().lower()
        scenarios = ScenarioTemplates.get_all_scenarios()
        for scenario_name, scenario in scenarios.items():
            if key in (scenario_name.lower(), scenario['id']):
                return scenario

        raise KeyError(f"Unknown scenario {name!r}. Available: {', '.join(scenarios)}")

    @staticmethod
    def apply_stage(params: OptionParameters, stage: Dict) -> OptionParameters:
        """
        Apply a stage's overrides to the current parameters.

        Args:
            params: Current option parameters
            stage: Stage dictionary

        Returns:
            New OptionParameters
        """
        changes = dict(stage.get('overrides', {}))
        if 'spot_offset' in stage:
            changes['spot'] = params.strike + stage['spot_offset']
        return params.replace(**changes)

    @staticmethod
    def earnings_play() -> Dict:
        """High volatility into earnings, then a volatility crush."""
        return {
            'id': 'earnings-play',
            'name': 'Earnings Play',
            'description': 'High volatility before earnings, then volatility crush',
            'story': 'You bought options before earnings expecting a big move...',
            'stages': [
                _stage('Pre-Earnings (High IV)',
                       'Implied volatility is elevated before earnings announcement',
                       volatility=0.6, time_to_expiry=_days(7)),
                _stage('Post-Earnings (Vol Crush)',
                       'Volatility collapses after earnings, even if stock moves as expected',
                       volatility=0.2, time_to_expiry=_days(6)),
                _stage('Week Later',
                       'Time decay accelerates as expiration approaches',
                       volatility=0.2, time_to_expiry=_days(1)),
            ]
        }

    @staticmethod
    def time_decay() -> Dict:
        return {
            'id': 'time-decay',
            'name': 'Time Decay Demo',
            'description': 'Watch theta acceleration as expiration approaches',
            'story': 'You hold an at-the-money option as time passes...',
            'stages': [
                _stage('30 Days Out', 'Plenty of time value remaining, theta is manageable',
                       time_to_expiry=_days(30)),
                _stage('7 Days Out', 'Time decay accelerates, especially for ATM options',
                       time_to_expiry=_days(7)),
                _stage('1 Day Out',
                       'Extreme time decay - option value approaches intrinsic value',
                       time_to_expiry=_days(1)),
            ]
        }

    @staticmethod
    def gamma_scalping() -> Dict:
        return {
            'id': 'gamma-scalping',
            'name': 'Gamma Scalping',
            'description': 'See how gamma changes with stock price movement',
            'story': 'You want to understand gamma risk near the strike...',
            'stages': [
                _stage('ATM - High Gamma',
                       'At-the-money options have maximum gamma - delta changes rapidly',
                       spot_offset=0),
                _stage('ITM - Lower Gamma',
                       'In-the-money options have lower gamma - delta changes slowly',
                       spot_offset=10),
                _stage('OTM - Lower Gamma',
                       'Out-of-the-money options also have lower gamma',
                       spot_offset=-10),
            ]
        }

    @staticmethod
    def volatility_impact() -> Dict:
        return {
            'id': 'volatility-smile',
            'name': 'Volatility Impact',
            'description': 'Compare option values across volatility levels',
            'story': 'Market volatility is changing - how does this affect your position?',
            'stages': [
                _stage('Low Volatility (15%)', 'Low volatility environment - options are cheaper',
                       volatility=0.15),
                _stage('Normal Volatility (25%)', 'Normal market conditions',
                       volatility=0.25),
                _stage('High Volatility (50%)',
                       'Crisis/event-driven volatility - options are expensive',
                       volatility=0.5),
            ]
        }

    @staticmethod
    def market_crash() -> Dict:
        """Stock falls while volatility explodes."""
        return {
            'id': 'market-crash',
            'name': 'Market Crash Scenario',
            'description': 'How options behave during market stress and volatility spikes',
            'story': 'The market is crashing and volatility is exploding...',
            'stages': [
                _stage('Normal Market', 'Calm market conditions with normal volatility',
                       spot_offset=0, volatility=0.2),
                _stage('Market Stress',
                       'Stock drops 10% and volatility doubles - put options surge',
                       spot_offset=-10, volatility=0.45),
                _stage('Full Panic', 'Stock down 20%, vol explodes - massive option premium',
                       spot_offset=-20, volatility=0.8),
            ]
        }

    @staticmethod
    def interest_rate_changes() -> Dict:
        return {
            'id': 'interest-rate-impact',
            'name': 'Interest Rate Changes',
            'description': 'How Rho affects options when interest rates change',
            'story': 'The Fed is changing interest rates - what happens to your options?',
            'stages': [
                _stage('Low Rates (2%)', 'Low interest rate environment - minimal Rho impact',
                       risk_free_rate=0.02, time_to_expiry=1.0),
                _stage('Normal Rates (5%)', 'Normal interest rates - moderate Rho sensitivity',
                       risk_free_rate=0.05, time_to_expiry=1.0),
                _stage('High Rates (8%)',
                       'High rates favor calls over puts - significant Rho impact',
                       risk_free_rate=0.08, time_to_expiry=1.0),
            ]
        }

    @staticmethod
    def ex_dividend() -> Dict:
        return {
            'id': 'dividend-effect',
            'name': 'Ex-Dividend Impact',
            'description': 'How stock price adjustments affect option values',
            'story': 'The stock is going ex-dividend tomorrow...',
            'stages': [
                _stage('Before Ex-Dividend', 'Stock trades higher ahead of dividend payment',
                       spot_offset=2, time_to_expiry=_days(10)),
                _stage('Ex-Dividend Day',
                       'Stock drops by dividend amount, strikes adjust accordingly',
                       spot_offset=0, time_to_expiry=_days(9)),
                _stage('Post Ex-Dividend', 'Stock recovers partially, time decay continues',
                       spot_offset=1, time_to_expiry=_days(8)),
            ]
        }

    @staticmethod
    def weekend_decay() -> Dict:
        return {
            'id': 'weekend-decay',
            'name': 'Weekend Time Decay',
            'description': 'How options lose value over weekends',
            'story': 'Friday close to Monday open - time passes but market is closed...',
            'stages': [
                _stage('Friday Close', 'End of trading week - one week to expiration',
                       time_to_expiry=_days(7)),
                _stage('Monday Open',
                       'Two calendar days passed but only business days matter for most options',
                       time_to_expiry=_days(5)),
                _stage('Wednesday', 'Mid-week - time decay accelerating rapidly',
                       time_to_expiry=_days(3)),
            ]
        }

    @staticmethod
    def expiration_friday() -> Dict:
        """Last quarter of a trading day before expiry."""
        return {
            'id': 'expiration-friday',
            'name': 'Expiration Friday',
            'description': "The final day of an option's life",
            'story': "It's expiration Friday - your options expire at close...",
            'stages': [
                _stage('Market Open (ITM)',
                       'In-the-money option at market open - mostly intrinsic value',
                       spot_offset=5, time_to_expiry=_days(0.25)),
                _stage('Market Open (ATM)',
                       'At-the-money - maximum time value but rapidly decaying',
                       spot_offset=0, time_to_expiry=_days(0.25)),
                _stage('Market Open (OTM)',
                       'Out-of-the-money - racing against time, needs big move',
                       spot_offset=-5, time_to_expiry=_days(0.25)),
            ]
        }

    @staticmethod
    def iv_rank() -> Dict:
        return {
            'id': 'iv-rank',
            'name': 'Implied Volatility Rank',
            'description': 'Understanding when volatility is cheap vs expensive',
            'story': 'Learn to identify when options are cheap or expensive...',
            'stages': [
                _stage('Low IV Rank (10th percentile)',
                       'Volatility in bottom 10% of annual range - options are cheap',
                       volatility=0.12),
                _stage('Medium IV Rank (50th percentile)',
                       'Average volatility conditions - fair value options',
                       volatility=0.25),
                _stage('High IV Rank (90th percentile)',
                       'Volatility in top 10% of range - options are expensive',
                       volatility=0.45),
            ]
        }

    @staticmethod
    def create_custom_scenario(name: str, stages: list, description: str = '',
                               story: str = '') -> Dict:
        """
        Create a custom scenario.

        Args:
            name: Scenario name
            stages: List of dicts with 'name', optional 'spot_offset',
                'explanation' and any OptionParameters field overrides
            description: Scenario description
            story: Narrative shown with the scenario

        Returns:
            Scenario dictionary
        """
        built = []
        for stage in stages:
            stage = dict(stage)
            stage_name = stage.pop('name')
            explanation = stage.pop('explanation', '')
            spot_offset = stage.pop('spot_offset', None)
            built.append(_stage(stage_name, explanation, spot_offset, **stage))

        return {
            'id': name.strip().lower().replace(' ', '-'),
            'name': name,
            'description': description or 'Custom scenario',
            'story': story,
            'stages': built
        }
