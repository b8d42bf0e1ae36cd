"""
Report generation for option and strategy analysis.
"""
import logging
import json
import pandas as pd
from typing import Any, Dict, Optional
from datetime import datetime
import os

from ..strategy.leg import ProfilePoint, StrategyEvaluation
from ..valuation.models import Greeks, OptionParameters

logger = logging.getLogger(__name__)

GREEK_DESCRIPTIONS = {
    'delta': 'Price change per $1 move in the underlying',
    'gamma': 'Delta change per $1 move',
    'theta': 'Daily time decay',
    'vega': 'Price change per 1% volatility move',
    'rho': 'Price change per 1% rate move',
}


class ReportGenerator:
    """Generate option analysis reports."""

    def __init__(self, export_path: str = 'data/reports/', decimals: int = 4):
        """
        Initialize report generator.

        Args:
            export_path: Path to export reports (created on first export)
            decimals: Decimal places for formatted values
        """
        self.export_path = export_path
        self.decimals = decimals

    def _fmt(self, value: Optional[float]) -> str:
        if value is None:
            return 'N/A'
        return f"{value:,.{self.decimals}f}"

    def generate_parameters_summary(self, params: OptionParameters) -> pd.DataFrame:
        """
        Generate input parameter table.

        Args:
            params: Option parameters

        Returns:
            DataFrame with one row per input
        """
        rows = [
            {'Input': 'Option Type', 'Value': params.option_type.name.capitalize()},
            {'Input': 'Stock Price', 'Value': f"${params.spot:,.2f}"},
            {'Input': 'Strike Price', 'Value': f"${params.strike:,.2f}"},
            {'Input': 'Risk-Free Rate', 'Value': f"{params.risk_free_rate:.2%}"},
            {'Input': 'Volatility', 'Value': f"{params.volatility:.1%}"},
            {'Input': 'Time to Expiry', 'Value': f"{params.time_to_expiry:.2f} years"},
        ]
        return pd.DataFrame(rows)

    def generate_greeks_summary(self, price: float, greeks: Greeks) -> pd.DataFrame:
        """
        Generate price and Greeks table.

        Args:
            price: Option price
            greeks: Option Greeks

        Returns:
            DataFrame with price and Greeks summary
        """
        rows = [{'Metric': 'Price', 'Value': self._fmt(price),
                 'Description': 'Black-Scholes fair value'}]

        for name, value in greeks.to_dict().items():
            rows.append({
                'Metric': name.capitalize(),
                'Value': self._fmt(value),
                'Description': GREEK_DESCRIPTIONS[name]
            })

        return pd.DataFrame(rows)

    def generate_strategy_summary(self, summary: Dict, current: ProfilePoint) -> pd.DataFrame:
        """
        Generate strategy summary table.

        Args:
            summary: Output of StrategyAggregator.summarize
            current: Profile point at the current spot

        Returns:
            DataFrame with strategy summary
        """
        initial_cost = summary.get('initial_cost', 0.0)
        breakevens = summary.get('breakevens', [])

        rows = [
            {'Metric': 'Initial Cost',
             'Value': f"{self._fmt(initial_cost)} ({'credit' if initial_cost > 0 else 'debit'})"},
            {'Metric': 'Max Profit (in range)', 'Value': self._fmt(summary.get('max_profit'))},
            {'Metric': 'Max Loss (in range)', 'Value': self._fmt(summary.get('max_loss'))},
            {'Metric': 'Breakevens',
             'Value': ', '.join(f"{b:,.2f}" for b in breakevens) if breakevens else 'None'},
            {'Metric': 'Current P&L', 'Value': self._fmt(current.total_value)},
            {'Metric': 'Current Delta', 'Value': self._fmt(current.total_delta)},
            {'Metric': 'Current Gamma', 'Value': self._fmt(current.total_gamma)},
            {'Metric': 'Current Theta', 'Value': self._fmt(current.total_theta)},
            {'Metric': 'Current Vega', 'Value': self._fmt(current.total_vega)},
        ]
        return pd.DataFrame(rows)

    def generate_option_report(self, params: OptionParameters, price: float,
                               greeks: Greeks) -> Dict[str, pd.DataFrame]:
        """
        Generate single-option report.

        Returns:
            Dictionary of report section name -> DataFrame
        """
        return {
            'Inputs': self.generate_parameters_summary(params),
            'Price and Greeks': self.generate_greeks_summary(price, greeks)
        }

    def generate_strategy_report(self, name: str, legs_df: pd.DataFrame,
                                 evaluation: StrategyEvaluation, summary: Dict,
                                 current: ProfilePoint) -> Dict[str, pd.DataFrame]:
        """
        Generate strategy report.

        Args:
            name: Strategy name
            legs_df: Per-leg table (StrategyAggregator.create_legs_df)
            evaluation: Strategy evaluation
            summary: Strategy summary
            current: Profile point at the current spot

        Returns:
            Dictionary of report section name -> DataFrame
        """
        return {
            f"{name} Legs": legs_df,
            f"{name} Summary": self.generate_strategy_summary(summary, current),
            f"{name} Profile": evaluation.to_dataframe().round(self.decimals)
        }

    def generate_scenario_report(self, result: Dict,
                                 stages_df: pd.DataFrame) -> Dict[str, pd.DataFrame]:
        """
        Generate scenario report.

        Args:
            result: Output of ScenarioRunner.run_scenario
            stages_df: Output of ScenarioRunner.create_scenario_summary_df

        Returns:
            Dictionary of report section name -> DataFrame
        """
        notes = pd.DataFrame([
            {'Stage': stage['stage'], 'Explanation': stage['explanation']}
            for stage in result['stage_results']
        ])

        return {
            f"{result['scenario_name']} Stages": stages_df.round(self.decimals),
            f"{result['scenario_name']} Notes": notes
        }

    def generate_curves_report(self, tables: Dict[str, pd.DataFrame]) -> Dict[str, pd.DataFrame]:
        """Chart tables rounded for display."""
        return {name: df.round(self.decimals) for name, df in tables.items()}

    def _filepath(self, filename: str) -> str:
        os.makedirs(self.export_path, exist_ok=True)
        return os.path.join(self.export_path, filename)

    def export_to_csv(self, df: pd.DataFrame, filename: str):
        """
        Export DataFrame to CSV.

        Args:
            df: DataFrame to export
            filename: Output filename
        """
        try:
            filepath = self._filepath(filename)
            df.to_csv(filepath, index=False)
            logger.info(f"Exported CSV to {filepath}")
            return filepath
        except Exception as e:
            logger.error(f"Error exporting CSV: {e}")
            return None

    def export_to_json(self, data: Dict, filename: str):
        """
        Export data to JSON.

        Args:
            data: Dictionary to export
            filename: Output filename
        """
        try:
            filepath = self._filepath(filename)
            with open(filepath, 'w') as f:
                json.dump(data, f, indent=2, default=str)
            logger.info(f"Exported JSON to {filepath}")
            return filepath
        except Exception as e:
            logger.error(f"Error exporting JSON: {e}")
            return None

    def export_to_excel(self, dataframes: Dict[str, pd.DataFrame], filename: str):
        """
        Export multiple DataFrames to Excel with multiple sheets.

        Args:
            dataframes: Dictionary of sheet_name -> DataFrame
            filename: Output filename
        """
        try:
            filepath = self._filepath(filename)
            with pd.ExcelWriter(filepath, engine='openpyxl') as writer:
                for sheet_name, df in dataframes.items():
                    # Excel caps sheet names at 31 characters
                    df.to_excel(writer, sheet_name=sheet_name[:31], index=False)
            logger.info(f"Exported Excel to {filepath}")
            return filepath
        except Exception as e:
            logger.error(f"Error exporting Excel: {e}")
            return None

    def print_report(self, report: Dict[str, pd.DataFrame], title: str = 'OPTIONS ANALYSIS REPORT'):
        """
        Print report to console.

        Args:
            report: Dictionary of report sections
            title: Report heading
        """
        print("\n" + "="*80)
        print(title)
        print(f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
        print("="*80 + "\n")

        for section_name, df in report.items():
            print(f"\n{section_name}")
            print("-" * len(section_name))
            print(df.to_string(index=False))
            print()

    def save_full_report(self, report: Dict[str, pd.DataFrame],
                         base_filename: str = None) -> Dict[str, Any]:
        """
        Save full report in multiple formats.

        Args:
            report: Dictionary of report sections
            base_filename: Base filename (timestamp will be added)

        Returns:
            Dictionary with paths to saved files
        """
        if base_filename is None:
            base_filename = f"options_report_{datetime.now().strftime('%Y%m%d_%H%M%S')}"

        saved_files = {}

        excel_path = self.export_to_excel(report, f"{base_filename}.xlsx")
        if excel_path:
            saved_files['excel'] = excel_path

        csv_files = []
        for section_name, df in report.items():
            csv_filename = f"{base_filename}_{section_name.replace(' ', '_')}.csv"
            csv_path = self.export_to_csv(df, csv_filename)
            if csv_path:
                csv_files.append(csv_path)

        if csv_files:
            saved_files['csv'] = csv_files

        json_path = self.export_to_json(
            {name: df.to_dict(orient='records') for name, df in report.items()},
            f"{base_filename}.json"
        )
        if json_path:
            saved_files['json'] = json_path

        logger.info(f"Saved full report: {saved_files}")
        return saved_files
