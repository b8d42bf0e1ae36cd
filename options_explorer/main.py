"""
Command-line entry point for Options Explorer.
"""
import argparse
import logging
import sys
from typing import Dict, List, Optional

from .utils.config_loader import load_config, parameters_from_config, setup_logging
from .valuation import black_scholes
from .valuation.models import OptionParameters, OptionType
from .strategy import StrategyAggregator, StrategyContext, StrategyTemplates
from .scenario import ScenarioRunner, ScenarioTemplates
from .output import ReportGenerator
from .analysis import curves

logger = logging.getLogger(__name__)

LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR']


class OptionsExplorer:
    """Main application class tying the engine to reports."""

    def __init__(self, config_path: str = 'config/config.yaml'):
        """
        Initialize options explorer.

        Args:
            config_path: Path to configuration file
        """
        self.config = load_config(config_path)

        reporting = self.config.get('reporting', {})
        self.report_generator = ReportGenerator(
            export_path=reporting.get('export_path', 'data/reports/'),
            decimals=reporting.get('decimals', 4)
        )
        self.scenario_runner = ScenarioRunner()

    def parameters(self, **overrides) -> OptionParameters:
        return parameters_from_config(self.config, **overrides)

    def analyze_option(self, params: OptionParameters) -> Dict:
        """Price and Greeks report for a single option."""
        logger.info(f"Pricing {params!r}")

        if not params.is_valid():
            logger.warning("Parameters are invalid; results are placeholder values")

        price = black_scholes.price(params)
        greeks = black_scholes.greeks(params)
        return self.report_generator.generate_option_report(params, price, greeks)

    def analyze_strategy(self, name: str, params: OptionParameters) -> Dict:
        """Payoff profile report for a preset strategy centred on params.strike."""
        strategy = StrategyTemplates.get_strategy(name, base_strike=params.strike)
        logger.info(f"Evaluating strategy {strategy['name']} with {len(strategy['legs'])} leg(s)")

        context = StrategyContext(
            risk_free_rate=params.risk_free_rate,
            volatility=params.volatility,
            time_to_expiry=params.time_to_expiry
        )
        aggregator = StrategyAggregator(context, self.config.get('sweep'))

        evaluation = aggregator.evaluate(strategy['legs'], params.spot)
        summary = aggregator.summarize(evaluation)
        current = aggregator.current_metrics(evaluation, params.spot)
        legs_df = aggregator.create_legs_df(strategy['legs'], params.spot)

        return self.report_generator.generate_strategy_report(
            strategy['name'], legs_df, evaluation, summary, current
        )

    def analyze_scenario(self, name: str, params: OptionParameters) -> Dict:
        """Stage-by-stage report for an educational scenario."""
        scenario = ScenarioTemplates.get_scenario(name)
        logger.info(f"Running scenario {scenario['name']}")

        result = self.scenario_runner.run_scenario(params, scenario)
        stages_df = self.scenario_runner.create_scenario_summary_df(result)
        return self.report_generator.generate_scenario_report(result, stages_df)

    def analyze_curves(self, params: OptionParameters) -> Dict:
        """Chart tables: price curve, Greeks curve, volatility levels, time decay."""
        logger.info(f"Building chart series for {params!r}")

        curve_config = self.config.get('price_curve', {})
        vol_config = self.config.get('volatility_comparison', {})
        sweep_config = self.config.get('sweep', {})

        comparison = curves.volatility_comparison(
            params,
            low=vol_config.get('low', 0.10),
            high=vol_config.get('high', 0.50),
            range_fraction=curve_config.get('range_fraction', 0.5),
            points=curve_config.get('points', 50)
        )

        greeks_kwargs = {k: sweep_config[k] for k in ('range_fraction', 'min_range', 'points')
                         if k in sweep_config}
        tables = {
            'Price Curve': curves.to_dataframe(curves.price_curve(
                params,
                range_fraction=curve_config.get('range_fraction', 0.5),
                points=curve_config.get('points', 50)
            )),
            'Greeks Curve': curves.to_dataframe(curves.greeks_curve(params, **greeks_kwargs)),
            'Volatility Levels': curves.to_dataframe(comparison['levels']),
            'Volatility Curve': curves.to_dataframe(comparison['curve']),
            'Time Decay': curves.to_dataframe(curves.time_decay_series(params)),
        }
        return self.report_generator.generate_curves_report(tables)


def _option_type(value: str) -> OptionType:
    try:
        return OptionType.from_value(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def add_common(parser: argparse.ArgumentParser):
    parser.add_argument("--spot", type=float, help="underlying price")
    parser.add_argument("--strike", type=float, help="strike price")
    parser.add_argument("--rate", dest="risk_free_rate", type=float,
                        help="cont. risk-free rate, e.g. 0.05")
    parser.add_argument("--vol", dest="volatility", type=float,
                        help="annualized volatility, e.g. 0.2")
    parser.add_argument("--time", dest="time_to_expiry", type=float, help="years")
    parser.add_argument("--type", dest="option_type", type=_option_type, help="call|put")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="options-explorer",
                                description="Black-Scholes prices, Greeks and strategy payoffs")
    p.add_argument("--config", default="config/config.yaml", help="YAML config path")
    p.add_argument("--log-level", default=None, type=str.upper,
                   choices=LOG_LEVELS, help="|".join(LOG_LEVELS))
    p.add_argument("--save", action="store_true", help="export the report to files")
    sub = p.add_subparsers(dest="cmd", required=True)

    p_price = sub.add_parser("price", help="price and Greeks for one option")
    add_common(p_price)

    p_strategy = sub.add_parser("strategy", help="payoff profile of a preset strategy")
    p_strategy.add_argument("name", help="e.g. 'Iron Condor'")
    add_common(p_strategy)

    p_scenario = sub.add_parser("scenario", help="run an educational scenario")
    p_scenario.add_argument("name", help="e.g. 'Time Decay Demo'")
    add_common(p_scenario)

    p_curves = sub.add_parser("curves", help="chart data series for one option")
    add_common(p_curves)

    sub.add_parser("list", help="list preset strategies and scenarios")

    return p


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    # configure early so config loading is logged, then apply the config's settings
    setup_logging(log_level=args.log_level or 'INFO')
    explorer = OptionsExplorer(args.config)

    log_config = explorer.config.get('logging', {})
    log_level = args.log_level or log_config.get('level', 'INFO')
    if log_level != (args.log_level or 'INFO') or log_config.get('file'):
        setup_logging(log_level=log_level, log_file=log_config.get('file'))

    if args.cmd == "list":
        print("Strategies:")
        for name, strategy in StrategyTemplates.get_all_strategies().items():
            print(f"  {name:<20} {strategy['description']}")
        print("Scenarios:")
        for name, scenario in ScenarioTemplates.get_all_scenarios().items():
            print(f"  {name:<24} {scenario['description']}")
        return 0

    params = explorer.parameters(
        spot=args.spot,
        strike=args.strike,
        risk_free_rate=args.risk_free_rate,
        volatility=args.volatility,
        time_to_expiry=args.time_to_expiry,
        option_type=args.option_type
    )

    try:
        if args.cmd == "price":
            report = explorer.analyze_option(params)
        elif args.cmd == "strategy":
            report = explorer.analyze_strategy(args.name, params)
        elif args.cmd == "scenario":
            report = explorer.analyze_scenario(args.name, params)
        else:
            report = explorer.analyze_curves(params)
    except KeyError as e:
        logger.error(e.args[0])
        return 1

    explorer.report_generator.print_report(report)

    if args.save:
        saved_files = explorer.report_generator.save_full_report(report)
        logger.info(f"Report saved to: {saved_files}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
