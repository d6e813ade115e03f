"""
Main execution flow for the options portfolio tracker.
"""
import argparse
import logging
import sys
from datetime import date
from typing import Dict, List, Optional

import yaml

from options_pnl.contracts import Contract, ContractValidationError, Holding
from options_pnl.lifecycle import find_contracts_past_expiration, get_active_contracts
from options_pnl.output import ReportGenerator
from options_pnl.risk import RiskAlertSystem, RiskMetrics
from options_pnl.scenario import ScenarioTemplates
from options_pnl.utils.config_loader import load_config, load_yaml, setup_logging
from options_pnl.valuation import PortfolioAggregator, ProfitLossCalculator

logger = logging.getLogger(__name__)


class OptionsPortfolioAnalyzer:
    """Loads a portfolio file and runs valuation, risk and scenario analysis."""

    def __init__(self, config_path: str = 'config/config.yaml', today: Optional[date] = None):
        """
        Initialize portfolio analyzer.

        Args:
            config_path: Path to configuration file
            today: Valuation date (default: current date)
        """
        self.config = load_config(config_path)
        self.today = today or date.today()

        self.calculator = ProfitLossCalculator()
        self.aggregator = PortfolioAggregator(self.config.get('risk_levels'), self.calculator)
        self.risk_alert_system = RiskAlertSystem(self.config)
        self.report_generator = None

        self.cash = 0.0
        self.holdings: List[Holding] = []
        self.contracts: List[Contract] = []
        self.prices: Dict[str, float] = {}
        self.scenario_results = {}

    def load_portfolio(self, portfolio_path: str):
        """
        Load cash, holdings, contracts and reference prices from YAML.

        Raises:
            OSError: file can't be read
            ContractValidationError: a record is malformed
        """
        data = load_yaml(portfolio_path)
        if not isinstance(data, dict):
            raise ContractValidationError(f"{portfolio_path} must hold a mapping")

        try:
            self.cash = float(data.get('cash', 0) or 0)
            self.prices = {str(k).upper(): float(v)
                           for k, v in (data.get('prices') or {}).items()}
        except (AttributeError, TypeError, ValueError) as e:
            raise ContractValidationError(f"Invalid cash or prices in {portfolio_path}: {e}") from e

        self.holdings = [Holding.from_dict(h) for h in data.get('holdings', []) or []]
        self.contracts = [Contract.from_dict(c) for c in data.get('contracts', []) or []]

        logger.info(f"Loaded {len(self.contracts)} contracts and {len(self.holdings)} holdings "
                    f"from {portfolio_path}")

        stale = find_contracts_past_expiration(self.contracts, self.today)
        if stale:
            logger.warning(f"{len(stale)} open contracts are past expiration and need expiring")

    def run_scenario_analysis(self) -> Dict[str, Dict]:
        """Run every scenario template against the active contracts."""
        logger.info("Running scenario analysis")

        if not self.prices:
            logger.warning("No underlying prices available, skipping scenarios")
            return {}

        self.scenario_results = self.aggregator.run_multiple_scenarios(
            self.contracts, self.prices, ScenarioTemplates.get_all_scenarios(), self.today
        )

        logger.info(f"Completed {len(self.scenario_results)} scenarios")
        return self.scenario_results

    def check_risk_alerts(self, groups: List) -> List:
        """Check for risk alerts."""
        alerts_config = self.config.get('alerts', {})
        if not alerts_config.get('enabled', True):
            return []

        alerts = self.risk_alert_system.check_all_risks(self.contracts, groups, self.today)

        if alerts:
            logger.info(f"Generated {len(alerts)} risk alerts")

            if alerts_config.get('log_file'):
                self.risk_alert_system.log_alerts(alerts_config['log_file'])

            if alerts_config.get('console', True):
                print("\n" + self.risk_alert_system.format_alert_summary())

        return alerts

    def generate_report(self, export: bool = False) -> Dict:
        """Build, print and optionally save the portfolio report."""
        logger.info("Generating portfolio report")

        export_path = self.config.get('reporting', {}).get('export_path', 'data/reports/')
        self.report_generator = ReportGenerator(export_path)

        active = get_active_contracts(self.contracts, self.today)
        groups = self.aggregator.group_by_symbol(active, self.today)

        summary = self.aggregator.calculate_portfolio_summary(
            self.cash, self.holdings, self.contracts, self.today
        )
        analytics = RiskMetrics.calculate_portfolio_analytics(active, self.today)
        expired_stats = RiskMetrics.calculate_expired_statistics(self.contracts)

        alerts = self.check_risk_alerts(groups)

        report = self.report_generator.generate_full_report(
            self.report_generator.generate_portfolio_summary(summary, analytics, expired_stats),
            self.report_generator.generate_group_summary(groups),
            self.report_generator.generate_contract_valuations(
                active, self.prices, self.calculator, self.today
            ),
            self.scenario_results,
            alerts
        )

        self.report_generator.print_report(report)

        if export:
            payoff = self.config.get('payoff', {})
            report['Payoff Curves'] = self.report_generator.generate_payoff_table(
                active, self.calculator,
                range_factor=payoff.get('range_factor', 0.5),
                steps=payoff.get('steps', 20)
            )
            saved_files = self.report_generator.save_full_report(report)
            logger.info(f"Report saved to: {saved_files}")

        return report

    def run_once(self, portfolio_path: str, price_overrides: Optional[Dict[str, float]] = None,
                 run_scenarios: bool = True, export: bool = False):
        """Run the analysis once."""
        logger.info("=== RUNNING SINGLE ANALYSIS ===")

        self.load_portfolio(portfolio_path)
        self.prices.update(price_overrides or {})

        if run_scenarios:
            self.run_scenario_analysis()

        return self.generate_report(export)


def parse_prices(values: List[str]) -> Dict[str, float]:
    """Parse ``SYMBOL=PRICE`` pairs."""
    prices = {}
    for value in values or []:
        symbol, sep, price = value.partition('=')
        if not sep:
            raise argparse.ArgumentTypeError(f"Expected SYMBOL=PRICE, got {value!r}")
        try:
            prices[symbol.strip().upper()] = float(price)
        except ValueError:
            raise argparse.ArgumentTypeError(f"Invalid price in {value!r}")
    return prices


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Options contract P/L tracker')
    parser.add_argument('--portfolio', required=True, help='Portfolio YAML file')
    parser.add_argument('--config', default='config/config.yaml', help='Configuration file')
    parser.add_argument('--price', action='append', default=[], metavar='SYMBOL=PRICE',
                        help='Underlying price override, repeatable')
    parser.add_argument('--as-of', type=date.fromisoformat, default=None,
                        help='Valuation date (YYYY-MM-DD)')
    parser.add_argument('--no-scenarios', action='store_true', help='Skip scenario analysis')
    parser.add_argument('--export', action='store_true', help='Save report files')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    analyzer = OptionsPortfolioAnalyzer(args.config, today=args.as_of)
    log_config = analyzer.config.get('logging', {})
    setup_logging(log_level=log_config.get('level', 'INFO'), log_file=log_config.get('file'))

    try:
        analyzer.run_once(args.portfolio, parse_prices(args.price),
                          run_scenarios=not args.no_scenarios, export=args.export)
    except (OSError, yaml.YAMLError, ContractValidationError, argparse.ArgumentTypeError) as e:
        logger.error(f"Could not load portfolio: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
