"""
Report generation for contract and portfolio analysis.
"""
import logging
import json
import os
from datetime import datetime
from typing import Dict, List, Optional

import pandas as pd

from .formatters import format_currency, format_profit_loss
from ..risk.risk_metrics import RiskMetrics
from ..utils.clock import Clock
from ..valuation.profit_loss import ProfitLossCalculator

logger = logging.getLogger(__name__)


class ReportGenerator:
    """Generate portfolio analysis reports."""

    def __init__(self, export_path: str = 'data/reports/'):
        """
        Initialize report generator.

        Args:
            export_path: Path to export reports, created on the first export
        """
        self.export_path = export_path

    def _export_file(self, filename: str) -> str:
        """Path for an export file, creating the export directory on first use."""
        os.makedirs(self.export_path, exist_ok=True)
        return os.path.join(self.export_path, filename)

    def generate_portfolio_summary(self, summary, analytics: Dict,
                                   expired_stats: Dict) -> pd.DataFrame:
        """
        Generate portfolio summary report.

        Args:
            summary: PortfolioSummary from the aggregator
            analytics: Output of RiskMetrics.calculate_portfolio_analytics
            expired_stats: Output of RiskMetrics.calculate_expired_statistics

        Returns:
            DataFrame with one metric per row
        """
        rows = [
            {'Metric': 'Cash', 'Value': format_currency(summary.cash)},
            {'Metric': 'Holdings Value', 'Value': format_currency(summary.holdings_value)},
            {'Metric': 'Net Option P/L', 'Value': format_profit_loss(summary.net_profit_loss)},
            {'Metric': 'Total Portfolio Value', 'Value': format_currency(summary.total_value)},
            {'Metric': 'Active Contracts', 'Value': analytics['total_active']},
            {'Metric': 'Active Premium', 'Value': format_profit_loss(analytics['total_value'])},
            {'Metric': 'Avg Chance of Profit', 'Value': f"{analytics['avg_chance_of_profit']:.1f}%"},
            {'Metric': 'Days to Closest Expiry', 'Value': analytics['days_to_closest_expiry']},
            {'Metric': 'Expiring This Week', 'Value': analytics['expiring_this_week']},
            {'Metric': 'Finished Contracts', 'Value': expired_stats['count']},
            {'Metric': 'Realized P/L', 'Value': format_profit_loss(expired_stats['total_profit_loss'])},
            {'Metric': 'Win Rate', 'Value': f"{expired_stats['win_rate']:.1f}%"},
        ]
        return pd.DataFrame(rows)

    def generate_group_summary(self, groups: List) -> pd.DataFrame:
        """
        Generate per-symbol group report.

        Args:
            groups: PortfolioGroup list

        Returns:
            DataFrame with one row per symbol
        """
        rows = []

        for group in groups:
            rows.append({
                'Symbol': group.symbol,
                'Contracts': group.total_positions,
                'Positions': len(group.contracts),
                'Premium': format_profit_loss(group.total_value),
                'Risk': group.risk_level.value
            })

        return pd.DataFrame(rows, columns=['Symbol', 'Contracts', 'Positions', 'Premium', 'Risk'])

    def generate_contract_valuations(self, contracts: List, prices: Dict[str, float],
                                     calculator: Optional[ProfitLossCalculator] = None,
                                     today: Optional[Clock] = None) -> pd.DataFrame:
        """
        Value each contract at its symbol's price.

        Contracts whose symbol has no price are valued at their strike.

        Args:
            contracts: Contracts to value
            prices: Symbol -> underlying price
            calculator: Valuation engine
            today: Valuation date

        Returns:
            DataFrame with valuations and risk scores
        """
        calculator = calculator or ProfitLossCalculator()
        rows = []

        for contract in contracts:
            symbol = contract.symbol or 'Unknown'
            price = prices.get(symbol, contract.strike_price)
            result = calculator.calculate_profit_loss(contract, price, today=today)
            risk = RiskMetrics.calculate_risk(contract, today)

            rows.append({
                'Symbol': symbol,
                'Side': contract.buy_or_sell.value,
                'Type': contract.option_type.value,
                'Strike': contract.strike_price,
                'Expiration': contract.expiration_date.isoformat(),
                'Qty': contract.contracts,
                'Underlying': price,
                'If Sold Now': result.if_sold_now,
                'At Expiration': result.if_exercised_at_expiration,
                'Breakeven': result.breakeven,
                'DTE': result.days_to_expiration,
                'Time Decay Risk': round(risk.time_decay, 2),
                'Delta Risk': round(risk.delta, 2),
                'Volatility Risk': round(risk.volatility, 2)
            })

        return pd.DataFrame(rows)

    def generate_payoff_table(self, contracts: List, calculator: Optional[ProfitLossCalculator] = None,
                              range_factor: float = 0.5, steps: int = 20) -> pd.DataFrame:
        """Expiration payoff curves, one row per contract and price point."""
        calculator = calculator or ProfitLossCalculator()
        frames = []

        for contract in contracts:
            curve = calculator.calculate_payoff_curve(contract, range_factor, steps)
            curve.insert(0, 'Contract', f"{contract.symbol or 'Unknown'} "
                                        f"{contract.buy_or_sell.value} "
                                        f"{contract.option_type.value} {contract.strike_price:g}")
            frames.append(curve)

        if not frames:
            return pd.DataFrame(columns=['Contract', 'underlying_price', 'profit_loss'])
        return pd.concat(frames, ignore_index=True)

    def generate_scenario_summary(self, scenario_results: Dict[str, Dict]) -> pd.DataFrame:
        """
        Generate scenario summary report.

        Args:
            scenario_results: Dictionary of scenario results

        Returns:
            DataFrame with scenario summary sorted by P/L
        """
        rows = []

        for scenario_name, result in scenario_results.items():
            worst_pos = result.get('worst_position')
            best_pos = result.get('best_position')

            rows.append({
                'Scenario': scenario_name,
                'Spot Change': f"{result['spot_change']:+.1%}",
                'Days': result['days_pass'],
                'P/L If Sold': format_profit_loss(result['portfolio_pnl']),
                'P/L At Expiration': format_profit_loss(result['portfolio_pnl_at_expiration']),
                'Worst Position': worst_pos['description'] if worst_pos else 'N/A',
                'Best Position': best_pos['description'] if best_pos else 'N/A',
                '_sort_pnl': result['portfolio_pnl']
            })

        if not rows:
            return pd.DataFrame()

        df = pd.DataFrame(rows).sort_values('_sort_pnl')
        return df.drop('_sort_pnl', axis=1)

    def export_to_csv(self, df: pd.DataFrame, filename: str):
        """
        Export DataFrame to CSV.

        Args:
            df: DataFrame to export
            filename: Output filename
        """
        try:
            filepath = self._export_file(filename)
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
            filepath = self._export_file(filename)
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
            filepath = self._export_file(filename)
            with pd.ExcelWriter(filepath, engine='openpyxl') as writer:
                for sheet_name, df in dataframes.items():
                    df.to_excel(writer, sheet_name=sheet_name, index=False)
            logger.info(f"Exported Excel to {filepath}")
            return filepath
        except Exception as e:
            logger.error(f"Error exporting Excel: {e}")
            return None

    def generate_full_report(self, portfolio_summary: pd.DataFrame, groups: pd.DataFrame,
                             valuations: pd.DataFrame,
                             scenario_results: Optional[Dict[str, Dict]] = None,
                             risk_alerts: List = None) -> Dict[str, pd.DataFrame]:
        """
        Assemble the report sections.

        Args:
            portfolio_summary: Output of generate_portfolio_summary
            groups: Output of generate_group_summary
            valuations: Output of generate_contract_valuations
            scenario_results: Dictionary of scenario results (optional)
            risk_alerts: List of risk alerts (optional)

        Returns:
            Dictionary of report section name -> DataFrame
        """
        report = {
            'Portfolio Summary': portfolio_summary,
            'Symbol Groups': groups,
            'Contract Valuations': valuations
        }

        if scenario_results:
            report['Scenario Summary'] = self.generate_scenario_summary(scenario_results)

        if risk_alerts:
            alerts_data = []
            for alert in risk_alerts:
                alerts_data.append({
                    'Severity': alert.severity,
                    'Type': alert.alert_type,
                    'Message': alert.message,
                    'Time': alert.timestamp.strftime('%Y-%m-%d %H:%M:%S')
                })
            report['Risk Alerts'] = pd.DataFrame(alerts_data)

        return report

    def print_report(self, report: Dict[str, pd.DataFrame]):
        """
        Print report to console.

        Args:
            report: Dictionary of report sections
        """
        print("\n" + "="*80)
        print("OPTIONS PORTFOLIO REPORT")
        print(f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
        print("="*80 + "\n")

        for section_name, df in report.items():
            print(f"\n{section_name}")
            print("-" * len(section_name))
            if df.empty:
                print("(none)")
            else:
                print(df.to_string(index=False))
            print()

    def save_full_report(self, report: Dict[str, pd.DataFrame], base_filename: str = None):
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
