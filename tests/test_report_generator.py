"""
Unit tests for report generation and formatting.
"""
import json
import os
import tempfile
import unittest
import sys
from datetime import date, timedelta
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from options_pnl.contracts import BuyOrSell, Contract, Holding, OptionType
from options_pnl.output import ReportGenerator, format_currency, format_profit_loss
from options_pnl.risk import RiskAlertSystem, RiskMetrics
from options_pnl.scenario import ScenarioTemplates
from options_pnl.valuation import PortfolioAggregator

TODAY = date(2024, 6, 1)


class TestFormatters(unittest.TestCase):
    """Test P/L formatting."""

    def test_format_currency(self):
        self.assertEqual(format_currency(1234.5), '$1,235')
        self.assertEqual(format_currency(0), '$0')
        self.assertEqual(format_currency(-0.4), '$0')
        self.assertEqual(format_currency(-500), '-$500')

    def test_format_profit_loss(self):
        self.assertEqual(format_profit_loss(700), '+$700')
        self.assertEqual(format_profit_loss(-400), '-$400')
        self.assertEqual(format_profit_loss(0), '+$0')
        self.assertEqual(format_profit_loss(-12345.6), '-$12,346')


class TestReportGenerator(unittest.TestCase):
    """Test report sections and exports."""

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.generator = ReportGenerator(os.path.join(self.tmpdir.name, 'reports'))
        self.aggregator = PortfolioAggregator()
        self.contracts = [
            Contract(buy_or_sell=BuyOrSell.BUY, option_type=OptionType.CALL,
                     expiration_date=TODAY + timedelta(days=73), strike_price=100,
                     expected_credit_or_debit=-5, bid_price=5, symbol='AAPL'),
            Contract(buy_or_sell=BuyOrSell.SELL, option_type=OptionType.PUT,
                     expiration_date=TODAY + timedelta(days=5), strike_price=400,
                     expected_credit_or_debit=2, bid_price=1.5, symbol='SPY'),
        ]

    def tearDown(self):
        self.tmpdir.cleanup()

    def _report(self):
        groups = self.aggregator.group_by_symbol(self.contracts, TODAY)
        summary = self.aggregator.calculate_portfolio_summary(
            1000, [Holding('AAPL', 10, 100)], self.contracts, TODAY
        )
        scenarios = self.aggregator.run_multiple_scenarios(
            self.contracts, {'AAPL': 100, 'SPY': 410},
            {'Normal Day': ScenarioTemplates.normal_day(),
             'Black Swan': ScenarioTemplates.black_swan()},
            TODAY
        )
        alerts = RiskAlertSystem({}).check_all_risks(self.contracts, groups, TODAY)

        return self.generator.generate_full_report(
            self.generator.generate_portfolio_summary(
                summary,
                RiskMetrics.calculate_portfolio_analytics(self.contracts, TODAY),
                RiskMetrics.calculate_expired_statistics(self.contracts)
            ),
            self.generator.generate_group_summary(groups),
            self.generator.generate_contract_valuations(self.contracts, {'AAPL': 110},
                                                        today=TODAY),
            scenarios,
            alerts
        )

    def test_full_report_sections(self):
        report = self._report()

        self.assertEqual(list(report), ['Portfolio Summary', 'Symbol Groups',
                                        'Contract Valuations', 'Scenario Summary',
                                        'Risk Alerts'])
        self.assertEqual(len(report['Symbol Groups']), 2)
        self.assertEqual(list(report['Symbol Groups']['Risk']), ['low', 'high'])

    def test_contract_valuations(self):
        valuations = self.generator.generate_contract_valuations(
            self.contracts, {'AAPL': 110}, today=TODAY
        )

        aapl = valuations.iloc[0]
        self.assertEqual(aapl['Underlying'], 110)
        self.assertAlmostEqual(aapl['At Expiration'], 500)
        # SPY has no price and is valued at its strike
        self.assertEqual(valuations.iloc[1]['Underlying'], 400)
        self.assertEqual(valuations.iloc[1]['DTE'], 5)

    def test_scenario_summary_sorted(self):
        scenarios = self._report()['Scenario Summary']
        self.assertEqual(list(scenarios['Scenario']), ['Black Swan', 'Normal Day'])

    def test_empty_groups(self):
        df = self.generator.generate_group_summary([])
        self.assertTrue(df.empty)
        self.assertIn('Risk', df.columns)

    def test_payoff_table(self):
        table = self.generator.generate_payoff_table(self.contracts, steps=10)

        self.assertEqual(len(table), 22)
        self.assertEqual(table['Contract'].iloc[0], 'AAPL buy call 100')

    def test_save_full_report(self):
        saved = self.generator.save_full_report(self._report(), 'test_report')

        self.assertTrue(os.path.exists(saved['excel']))
        self.assertEqual(len(saved['csv']), 5)
        with open(saved['json']) as f:
            data = json.load(f)
        self.assertIn('Portfolio Summary', data)

    def test_export_directory_created_on_save(self):
        """Test building reports alone leaves the filesystem untouched."""
        export_path = os.path.join(self.tmpdir.name, 'reports')
        report = self._report()
        self.assertFalse(os.path.exists(export_path))

        self.generator.save_full_report(report, 'test_report')
        self.assertTrue(os.path.isdir(export_path))

    def test_export_failure_returns_none(self):
        generator = ReportGenerator(self.tmpdir.name)
        self.assertIsNone(generator.export_to_json({'a': 1}, os.path.join('missing', 'x.json')))


if __name__ == '__main__':
    unittest.main()
