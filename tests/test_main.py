"""
Tests for the analysis entry point.
"""
import argparse
import os
import tempfile
import unittest
import sys
from datetime import date
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from options_pnl.contracts import ContractValidationError
from options_pnl.main import OptionsPortfolioAnalyzer, main, parse_prices

TODAY = date(2026, 10, 19)

PORTFOLIO = """\
cash: 10000
holdings:
  - symbol: AAPL
    shares: 100
    price: 190.50
prices:
  aapl: 192.00
  SPY: 545.00
contracts:
  - id: "1"
    symbol: AAPL
    buyOrSell: buy
    optionType: call
    expirationDate: "2026-12-18"
    strikePrice: 200
    chanceOfProfit: 35
    bidPrice: 6.40
    contracts: 2
    expectedCreditOrDebit: -6.50
  - id: "2"
    symbol: SPY
    buyOrSell: sell
    optionType: put
    expirationDate: "2026-11-20"
    strikePrice: 520
    chanceOfProfit: 78
    bidPrice: 4.60
    expectedCreditOrDebit: 4.80
  - id: "3"
    symbol: SPY
    buyOrSell: buy
    optionType: call
    expirationDate: "2026-09-18"
    strikePrice: 540
    expectedCreditOrDebit: -7.25
    status: expired
    finalProfitLoss: 85
"""


class TestOptionsPortfolioAnalyzer(unittest.TestCase):
    """Test a full run against a portfolio file."""

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.export_path = os.path.join(self.tmpdir.name, 'reports')

        self.config_path = os.path.join(self.tmpdir.name, 'config.yaml')
        with open(self.config_path, 'w') as f:
            f.write(f"alerts:\n  console: false\nreporting:\n  export_path: {self.export_path}\n")

        self.portfolio_path = self._write('portfolio.yaml', PORTFOLIO)

    def tearDown(self):
        self.tmpdir.cleanup()

    def _write(self, name, text):
        path = os.path.join(self.tmpdir.name, name)
        with open(path, 'w') as f:
            f.write(text)
        return path

    def test_load_portfolio(self):
        analyzer = OptionsPortfolioAnalyzer(self.config_path, today=TODAY)
        analyzer.load_portfolio(self.portfolio_path)

        self.assertEqual(analyzer.cash, 10000)
        self.assertEqual(len(analyzer.holdings), 1)
        self.assertEqual(len(analyzer.contracts), 3)
        self.assertEqual(analyzer.prices, {'AAPL': 192.0, 'SPY': 545.0})

    def test_run_once(self):
        analyzer = OptionsPortfolioAnalyzer(self.config_path, today=TODAY)
        report = analyzer.run_once(self.portfolio_path, {'AAPL': 210.0})

        self.assertIn('Portfolio Summary', report)
        self.assertEqual(list(report['Symbol Groups']['Symbol']), ['AAPL', 'SPY'])
        # Only active contracts are valued
        self.assertEqual(len(report['Contract Valuations']), 2)
        self.assertEqual(report['Contract Valuations'].iloc[0]['Underlying'], 210.0)
        self.assertEqual(len(report['Scenario Summary']), 10)
        self.assertIn('TIME_DECAY', list(report['Risk Alerts']['Type']))

    def test_run_without_scenarios(self):
        analyzer = OptionsPortfolioAnalyzer(self.config_path, today=TODAY)
        report = analyzer.run_once(self.portfolio_path, run_scenarios=False)

        self.assertNotIn('Scenario Summary', report)
        self.assertFalse(os.path.exists(self.export_path))

    def test_main_exports(self):
        code = main(['--portfolio', self.portfolio_path, '--config', self.config_path,
                     '--as-of', '2026-10-19', '--price', 'SPY=530', '--export'])

        self.assertEqual(code, 0)
        files = os.listdir(self.export_path)
        self.assertTrue(any(name.endswith('.xlsx') for name in files))
        self.assertTrue(any(name.endswith('Payoff_Curves.csv') for name in files))

    def test_main_invalid_portfolio(self):
        bad = self._write('bad.yaml', "contracts:\n  - buyOrSell: buy\n    optionType: call\n")

        self.assertEqual(main(['--portfolio', bad, '--config', self.config_path]), 1)
        self.assertEqual(main(['--portfolio', os.path.join(self.tmpdir.name, 'none.yaml'),
                               '--config', self.config_path]), 1)

    def test_main_malformed_values(self):
        """Test bad numbers in the portfolio file exit with status 1."""
        bad_final = self._write('bad_final.yaml', PORTFOLIO.replace('finalProfitLoss: 85',
                                                                     'finalProfitLoss: n/a'))
        bad_cash = self._write('bad_cash.yaml', PORTFOLIO.replace('cash: 10000', 'cash: lots'))
        bad_price = self._write('bad_price.yaml', PORTFOLIO.replace('SPY: 545.00', 'SPY: soon'))
        not_mapping = self._write('list.yaml', "- 1\n- 2\n")

        for path in (bad_final, bad_cash, bad_price, not_mapping):
            self.assertEqual(main(['--portfolio', path, '--config', self.config_path]), 1)

    def test_load_portfolio_bad_cash(self):
        analyzer = OptionsPortfolioAnalyzer(self.config_path, today=TODAY)
        path = self._write('bad_cash.yaml', PORTFOLIO.replace('cash: 10000', 'cash: lots'))

        with self.assertRaises(ContractValidationError):
            analyzer.load_portfolio(path)


class TestParsePrices(unittest.TestCase):
    """Test SYMBOL=PRICE parsing."""

    def test_parse(self):
        self.assertEqual(parse_prices(['aapl=192.5', ' SPY = 545']),
                         {'AAPL': 192.5, 'SPY': 545.0})
        self.assertEqual(parse_prices(None), {})

    def test_invalid(self):
        with self.assertRaises(argparse.ArgumentTypeError):
            parse_prices(['AAPL'])
        with self.assertRaises(argparse.ArgumentTypeError):
            parse_prices(['AAPL=abc'])


if __name__ == '__main__':
    unittest.main()
