"""
Unit tests for contract records.
"""
import unittest
import sys
from datetime import date
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from options_pnl.contracts import (
    BuyOrSell,
    Contract,
    ContractStatus,
    ContractValidationError,
    Holding,
    OptionType,
    TradeAnalysis,
)


def api_record(**overrides) -> dict:
    record = {
        'id': '64f0',
        'buyOrSell': 'sell',
        'optionType': 'put',
        'symbol': ' spy ',
        'expirationDate': '2024-12-20T00:00:00.000Z',
        'strikePrice': 520,
        'breakeven': 515.2,
        'chanceOfProfit': 78,
        'percentChange': -2.5,
        'bidPrice': 4.6,
        'contracts': 2,
        'expectedCreditOrDebit': 4.8,
        'status': 'open',
    }
    record.update(overrides)
    return record


class TestContractFromDict(unittest.TestCase):
    """Test building contracts from API records."""

    def test_api_record(self):
        contract = Contract.from_dict(api_record())

        self.assertEqual(contract.buy_or_sell, BuyOrSell.SELL)
        self.assertEqual(contract.option_type, OptionType.PUT)
        self.assertEqual(contract.symbol, 'SPY')
        self.assertEqual(contract.expiration_date, date(2024, 12, 20))
        self.assertEqual(contract.strike_price, 520)
        self.assertEqual(contract.contracts, 2)
        self.assertEqual(contract.status, ContractStatus.ACTIVE)
        self.assertAlmostEqual(contract.premium_total, 960)

    def test_snake_case_record(self):
        contract = Contract.from_dict({
            'buy_or_sell': 'BUY',
            'option_type': 'call',
            'expiration_date': date(2025, 1, 17),
            'strike_price': '45.5',
            'expected_credit_or_debit': -1.2,
        })

        self.assertTrue(contract.is_long)
        self.assertTrue(contract.is_call)
        self.assertEqual(contract.strike_price, 45.5)
        self.assertEqual(contract.contracts, 1)
        self.assertIsNone(contract.symbol)

    def test_finished_record(self):
        contract = Contract.from_dict(api_record(
            status='expired',
            finalUnderlyingPrice=530,
            finalProfitLoss=960,
            closedDate='2024-12-20',
            analysis={'wasProfit': True, 'reasonForOutcome': 'Expired worthless'}
        ))

        self.assertTrue(contract.is_terminal)
        self.assertEqual(contract.final_profit_loss, 960)
        self.assertEqual(contract.closed_date, date(2024, 12, 20))
        self.assertIsInstance(contract.analysis, TradeAnalysis)
        self.assertTrue(contract.analysis.was_profit)

    def test_missing_required_field(self):
        record = api_record()
        del record['strikePrice']

        with self.assertRaises(ContractValidationError):
            Contract.from_dict(record)

        with self.assertRaises(ContractValidationError):
            Contract.from_dict(api_record(expirationDate=''))

    def test_invalid_values(self):
        with self.assertRaises(ContractValidationError):
            Contract.from_dict(api_record(optionType='straddle'))
        with self.assertRaises(ContractValidationError):
            Contract.from_dict(api_record(contracts=0))
        with self.assertRaises(ContractValidationError):
            Contract.from_dict(api_record(expirationDate='next friday'))
        with self.assertRaises(ContractValidationError):
            Contract.from_dict(api_record(status='pending'))

    def test_invalid_final_values(self):
        """Test malformed frozen results are rejected at the boundary."""
        for key in ('finalProfitLoss', 'finalUnderlyingPrice', 'finalOptionPrice'):
            with self.assertRaises(ContractValidationError):
                Contract.from_dict(api_record(status='closed', **{key: 'n/a'}))

    def test_missing_final_values_stay_none(self):
        contract = Contract.from_dict(api_record(finalProfitLoss='', finalOptionPrice=None))

        self.assertIsNone(contract.final_profit_loss)
        self.assertIsNone(contract.final_option_price)
        self.assertIsNone(contract.final_underlying_price)

    def test_numeric_symbol(self):
        self.assertEqual(Contract.from_dict(api_record(symbol=123)).symbol, '123')

    def test_fractional_contract_count(self):
        with self.assertRaises(ContractValidationError):
            Contract.from_dict(api_record(contracts=2.7))
        self.assertEqual(Contract.from_dict(api_record(contracts='3')).contracts, 3)
        self.assertEqual(Contract.from_dict(api_record(contracts=2.0)).contracts, 2)

    def test_validation_error_is_value_error(self):
        self.assertTrue(issubclass(ContractValidationError, ValueError))


class TestHolding(unittest.TestCase):
    """Test stock holdings."""

    def test_from_dict(self):
        holding = Holding.from_dict({'symbol': 'msft', 'shares': 10, 'price': 410.5})

        self.assertEqual(holding.symbol, 'MSFT')
        self.assertAlmostEqual(holding.value, 4105)

    def test_rejects_negative_shares(self):
        with self.assertRaises(ContractValidationError):
            Holding.from_dict({'symbol': 'MSFT', 'shares': -1, 'price': 10})

    def test_requires_symbol(self):
        with self.assertRaises(ContractValidationError):
            Holding.from_dict({'shares': 1, 'price': 10})


if __name__ == '__main__':
    unittest.main()
