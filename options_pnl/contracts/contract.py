"""
Contract and holding records for tracked option trades.
"""
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Dict, Optional

CONTRACT_MULTIPLIER = 100


class ContractValidationError(ValueError):
    """Raised when a raw record cannot be turned into a Contract or Holding."""


class BuyOrSell(str, Enum):
    BUY = 'buy'
    SELL = 'sell'


class OptionType(str, Enum):
    CALL = 'call'
    PUT = 'put'


class ContractStatus(str, Enum):
    ACTIVE = 'active'
    CLOSED = 'closed'
    EXPIRED = 'expired'


def _field(record: Dict, camel: str, snake: str, default=None):
    """Look up a field by its API (camelCase) or Python (snake_case) name."""
    if camel in record:
        return record[camel]
    return record.get(snake, default)


def _parse_date(value, name: str) -> Optional[date]:
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.fromisoformat(str(value)[:10]).date()
    except ValueError as e:
        raise ContractValidationError(f"Invalid date for {name}: {value!r}") from e


def _parse_enum(enum_cls, value, name: str):
    try:
        return enum_cls(str(value).lower())
    except ValueError as e:
        raise ContractValidationError(f"Invalid {name}: {value!r}") from e


def _parse_number(value, name: str, required: bool = False,
                  default: Optional[float] = 0.0) -> Optional[float]:
    if value is None or value == '':
        if required:
            raise ContractValidationError(f"Missing required field: {name}")
        return default
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise ContractValidationError(f"Invalid number for {name}: {value!r}") from e


@dataclass
class TradeAnalysis:
    """Post-trade notes attached when a contract expires."""
    was_profit: bool = False
    reason_for_outcome: str = ''
    lessons_learned: str = ''
    market_conditions: str = ''
    what_went_right: Optional[str] = None
    what_went_wrong: Optional[str] = None

    @classmethod
    def from_dict(cls, record: Dict) -> 'TradeAnalysis':
        return cls(
            was_profit=bool(_field(record, 'wasProfit', 'was_profit', False)),
            reason_for_outcome=_field(record, 'reasonForOutcome', 'reason_for_outcome', ''),
            lessons_learned=_field(record, 'lessonsLearned', 'lessons_learned', ''),
            market_conditions=_field(record, 'marketConditions', 'market_conditions', ''),
            what_went_right=_field(record, 'whatWentRight', 'what_went_right'),
            what_went_wrong=_field(record, 'whatWentWrong', 'what_went_wrong'),
        )


@dataclass
class Contract:
    """
    A single options position record.

    ``expected_credit_or_debit`` is the per-unit premium: positive when the
    premium was received, negative when it was paid. Its sign is independent
    of ``buy_or_sell``. Each unit in ``contracts`` covers
    ``CONTRACT_MULTIPLIER`` shares.
    """
    buy_or_sell: BuyOrSell
    option_type: OptionType
    strike_price: float
    expiration_date: date
    expected_credit_or_debit: float
    contracts: int = 1
    breakeven: float = 0.0
    chance_of_profit: float = 0.0
    bid_price: float = 0.0
    percent_change: float = 0.0
    change: float = 0.0
    limit_price: float = 0.0
    symbol: Optional[str] = None
    notes: str = ''
    id: Optional[str] = None
    status: ContractStatus = ContractStatus.ACTIVE

    # Frozen once the contract is closed or expired
    final_underlying_price: Optional[float] = None
    final_option_price: Optional[float] = None
    final_profit_loss: Optional[float] = None
    closed_date: Optional[date] = None
    analysis: Optional[TradeAnalysis] = None

    @property
    def is_call(self) -> bool:
        return self.option_type == OptionType.CALL

    @property
    def is_long(self) -> bool:
        return self.buy_or_sell == BuyOrSell.BUY

    @property
    def is_terminal(self) -> bool:
        """Closed and expired contracts never change again."""
        return self.status in (ContractStatus.CLOSED, ContractStatus.EXPIRED)

    @property
    def premium_total(self) -> float:
        """Premium in cash terms across all units."""
        return self.expected_credit_or_debit * self.contracts * CONTRACT_MULTIPLIER

    @classmethod
    def from_dict(cls, record: Dict) -> 'Contract':
        """
        Build a contract from a persistence-layer record.

        Accepts the camelCase field names used by the REST API as well as
        snake_case names. ``status: open`` is read as active.

        Raises:
            ContractValidationError: required field missing or malformed
        """
        for camel, snake in (('buyOrSell', 'buy_or_sell'),
                             ('optionType', 'option_type'),
                             ('expirationDate', 'expiration_date')):
            if _field(record, camel, snake) in (None, ''):
                raise ContractValidationError(f"Missing required field: {camel}")

        count = _parse_number(_field(record, 'contracts', 'contracts'), 'contracts', default=1)
        if not float(count).is_integer():
            raise ContractValidationError(f"contracts must be a whole number, got {count}")
        count = int(count)
        if count < 1:
            raise ContractValidationError(f"contracts must be at least 1, got {count}")

        raw_status = str(_field(record, 'status', 'status', 'active') or 'active').lower()
        if raw_status == 'open':
            raw_status = 'active'

        analysis = _field(record, 'analysis', 'analysis')
        if isinstance(analysis, dict):
            analysis = TradeAnalysis.from_dict(analysis)

        return cls(
            id=_field(record, 'id', 'id'),
            symbol=str(_field(record, 'symbol', 'symbol') or '').strip().upper() or None,
            buy_or_sell=_parse_enum(BuyOrSell, _field(record, 'buyOrSell', 'buy_or_sell'), 'buyOrSell'),
            option_type=_parse_enum(OptionType, _field(record, 'optionType', 'option_type'), 'optionType'),
            strike_price=_parse_number(_field(record, 'strikePrice', 'strike_price'),
                                       'strikePrice', required=True),
            expiration_date=_parse_date(_field(record, 'expirationDate', 'expiration_date'),
                                        'expirationDate'),
            expected_credit_or_debit=_parse_number(
                _field(record, 'expectedCreditOrDebit', 'expected_credit_or_debit'),
                'expectedCreditOrDebit', required=True),
            contracts=count,
            breakeven=_parse_number(_field(record, 'breakeven', 'breakeven'), 'breakeven'),
            chance_of_profit=_parse_number(_field(record, 'chanceOfProfit', 'chance_of_profit'),
                                           'chanceOfProfit'),
            bid_price=_parse_number(_field(record, 'bidPrice', 'bid_price'), 'bidPrice'),
            percent_change=_parse_number(_field(record, 'percentChange', 'percent_change'),
                                         'percentChange'),
            change=_parse_number(_field(record, 'change', 'change'), 'change'),
            limit_price=_parse_number(_field(record, 'limitPrice', 'limit_price'), 'limitPrice'),
            notes=_field(record, 'notes', 'notes', '') or '',
            status=_parse_enum(ContractStatus, raw_status, 'status'),
            final_underlying_price=_parse_number(
                _field(record, 'finalUnderlyingPrice', 'final_underlying_price'),
                'finalUnderlyingPrice', default=None),
            final_option_price=_parse_number(
                _field(record, 'finalOptionPrice', 'final_option_price'),
                'finalOptionPrice', default=None),
            final_profit_loss=_parse_number(
                _field(record, 'finalProfitLoss', 'final_profit_loss'),
                'finalProfitLoss', default=None),
            closed_date=_parse_date(_field(record, 'closedDate', 'closed_date'), 'closedDate'),
            analysis=analysis,
        )

    def __repr__(self) -> str:
        return (f"Contract({self.symbol or 'Unknown'} {self.buy_or_sell.value} "
                f"{self.option_type.value} {self.strike_price} "
                f"exp:{self.expiration_date}, qty:{self.contracts}, "
                f"premium:{self.expected_credit_or_debit:+.2f}, status:{self.status.value})")


@dataclass
class Holding:
    """Stock holding counted toward the total portfolio value."""
    symbol: str
    shares: float
    price: float
    id: Optional[str] = None

    @property
    def value(self) -> float:
        return self.shares * self.price

    @classmethod
    def from_dict(cls, record: Dict) -> 'Holding':
        symbol = record.get('symbol')
        if not symbol:
            raise ContractValidationError("Missing required field: symbol")
        shares = _parse_number(record.get('shares'), 'shares', required=True)
        if shares < 0:
            raise ContractValidationError(f"shares must not be negative, got {shares}")
        return cls(
            symbol=str(symbol).upper(),
            shares=shares,
            price=_parse_number(record.get('price'), 'price', required=True),
            id=record.get('id'),
        )
