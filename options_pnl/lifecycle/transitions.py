"""
Contract lifecycle transitions.

A contract starts active and ends either closed (bought back or sold off
before expiration) or expired. Both end states are final. Transitions
return a new record and never touch the one passed in.
"""
import logging
from dataclasses import dataclass, replace
from datetime import date
from typing import List, Optional, Union

from ..contracts.contract import CONTRACT_MULTIPLIER, Contract, ContractStatus, TradeAnalysis
from ..utils.clock import Clock, days_to_expiration
from ..valuation.profit_loss import ProfitLossCalculator, calculate_intrinsic_value

logger = logging.getLogger(__name__)


class InvalidTransitionError(ValueError):
    """Raised when a closed or expired contract is asked to transition again."""


@dataclass(frozen=True)
class CloseEvent:
    final_underlying_price: float
    final_option_price: float
    closed_date: Optional[date] = None


@dataclass(frozen=True)
class ExpireEvent:
    final_underlying_price: float
    analysis: Optional[TradeAnalysis] = None
    closed_date: Optional[date] = None


LifecycleEvent = Union[CloseEvent, ExpireEvent]


def _check_active(contract: Contract, action: str):
    if contract.is_terminal:
        raise InvalidTransitionError(
            f"Cannot {action} contract {contract.id or contract!r}: already {contract.status.value}"
        )


def close_contract(contract: Contract, final_underlying_price: float,
                   final_option_price: float, closed_date: Optional[date] = None,
                   calculator: Optional[ProfitLossCalculator] = None) -> Contract:
    """
    Close an active contract at a given option price.

    The final P/L is the "if sold now" valuation at the closing prices.

    Raises:
        InvalidTransitionError: contract is already closed or expired
    """
    _check_active(contract, 'close')
    closed_date = closed_date or date.today()
    calculator = calculator or ProfitLossCalculator()

    result = calculator.calculate_profit_loss(
        contract, final_underlying_price, final_option_price, today=closed_date
    )

    logger.info(f"Closed {contract!r} with P/L {result.if_sold_now:.2f}")
    return replace(
        contract,
        status=ContractStatus.CLOSED,
        final_underlying_price=final_underlying_price,
        final_option_price=final_option_price,
        final_profit_loss=result.if_sold_now,
        closed_date=closed_date
    )


def expire_contract(contract: Contract, final_underlying_price: float,
                    analysis: Optional[TradeAnalysis] = None,
                    closed_date: Optional[date] = None) -> Contract:
    """
    Expire an active contract at the final underlying price.

    The option settles at intrinsic value: a long position keeps it on top
    of the premium, a short position gives it up out of the premium.

    Raises:
        InvalidTransitionError: contract is already closed or expired
    """
    _check_active(contract, 'expire')

    intrinsic = calculate_intrinsic_value(contract.option_type, contract.strike_price,
                                          final_underlying_price)
    settlement = intrinsic * contract.contracts * CONTRACT_MULTIPLIER
    premium = contract.expected_credit_or_debit * contract.contracts * CONTRACT_MULTIPLIER

    final_pl = settlement + premium if contract.is_long else premium - settlement

    if analysis is not None:
        analysis = replace(analysis, was_profit=final_pl > 0)

    logger.info(f"Expired {contract!r} with P/L {final_pl:.2f}")
    return replace(
        contract,
        status=ContractStatus.EXPIRED,
        final_underlying_price=final_underlying_price,
        final_profit_loss=final_pl,
        closed_date=closed_date or contract.expiration_date,
        analysis=analysis
    )


def apply_transition(contract: Contract, event: LifecycleEvent,
                     calculator: Optional[ProfitLossCalculator] = None) -> Contract:
    """
    Apply a lifecycle event to a contract.

    Args:
        contract: Current record
        event: CloseEvent or ExpireEvent

    Returns:
        New contract record in its terminal state

    Raises:
        InvalidTransitionError: contract is already closed or expired
        TypeError: unknown event type
    """
    if isinstance(event, CloseEvent):
        return close_contract(contract, event.final_underlying_price, event.final_option_price,
                              event.closed_date, calculator)
    if isinstance(event, ExpireEvent):
        return expire_contract(contract, event.final_underlying_price, event.analysis,
                               event.closed_date)
    raise TypeError(f"Unsupported lifecycle event: {event!r}")


def is_active(contract: Contract, today: Optional[Clock] = None) -> bool:
    """Active status and not yet past its expiration date."""
    return (contract.status == ContractStatus.ACTIVE and
            days_to_expiration(contract.expiration_date, today) >= 0)


def get_active_contracts(contracts: List[Contract],
                         today: Optional[Clock] = None) -> List[Contract]:
    return [c for c in contracts if is_active(c, today)]


def get_expired_contracts(contracts: List[Contract]) -> List[Contract]:
    """Closed and expired contracts."""
    return [c for c in contracts if c.is_terminal]


def get_expiring_today(contracts: List[Contract],
                       today: Optional[Clock] = None) -> List[Contract]:
    return [c for c in contracts
            if c.status == ContractStatus.ACTIVE
            and days_to_expiration(c.expiration_date, today) == 0]


def find_contracts_past_expiration(contracts: List[Contract],
                                   today: Optional[Clock] = None) -> List[Contract]:
    """Active records whose expiration date has passed and need expiring."""
    return [c for c in contracts
            if c.status == ContractStatus.ACTIVE
            and days_to_expiration(c.expiration_date, today) < 0]
