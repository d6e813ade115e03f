"""
Profit/loss valuation for single option contracts.
"""
import logging
from dataclasses import asdict, dataclass
from typing import Optional

import numpy as np
import pandas as pd

from ..contracts.contract import CONTRACT_MULTIPLIER, Contract, OptionType
from ..utils.clock import Clock, days_to_expiration

logger = logging.getLogger(__name__)


def calculate_intrinsic_value(option_type: OptionType, strike_price: float,
                              underlying_price: float) -> float:
    """In-the-money amount per share."""
    if option_type == OptionType.CALL:
        return max(0.0, underlying_price - strike_price)
    return max(0.0, strike_price - underlying_price)


@dataclass
class ProfitLossResult:
    """Valuation of one contract at a given underlying price."""
    if_sold_now: float
    if_exercised_at_expiration: float
    breakeven: float
    days_to_expiration: int

    def to_dict(self) -> dict:
        return asdict(self)


class ProfitLossCalculator:
    """
    Premium-adjusted P/L for a contract if closed now or held to expiration.

    All methods are pure. The only time-dependent input is ``today``, which
    callers pass explicitly when results must be reproducible.
    """

    def __init__(self, multiplier: int = CONTRACT_MULTIPLIER):
        """
        Initialize calculator.

        Args:
            multiplier: Shares covered by one contract unit
        """
        self.multiplier = multiplier

    def estimate_option_price(self, contract: Contract, underlying_price: float,
                              dte: int) -> float:
        """
        Rough current option price when no live quote is available.

        Intrinsic value at ``underlying_price`` plus the bid's time value
        scaled by remaining time. This is a heuristic, not a pricing model:
        the time value is taken as the bid snapshot minus the distance the
        strike sits out of the money at ``underlying_price``, which drifts
        from reality as the price moves far from the strike.

        Args:
            contract: Contract being valued
            underlying_price: Hypothetical underlying price
            dte: Days to expiration

        Returns:
            Estimated option price per share, floored at 0.01
        """
        intrinsic = calculate_intrinsic_value(contract.option_type, contract.strike_price,
                                              underlying_price)
        time_value_decay = max(0.1, dte / 365) if dte > 0 else 0

        if contract.option_type == OptionType.CALL:
            otm_distance = contract.strike_price - underlying_price
        else:
            otm_distance = underlying_price - contract.strike_price
        original_time_value = abs(contract.bid_price) - max(0, otm_distance)

        return max(0.01, intrinsic + original_time_value * time_value_decay)

    def calculate_profit_loss(self, contract: Contract, underlying_price: float,
                              option_price: Optional[float] = None,
                              today: Optional[Clock] = None) -> ProfitLossResult:
        """
        Value a contract at a hypothetical underlying price.

        Args:
            contract: Contract to value
            underlying_price: Underlying price, not validated
            option_price: Current option price per share; estimated when
                missing or zero
            today: Valuation date (default: current date)

        Returns:
            ProfitLossResult
        """
        dte = days_to_expiration(contract.expiration_date, today)
        units = contract.contracts * self.multiplier

        total_premium = contract.expected_credit_or_debit * units

        intrinsic_per_share = calculate_intrinsic_value(
            contract.option_type, contract.strike_price, underlying_price
        )
        total_intrinsic = intrinsic_per_share * units

        current_price = option_price
        if not current_price:
            current_price = self.estimate_option_price(contract, underlying_price, dte)
            logger.debug(f"Estimated option price {current_price:.4f} for {contract!r}")

        # Selling a long option brings cash in, buying back a short one costs cash
        cash_on_close = current_price * units * (1 if contract.is_long else -1)
        if_sold_now = total_premium + cash_on_close

        if contract.is_long:
            if_exercised = total_intrinsic + total_premium
        else:
            if_exercised = total_premium - total_intrinsic

        return ProfitLossResult(
            if_sold_now=if_sold_now,
            if_exercised_at_expiration=if_exercised,
            breakeven=contract.breakeven,
            days_to_expiration=dte
        )

    def calculate_expiration_batch(self, contract: Contract,
                                   underlying_prices: np.ndarray) -> np.ndarray:
        """
        Vectorized P/L at expiration over an array of underlying prices.

        Args:
            contract: Contract to value
            underlying_prices: Array of underlying prices

        Returns:
            Array of P/L values, same shape as ``underlying_prices``
        """
        prices = np.asarray(underlying_prices, dtype=float)
        units = contract.contracts * self.multiplier

        if contract.option_type == OptionType.CALL:
            intrinsic = np.maximum(0, prices - contract.strike_price)
        else:
            intrinsic = np.maximum(0, contract.strike_price - prices)

        total_premium = contract.expected_credit_or_debit * units
        if contract.is_long:
            return intrinsic * units + total_premium
        return total_premium - intrinsic * units

    def calculate_payoff_curve(self, contract: Contract, range_factor: float = 0.5,
                               steps: int = 20) -> pd.DataFrame:
        """
        Expiration payoff around the strike.

        Args:
            contract: Contract to chart
            range_factor: Fraction of the strike covered on each side
            steps: Number of intervals; the curve has ``steps + 1`` points

        Returns:
            DataFrame with ``underlying_price`` and ``profit_loss`` columns
        """
        min_price = contract.strike_price * (1 - range_factor)
        max_price = contract.strike_price * (1 + range_factor)
        prices = np.linspace(min_price, max_price, steps + 1)

        return pd.DataFrame({
            'underlying_price': prices,
            'profit_loss': self.calculate_expiration_batch(contract, prices)
        })


_default_calculator = ProfitLossCalculator()


def calculate_profit_loss(contract: Contract, underlying_price: float,
                          option_price: Optional[float] = None,
                          today: Optional[Clock] = None) -> ProfitLossResult:
    """Module-level shortcut for ``ProfitLossCalculator().calculate_profit_loss``."""
    return _default_calculator.calculate_profit_loss(contract, underlying_price,
                                                     option_price, today)
