"""
Risk metrics calculation module.
"""
import logging
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Dict, List, Optional

from ..contracts.contract import Contract
from ..utils.clock import Clock, days_to_expiration, days_until

logger = logging.getLogger(__name__)

DEFAULT_RISK_LEVELS = {
    'high_days': 14,
    'high_value': 5000,
    'medium_days': 30,
    'medium_value': 2000
}


class RiskLevel(str, Enum):
    LOW = 'low'
    MEDIUM = 'medium'
    HIGH = 'high'


@dataclass
class RiskBreakdown:
    """Simple risk scores, each between 0 and 1."""
    time_decay: float
    delta: float
    volatility: float

    def to_dict(self) -> dict:
        return asdict(self)


class RiskMetrics:
    """Calculate contract and portfolio risk metrics."""

    @staticmethod
    def calculate_risk(contract: Contract, today: Optional[Clock] = None) -> RiskBreakdown:
        """
        Score a contract on time decay, directional and volatility risk.

        ``delta`` is the inverse of the stored chance of profit, not an
        option delta. ``volatility`` scales the recent percent change.

        Args:
            contract: Contract to score
            today: Scoring date (default: current date)

        Returns:
            RiskBreakdown
        """
        days_to_expiry = max(0.0, days_until(contract.expiration_date, today))

        # Saturates at expiry, rises inside the last 30 days
        time_decay = 1.0 if days_to_expiry <= 0 else min(1.0, 30 / days_to_expiry)
        delta = 1 - contract.chance_of_profit / 100
        volatility = min(1.0, abs(contract.percent_change) / 10)

        return RiskBreakdown(time_decay=time_decay, delta=delta, volatility=volatility)

    @staticmethod
    def get_risk_band(score: float) -> RiskLevel:
        """Map a 0-1 risk score to a band."""
        if score < 0.33:
            return RiskLevel.LOW
        if score < 0.66:
            return RiskLevel.MEDIUM
        return RiskLevel.HIGH

    @staticmethod
    def calculate_group_risk_level(avg_days_to_expiry: float, total_value: float,
                                   thresholds: Optional[Dict] = None) -> RiskLevel:
        """
        Risk level of a symbol group.

        Args:
            avg_days_to_expiry: Average days to expiration across the group
            total_value: Group premium total
            thresholds: Overrides for DEFAULT_RISK_LEVELS

        Returns:
            RiskLevel, with the high check taking precedence
        """
        limits = dict(DEFAULT_RISK_LEVELS)
        if thresholds:
            limits.update(thresholds)

        if avg_days_to_expiry < limits['high_days'] or abs(total_value) > limits['high_value']:
            return RiskLevel.HIGH
        if avg_days_to_expiry < limits['medium_days'] or abs(total_value) > limits['medium_value']:
            return RiskLevel.MEDIUM
        return RiskLevel.LOW

    @staticmethod
    def calculate_portfolio_analytics(contracts: List[Contract],
                                      today: Optional[Clock] = None) -> Dict:
        """
        Headline metrics over a set of contracts.

        Args:
            contracts: Contracts to summarize (usually the active ones)
            today: Reference date (default: current date)

        Returns:
            Dictionary with portfolio analytics
        """
        total_value = sum(c.premium_total for c in contracts)
        dtes = [days_to_expiration(c.expiration_date, today) for c in contracts]

        avg_chance = (sum(c.chance_of_profit for c in contracts) / len(contracts)
                      if contracts else 0)

        return {
            'total_value': total_value,
            'total_active': len(contracts),
            'active_profitable': len([c for c in contracts if c.chance_of_profit > 50]),
            'avg_chance_of_profit': avg_chance,
            'days_to_closest_expiry': min(dtes) if dtes else 0,
            'expiring_this_week': len([d for d in dtes if 0 <= d <= 7])
        }

    @staticmethod
    def calculate_expired_statistics(contracts: List[Contract]) -> Dict:
        """
        Realized results over closed and expired contracts.

        Args:
            contracts: Any contracts; only terminal ones are counted

        Returns:
            Dictionary with total P/L, win count and win rate (percent)
        """
        finished = [c for c in contracts if c.is_terminal]
        results = [c.final_profit_loss or 0 for c in finished]
        profitable = len([pl for pl in results if pl > 0])

        return {
            'count': len(finished),
            'total_profit_loss': sum(results),
            'profitable_count': profitable,
            'win_rate': (profitable / len(finished) * 100) if finished else 0
        }
