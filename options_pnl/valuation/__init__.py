"""Valuation engine for contract P/L and portfolio aggregation."""
from .profit_loss import (
    ProfitLossCalculator,
    ProfitLossResult,
    calculate_intrinsic_value,
    calculate_profit_loss,
    days_to_expiration,
)
from .portfolio_aggregation import PortfolioAggregator, PortfolioGroup, PortfolioSummary

__all__ = [
    'ProfitLossCalculator',
    'ProfitLossResult',
    'calculate_intrinsic_value',
    'calculate_profit_loss',
    'days_to_expiration',
    'PortfolioAggregator',
    'PortfolioGroup',
    'PortfolioSummary'
]
