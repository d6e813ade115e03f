"""Contract and holding records."""
from .contract import (
    CONTRACT_MULTIPLIER,
    BuyOrSell,
    Contract,
    ContractStatus,
    ContractValidationError,
    Holding,
    OptionType,
    TradeAnalysis,
)

__all__ = [
    'CONTRACT_MULTIPLIER',
    'BuyOrSell',
    'Contract',
    'ContractStatus',
    'ContractValidationError',
    'Holding',
    'OptionType',
    'TradeAnalysis'
]
