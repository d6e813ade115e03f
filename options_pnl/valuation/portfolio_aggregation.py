"""
Portfolio aggregation and scenario valuation.
"""
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .profit_loss import ProfitLossCalculator
from ..contracts.contract import Contract, ContractStatus, Holding
from ..risk.risk_metrics import RiskLevel, RiskMetrics
from ..utils.clock import Clock, advance, days_to_expiration

logger = logging.getLogger(__name__)

UNKNOWN_SYMBOL = 'Unknown'


@dataclass
class PortfolioGroup:
    """Contracts on one underlying symbol."""
    symbol: str
    contracts: List[Contract] = field(default_factory=list)
    total_value: float = 0.0
    total_positions: int = 0
    risk_level: RiskLevel = RiskLevel.LOW


@dataclass
class PortfolioSummary:
    """Cash, holdings and option P/L rolled into one value."""
    cash: float
    holdings_value: float
    net_profit_loss: float
    total_value: float


class PortfolioAggregator:
    """Aggregates contract values by symbol and across the portfolio."""

    def __init__(self, risk_levels: Optional[Dict] = None,
                 calculator: Optional[ProfitLossCalculator] = None):
        """
        Initialize portfolio aggregator.

        Args:
            risk_levels: Group risk thresholds (see DEFAULT_RISK_LEVELS)
            calculator: Valuation engine to use
        """
        self.risk_levels = risk_levels
        self.calculator = calculator or ProfitLossCalculator()

    def group_by_symbol(self, contracts: List[Contract],
                        today: Optional[Clock] = None) -> List[PortfolioGroup]:
        """
        Group contracts by underlying symbol.

        Contracts without a symbol go to the "Unknown" group. Groups keep the
        order in which their symbol first appears.

        Args:
            contracts: Contracts to group
            today: Reference date for days to expiry (default: current date)

        Returns:
            List of PortfolioGroup
        """
        buckets: Dict[str, List[Contract]] = {}
        for contract in contracts:
            buckets.setdefault(contract.symbol or UNKNOWN_SYMBOL, []).append(contract)

        groups = []
        for symbol, members in buckets.items():
            total_value = sum(c.premium_total for c in members)
            total_positions = sum(c.contracts for c in members)

            avg_days_to_expiry = sum(
                days_to_expiration(c.expiration_date, today) for c in members
            ) / len(members)

            risk_level = RiskMetrics.calculate_group_risk_level(
                avg_days_to_expiry, total_value, self.risk_levels
            )

            groups.append(PortfolioGroup(
                symbol=symbol,
                contracts=members,
                total_value=total_value,
                total_positions=total_positions,
                risk_level=risk_level
            ))

        logger.debug(f"Grouped {len(contracts)} contracts into {len(groups)} symbols")
        return groups

    def calculate_net_profit_loss(self, contracts: List[Contract],
                                  today: Optional[Clock] = None) -> float:
        """
        Net option P/L across contracts.

        Closed and expired contracts count their frozen final P/L (or their
        premium when none was recorded). Active contracts are marked against
        their own strike, standing in for an unknown current price.

        Args:
            contracts: Contracts to total
            today: Valuation date (default: current date)

        Returns:
            Net P/L, 0 for no contracts
        """
        total = 0.0

        for contract in contracts:
            if contract.is_terminal:
                if contract.final_profit_loss is not None:
                    total += contract.final_profit_loss
                else:
                    total += contract.premium_total
            else:
                result = self.calculator.calculate_profit_loss(
                    contract, contract.strike_price, today=today
                )
                total += result.if_sold_now

        return total

    @staticmethod
    def calculate_holdings_value(holdings: List[Holding]) -> float:
        """Market value of stock holdings."""
        return sum(h.shares * h.price for h in holdings)

    def calculate_total_portfolio_value(self, cash: float, holdings: List[Holding],
                                        contracts: List[Contract],
                                        today: Optional[Clock] = None) -> float:
        """Cash plus holdings plus net option P/L."""
        return (cash + self.calculate_holdings_value(holdings) +
                self.calculate_net_profit_loss(contracts, today))

    def calculate_portfolio_summary(self, cash: float, holdings: List[Holding],
                                    contracts: List[Contract],
                                    today: Optional[Clock] = None) -> PortfolioSummary:
        """
        Break the portfolio value into its parts.

        Args:
            cash: Cash balance
            holdings: Stock holdings
            contracts: All contracts, active and finished
            today: Valuation date (default: current date)

        Returns:
            PortfolioSummary
        """
        holdings_value = self.calculate_holdings_value(holdings)
        net_pl = self.calculate_net_profit_loss(contracts, today)

        return PortfolioSummary(
            cash=cash,
            holdings_value=holdings_value,
            net_profit_loss=net_pl,
            total_value=cash + holdings_value + net_pl
        )

    def simulate_price(self, contracts: List[Contract], underlying_price: float,
                       today: Optional[Clock] = None) -> Dict:
        """
        Value contracts on one symbol at a hypothetical underlying price.

        Args:
            contracts: Contracts sharing an underlying
            underlying_price: Simulated underlying price
            today: Valuation date (default: current date)

        Returns:
            Dictionary with total P/L if sold now and per-contract results
        """
        results = []
        for contract in contracts:
            result = self.calculator.calculate_profit_loss(contract, underlying_price, today=today)
            results.append({'contract': contract, 'result': result})

        return {
            'underlying_price': underlying_price,
            'total_if_sold_now': sum(r['result'].if_sold_now for r in results),
            'total_if_exercised': sum(r['result'].if_exercised_at_expiration for r in results),
            'contract_results': results
        }

    def run_scenario(self, contracts: List[Contract], base_prices: Dict[str, float],
                     scenario: Dict, today: Optional[Clock] = None) -> Dict:
        """
        Run a price-move scenario on the active contracts.

        Args:
            contracts: Contracts to value; closed, expired and past-expiration
                ones are ignored
            base_prices: Symbol -> current underlying price
            scenario: Scenario parameters (``spot_change``, ``days_pass``)
            today: Date the scenario starts from (default: current date)

        Returns:
            Dictionary with scenario results
        """
        scenario_name = scenario.get('name', 'Unknown')
        spot_change = scenario.get('spot_change', 0.0)
        days_pass = scenario.get('days_pass', 0)

        logger.debug(f"Running scenario: {scenario_name}")

        scenario_date = advance(today, days_pass)
        contract_results = []

        for contract in contracts:
            # Only contracts still active when the scenario starts
            if (contract.status != ContractStatus.ACTIVE or
                    days_to_expiration(contract.expiration_date, today) < 0):
                continue

            symbol = contract.symbol or UNKNOWN_SYMBOL
            base_price = base_prices.get(symbol)
            if base_price is None:
                logger.warning(f"No base price for {symbol}, skipping {contract!r}")
                continue

            new_price = base_price * (1 + spot_change)
            result = self.calculator.calculate_profit_loss(contract, new_price, today=scenario_date)

            contract_results.append({
                'id': contract.id,
                'symbol': symbol,
                'description': f"{contract.buy_or_sell.value} {contract.option_type.value} "
                               f"{contract.strike_price:g}",
                'underlying_price': new_price,
                'pnl': result.if_sold_now,
                'pnl_at_expiration': result.if_exercised_at_expiration,
                'days_to_expiration': result.days_to_expiration
            })

        sorted_results = sorted(contract_results, key=lambda x: x['pnl'])

        return {
            'scenario_name': scenario_name,
            'spot_change': spot_change,
            'days_pass': days_pass,
            'portfolio_pnl': sum(r['pnl'] for r in contract_results),
            'portfolio_pnl_at_expiration': sum(r['pnl_at_expiration'] for r in contract_results),
            'worst_position': sorted_results[0] if sorted_results else None,
            'best_position': sorted_results[-1] if sorted_results else None,
            'position_results': contract_results
        }

    def run_multiple_scenarios(self, contracts: List[Contract], base_prices: Dict[str, float],
                               scenarios: Dict[str, Dict],
                               today: Optional[Clock] = None) -> Dict[str, Dict]:
        """
        Run multiple scenarios on the portfolio.

        Args:
            contracts: Contracts to value
            base_prices: Symbol -> current underlying price
            scenarios: Dictionary of scenario name -> parameters
            today: Date the scenarios start from

        Returns:
            Dictionary of scenario name -> results
        """
        results = {}

        for scenario_name, scenario_params in scenarios.items():
            results[scenario_name] = self.run_scenario(contracts, base_prices,
                                                       scenario_params, today)
            logger.debug(f"Completed scenario: {scenario_name}")

        return results

    @staticmethod
    def calculate_max_drawdown(scenario_results: Dict[str, Dict]) -> Dict:
        """
        Worst scenario P/L.

        Args:
            scenario_results: Dictionary of scenario results

        Returns:
            Dictionary with max drawdown info
        """
        worst_scenario = None
        worst_pnl = 0.0

        for scenario_name, result in scenario_results.items():
            pnl = result['portfolio_pnl']
            if pnl < worst_pnl:
                worst_pnl = pnl
                worst_scenario = scenario_name

        return {
            'max_drawdown': worst_pnl,
            'worst_scenario': worst_scenario
        }
