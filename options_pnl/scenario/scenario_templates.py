"""
Pre-built scenario templates for portfolio analysis.
"""
from typing import Dict


class ScenarioTemplates:
    """Pre-defined underlying price and time scenarios."""

    @staticmethod
    def get_all_scenarios() -> Dict[str, Dict]:
        """
        Get all predefined scenarios.

        Returns:
            Dictionary of scenario name -> parameters
        """
        return {
            'Normal Day': ScenarioTemplates.normal_day(),
            'Rally': ScenarioTemplates.rally(),
            'Selloff': ScenarioTemplates.selloff(),
            'Market Panic': ScenarioTemplates.market_panic(),
            'Black Swan': ScenarioTemplates.black_swan(),
            'Short Squeeze': ScenarioTemplates.short_squeeze(),
            '1 Day Pass': ScenarioTemplates.one_day_pass(),
            'Weekend': ScenarioTemplates.weekend(),
            '1 Week': ScenarioTemplates.one_week(),
            'Expiration Week': ScenarioTemplates.expiration_week(),
        }

    @staticmethod
    def normal_day() -> Dict:
        """No change scenario."""
        return {
            'name': 'Normal Day',
            'spot_change': 0.0,
            'days_pass': 0,
            'description': 'Baseline - no changes'
        }

    @staticmethod
    def rally() -> Dict:
        return {
            'name': 'Rally',
            'spot_change': 0.05,  # +5%
            'days_pass': 1,
            'description': 'Broad rally over one session'
        }

    @staticmethod
    def selloff() -> Dict:
        return {
            'name': 'Selloff',
            'spot_change': -0.05,  # -5%
            'days_pass': 1,
            'description': 'Broad selloff over one session'
        }

    @staticmethod
    def market_panic() -> Dict:
        """Market panic scenario."""
        return {
            'name': 'Market Panic',
            'spot_change': -0.10,  # -10%
            'days_pass': 0,
            'description': 'Sharp intraday selloff'
        }

    @staticmethod
    def black_swan() -> Dict:
        """Black swan event."""
        return {
            'name': 'Black Swan',
            'spot_change': -0.20,  # -20%
            'days_pass': 0,
            'description': 'Catastrophic gap down'
        }

    @staticmethod
    def short_squeeze() -> Dict:
        """Short squeeze scenario."""
        return {
            'name': 'Short Squeeze',
            'spot_change': 0.15,  # +15%
            'days_pass': 0,
            'description': 'Rapid upward move'
        }

    @staticmethod
    def one_day_pass() -> Dict:
        """One day passes (time decay only)."""
        return {
            'name': '1 Day Pass',
            'spot_change': 0.0,
            'days_pass': 1,
            'description': 'One day of time decay'
        }

    @staticmethod
    def weekend() -> Dict:
        """Weekend passes (3 days)."""
        return {
            'name': 'Weekend',
            'spot_change': 0.0,
            'days_pass': 3,
            'description': 'Weekend time decay'
        }

    @staticmethod
    def one_week() -> Dict:
        """One week passes."""
        return {
            'name': '1 Week',
            'spot_change': 0.0,
            'days_pass': 7,
            'description': 'One week of time decay'
        }

    @staticmethod
    def expiration_week() -> Dict:
        return {
            'name': 'Expiration Week',
            'spot_change': -0.03,  # -3%
            'days_pass': 5,
            'description': 'Drift lower into a weekly expiration'
        }

    @staticmethod
    def create_custom_scenario(name: str, spot_change: float, days_pass: int = 0) -> Dict:
        """
        Create a custom scenario.

        Args:
            name: Scenario name
            spot_change: Underlying price change (as decimal, e.g., 0.05 for 5%)
            days_pass: Number of days passing

        Returns:
            Scenario parameters dictionary
        """
        description = f'Custom: {spot_change:+.1%} spot'
        if days_pass:
            description += f', {days_pass} days'

        return {
            'name': name,
            'spot_change': spot_change,
            'days_pass': days_pass,
            'description': description
        }
