"""
Risk alert system for monitoring tracked contracts.
"""
import logging
from datetime import datetime
from typing import Dict, List, Optional

from .risk_metrics import RiskLevel, RiskMetrics
from ..contracts.contract import Contract, ContractStatus
from ..utils.clock import Clock, days_to_expiration

logger = logging.getLogger(__name__)

SEVERITIES = ['CRITICAL', 'HIGH', 'MEDIUM', 'LOW']


class RiskAlert:
    """Represents a risk alert."""

    def __init__(self, alert_type: str, severity: str, message: str, details: Dict = None):
        """
        Initialize risk alert.

        Args:
            alert_type: Type of alert
            severity: Severity level (LOW, MEDIUM, HIGH, CRITICAL)
            message: Alert message
            details: Additional details
        """
        self.alert_type = alert_type
        self.severity = severity
        self.message = message
        self.details = details or {}
        self.timestamp = datetime.now()

    def __repr__(self):
        return f"[{self.severity}] {self.alert_type}: {self.message}"


class RiskAlertSystem:
    """Monitor contracts and symbol groups and generate risk alerts."""

    def __init__(self, config: Dict):
        """
        Initialize risk alert system.

        Args:
            config: Configuration dictionary with an ``alerts`` section
        """
        self.config = config
        self.alerts: List[RiskAlert] = []

    def _alert_setting(self, key: str, default):
        return self.config.get('alerts', {}).get(key, default)

    def check_all_risks(self, contracts: List[Contract], groups: List,
                        today: Optional[Clock] = None) -> List[RiskAlert]:
        """
        Check all risk conditions and generate alerts.

        Args:
            contracts: Tracked contracts; finished ones are ignored
            groups: PortfolioGroup list from the aggregator
            today: Reference date (default: current date)

        Returns:
            List of RiskAlert objects
        """
        self.alerts = []
        active = [c for c in contracts if c.status == ContractStatus.ACTIVE]

        self._check_expirations(active, today)
        self._check_risk_scores(active, today)
        self._check_group_risk(groups)

        return self.alerts

    def _check_expirations(self, contracts: List[Contract], today: Optional[Clock]):
        """Flag contracts expiring soon or already past expiration."""
        expiring_days = self._alert_setting('expiring_days', 7)

        for contract in contracts:
            dte = days_to_expiration(contract.expiration_date, today)
            label = contract.symbol or 'Unknown'

            if dte < 0:
                alert = RiskAlert(
                    alert_type='PAST_EXPIRATION',
                    severity='HIGH',
                    message=f"{label} {contract.option_type.value} {contract.strike_price:g} "
                            f"expired {-dte} days ago and is still open",
                    details={
                        'id': contract.id,
                        'symbol': label,
                        'expiration_date': contract.expiration_date,
                        'days_to_expiration': dte
                    }
                )
                self.alerts.append(alert)
                logger.warning(alert)

            elif dte <= expiring_days:
                alert = RiskAlert(
                    alert_type='EXPIRING_SOON',
                    severity='HIGH' if dte <= 1 else 'MEDIUM',
                    message=f"{label} {contract.option_type.value} {contract.strike_price:g} "
                            f"expires in {dte} days",
                    details={
                        'id': contract.id,
                        'symbol': label,
                        'expiration_date': contract.expiration_date,
                        'days_to_expiration': dte
                    }
                )
                self.alerts.append(alert)
                logger.info(alert)

    def _check_risk_scores(self, contracts: List[Contract], today: Optional[Clock]):
        """Flag contracts with high time decay or low chance of profit."""
        threshold = self._alert_setting('risk_score_threshold', 0.8)

        for contract in contracts:
            risk = RiskMetrics.calculate_risk(contract, today)
            label = contract.symbol or 'Unknown'

            if risk.time_decay >= threshold:
                self.alerts.append(RiskAlert(
                    alert_type='TIME_DECAY',
                    severity='MEDIUM',
                    message=f"{label} {contract.option_type.value} {contract.strike_price:g} "
                            f"time decay risk {risk.time_decay:.2f}",
                    details={'id': contract.id, 'symbol': label, 'score': risk.time_decay}
                ))

            if risk.delta >= threshold:
                self.alerts.append(RiskAlert(
                    alert_type='LOW_CHANCE_OF_PROFIT',
                    severity='LOW',
                    message=f"{label} {contract.option_type.value} {contract.strike_price:g} "
                            f"has {contract.chance_of_profit:.0f}% chance of profit",
                    details={'id': contract.id, 'symbol': label, 'score': risk.delta}
                ))

    def _check_group_risk(self, groups: List):
        """Flag symbol groups rated high risk."""
        for group in groups:
            if group.risk_level == RiskLevel.HIGH:
                alert = RiskAlert(
                    alert_type='HIGH_RISK_GROUP',
                    severity='HIGH',
                    message=f"{group.symbol} group is high risk "
                            f"({group.total_positions} contracts, ${group.total_value:,.0f})",
                    details={
                        'symbol': group.symbol,
                        'total_value': group.total_value,
                        'total_positions': group.total_positions
                    }
                )
                self.alerts.append(alert)
                logger.warning(alert)

    def get_alerts_by_severity(self, severity: str) -> List[RiskAlert]:
        """
        Get alerts filtered by severity.

        Args:
            severity: Severity level to filter

        Returns:
            List of alerts matching severity
        """
        return [alert for alert in self.alerts if alert.severity == severity]

    def format_alert_summary(self) -> str:
        """
        Format alert summary for display.

        Returns:
            Formatted string with alert summary
        """
        if not self.alerts:
            return "No alerts"

        summary = [f"Total Alerts: {len(self.alerts)}"]

        severity_counts = {}
        for alert in self.alerts:
            severity_counts[alert.severity] = severity_counts.get(alert.severity, 0) + 1

        for severity in SEVERITIES:
            count = severity_counts.get(severity, 0)
            if count > 0:
                summary.append(f"  {severity}: {count}")

        important = [a for a in self.alerts if a.severity in ['CRITICAL', 'HIGH']]
        if important:
            summary.append("\nImportant Alerts:")
            for alert in important:
                summary.append(f"  - {alert}")

        return "\n".join(summary)

    def log_alerts(self, log_file: str = None):
        """
        Append alerts to a file.

        Args:
            log_file: Path to log file (optional)
        """
        if log_file:
            try:
                with open(log_file, 'a') as f:
                    f.write(f"\n=== Alert Log: {datetime.now()} ===\n")
                    for alert in self.alerts:
                        f.write(f"{alert}\n")
                        f.write(f"  Details: {alert.details}\n")
                    f.write("\n")
            except OSError as e:
                logger.error(f"Error writing to alert log: {e}")

    def clear_alerts(self):
        """Clear all alerts."""
        self.alerts = []
