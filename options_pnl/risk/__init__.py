"""Risk metrics and alert system."""
from .risk_metrics import RiskBreakdown, RiskLevel, RiskMetrics
from .risk_alerts import RiskAlertSystem, RiskAlert

__all__ = ['RiskBreakdown', 'RiskLevel', 'RiskMetrics', 'RiskAlertSystem', 'RiskAlert']
