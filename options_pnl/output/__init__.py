"""Report formatting and export."""
from .formatters import format_currency, format_profit_loss
from .report_generator import ReportGenerator

__all__ = ['format_currency', 'format_profit_loss', 'ReportGenerator']
