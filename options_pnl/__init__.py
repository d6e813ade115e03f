"""Options contract profit/loss tracking, risk scoring and portfolio aggregation."""

__version__ = '0.1.0'
