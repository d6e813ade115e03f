"""Scenario templates for portfolio analysis."""
from .scenario_templates import ScenarioTemplates

__all__ = ['ScenarioTemplates']
