"""Educational scenario engine."""
from .scenario_templates import ScenarioTemplates
from .scenario_runner import ScenarioRunner

__all__ = ['ScenarioTemplates', 'ScenarioRunner']
