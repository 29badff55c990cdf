"""
Saved snapshots, comparison deltas, projections, and export.
"""

from .comparison import ScenarioComparison, compare_scenarios, percent_delta
from .export import (
    ScenarioImportError,
    export_run,
    scenarios_from_json,
    scenarios_to_json,
    summary_markdown,
)
from .projection import (
    break_even_month_marker,
    cost_breakdown_series,
    cost_value_series,
    project_cumulative_profit,
)
from .repository import ScenarioRepository, scenario_color
from .storage import InMemoryScenarioStore, JsonFileScenarioStore, ScenarioStore

__all__ = [
    "ScenarioComparison",
    "compare_scenarios",
    "percent_delta",
    "ScenarioImportError",
    "export_run",
    "scenarios_from_json",
    "scenarios_to_json",
    "summary_markdown",
    "break_even_month_marker",
    "cost_breakdown_series",
    "cost_value_series",
    "project_cumulative_profit",
    "ScenarioRepository",
    "scenario_color",
    "InMemoryScenarioStore",
    "JsonFileScenarioStore",
    "ScenarioStore",
]
