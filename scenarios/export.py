"""
Serialization of runs and scenario lists, and the human-readable summary.

Scenario lists travel as an ordered JSON array of Scenario records. Imports
are validated in full before anything is applied: a payload that is not a
list, or any record that fails validation, rejects the whole import.
"""

from __future__ import annotations

import json
from datetime import date
from typing import Any, Dict, List, Optional, Sequence, Union

from pydantic import TypeAdapter, ValidationError

from core.schema import CalculationResults, Scenario, UseCaseInputs
from core.utils import format_money, format_number, money_decimals, slugify
from data_prep.loader import inputs_to_dict, results_to_dict

SCENARIOS_ADAPTER = TypeAdapter(List[Scenario])


class ScenarioImportError(ValueError):
    """Raised when a scenario payload cannot be imported."""


def export_run(inputs: UseCaseInputs, results: CalculationResults) -> Dict[str, Any]:
    return {"inputs": inputs_to_dict(inputs), "results": results_to_dict(results)}


def run_to_json(inputs: UseCaseInputs, results: CalculationResults, *, indent: int = 2) -> str:
    return json.dumps(export_run(inputs, results), indent=indent)


def run_export_filename(inputs: UseCaseInputs) -> str:
    return f"roi-calculator-{slugify(inputs.use_case_name)}.json"


def scenarios_export_filename(day: Optional[date] = None) -> str:
    day = day or date.today()
    return f"ai-roi-scenarios-{day.isoformat()}.json"


def scenarios_to_records(scenarios: Sequence[Scenario]) -> List[Dict[str, Any]]:
    return SCENARIOS_ADAPTER.dump_python(list(scenarios), mode="json")


def scenarios_to_json(scenarios: Sequence[Scenario], *, indent: int = 2) -> str:
    return json.dumps(scenarios_to_records(scenarios), indent=indent)


def scenarios_from_json(payload: Union[str, bytes, Sequence[Any]]) -> List[Scenario]:
    """
    Parse an exported scenario list (JSON text or already-decoded records).
    Raises ScenarioImportError; never returns a partial list.
    """
    if isinstance(payload, (str, bytes, bytearray)):
        try:
            payload = json.loads(payload)
        except json.JSONDecodeError as exc:
            raise ScenarioImportError(f"Scenario payload is not valid JSON: {exc}") from exc

    if not isinstance(payload, (list, tuple)):
        raise ScenarioImportError(
            f"Invalid scenario file format: expected a list of scenarios, "
            f"got {type(payload).__name__}."
        )

    try:
        return SCENARIOS_ADAPTER.validate_python(list(payload))
    except ValidationError as exc:
        raise ScenarioImportError(
            f"Invalid scenario record(s): {exc.error_count()} validation error(s).\n{exc}"
        ) from exc


def summary_markdown(inputs: UseCaseInputs, results: CalculationResults) -> str:
    """Short markdown summary of one run, suitable for pasting."""
    payback = str(results.payback)
    if results.payback.is_months:
        payback = f"{payback} months"
    secondary_share = 100 - inputs.routing_simple_percent
    cost_per_unit = results.total_cost_per_unit
    value_per_unit = results.gross_value_per_unit

    lines = [
        f"# AI ROI Analysis: {inputs.use_case_name}",
        "",
        "## Summary",
        f"- **Monthly Net Benefit**: {format_money(results.net_monthly_benefit, 0)}",
        f"- **ROI**: {results.roi_percentage:.1f}%",
        f"- **Payback Period**: {payback}",
        f"- **Cost per Unit**: {format_money(cost_per_unit, money_decimals(cost_per_unit))}",
        f"- **Value per Unit**: {format_money(value_per_unit, money_decimals(value_per_unit))}",
        "",
        "## Inputs",
        f"- Volume: {format_number(inputs.monthly_volume)} {inputs.unit_name}s/mo",
        f"- Success Rate: {inputs.success_rate:g}%",
        f"- Model: Simple/Complex split {inputs.routing_simple_percent:g}% / {secondary_share:g}%",
    ]
    return "\n".join(lines)
