from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Mapping, Union

from pydantic import TypeAdapter

from core.schema import CalculationResults, UseCaseInputs

INPUTS_ADAPTER = TypeAdapter(UseCaseInputs)
RESULTS_ADAPTER = TypeAdapter(CalculationResults)


def inputs_from_dict(data: Mapping[str, Any]) -> UseCaseInputs:
    """
    Build a complete UseCaseInputs from a JSON-shaped mapping.
    Every field must be present; raises pydantic.ValidationError otherwise.
    """
    return INPUTS_ADAPTER.validate_python(data)


def inputs_to_dict(inputs: UseCaseInputs) -> Dict[str, Any]:
    return INPUTS_ADAPTER.dump_python(inputs, mode="json")


def results_to_dict(results: CalculationResults) -> Dict[str, Any]:
    return RESULTS_ADAPTER.dump_python(results, mode="json")


def load_inputs_json(path: Union[str, Path]) -> UseCaseInputs:
    """
    Load inputs from a JSON file. Accepts either a bare inputs object or a
    run export (``{"inputs": ..., "results": ...}``).
    """
    with open(path, "r", encoding="utf-8") as fh:
        data = json.load(fh)
    if isinstance(data, dict) and "inputs" in data and "results" in data:
        data = data["inputs"]
    return inputs_from_dict(data)
