"""
Input preparation: defaults, presets, loading, and range validation.
"""

from .loader import inputs_from_dict, inputs_to_dict, load_inputs_json
from .presets import (
    DEFAULT_INPUTS,
    DEFAULT_MODEL_PARAMS,
    DEFAULT_VALUE_PARAMS,
    PRESETS,
    apply_preset,
    get_preset,
    load_preset,
)
from .validators import ValidationResult, clamp_inputs, validate_inputs

__all__ = [
    "inputs_from_dict",
    "inputs_to_dict",
    "load_inputs_json",
    "DEFAULT_INPUTS",
    "DEFAULT_MODEL_PARAMS",
    "DEFAULT_VALUE_PARAMS",
    "PRESETS",
    "apply_preset",
    "get_preset",
    "load_preset",
    "ValidationResult",
    "clamp_inputs",
    "validate_inputs",
]
