"""
Input validation and clamping, applied before inputs reach the engine.

The engine does not re-validate: it will happily compute nonsense from a
deflection rate of 140%. This is the edge where ranges are enforced:
- validate_inputs reports errors (out of range) and warnings (suspicious)
- clamp_inputs pulls every ranged field back into its domain
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Dict, List, Tuple

from core.schema import (
    CostDisplacementParams,
    ModelParams,
    PremiumMonetizationParams,
    RetentionParams,
    RevenueUpliftParams,
    UseCaseInputs,
)
from core.utils import clamp

PERCENT_FIELDS: Tuple[str, ...] = (
    "success_rate",
    "routing_simple_percent",
    "cache_hit_rate",
    "cached_token_discount",
)

NON_NEGATIVE_FIELDS: Tuple[str, ...] = (
    "monthly_volume",
    "analysis_horizon_months",
    "integration_cost",
    "training_tuning_cost",
    "change_management_cost",
    "amortization_months",
    "orchestration_cost_per_unit",
    "retrieval_cost_per_unit",
    "tool_api_cost_per_unit",
    "logging_monitoring_cost_per_unit",
    "safety_guardrails_cost_per_unit",
    "network_egress_cost_per_unit",
    "storage_cost_per_unit",
    "overhead_multiplier",
)

MODEL_FIELDS: Tuple[str, ...] = (
    "input_tokens_per_unit",
    "output_tokens_per_unit",
    "price_per_1m_input_tokens",
    "price_per_1m_output_tokens",
    "cost_per_call",
)

# Ranged value-method fields: name -> percent (True) or non-negative (False)
VALUE_FIELD_RANGES: Dict[type, Dict[str, bool]] = {
    CostDisplacementParams: {
        "baseline_human_cost_per_unit": False,
        "deflection_rate": True,
        "residual_human_review_rate": True,
        "residual_review_cost_per_unit": False,
    },
    RevenueUpliftParams: {
        "baseline_conversion_rate": True,
        "conversion_uplift_absolute": False,
        "average_order_value": False,
        "gross_margin": True,
    },
    RetentionParams: {
        "baseline_churn_rate": True,
        "churn_reduction_absolute": False,
        "annual_value_per_customer": False,
        "customers_impacted_per_month": False,
    },
    PremiumMonetizationParams: {
        "price_per_subscriber_per_month": False,
        "subscribers": False,
        "non_ai_cogs_per_subscriber": False,
    },
}


@dataclass
class ValidationResult:
    """Collects all validation warnings/errors for an input set."""
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    def summary(self) -> str:
        lines = []
        if self.errors:
            lines.append(f"ERRORS ({len(self.errors)}):")
            for e in self.errors:
                lines.append(f"  ✗ {e}")
        if self.warnings:
            lines.append(f"WARNINGS ({len(self.warnings)}):")
            for w in self.warnings:
                lines.append(f"  ⚠ {w}")
        if not lines:
            lines.append("✓ All checks passed.")
        return "\n".join(lines)


def _check_percent(result: ValidationResult, label: str, value: float) -> None:
    if not 0 <= value <= 100:
        result.errors.append(f"{label} must be within [0, 100] (got {value}).")


def _check_non_negative(result: ValidationResult, label: str, value: float) -> None:
    if value < 0:
        result.errors.append(f"{label} must not be negative (got {value}).")


def validate_inputs(inputs: UseCaseInputs) -> ValidationResult:
    """
    Range-check an input set.
    Returns a ValidationResult with errors (blocking) and warnings (informational).
    """
    result = ValidationResult()

    for name in PERCENT_FIELDS:
        _check_percent(result, name, getattr(inputs, name))
    for name in NON_NEGATIVE_FIELDS:
        _check_non_negative(result, name, getattr(inputs, name))

    if not 0 <= inputs.retry_rate <= 1:
        result.errors.append(
            f"retry_rate is a 0-1 fraction (got {inputs.retry_rate}); "
            f"check if it was entered as a percentage."
        )

    for model_name in ("primary_model", "secondary_model"):
        model: ModelParams = getattr(inputs, model_name)
        for name in MODEL_FIELDS:
            _check_non_negative(result, f"{model_name}.{name}", getattr(model, name))

    for name, is_percent in VALUE_FIELD_RANGES[type(inputs.value)].items():
        label = f"value.{name}"
        if is_percent:
            _check_percent(result, label, getattr(inputs.value, name))
        else:
            _check_non_negative(result, label, getattr(inputs.value, name))

    # --- warnings ---
    if inputs.overhead_multiplier < 1:
        result.warnings.append(
            f"overhead_multiplier below 1.0 ({inputs.overhead_multiplier}) discounts costs."
        )
    if not inputs.amortization_months:
        result.warnings.append("amortization_months is 0; fixed costs amortize over 12 months.")
    if inputs.monthly_volume == 0:
        result.warnings.append(
            "monthly_volume is 0; per-unit figures divide by 1 unit and equal monthly totals."
        )
    if isinstance(inputs.value, PremiumMonetizationParams):
        if inputs.value.non_ai_cogs_per_subscriber > inputs.value.price_per_subscriber_per_month:
            result.warnings.append("Subscriber COGS exceed subscription price; value is negative.")

    return result


def _clamp_fields(obj, ranges: Dict[str, bool]):
    changes = {}
    for name, is_percent in ranges.items():
        value = getattr(obj, name)
        changes[name] = clamp(value, 0, 100) if is_percent else max(value, 0)
    return replace(obj, **changes)


def clamp_inputs(inputs: UseCaseInputs) -> UseCaseInputs:
    """Return inputs with every ranged field pulled back into its domain."""
    ranges = {name: True for name in PERCENT_FIELDS}
    ranges.update({name: False for name in NON_NEGATIVE_FIELDS})
    clamped = _clamp_fields(inputs, ranges)

    model_ranges = {name: False for name in MODEL_FIELDS}
    return replace(
        clamped,
        retry_rate=clamp(inputs.retry_rate, 0, 1),
        primary_model=_clamp_fields(inputs.primary_model, model_ranges),
        secondary_model=_clamp_fields(inputs.secondary_model, model_ranges),
        value=_clamp_fields(inputs.value, VALUE_FIELD_RANGES[type(inputs.value)]),
    )
