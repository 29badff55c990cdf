"""
Default inputs and named use-case presets.

A preset is a partial set of input fields. Applying one merges its fields
over the current inputs; fields it does not name keep their current values.
"""

from __future__ import annotations

import copy
from dataclasses import asdict, is_dataclass
from typing import Any, Dict, Mapping

from core.schema import (
    CostDisplacementParams,
    ModelParams,
    PremiumMonetizationParams,
    RetentionParams,
    RevenueUpliftParams,
    UseCaseInputs,
    ValueMethod,
    ValueParams,
)

from .loader import inputs_from_dict

DEFAULT_MODEL_PARAMS = ModelParams(
    input_tokens_per_unit=1000,
    output_tokens_per_unit=500,
    price_per_1m_input_tokens=0.15,
    price_per_1m_output_tokens=0.60,
    cost_per_call=0.005,
    use_call_pricing=False,
)

DEFAULT_VALUE_PARAMS: Dict[ValueMethod, ValueParams] = {
    ValueMethod.COST_DISPLACEMENT: CostDisplacementParams(
        baseline_human_cost_per_unit=5.00,
        deflection_rate=40,
        residual_human_review_rate=10,
        residual_review_cost_per_unit=2.50,
    ),
    ValueMethod.REVENUE_UPLIFT: RevenueUpliftParams(
        baseline_conversion_rate=3.0,
        conversion_uplift_absolute=0.2,
        average_order_value=85,
        gross_margin=45,
    ),
    ValueMethod.RETENTION: RetentionParams(
        baseline_churn_rate=1.0,
        churn_reduction_absolute=0.1,
        annual_value_per_customer=1200,
        customers_impacted_per_month=1000,
    ),
    ValueMethod.PREMIUM_MONETIZATION: PremiumMonetizationParams(
        price_per_subscriber_per_month=20,
        subscribers=500,
        non_ai_cogs_per_subscriber=2,
    ),
}

DEFAULT_INPUTS = UseCaseInputs(
    use_case_name="E-commerce Recommendations",
    unit_name="Order",
    monthly_volume=100_000,
    success_rate=100,
    analysis_horizon_months=12,
    integration_cost=30_000,
    training_tuning_cost=12_000,
    change_management_cost=8_000,
    amortization_months=12,
    primary_model=ModelParams(**{
        **asdict(DEFAULT_MODEL_PARAMS),
        "input_tokens_per_unit": 1200,
        "output_tokens_per_unit": 300,
    }),
    secondary_model=ModelParams(**{
        **asdict(DEFAULT_MODEL_PARAMS),
        "price_per_1m_input_tokens": 2.5,
        "price_per_1m_output_tokens": 10,
    }),
    routing_simple_percent=100,
    cache_hit_rate=10,
    cached_token_discount=90,
    orchestration_cost_per_unit=0.003,
    retrieval_cost_per_unit=0.004,
    tool_api_cost_per_unit=0.0005,
    logging_monitoring_cost_per_unit=0.001,
    safety_guardrails_cost_per_unit=0.0008,
    network_egress_cost_per_unit=0.0003,
    storage_cost_per_unit=0.0002,
    retry_rate=0.1,
    overhead_multiplier=1.0,
    value=DEFAULT_VALUE_PARAMS[ValueMethod.REVENUE_UPLIFT],
)


def _model(**overrides: float) -> Dict[str, Any]:
    return {**asdict(DEFAULT_MODEL_PARAMS), **overrides}


PRESETS: Dict[str, Dict[str, Any]] = {
    "support": {
        "use_case_name": "Customer Support Bot",
        "unit_name": "ticket",
        "monthly_volume": 5000,
        "success_rate": 90,
        # SMB rollout: knowledge base setup, guardrail tuning, agent enablement
        "integration_cost": 6000,
        "training_tuning_cost": 2500,
        "change_management_cost": 1500,
        "value": {
            "method": "cost_displacement",
            "baseline_human_cost_per_unit": 1.00,
            "deflection_rate": 35,
            "residual_human_review_rate": 5,
            "residual_review_cost_per_unit": 0.20,
        },
        "retry_rate": 0.1,
        "primary_model": _model(
            input_tokens_per_unit=800,
            output_tokens_per_unit=300,
            price_per_1m_input_tokens=0.15,
            price_per_1m_output_tokens=0.60,
        ),
        "orchestration_cost_per_unit": 0.002,
        "retrieval_cost_per_unit": 0.0015,
        "tool_api_cost_per_unit": 0.0003,
        "logging_monitoring_cost_per_unit": 0.0008,
        "safety_guardrails_cost_per_unit": 0.0005,
        "network_egress_cost_per_unit": 0.0002,
        "storage_cost_per_unit": 0.0002,
    },
    "invoice": {
        "use_case_name": "Invoice Processing",
        "unit_name": "invoice",
        "monthly_volume": 10000,
        "success_rate": 98,
        # ~$4/hour specialist at ~10 invoices/hour; review is a partial pass
        "value": {
            "method": "cost_displacement",
            "baseline_human_cost_per_unit": 0.40,
            "deflection_rate": 90,
            "residual_human_review_rate": 15,
            "residual_review_cost_per_unit": 0.20,
        },
        "integration_cost": 15000,
        "training_tuning_cost": 6000,
        "change_management_cost": 4000,
        "primary_model": _model(
            input_tokens_per_unit=2500,
            output_tokens_per_unit=350,
            price_per_1m_input_tokens=5.00,
            price_per_1m_output_tokens=15.00,
        ),
        "orchestration_cost_per_unit": 0.004,
        "retrieval_cost_per_unit": 0.003,
        "tool_api_cost_per_unit": 0.0015,
        "logging_monitoring_cost_per_unit": 0.001,
        "safety_guardrails_cost_per_unit": 0.0007,
        "network_egress_cost_per_unit": 0.0002,
        "storage_cost_per_unit": 0.0005,
    },
    "recommendation": {
        "use_case_name": "E-commerce Recommendations",
        "unit_name": "Order",
        "monthly_volume": 100000,
        "success_rate": 100,
        "value": {
            "method": "revenue_uplift",
            "baseline_conversion_rate": 3.0,
            "conversion_uplift_absolute": 0.2,
            "average_order_value": 85,
            "gross_margin": 45,
        },
        "integration_cost": 30000,
        "training_tuning_cost": 12000,
        "change_management_cost": 8000,
        "primary_model": _model(
            input_tokens_per_unit=1200,
            output_tokens_per_unit=300,
            price_per_1m_input_tokens=0.15,
            price_per_1m_output_tokens=0.60,
        ),
        "orchestration_cost_per_unit": 0.003,
        "retrieval_cost_per_unit": 0.004,
        "tool_api_cost_per_unit": 0.0005,
        "logging_monitoring_cost_per_unit": 0.001,
        "safety_guardrails_cost_per_unit": 0.0008,
        "network_egress_cost_per_unit": 0.0003,
        "storage_cost_per_unit": 0.0002,
    },
    "retention": {
        "use_case_name": "Customer Retention AI",
        "unit_name": "customer",
        "monthly_volume": 10000,
        "success_rate": 85,
        "integration_cost": 20000,
        "training_tuning_cost": 9000,
        "change_management_cost": 6000,
        "value": {
            "method": "retention",
            "baseline_churn_rate": 2.5,
            "churn_reduction_absolute": 0.5,
            "annual_value_per_customer": 1200,
            "customers_impacted_per_month": 10000,
        },
        "primary_model": _model(
            input_tokens_per_unit=1200,
            output_tokens_per_unit=400,
            price_per_1m_input_tokens=0.15,
            price_per_1m_output_tokens=0.60,
        ),
        "orchestration_cost_per_unit": 0.003,
        "retrieval_cost_per_unit": 0.004,
        "tool_api_cost_per_unit": 0.001,
        "logging_monitoring_cost_per_unit": 0.0012,
        "safety_guardrails_cost_per_unit": 0.001,
        "network_egress_cost_per_unit": 0.0003,
        "storage_cost_per_unit": 0.0004,
    },
    "premium": {
        "use_case_name": "AI Premium Features",
        "unit_name": "subscriber",
        "monthly_volume": 5000,
        "success_rate": 100,
        "integration_cost": 35000,
        "training_tuning_cost": 15000,
        "change_management_cost": 10000,
        "value": {
            "method": "premium_monetization",
            "price_per_subscriber_per_month": 15,
            "subscribers": 5000,
            "non_ai_cogs_per_subscriber": 3,
        },
        "primary_model": _model(
            input_tokens_per_unit=2000,
            output_tokens_per_unit=800,
            price_per_1m_input_tokens=0.50,
            price_per_1m_output_tokens=1.50,
        ),
        "orchestration_cost_per_unit": 0.006,
        "retrieval_cost_per_unit": 0.008,
        "tool_api_cost_per_unit": 0.0025,
        "logging_monitoring_cost_per_unit": 0.0022,
        "safety_guardrails_cost_per_unit": 0.0015,
        "network_egress_cost_per_unit": 0.0005,
        "storage_cost_per_unit": 0.0008,
    },
}


def get_preset(name: str) -> Dict[str, Any]:
    """Return a copy of a named preset."""
    if name not in PRESETS:
        raise KeyError(
            f"Unknown preset '{name}'. "
            f"Available: {list(PRESETS.keys())}"
        )
    return copy.deepcopy(PRESETS[name])


def _as_mapping(value: Any) -> Any:
    if is_dataclass(value) and not isinstance(value, type):
        return asdict(value)
    return value


def _merge_value(current: ValueParams, override: Any) -> Dict[str, Any]:
    override = _as_mapping(override)
    if not isinstance(override, Mapping):
        raise ValueError("Preset field 'value' must be a mapping of value-method parameters.")
    method = ValueMethod(override.get("method", current.method))
    # switching methods starts from that method's defaults
    base = current if current.method == method.value else DEFAULT_VALUE_PARAMS[method]
    return {**asdict(base), **override, "method": method.value}


def apply_preset(inputs: UseCaseInputs, preset: Mapping[str, Any]) -> UseCaseInputs:
    """
    Merge preset fields over ``inputs`` and return the new inputs.

    Nested blocks (models, value parameters) merge field by field.
    Unknown field names raise ValueError; ill-typed values raise
    pydantic.ValidationError.
    """
    current = asdict(inputs)
    merged = dict(current)
    for key, override in preset.items():
        if key not in current:
            raise ValueError(f"Unknown input field in preset: {key!r}")
        if key == "value":
            merged[key] = _merge_value(inputs.value, override)
            continue
        override = _as_mapping(override)
        if isinstance(current[key], dict) and isinstance(override, Mapping):
            unknown = sorted(set(override) - set(current[key]))
            if unknown:
                raise ValueError(f"Unknown fields for {key!r} in preset: {unknown}")
            merged[key] = {**current[key], **override}
        else:
            merged[key] = override
    return inputs_from_dict(merged)


def load_preset(name: str, base: UseCaseInputs = DEFAULT_INPUTS) -> UseCaseInputs:
    return apply_preset(base, get_preset(name))
