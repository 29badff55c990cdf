from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timedelta, timezone

import pytest

from core.schema import CostDisplacementParams, ModelParams
from data_prep.presets import DEFAULT_INPUTS

PRIMARY = ModelParams(
    input_tokens_per_unit=1000,
    output_tokens_per_unit=500,
    price_per_1m_input_tokens=0.15,
    price_per_1m_output_tokens=0.60,
    cost_per_call=0.005,
    use_call_pricing=False,
)

SECONDARY = ModelParams(
    input_tokens_per_unit=2000,
    output_tokens_per_unit=1000,
    price_per_1m_input_tokens=2.50,
    price_per_1m_output_tokens=10.00,
    cost_per_call=0.02,
    use_call_pricing=False,
)


@pytest.fixture
def plain_inputs():
    """10k units/month, primary model only, no cache/retry/overhead/harness/fixed costs."""
    return replace(
        DEFAULT_INPUTS,
        monthly_volume=10000,
        success_rate=100,
        primary_model=PRIMARY,
        secondary_model=SECONDARY,
        routing_simple_percent=100,
        cache_hit_rate=0,
        cached_token_discount=0,
        orchestration_cost_per_unit=0,
        retrieval_cost_per_unit=0,
        tool_api_cost_per_unit=0,
        logging_monitoring_cost_per_unit=0,
        safety_guardrails_cost_per_unit=0,
        network_egress_cost_per_unit=0,
        storage_cost_per_unit=0,
        retry_rate=0,
        overhead_multiplier=1,
        integration_cost=0,
        training_tuning_cost=0,
        change_management_cost=0,
        amortization_months=12,
        value=CostDisplacementParams(
            baseline_human_cost_per_unit=5.0,
            deflection_rate=40,
            residual_human_review_rate=10,
            residual_review_cost_per_unit=2.5,
        ),
    )


@pytest.fixture
def fixed_clock():
    """Deterministic clock advancing one minute per call."""
    state = {"now": datetime(2025, 3, 1, 9, 0, tzinfo=timezone.utc)}

    def _clock():
        current = state["now"]
        state["now"] = current + timedelta(minutes=1)
        return current

    return _clock
