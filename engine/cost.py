"""
Layered cost model.

  Layer 1: model inference, token (or per-call) pricing, routed between a
           primary and a secondary model, with cache savings on input cost.
  Layer 2: harness, seven per-unit operational costs, plus a retry
           surcharge on Layer 1 only and an overhead multiplier on the sum.
  Fixed:   one-time costs amortized over a number of months.
"""

from __future__ import annotations

from dataclasses import dataclass

from core.config import DEFAULT_ENGINE_CONFIG, EngineConfig
from core.schema import ModelParams, SensitivityModifiers, UseCaseInputs


@dataclass(frozen=True)
class ModelCost:
    """Per-unit cost of one model, split into input and output components."""

    input_cost: float
    output_cost: float

    @property
    def total(self) -> float:
        return self.input_cost + self.output_cost


def model_cost(
    params: ModelParams,
    cost_multiplier: float = 1.0,
    *,
    config: EngineConfig = DEFAULT_ENGINE_CONFIG,
) -> ModelCost:
    """
    Per-unit cost for one model.

    A flat per-call price has no token breakdown; it is carried entirely in
    the output component so that cache savings (input-only) never touch it.
    """
    if params.use_call_pricing:
        return ModelCost(input_cost=0.0, output_cost=params.cost_per_call * cost_multiplier)

    scale = config.tokens_per_price_unit
    input_cost = params.input_tokens_per_unit / scale * params.price_per_1m_input_tokens
    output_cost = params.output_tokens_per_unit / scale * params.price_per_1m_output_tokens
    return ModelCost(
        input_cost=input_cost * cost_multiplier,
        output_cost=output_cost * cost_multiplier,
    )


def blend_model_costs(primary: ModelCost, secondary: ModelCost, routing_simple_percent: float) -> ModelCost:
    """Linear blend of both components by routing share."""
    primary_share = routing_simple_percent / 100
    secondary_share = 1 - primary_share
    return ModelCost(
        input_cost=primary.input_cost * primary_share + secondary.input_cost * secondary_share,
        output_cost=primary.output_cost * primary_share + secondary.output_cost * secondary_share,
    )


def cache_savings_factor(cache_hit_rate: float, cached_token_discount: float) -> float:
    return (cache_hit_rate / 100) * (cached_token_discount / 100)


def layer1_cost_per_unit(
    inputs: UseCaseInputs,
    modifiers: SensitivityModifiers,
    *,
    config: EngineConfig = DEFAULT_ENGINE_CONFIG,
) -> float:
    primary = model_cost(inputs.primary_model, modifiers.cost_multiplier, config=config)
    secondary = model_cost(inputs.secondary_model, modifiers.cost_multiplier, config=config)
    blended = blend_model_costs(primary, secondary, inputs.routing_simple_percent)

    savings = cache_savings_factor(inputs.cache_hit_rate, inputs.cached_token_discount)
    return blended.input_cost * (1 - savings) + blended.output_cost


def harness_cost_per_unit(inputs: UseCaseInputs, modifiers: SensitivityModifiers) -> float:
    harness_sum = (
        inputs.orchestration_cost_per_unit
        + inputs.retrieval_cost_per_unit
        + inputs.tool_api_cost_per_unit
        + inputs.logging_monitoring_cost_per_unit
        + inputs.safety_guardrails_cost_per_unit
        + inputs.network_egress_cost_per_unit
        + inputs.storage_cost_per_unit
    )
    return harness_sum * modifiers.cost_multiplier


def layer2_cost_per_unit(layer1: float, harness: float, retry_rate: float, overhead_multiplier: float) -> float:
    # retries re-invoke the model only; harness costs are not re-run
    layer1_with_retries = layer1 * (1 + retry_rate)
    return (layer1_with_retries + harness) * overhead_multiplier


def monthly_amortized_fixed_cost(
    inputs: UseCaseInputs,
    *,
    config: EngineConfig = DEFAULT_ENGINE_CONFIG,
) -> float:
    months = inputs.amortization_months or config.default_amortization_months
    return inputs.total_fixed_one_time / months
