"""
Business value (Layer 3).

Each value method has its own mechanics:

  Cost displacement:    human cost deflected, less residual review cost, per unit
  Revenue uplift:       conversion-point uplift × order value × margin, per unit
  Retention:            saved customers × monthly customer value (monthly-first)
  Premium monetization: subscriber margin × subscribers (monthly-first)

The success factor is folded in exactly once, inside each method. The two
monthly-first methods back-compute a per-unit figure by dividing by usage
volume; that population differs from the customers/subscribers driving the
value, so the per-unit figure is informational only.
"""

from __future__ import annotations

from dataclasses import dataclass

from core.config import DEFAULT_ENGINE_CONFIG, EngineConfig
from core.schema import (
    CostDisplacementParams,
    PremiumMonetizationParams,
    RetentionParams,
    RevenueUpliftParams,
    ValueParams,
)


@dataclass(frozen=True)
class ValueOutcome:
    gross_value_per_unit: float
    total_monthly_value: float


def cost_displacement_value(
    params: CostDisplacementParams,
    *,
    effective_volume: float,
    success_factor: float,
    value_multiplier: float,
) -> ValueOutcome:
    deflect = min(100, params.deflection_rate * value_multiplier) / 100
    residual = params.residual_human_review_rate / 100
    savings = params.baseline_human_cost_per_unit * deflect
    review_cost = params.residual_review_cost_per_unit * residual
    per_unit = (savings - review_cost) * success_factor
    return ValueOutcome(per_unit, per_unit * effective_volume)


def revenue_uplift_value(
    params: RevenueUpliftParams,
    *,
    effective_volume: float,
    success_factor: float,
    value_multiplier: float,
) -> ValueOutcome:
    old_conv = params.baseline_conversion_rate / 100
    # uplift is in percentage points: add before dividing by 100
    uplift_points = params.conversion_uplift_absolute * value_multiplier
    new_conv = min(100, params.baseline_conversion_rate + uplift_points) / 100
    delta_conv = new_conv - old_conv
    per_unit = params.average_order_value * delta_conv * (params.gross_margin / 100) * success_factor
    return ValueOutcome(per_unit, per_unit * effective_volume)


def retention_value(
    params: RetentionParams,
    *,
    effective_volume: float,
    success_factor: float,
    value_multiplier: float,
    min_volume_divisor: float = DEFAULT_ENGINE_CONFIG.min_volume_divisor,
    months_per_year: int = DEFAULT_ENGINE_CONFIG.months_per_year,
) -> ValueOutcome:
    churn_reduction = params.churn_reduction_absolute * value_multiplier / 100
    saved_customers = params.customers_impacted_per_month * churn_reduction * success_factor
    monthly = saved_customers * (params.annual_value_per_customer / months_per_year)
    return ValueOutcome(monthly / max(effective_volume, min_volume_divisor), monthly)


def premium_monetization_value(
    params: PremiumMonetizationParams,
    *,
    effective_volume: float,
    success_factor: float,
    value_multiplier: float,
    min_volume_divisor: float = DEFAULT_ENGINE_CONFIG.min_volume_divisor,
) -> ValueOutcome:
    margin_per_subscriber = params.price_per_subscriber_per_month - params.non_ai_cogs_per_subscriber
    monthly = margin_per_subscriber * params.subscribers * value_multiplier * success_factor
    return ValueOutcome(monthly / max(effective_volume, min_volume_divisor), monthly)


def compute_value(
    params: ValueParams,
    *,
    effective_volume: float,
    success_factor: float,
    value_multiplier: float,
    config: EngineConfig = DEFAULT_ENGINE_CONFIG,
) -> ValueOutcome:
    """Dispatch to the value method matching the parameter block."""
    common = dict(
        effective_volume=effective_volume,
        success_factor=success_factor,
        value_multiplier=value_multiplier,
    )
    if isinstance(params, CostDisplacementParams):
        return cost_displacement_value(params, **common)
    if isinstance(params, RevenueUpliftParams):
        return revenue_uplift_value(params, **common)
    if isinstance(params, RetentionParams):
        return retention_value(
            params,
            min_volume_divisor=config.min_volume_divisor,
            months_per_year=config.months_per_year,
            **common,
        )
    if isinstance(params, PremiumMonetizationParams):
        return premium_monetization_value(params, min_volume_divisor=config.min_volume_divisor, **common)
    raise TypeError(f"Unsupported value parameters: {type(params).__name__}")
