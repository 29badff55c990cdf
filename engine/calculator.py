"""
ROI calculator as a pure function of (inputs, modifiers).

Flow:
  1. Effective volume and success rate after sensitivity modifiers
  2. Layer 1 model cost (routing blend, cache discount on input only)
  3. Layer 2 cost: (Layer 1 × (1 + retry) + harness) × overhead
  4. Fixed costs amortized monthly
  5. Business value for the selected method
  6. Net benefit, ROI %, payback, break-even volume/months

Total over its domain: every branch yields a number, ``None`` for an
undefined break-even, or a payback sentinel. Nothing is cached; callers
re-run it whenever any input or modifier changes.
"""

from __future__ import annotations

from typing import Optional

from core.config import DEFAULT_ENGINE_CONFIG, EngineConfig
from core.schema import CalculationResults, Payback, SensitivityModifiers, UseCaseInputs
from core.utils import clamp, round_half_up

from .cost import (
    harness_cost_per_unit,
    layer1_cost_per_unit,
    layer2_cost_per_unit,
    monthly_amortized_fixed_cost,
)
from .value import compute_value


def payback_period(
    total_fixed_one_time: float,
    net_monthly_benefit: float,
    *,
    decimals: int = DEFAULT_ENGINE_CONFIG.payback_decimals,
) -> Payback:
    if total_fixed_one_time == 0:
        return Payback.immediate()
    if net_monthly_benefit <= 0:
        return Payback.no_payback()
    return Payback.after(round_half_up(total_fixed_one_time / net_monthly_benefit, decimals))


def break_even_volume(
    monthly_fixed_cost: float,
    value_per_unit: float,
    variable_cost_per_unit: float,
) -> Optional[float]:
    """
    Volume at which monthly value covers variable cost plus amortized fixed cost.

    None when the unit margin is non-positive: no volume breaks even.
    """
    margin = value_per_unit - variable_cost_per_unit
    if margin <= 0:
        return None
    return monthly_fixed_cost / margin


def break_even_months(
    total_fixed_one_time: float,
    total_monthly_value: float,
    variable_monthly_cost: float,
) -> Optional[float]:
    """
    Month at which cumulative profit (value − variable cost, less the up-front
    fixed outlay) crosses zero. None when the monthly contribution is non-positive.
    """
    contribution = total_monthly_value - variable_monthly_cost
    if contribution <= 0:
        return None
    return total_fixed_one_time / contribution


def calculate(
    inputs: UseCaseInputs,
    modifiers: Optional[SensitivityModifiers] = None,
    *,
    config: EngineConfig = DEFAULT_ENGINE_CONFIG,
) -> CalculationResults:
    """
    Compute unit economics and ROI metrics for one use case.

    Parameters
    ----------
    inputs : UseCaseInputs
        Fully populated, already range-checked assumption set.
    modifiers : SensitivityModifiers, optional
        Sensitivity overlay; defaults to all-ones.
    config : EngineConfig
        Policy constants (amortization default, volume divisor floor, ...).
    """
    if modifiers is None:
        modifiers = SensitivityModifiers()

    effective_volume = inputs.monthly_volume * modifiers.volume_multiplier
    effective_success_rate = clamp(inputs.success_rate * modifiers.success_rate_multiplier, 0, 100)

    # --- costs ---
    layer1 = layer1_cost_per_unit(inputs, modifiers, config=config)
    harness = harness_cost_per_unit(inputs, modifiers)
    layer2 = layer2_cost_per_unit(layer1, harness, inputs.retry_rate, inputs.overhead_multiplier)

    total_fixed = inputs.total_fixed_one_time
    monthly_fixed = monthly_amortized_fixed_cost(inputs, config=config)

    layer1_monthly = layer1 * effective_volume
    layer2_monthly = layer2 * effective_volume
    total_monthly_cost = layer2_monthly + monthly_fixed
    total_cost_per_unit = total_monthly_cost / max(effective_volume, config.min_volume_divisor)

    # --- value ---
    outcome = compute_value(
        inputs.value,
        effective_volume=effective_volume,
        success_factor=effective_success_rate / 100,
        value_multiplier=modifiers.value_multiplier,
        config=config,
    )
    total_monthly_value = outcome.total_monthly_value

    # --- ROI ---
    net_monthly_benefit = total_monthly_value - total_monthly_cost
    roi = net_monthly_benefit / total_monthly_cost * 100 if total_monthly_cost > 0 else 0.0

    return CalculationResults(
        effective_monthly_volume=effective_volume,
        layer1_cost_per_unit=layer1,
        layer1_monthly_cost=layer1_monthly,
        harness_cost_per_unit=harness,
        layer2_cost_per_unit=layer2,
        layer2_monthly_cost=layer2_monthly,
        monthly_amortized_fixed_cost=monthly_fixed,
        total_fixed_cost=total_fixed,
        total_monthly_cost=total_monthly_cost,
        total_cost_per_unit=total_cost_per_unit,
        gross_value_per_unit=outcome.gross_value_per_unit,
        net_value_per_unit=outcome.gross_value_per_unit,
        total_monthly_value=total_monthly_value,
        net_monthly_benefit=net_monthly_benefit,
        annualized_net_benefit=net_monthly_benefit * config.months_per_year,
        roi_percentage=roi,
        payback=payback_period(total_fixed, net_monthly_benefit, decimals=config.payback_decimals),
        break_even_volume=break_even_volume(monthly_fixed, outcome.gross_value_per_unit, layer2),
        break_even_months=break_even_months(total_fixed, total_monthly_value, layer2_monthly),
    )
