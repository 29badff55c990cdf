"""
Domain records for the ROI model.

Inputs, modifiers and results are frozen dataclasses: a calculation never
mutates what it is handed, and every result is recomputed from scratch.
The value-method parameter block is a tagged union: each variant carries
only the parameters its method uses, plus a literal ``method`` tag.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Literal, Optional, Union


class ValueMethod(str, Enum):
    COST_DISPLACEMENT = "cost_displacement"
    REVENUE_UPLIFT = "revenue_uplift"
    RETENTION = "retention"
    PREMIUM_MONETIZATION = "premium_monetization"

    @property
    def label(self) -> str:
        return VALUE_METHOD_LABELS[self]


VALUE_METHOD_LABELS = {
    ValueMethod.COST_DISPLACEMENT: "Cost Displacement",
    ValueMethod.REVENUE_UPLIFT: "Revenue Uplift",
    ValueMethod.RETENTION: "Retention Uplift",
    ValueMethod.PREMIUM_MONETIZATION: "Premium Monetization",
}


@dataclass(frozen=True)
class ModelParams:
    """Pricing for one inference backend (per unit of work)."""

    input_tokens_per_unit: float
    output_tokens_per_unit: float
    price_per_1m_input_tokens: float
    price_per_1m_output_tokens: float
    cost_per_call: float  # flat alternative to token pricing
    use_call_pricing: bool


# ---------------------------------------------------------------------------
# Value-method parameter blocks
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class CostDisplacementParams:
    baseline_human_cost_per_unit: float
    deflection_rate: float  # 0-100
    residual_human_review_rate: float  # 0-100
    residual_review_cost_per_unit: float
    method: Literal["cost_displacement"] = "cost_displacement"


@dataclass(frozen=True)
class RevenueUpliftParams:
    baseline_conversion_rate: float  # 0-100
    conversion_uplift_absolute: float  # percentage points
    average_order_value: float
    gross_margin: float  # 0-100
    method: Literal["revenue_uplift"] = "revenue_uplift"


@dataclass(frozen=True)
class RetentionParams:
    baseline_churn_rate: float  # 0-100, informational
    churn_reduction_absolute: float  # percentage points
    annual_value_per_customer: float
    customers_impacted_per_month: float
    method: Literal["retention"] = "retention"


@dataclass(frozen=True)
class PremiumMonetizationParams:
    price_per_subscriber_per_month: float
    subscribers: float
    non_ai_cogs_per_subscriber: float
    method: Literal["premium_monetization"] = "premium_monetization"


ValueParams = Union[
    CostDisplacementParams,
    RevenueUpliftParams,
    RetentionParams,
    PremiumMonetizationParams,
]


@dataclass(frozen=True)
class UseCaseInputs:
    """
    Complete assumption set for one AI use case.

    Rates are percentages in [0, 100] except ``retry_rate``, which is a
    0-1 fraction. Range enforcement belongs to the input layer
    (see data_prep.validators); the engine takes these as given.
    """

    # general
    use_case_name: str
    unit_name: str
    monthly_volume: float
    success_rate: float
    analysis_horizon_months: int

    # one-time fixed costs
    integration_cost: float
    training_tuning_cost: float
    change_management_cost: float
    amortization_months: int

    # layer 1: model inference
    primary_model: ModelParams
    secondary_model: ModelParams
    routing_simple_percent: float  # share routed to the primary model
    cache_hit_rate: float
    cached_token_discount: float

    # layer 2: harness, per unit
    orchestration_cost_per_unit: float
    retrieval_cost_per_unit: float
    tool_api_cost_per_unit: float
    logging_monitoring_cost_per_unit: float
    safety_guardrails_cost_per_unit: float
    network_egress_cost_per_unit: float
    storage_cost_per_unit: float

    retry_rate: float
    overhead_multiplier: float

    # layer 3: business value
    value: ValueParams

    @property
    def value_method(self) -> ValueMethod:
        return ValueMethod(self.value.method)

    @property
    def total_fixed_one_time(self) -> float:
        return self.integration_cost + self.training_tuning_cost + self.change_management_cost


@dataclass(frozen=True)
class SensitivityModifiers:
    volume_multiplier: float = 1.0
    success_rate_multiplier: float = 1.0
    cost_multiplier: float = 1.0
    value_multiplier: float = 1.0


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------
class PaybackKind(str, Enum):
    IMMEDIATE = "immediate"
    NO_PAYBACK = "no_payback"
    MONTHS = "months"


@dataclass(frozen=True)
class Payback:
    """Payback period: Immediate, No Payback, or a month count."""

    kind: PaybackKind
    months: Optional[float] = None

    @classmethod
    def immediate(cls) -> "Payback":
        return cls(PaybackKind.IMMEDIATE)

    @classmethod
    def no_payback(cls) -> "Payback":
        return cls(PaybackKind.NO_PAYBACK)

    @classmethod
    def after(cls, months: float) -> "Payback":
        return cls(PaybackKind.MONTHS, months)

    @property
    def is_months(self) -> bool:
        return self.kind is PaybackKind.MONTHS

    def __str__(self) -> str:
        if self.kind is PaybackKind.IMMEDIATE:
            return "Immediate"
        if self.kind is PaybackKind.NO_PAYBACK:
            return "No Payback"
        return f"{self.months:.1f}"


@dataclass(frozen=True)
class CalculationResults:
    effective_monthly_volume: float

    # layer 1
    layer1_cost_per_unit: float
    layer1_monthly_cost: float

    # layer 2
    harness_cost_per_unit: float
    layer2_cost_per_unit: float
    layer2_monthly_cost: float

    # fixed
    monthly_amortized_fixed_cost: float
    total_fixed_cost: float

    # totals
    total_monthly_cost: float
    total_cost_per_unit: float

    # value
    gross_value_per_unit: float
    net_value_per_unit: float
    total_monthly_value: float

    # ROI
    net_monthly_benefit: float
    annualized_net_benefit: float
    roi_percentage: float
    payback: Payback

    break_even_volume: Optional[float] = None
    break_even_months: Optional[float] = None


@dataclass(frozen=True)
class Scenario:
    """Named snapshot of one (inputs, results) pair."""

    id: str
    name: str
    inputs: UseCaseInputs
    results: CalculationResults
    created_at: datetime
    color: str
    description: Optional[str] = None
