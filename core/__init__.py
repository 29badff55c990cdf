"""
Domain records, policy configuration, and shared utilities.
No business logic lives here.
"""

from .schema import (
    ValueMethod,
    ModelParams,
    CostDisplacementParams,
    RevenueUpliftParams,
    RetentionParams,
    PremiumMonetizationParams,
    ValueParams,
    UseCaseInputs,
    SensitivityModifiers,
    PaybackKind,
    Payback,
    CalculationResults,
    Scenario,
)
from .config import EngineConfig, DEFAULT_ENGINE_CONFIG
from .utils import clamp, format_money, format_pct, format_number

__all__ = [
    "ValueMethod",
    "ModelParams",
    "CostDisplacementParams",
    "RevenueUpliftParams",
    "RetentionParams",
    "PremiumMonetizationParams",
    "ValueParams",
    "UseCaseInputs",
    "SensitivityModifiers",
    "PaybackKind",
    "Payback",
    "CalculationResults",
    "Scenario",
    "EngineConfig",
    "DEFAULT_ENGINE_CONFIG",
    "clamp",
    "format_money",
    "format_pct",
    "format_number",
]
