"""
Engine configuration and named policy constants.

The division-by-zero guards are approximations: a zero or unset
amortization period is treated as 12 months, and per-unit figures divide by
at least one unit of volume. At zero volume this makes
``total_cost_per_unit`` equal to the monthly amortized fixed cost.
"""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_AMORTIZATION_MONTHS = 12
MIN_VOLUME_DIVISOR = 1
TOKENS_PER_PRICE_UNIT = 1_000_000
MONTHS_PER_YEAR = 12
PAYBACK_DECIMALS = 1

# Hue step between consecutive scenario colors.
GOLDEN_ANGLE_DEGREES = 137.5


@dataclass(frozen=True)
class EngineConfig:
    default_amortization_months: int = DEFAULT_AMORTIZATION_MONTHS
    min_volume_divisor: float = MIN_VOLUME_DIVISOR
    tokens_per_price_unit: int = TOKENS_PER_PRICE_UNIT
    months_per_year: int = MONTHS_PER_YEAR
    payback_decimals: int = PAYBACK_DECIMALS


DEFAULT_ENGINE_CONFIG = EngineConfig()
