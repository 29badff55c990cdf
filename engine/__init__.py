"""
Cost/value engine: layered unit economics and ROI metrics.
"""

from .calculator import calculate, payback_period, break_even_volume, break_even_months
from .cost import ModelCost, model_cost, blend_model_costs
from .value import ValueOutcome, compute_value

__all__ = [
    "calculate",
    "payback_period",
    "break_even_volume",
    "break_even_months",
    "ModelCost",
    "model_cost",
    "blend_model_costs",
    "ValueOutcome",
    "compute_value",
]
