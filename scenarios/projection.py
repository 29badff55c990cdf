"""
Chart-ready series built from engine results.

The cumulative-profit curve starts at minus the one-time fixed cost and adds
(value − variable cost) each month. The variable cost is layer2_monthly_cost,
not total_monthly_cost: the fixed cost is already the month-0 offset, and
adding its amortized share per month would count it twice.
"""

from __future__ import annotations

import math
from typing import Optional, Union

import numpy as np
import pandas as pd
from dateutil.relativedelta import relativedelta

from core.schema import CalculationResults, UseCaseInputs


def project_cumulative_profit(
    inputs: UseCaseInputs,
    results: CalculationResults,
    horizon_months: Optional[int] = None,
    *,
    start: Optional[Union[str, pd.Timestamp]] = None,
) -> pd.DataFrame:
    """
    Cumulative profit for months 0..horizon.

    Parameters
    ----------
    horizon_months : int, optional
        Defaults to inputs.analysis_horizon_months.
    start : date-like, optional
        If given, adds a ``date`` column: start plus ``month`` calendar months.

    Returns
    -------
    DataFrame with columns: month, [date], cumulative_profit
    """
    horizon = inputs.analysis_horizon_months if horizon_months is None else horizon_months
    horizon = int(horizon)
    if horizon < 0:
        raise ValueError(f"horizon_months must be >= 0 (got {horizon}).")

    months = np.arange(horizon + 1)
    monthly_contribution = results.total_monthly_value - results.layer2_monthly_cost
    profit = -inputs.total_fixed_one_time + monthly_contribution * months.astype(float)

    df = pd.DataFrame({"month": months, "cumulative_profit": profit})
    if start is not None:
        base = pd.Timestamp(start)
        df.insert(1, "date", [base + relativedelta(months=int(m)) for m in months])
    return df


def break_even_month_marker(results: CalculationResults) -> Optional[int]:
    """First whole month at or after break-even, for a chart marker."""
    if results.break_even_months is None or results.break_even_months == 0:
        return None
    return math.ceil(results.break_even_months)


def cost_value_series(results: CalculationResults) -> pd.DataFrame:
    return pd.DataFrame([
        {"name": "Cost", "value": results.total_monthly_cost},
        {"name": "Value", "value": results.total_monthly_value},
    ])


def cost_breakdown_series(results: CalculationResults) -> pd.DataFrame:
    """Monthly cost split: model (L1), harness and overhead (L2 − L1), amortized fixed."""
    return pd.DataFrame([
        {"name": "Model (L1)", "value": results.layer1_monthly_cost},
        {"name": "Harness (L2)", "value": results.layer2_monthly_cost - results.layer1_monthly_cost},
        {"name": "Fixed (Amort)", "value": results.monthly_amortized_fixed_cost},
    ])
