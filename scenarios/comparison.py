"""
Side-by-side scenario comparison.

The first scenario is the baseline. For every tracked metric, each other
scenario gets a percentage delta against it:

    delta = (current − base) / base × 100

A baseline of exactly 0 has no meaningful delta, so the delta is None
("no baseline") rather than ±inf. Payback deltas are percentages only when both
sides are month counts. Two undefined values of the same kind (both
Immediate, or a metric that applies to neither side) compare as equal and
get delta 0; a defined value against an undefined one gets None.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Hashable, List, Optional, Sequence

import pandas as pd

from core.schema import CostDisplacementParams, Scenario
from core.utils import format_money, format_number, format_pct, money_decimals

NO_BASELINE = "no baseline"


def percent_delta(base: Optional[float], current: Optional[float]) -> Optional[float]:
    if base is None or current is None or base == 0:
        return None
    return (current - base) / base * 100


@dataclass(frozen=True)
class MetricSpec:
    key: str
    label: str
    value: Callable[[Scenario], Optional[float]]
    display: Callable[[Scenario], str]
    # undefined values of the same kind compare as equal (delta 0)
    kind: Callable[[Scenario], Hashable] = lambda s: None


def _metric_delta(
    spec: MetricSpec,
    baseline: Scenario,
    base: Optional[float],
    scenario: Scenario,
    current: Optional[float],
) -> Optional[float]:
    if base is None and current is None:
        return 0.0 if spec.kind(baseline) == spec.kind(scenario) else None
    return percent_delta(base, current)


def _payback_months(s: Scenario) -> Optional[float]:
    return s.results.payback.months if s.results.payback.is_months else None


def _deflection_rate(s: Scenario) -> Optional[float]:
    if isinstance(s.inputs.value, CostDisplacementParams):
        return s.inputs.value.deflection_rate
    return None


def _money(getter: Callable[[Scenario], float]) -> Callable[[Scenario], str]:
    return lambda s: format_money(getter(s), 0)


def _unit_money(getter: Callable[[Scenario], float]) -> Callable[[Scenario], str]:
    return lambda s: format_money(getter(s), money_decimals(getter(s)))


RESULT_METRICS: List[MetricSpec] = [
    MetricSpec(
        "roi_percentage", "ROI %",
        lambda s: s.results.roi_percentage,
        lambda s: format_pct(s.results.roi_percentage),
    ),
    MetricSpec(
        "net_monthly_benefit", "Monthly Benefit",
        lambda s: s.results.net_monthly_benefit,
        _money(lambda s: s.results.net_monthly_benefit),
    ),
    MetricSpec(
        "total_monthly_cost", "Total Cost/Mo",
        lambda s: s.results.total_monthly_cost,
        _money(lambda s: s.results.total_monthly_cost),
    ),
    MetricSpec(
        "total_monthly_value", "Total Value/Mo",
        lambda s: s.results.total_monthly_value,
        _money(lambda s: s.results.total_monthly_value),
    ),
    MetricSpec(
        "total_cost_per_unit", "Cost per Unit",
        lambda s: s.results.total_cost_per_unit,
        _unit_money(lambda s: s.results.total_cost_per_unit),
    ),
    MetricSpec(
        "payback_months", "Payback (Mo)",
        _payback_months,
        lambda s: str(s.results.payback),
        kind=lambda s: s.results.payback.kind,
    ),
]

INPUT_METRICS: List[MetricSpec] = [
    MetricSpec(
        "monthly_volume", "Monthly Volume",
        lambda s: s.inputs.monthly_volume,
        lambda s: format_number(s.inputs.monthly_volume),
    ),
    MetricSpec(
        "success_rate", "Success Rate",
        lambda s: s.inputs.success_rate,
        lambda s: f"{s.inputs.success_rate:g}%",
    ),
    MetricSpec(
        "deflection_rate", "Deflection Rate",
        _deflection_rate,
        lambda s: "—" if _deflection_rate(s) is None else f"{_deflection_rate(s):g}%",
    ),
]


@dataclass(frozen=True)
class MetricComparison:
    """One metric across scenarios; ``deltas`` align with scenarios[1:]."""
    key: str
    label: str
    values: List[Optional[float]]
    display: List[str]
    deltas: List[Optional[float]]


@dataclass
class ScenarioComparison:
    scenarios: List[Scenario]
    metrics: List[MetricComparison] = field(default_factory=list)

    @property
    def baseline(self) -> Scenario:
        return self.scenarios[0]

    def metric(self, key: str) -> MetricComparison:
        for m in self.metrics:
            if m.key == key:
                return m
        raise KeyError(f"Unknown metric '{key}'. Available: {[m.key for m in self.metrics]}")

    def delta(self, key: str, position: int) -> Optional[float]:
        """Delta of scenarios[position] (position >= 1) against the baseline."""
        if position < 1:
            raise ValueError("The baseline has no delta against itself; use position >= 1.")
        return self.metric(key).deltas[position - 1]

    def to_dataframe(self) -> pd.DataFrame:
        """One row per metric: baseline value, then each scenario's value and delta."""
        columns = ["Metric", self.baseline.name]
        for s in self.scenarios[1:]:
            columns += [s.name, f"{s.name} Δ%"]

        rows = []
        for m in self.metrics:
            row = [m.label, m.display[0]]
            for shown, delta in zip(m.display[1:], m.deltas):
                row += [shown, NO_BASELINE if delta is None else f"{delta:+.1f}%"]
            rows.append(row)
        return pd.DataFrame(rows, columns=columns)

    def chart_data(self) -> pd.DataFrame:
        """ROI and money figures per scenario, money in thousands."""
        return pd.DataFrame([
            {
                "name": s.name,
                "color": s.color,
                "ROI": s.results.roi_percentage,
                "Net Benefit": s.results.net_monthly_benefit / 1000,
                "Cost": s.results.total_monthly_cost / 1000,
                "Value": s.results.total_monthly_value / 1000,
            }
            for s in self.scenarios
        ])


def compare_scenarios(
    scenarios: Sequence[Scenario],
    *,
    metrics: Optional[Sequence[MetricSpec]] = None,
) -> ScenarioComparison:
    """
    Compare scenarios against the first one.

    Parameters
    ----------
    scenarios : sequence of Scenario
        At least two; the first is the baseline.
    metrics : sequence of MetricSpec, optional
        Defaults to RESULT_METRICS followed by INPUT_METRICS.
    """
    if len(scenarios) < 2:
        raise ValueError("Select at least 2 scenarios to compare.")
    specs = list(metrics) if metrics is not None else RESULT_METRICS + INPUT_METRICS
    scenarios = list(scenarios)

    compared = []
    for spec in specs:
        values = [spec.value(s) for s in scenarios]
        base = values[0]
        compared.append(MetricComparison(
            key=spec.key,
            label=spec.label,
            values=values,
            display=[spec.display(s) for s in scenarios],
            deltas=[
                _metric_delta(spec, scenarios[0], base, s, v)
                for s, v in zip(scenarios[1:], values[1:])
            ],
        ))
    return ScenarioComparison(scenarios=scenarios, metrics=compared)
