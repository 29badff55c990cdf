from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone

import pandas as pd
import pytest

from core.schema import CostDisplacementParams, PaybackKind, Scenario, ValueMethod
from data_prep import DEFAULT_INPUTS, DEFAULT_VALUE_PARAMS
from engine import calculate
from scenarios import (
    break_even_month_marker,
    compare_scenarios,
    cost_breakdown_series,
    cost_value_series,
    percent_delta,
    project_cumulative_profit,
)
from scenarios.comparison import NO_BASELINE, MetricSpec

DISPLACEMENT_INPUTS = replace(DEFAULT_INPUTS, value=DEFAULT_VALUE_PARAMS[ValueMethod.COST_DISPLACEMENT])


def _scenario(name, inputs):
    return Scenario(
        id=f"scenario-{name}",
        name=name,
        inputs=inputs,
        results=calculate(inputs),
        created_at=datetime(2025, 1, 1, tzinfo=timezone.utc),
        color="hsl(0, 70%, 50%)",
    )


class TestPercentDelta:
    def test_basic(self):
        assert percent_delta(200, 250) == pytest.approx(25.0)
        assert percent_delta(-100, -50) == pytest.approx(-50.0)

    def test_zero_base_is_undefined(self):
        assert percent_delta(0, 10) is None
        assert percent_delta(0, 0) is None

    def test_missing_side(self):
        assert percent_delta(None, 1) is None
        assert percent_delta(1, None) is None


class TestCompareScenarios:
    def test_self_comparison_has_zero_deltas(self):
        s = _scenario("base", DISPLACEMENT_INPUTS)
        comparison = compare_scenarios([s, s])
        for metric in comparison.metrics:
            assert metric.deltas == [pytest.approx(0.0)], metric.key

    @pytest.mark.parametrize("method", list(ValueMethod), ids=lambda m: m.value)
    def test_self_comparison_every_value_method(self, method):
        s = _scenario("base", replace(DEFAULT_INPUTS, value=DEFAULT_VALUE_PARAMS[method]))
        comparison = compare_scenarios([s, s])
        for metric in comparison.metrics:
            assert metric.deltas == [pytest.approx(0.0)], metric.key

    @pytest.mark.parametrize("integration_cost, deflection_rate, kind", [
        (0, 40, PaybackKind.IMMEDIATE),
        (5000, 1, PaybackKind.NO_PAYBACK),
    ])
    def test_self_comparison_with_payback_sentinel(self, plain_inputs, integration_cost, deflection_rate, kind):
        inputs = replace(
            plain_inputs,
            integration_cost=integration_cost,
            value=CostDisplacementParams(5.0, deflection_rate, 10, 2.5),
        )
        a, b = _scenario("a", inputs), _scenario("b", inputs)
        assert a.results.payback.kind is kind

        comparison = compare_scenarios([a, b])
        assert comparison.delta("payback_months", 1) == 0.0
        for metric in comparison.metrics:
            assert metric.deltas == [pytest.approx(0.0)], metric.key
        row = comparison.to_dataframe().set_index("Metric").loc["Payback (Mo)"]
        assert row["b Δ%"] == "+0.0%"

    def test_mixed_payback_sentinels_have_no_delta(self, plain_inputs):
        immediate = _scenario("a", plain_inputs)
        no_payback = _scenario("b", replace(
            plain_inputs,
            integration_cost=5000,
            value=CostDisplacementParams(5.0, 0, 10, 2.5),
        ))
        comparison = compare_scenarios([immediate, no_payback])
        assert comparison.delta("payback_months", 1) is None

    def test_zero_baseline_still_undefined_on_self_comparison(self, plain_inputs):
        s = _scenario("base", plain_inputs)
        spec = MetricSpec("fixed", "Fixed Cost", lambda x: x.results.total_fixed_cost, str)
        comparison = compare_scenarios([s, s], metrics=[spec])
        assert comparison.delta("fixed", 1) is None

    def test_deltas_against_first(self):
        base = _scenario("base", DISPLACEMENT_INPUTS)
        bigger = _scenario("bigger", replace(DISPLACEMENT_INPUTS, monthly_volume=150_000))
        comparison = compare_scenarios([base, bigger])
        assert comparison.baseline is base
        assert comparison.delta("monthly_volume", 1) == pytest.approx(50.0)
        expected = percent_delta(base.results.total_monthly_value, bigger.results.total_monthly_value)
        assert comparison.delta("total_monthly_value", 1) == pytest.approx(expected)

    def test_immediate_payback_has_no_baseline(self):
        no_fixed = replace(DISPLACEMENT_INPUTS, integration_cost=0, training_tuning_cost=0, change_management_cost=0)
        comparison = compare_scenarios([_scenario("a", no_fixed), _scenario("b", DISPLACEMENT_INPUTS)])
        assert comparison.delta("payback_months", 1) is None

        df = comparison.to_dataframe()
        row = df[df["Metric"] == "Payback (Mo)"].iloc[0]
        assert row["a"] == "Immediate"
        assert row["b Δ%"] == NO_BASELINE

    def test_deflection_only_for_cost_displacement(self):
        comparison = compare_scenarios([
            _scenario("a", DEFAULT_INPUTS),
            _scenario("b", DISPLACEMENT_INPUTS),
        ])
        metric = comparison.metric("deflection_rate")
        assert metric.values == [None, 40]
        assert metric.deltas == [None]

    def test_dataframe_layout(self):
        a = _scenario("a", DISPLACEMENT_INPUTS)
        b = _scenario("b", replace(DISPLACEMENT_INPUTS, success_rate=50))
        c = _scenario("c", replace(DISPLACEMENT_INPUTS, monthly_volume=50_000))
        df = compare_scenarios([a, b, c]).to_dataframe()
        assert list(df.columns) == ["Metric", "a", "b", "b Δ%", "c", "c Δ%"]
        assert len(df) == 9
        row = df[df["Metric"] == "Success Rate"].iloc[0]
        assert row["b"] == "50%"
        assert row["b Δ%"] == "-50.0%"

    def test_chart_data_in_thousands(self):
        a = _scenario("a", DISPLACEMENT_INPUTS)
        b = _scenario("b", DEFAULT_INPUTS)
        chart = compare_scenarios([a, b]).chart_data()
        assert list(chart["name"]) == ["a", "b"]
        assert chart.loc[0, "Value"] == pytest.approx(a.results.total_monthly_value / 1000)
        assert chart.loc[1, "ROI"] == pytest.approx(b.results.roi_percentage)

    def test_requires_two(self):
        with pytest.raises(ValueError):
            compare_scenarios([_scenario("a", DEFAULT_INPUTS)])

    def test_unknown_metric(self):
        s = _scenario("a", DEFAULT_INPUTS)
        with pytest.raises(KeyError):
            compare_scenarios([s, s]).metric("nope")


class TestProjection:
    def test_cumulative_profit_curve(self, plain_inputs):
        inputs = replace(plain_inputs, integration_cost=12000, analysis_horizon_months=6)
        results = calculate(inputs)
        curve = project_cumulative_profit(inputs, results)

        assert list(curve["month"]) == list(range(7))
        assert curve.loc[0, "cumulative_profit"] == pytest.approx(-12000)
        step = results.total_monthly_value - results.layer2_monthly_cost
        assert curve.loc[3, "cumulative_profit"] == pytest.approx(-12000 + 3 * step)

    def test_fixed_cost_not_double_counted(self, plain_inputs):
        inputs = replace(plain_inputs, integration_cost=12000)
        results = calculate(inputs)
        curve = project_cumulative_profit(inputs, results, 1)
        # one month adds value − variable cost, not value − total cost
        assert curve.loc[1, "cumulative_profit"] - curve.loc[0, "cumulative_profit"] == pytest.approx(
            results.total_monthly_value - results.layer2_monthly_cost
        )
        assert results.total_monthly_cost > results.layer2_monthly_cost

    def test_dated_curve(self, plain_inputs):
        curve = project_cumulative_profit(plain_inputs, calculate(plain_inputs), 2, start="2025-01-31")
        assert list(curve.columns) == ["month", "date", "cumulative_profit"]
        assert curve.loc[1, "date"] == pd.Timestamp("2025-02-28")
        assert curve.loc[2, "date"] == pd.Timestamp("2025-03-31")

    def test_negative_horizon(self, plain_inputs):
        with pytest.raises(ValueError):
            project_cumulative_profit(plain_inputs, calculate(plain_inputs), -1)

    def test_break_even_marker(self, plain_inputs):
        results = calculate(replace(plain_inputs, integration_cost=40000))
        assert break_even_month_marker(results) == 3
        assert break_even_month_marker(calculate(plain_inputs)) is None

    def test_cost_series(self, plain_inputs):
        inputs = replace(plain_inputs, integration_cost=12000, orchestration_cost_per_unit=0.01)
        results = calculate(inputs)
        breakdown = cost_breakdown_series(results)
        assert list(breakdown["name"]) == ["Model (L1)", "Harness (L2)", "Fixed (Amort)"]
        assert breakdown["value"].sum() == pytest.approx(results.total_monthly_cost)

        totals = cost_value_series(results).set_index("name")["value"]
        assert totals["Cost"] == pytest.approx(results.total_monthly_cost)
        assert totals["Value"] == pytest.approx(results.total_monthly_value)
