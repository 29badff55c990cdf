"""Scenario repository, persistence port, import/export."""
from __future__ import annotations

import json
from dataclasses import replace
from datetime import date, datetime, timezone

import pytest

from data_prep import DEFAULT_INPUTS, load_preset
from engine import calculate
from scenarios import (
    InMemoryScenarioStore,
    JsonFileScenarioStore,
    ScenarioImportError,
    ScenarioRepository,
    export_run,
    scenario_color,
    scenarios_from_json,
    summary_markdown,
)
from scenarios.export import run_export_filename, scenarios_export_filename


@pytest.fixture
def repo(fixed_clock):
    return ScenarioRepository(InMemoryScenarioStore(), clock=fixed_clock)


def _save(repo, name, inputs=DEFAULT_INPUTS, **kwargs):
    return repo.save(name, inputs, calculate(inputs), **kwargs)


class TestScenarioColor:
    def test_golden_angle_rotation(self):
        assert scenario_color(0) == "hsl(0, 70%, 50%)"
        assert scenario_color(1) == "hsl(137.5, 70%, 50%)"
        assert scenario_color(2) == "hsl(275, 70%, 50%)"
        assert scenario_color(3) == "hsl(52.5, 70%, 50%)"


class TestRepository:
    def test_save_snapshot(self, repo):
        inputs = load_preset("support")
        results = calculate(inputs)
        scenario = repo.save("Baseline", inputs, results, description="current plan")

        assert scenario.id.startswith("scenario-")
        assert scenario.name == "Baseline"
        assert scenario.description == "current plan"
        assert scenario.inputs == inputs and scenario.inputs is not inputs
        assert scenario.results == results and scenario.results is not results
        assert scenario.created_at == datetime(2025, 3, 1, 9, 0, tzinfo=timezone.utc)
        assert scenario.color == "hsl(0, 70%, 50%)"
        assert repo.scenarios == [scenario]

    def test_ids_unique_and_colors_rotate(self, repo):
        a = _save(repo, "A")
        b = _save(repo, "B")
        assert a.id != b.id
        assert b.color == "hsl(137.5, 70%, 50%)"

    def test_blank_name_rejected(self, repo):
        with pytest.raises(ValueError):
            _save(repo, "   ")
        assert len(repo) == 0

    def test_load_returns_inputs(self, repo):
        scenario = _save(repo, "A", load_preset("invoice"))
        assert repo.load(scenario.id) == load_preset("invoice")

    def test_delete_evicts_from_selection(self, repo):
        a, b, c = _save(repo, "A"), _save(repo, "B"), _save(repo, "C")
        repo.select([a.id, b.id, c.id])
        repo.delete(b.id)
        assert [s.name for s in repo.scenarios] == ["A", "C"]
        assert repo.selected_ids == [a.id, c.id]

    def test_unknown_id(self, repo):
        with pytest.raises(KeyError):
            repo.get("scenario-missing")
        with pytest.raises(KeyError):
            repo.delete("scenario-missing")
        with pytest.raises(KeyError):
            repo.select(["scenario-missing"])

    def test_compare_uses_selection(self, repo):
        a = _save(repo, "A")
        b = _save(repo, "B", replace(DEFAULT_INPUTS, monthly_volume=200_000))
        repo.select([b.id, a.id])
        comparison = repo.compare()
        assert comparison.baseline.id == b.id
        assert comparison.delta("monthly_volume", 1) == pytest.approx(-50.0)

    def test_compare_requires_two(self, repo):
        a = _save(repo, "A")
        with pytest.raises(ValueError):
            repo.compare([a.id])


class TestPersistence:
    def test_writes_through_to_store(self, fixed_clock):
        store = InMemoryScenarioStore()
        repo = ScenarioRepository(store, clock=fixed_clock)
        a = _save(repo, "A")
        assert store.load() == [a]
        repo.delete(a.id)
        assert store.load() == []

    def test_json_file_store_round_trip(self, tmp_path, fixed_clock):
        path = tmp_path / "state" / "scenarios.json"
        repo = ScenarioRepository(JsonFileScenarioStore(path), clock=fixed_clock)
        a = _save(repo, "A", load_preset("retention"))
        b = _save(repo, "B", load_preset("premium"), description="launch")

        reopened = ScenarioRepository(JsonFileScenarioStore(path))
        assert reopened.scenarios == [a, b]

    def test_missing_file_loads_empty(self, tmp_path):
        assert JsonFileScenarioStore(tmp_path / "none.json").load() == []

    def test_corrupt_file_raises(self, tmp_path):
        path = tmp_path / "scenarios.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ScenarioImportError):
            JsonFileScenarioStore(path).load()

    def test_clear(self, tmp_path, fixed_clock):
        path = tmp_path / "scenarios.json"
        repo = ScenarioRepository(JsonFileScenarioStore(path), clock=fixed_clock)
        _save(repo, "A")
        repo.clear()
        assert len(repo) == 0
        assert not path.exists()


class TestImportExport:
    def test_import_appends(self, repo, fixed_clock):
        other = ScenarioRepository(clock=fixed_clock)
        _save(other, "X")
        _save(other, "Y")

        existing = _save(repo, "A")
        imported = repo.import_json(other.export_json())
        assert len(imported) == 2
        assert [s.name for s in repo.scenarios] == ["A", "X", "Y"]
        assert repo.scenarios[0] == existing

    def test_reimporting_own_export_keeps_ids_unique(self, repo):
        a = _save(repo, "A")
        imported = repo.import_json(repo.export_json())

        assert len(repo) == 2
        assert imported[0].id != a.id
        assert imported[0].name == "A"
        assert imported[0].inputs == a.inputs
        assert len({s.id for s in repo.scenarios}) == 2

        repo.delete(a.id)
        assert [s.id for s in repo.scenarios] == [imported[0].id]

    def test_duplicate_ids_within_one_import(self, repo, fixed_clock):
        other = ScenarioRepository(clock=fixed_clock)
        _save(other, "X")
        records = json.loads(other.export_json())
        imported = repo.import_scenarios(records + records)
        assert imported[0].id == records[0]["id"]
        assert imported[1].id != imported[0].id

    def test_import_decoded_records(self, repo, fixed_clock):
        other = ScenarioRepository(clock=fixed_clock)
        _save(other, "X")
        repo.import_scenarios(json.loads(other.export_json()))
        assert [s.name for s in repo.scenarios] == ["X"]

    def test_non_list_rejected(self, repo):
        _save(repo, "A")
        with pytest.raises(ScenarioImportError, match="expected a list"):
            repo.import_json(json.dumps({"scenarios": []}))
        assert len(repo) == 1

    def test_bad_record_rejects_whole_import(self, repo, fixed_clock):
        other = ScenarioRepository(clock=fixed_clock)
        _save(other, "X")
        records = json.loads(other.export_json())
        records.append({"id": "broken"})
        with pytest.raises(ScenarioImportError):
            repo.import_scenarios(records)
        assert len(repo) == 0

    def test_invalid_json(self):
        with pytest.raises(ScenarioImportError, match="not valid JSON"):
            scenarios_from_json("[{")

    def test_export_run(self):
        inputs = load_preset("support")
        payload = export_run(inputs, calculate(inputs))
        assert set(payload) == {"inputs", "results"}
        assert payload["inputs"]["value"]["method"] == "cost_displacement"
        assert payload["results"]["payback"]["kind"] == "months"
        json.dumps(payload)

    def test_filenames(self):
        assert run_export_filename(load_preset("support")) == "roi-calculator-customer-support-bot.json"
        assert scenarios_export_filename(date(2026, 1, 5)) == "ai-roi-scenarios-2026-01-05.json"


class TestSummary:
    def test_summary_markdown(self):
        inputs = load_preset("support")
        results = calculate(inputs)
        text = summary_markdown(inputs, results)
        lines = text.splitlines()
        assert lines[0] == "# AI ROI Analysis: Customer Support Bot"
        assert f"- **ROI**: {results.roi_percentage:.1f}%" in lines
        assert f"- **Payback Period**: {results.payback} months" in lines
        assert "- Volume: 5,000 tickets/mo" in lines
        assert "- Success Rate: 90%" in lines
        assert "- Model: Simple/Complex split 100% / 0%" in lines

    def test_summary_unit_money_precision_follows_magnitude(self, plain_inputs):
        inputs = replace(plain_inputs, monthly_volume=0, integration_cost=10000)
        results = calculate(inputs)
        lines = summary_markdown(inputs, results).splitlines()
        # zero volume: cost per unit is the amortized $833.33
        assert "- **Cost per Unit**: $833.33" in lines
        assert "- **Value per Unit**: $1.75" in lines

        # (4.5 + 1230 / 12) / 10000 units
        inputs = replace(plain_inputs, integration_cost=1230)
        lines = summary_markdown(inputs, calculate(inputs)).splitlines()
        assert "- **Cost per Unit**: $0.0107" in lines

    def test_summary_sentinel_payback(self, plain_inputs):
        text = summary_markdown(plain_inputs, calculate(plain_inputs))
        assert "- **Payback Period**: Immediate" in text.splitlines()
