"""
Scenario repository: named snapshots of (inputs, results) pairs.

Every mutation writes through to the injected ScenarioStore. The repository
also tracks the active comparison selection. Scenarios are never mutated
after creation.
"""

from __future__ import annotations

import copy
import uuid
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Callable, List, Optional, Sequence

import structlog

from core.config import GOLDEN_ANGLE_DEGREES
from core.schema import CalculationResults, Scenario, UseCaseInputs

from .comparison import ScenarioComparison, compare_scenarios
from .export import ScenarioImportError, scenarios_from_json, scenarios_to_json
from .storage import InMemoryScenarioStore, ScenarioStore

logger = structlog.get_logger()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_scenario_id() -> str:
    return f"scenario-{uuid.uuid4()}"


def scenario_color(index: int) -> str:
    """Display color for the index-th scenario; hue steps by the golden angle."""
    hue = (index * GOLDEN_ANGLE_DEGREES) % 360
    return f"hsl({hue:g}, 70%, 50%)"


class ScenarioRepository:
    def __init__(
        self,
        store: Optional[ScenarioStore] = None,
        *,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._store = store if store is not None else InMemoryScenarioStore()
        self._clock = clock or _utcnow
        self._scenarios: List[Scenario] = list(self._store.load())
        self._selected: List[str] = []

    @property
    def scenarios(self) -> List[Scenario]:
        return list(self._scenarios)

    @property
    def selected_ids(self) -> List[str]:
        return list(self._selected)

    def __len__(self) -> int:
        return len(self._scenarios)

    def get(self, scenario_id: str) -> Scenario:
        for s in self._scenarios:
            if s.id == scenario_id:
                return s
        raise KeyError(f"Unknown scenario id: {scenario_id!r}")

    def save(
        self,
        name: str,
        inputs: UseCaseInputs,
        results: CalculationResults,
        description: Optional[str] = None,
    ) -> Scenario:
        """Snapshot the current inputs and results under a name."""
        if not name or not name.strip():
            raise ValueError("Scenario name must not be blank.")

        scenario = Scenario(
            id=_new_scenario_id(),
            name=name,
            description=description or None,
            inputs=copy.deepcopy(inputs),
            results=copy.deepcopy(results),
            created_at=self._clock(),
            color=scenario_color(len(self._scenarios)),
        )
        self._scenarios.append(scenario)
        self._persist()
        logger.info("scenario_saved", scenario_id=scenario.id, name=name, total=len(self._scenarios))
        return scenario

    def load(self, scenario_id: str) -> UseCaseInputs:
        """Copy of the stored inputs, ready to be edited and recalculated."""
        return copy.deepcopy(self.get(scenario_id).inputs)

    def delete(self, scenario_id: str) -> None:
        self.get(scenario_id)
        self._scenarios = [s for s in self._scenarios if s.id != scenario_id]
        self._selected = [i for i in self._selected if i != scenario_id]
        self._persist()
        logger.info("scenario_deleted", scenario_id=scenario_id, total=len(self._scenarios))

    def select(self, scenario_ids: Sequence[str]) -> None:
        for scenario_id in scenario_ids:
            self.get(scenario_id)
        self._selected = list(scenario_ids)

    def compare(self, scenario_ids: Optional[Sequence[str]] = None) -> ScenarioComparison:
        """
        Compare scenarios against the first id given (or the current selection).
        Requires at least two ids; the selection is updated to the ids compared.
        """
        ids = list(scenario_ids) if scenario_ids is not None else self.selected_ids
        if len(ids) < 2:
            raise ValueError("Select at least 2 scenarios to compare.")
        self.select(ids)
        return compare_scenarios([self.get(i) for i in ids])

    def export_json(self, *, indent: int = 2) -> str:
        return scenarios_to_json(self._scenarios, indent=indent)

    def import_json(self, payload: Any) -> List[Scenario]:
        """Append scenarios from an exported payload; all-or-nothing."""
        try:
            imported = scenarios_from_json(payload)
        except ScenarioImportError as exc:
            logger.warning("scenario_import_rejected", error=str(exc).splitlines()[0])
            raise
        return self._append(imported)

    def import_scenarios(self, records: Sequence[Any]) -> List[Scenario]:
        return self.import_json(records)

    def clear(self) -> None:
        self._scenarios = []
        self._selected = []
        self._store.clear()

    def _append(self, imported: List[Scenario]) -> List[Scenario]:
        # ids must stay unique: a record whose id is already taken gets a fresh one
        taken = {s.id for s in self._scenarios}
        appended = []
        reissued = 0
        for scenario in imported:
            if scenario.id in taken:
                scenario = replace(scenario, id=_new_scenario_id())
                reissued += 1
            taken.add(scenario.id)
            appended.append(scenario)

        self._scenarios.extend(appended)
        self._persist()
        logger.info(
            "scenarios_imported",
            count=len(appended),
            reissued_ids=reissued,
            total=len(self._scenarios),
        )
        return appended

    def _persist(self) -> None:
        self._store.save(self._scenarios)
