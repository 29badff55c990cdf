"""
Persistence port for the scenario list.

The store is a single blob with last-writer-wins semantics; no locking.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Sequence, Union

import structlog

from core.schema import Scenario

from .export import scenarios_from_json, scenarios_to_json

logger = structlog.get_logger()


class ScenarioStore:
    """Interface for loading and saving the whole scenario list."""

    def load(self) -> List[Scenario]:
        raise NotImplementedError

    def save(self, scenarios: Sequence[Scenario]) -> None:
        raise NotImplementedError

    def clear(self) -> None:
        raise NotImplementedError


class InMemoryScenarioStore(ScenarioStore):
    """Keeps the serialized list in memory, the way a browser key-value slot would."""

    def __init__(self, scenarios: Sequence[Scenario] = ()) -> None:
        self._blob: Optional[str] = scenarios_to_json(scenarios) if scenarios else None

    def load(self) -> List[Scenario]:
        if self._blob is None:
            return []
        return scenarios_from_json(self._blob)

    def save(self, scenarios: Sequence[Scenario]) -> None:
        self._blob = scenarios_to_json(scenarios)

    def clear(self) -> None:
        self._blob = None


class JsonFileScenarioStore(ScenarioStore):
    """
    Scenario list in one JSON file. A missing file loads as an empty list;
    a corrupt file raises ScenarioImportError.
    """

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)

    def load(self) -> List[Scenario]:
        if not self.path.exists():
            return []
        return scenarios_from_json(self.path.read_text(encoding="utf-8"))

    def save(self, scenarios: Sequence[Scenario]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(scenarios_to_json(scenarios), encoding="utf-8")
        logger.debug("scenario_store_written", path=str(self.path), scenarios=len(scenarios))

    def clear(self) -> None:
        if self.path.exists():
            self.path.unlink()
