"""Sitzungsspeicher: letzte Eingabe, letzter Plan, letzte Validierung.

Der Speicher ist ein injizierter Port (``KeyValueStore``) statt globalem
Zustand. Lese- und Schreibfehler sind nie fatal: sie werden geloggt und
führen zu "nichts wiederhergestellt" bzw. ``False``.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, Union

from pydantic import ValidationError

from models.problem import SchedulingProblem
from models.schedule import Schedule
from models.validation import ValidationResult

logger = logging.getLogger(__name__)

StoredModel = Union[SchedulingProblem, Schedule, ValidationResult]


class StorageSlot(str, Enum):
    LAST_PROBLEM = "scheduling-app-last-problem"
    LAST_SCHEDULE = "scheduling-app-last-schedule"
    LAST_VALIDATION = "scheduling-app-last-validation"


_SLOT_MODELS: dict[StorageSlot, type] = {
    StorageSlot.LAST_PROBLEM: SchedulingProblem,
    StorageSlot.LAST_SCHEDULE: Schedule,
    StorageSlot.LAST_VALIDATION: ValidationResult,
}


# ─── Backends ─────────────────────────────────────────────────────────────────

class KeyValueStore(ABC):
    """Minimaler String-Schlüssel/Wert-Speicher."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        ...

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        ...

    @abstractmethod
    def delete(self, key: str) -> None:
        ...


class MemoryStore(KeyValueStore):
    """Flüchtiger Speicher (Tests, ``--no-store``)."""

    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def __len__(self) -> int:
        return len(self._data)


class JsonFileStore(KeyValueStore):
    """Eine JSON-Datei pro Schlüssel in einem Verzeichnis."""

    def __init__(self, directory: Path) -> None:
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        with open(path, "r", encoding="utf-8") as f:
            return f.read()

    def set(self, key: str, value: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        with open(self._path(key), "w", encoding="utf-8") as f:
            f.write(value)

    def delete(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)

    def __repr__(self) -> str:
        return f"JsonFileStore({str(self.directory)!r})"


# ─── Typisierter Sitzungsspeicher ─────────────────────────────────────────────

@dataclass
class SessionState:
    """Beim Start wiederhergestellter Zustand (fehlend = None)."""

    problem: Optional[SchedulingProblem] = None
    schedule: Optional[Schedule] = None
    validation: Optional[ValidationResult] = None


class SessionStore:
    """Lädt und speichert die drei Sitzungs-Slots als JSON."""

    def __init__(self, backend: KeyValueStore) -> None:
        self.backend = backend

    def load(self, slot: StorageSlot) -> Optional[StoredModel]:
        """Liest einen Slot. Fehlend, unlesbar oder ungültig → None."""
        model = _SLOT_MODELS[slot]
        try:
            raw = self.backend.get(slot.value)
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Slot '{slot.value}' nicht lesbar: {e}")
            return None
        if raw is None:
            return None
        try:
            return model.model_validate_json(raw)
        except ValidationError as e:
            logger.warning(
                f"Slot '{slot.value}' enthält ungültige Daten "
                f"({e.error_count()} Fehler) – wird ignoriert."
            )
            return None

    def save(self, slot: StorageSlot, value: StoredModel) -> bool:
        """Überschreibt einen Slot. Gibt False zurück, wenn das Schreiben scheitert."""
        expected = _SLOT_MODELS[slot]
        if not isinstance(value, expected):
            raise TypeError(
                f"Slot '{slot.value}' erwartet {expected.__name__}, "
                f"nicht {type(value).__name__}"
            )
        try:
            self.backend.set(slot.value, value.model_dump_json(by_alias=True))
        except OSError as e:
            logger.warning(f"Slot '{slot.value}' konnte nicht gespeichert werden: {e}")
            return False
        logger.debug(f"Slot '{slot.value}' gespeichert")
        return True

    def discard(self, slot: StorageSlot) -> None:
        try:
            self.backend.delete(slot.value)
        except OSError as e:
            logger.warning(f"Slot '{slot.value}' konnte nicht gelöscht werden: {e}")

    def load_all(self) -> SessionState:
        return SessionState(
            problem=self.load(StorageSlot.LAST_PROBLEM),
            schedule=self.load(StorageSlot.LAST_SCHEDULE),
            validation=self.load(StorageSlot.LAST_VALIDATION),
        )

    def clear(self) -> None:
        for slot in StorageSlot:
            self.discard(slot)
