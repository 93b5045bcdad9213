"""SchedulingProblem: vollständige Eingabe für den Generator (Pydantic v2)."""

from pathlib import Path
from typing import Iterable

from models.course import Course
from models.lecture import Lecture
from models.room import Room
from models.timeslot import TimeSlot
from models.wire import WireModel


class SchedulingProblem(WireModel):
    """Kurse, Vorlesungen, Räume und Zeitslots in Eingabereihenfolge.

    Das Modell prüft nur die Form der einzelnen Zeilen. Eindeutigkeit der
    IDs, aufgelöste Kursverweise und nicht-leere Listen entscheidet
    ``analysis.integrity.validate_problem`` – ein Problem in Bearbeitung
    darf diese Invarianten vorübergehend verletzen.
    """

    courses: list[Course] = []
    lectures: list[Lecture] = []
    rooms: list[Room] = []
    time_slots: list[TimeSlot] = []

    # ─── Übersicht ───

    def summary(self) -> str:
        """Kurze Übersicht über den Datensatz."""
        total_enrollment = sum(l.enrollment for l in self.lectures)
        total_capacity = sum(r.capacity for r in self.rooms)
        days = sorted({t.day.value for t in self.time_slots})
        lines = [
            f"Kurse: {len(self.courses)}",
            f"Vorlesungen: {len(self.lectures)} ({total_enrollment} Teilnehmende gesamt)",
            f"Räume: {len(self.rooms)} ({total_capacity} Plätze gesamt)",
            f"Zeitslots: {len(self.time_slots)}"
            + (f" ({', '.join(days)})" if days else ""),
        ]
        return "\n".join(lines)

    # ─── Persistenz ───

    def save_json(self, path: Path) -> None:
        """Speichert das Problem im JSON-Format des Dienstes."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            f.write(self.model_dump_json(by_alias=True, indent=2))

    @classmethod
    def load_json(cls, path: Path) -> "SchedulingProblem":
        """Lädt ein Problem aus einer JSON-Datei."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"JSON-Datei nicht gefunden: {path}")
        with open(path, "r", encoding="utf-8") as f:
            return cls.model_validate_json(f.read())


def generate_unique_id(prefix: str, existing_ids: Iterable[str]) -> str:
    """Erste freie ID der Form ``{prefix}{n}`` mit n = 1, 2, ..."""
    taken = set(existing_ids)
    counter = 1
    while f"{prefix}{counter}" in taken:
        counter += 1
    return f"{prefix}{counter}"
