"""Struktur- und Referenzprüfung eines SchedulingProblem (lokal, synchron).

Entscheidet, ob ein Problem an den Generator geschickt werden darf und ob
ein Stundenplan gegen ein Problem validiert werden kann. Alle verletzten
Regeln werden gesammelt – nur Formfehler einer Zeile (falscher Typ,
fehlendes Pflichtfeld) überspringen die weiteren Prüfungen dieser Zeile.
"""

from enum import Enum
from typing import Any, Mapping, Optional, Union

from pydantic import BaseModel, ValidationError

from analysis.lookup import ProblemIndex
from models.course import Course
from models.lecture import Lecture
from models.problem import SchedulingProblem
from models.room import Room
from models.schedule import Assignment, Schedule
from models.timeslot import TimeSlot

STRUCTURAL_ERROR_CODE = 400


class StructuralRule(str, Enum):
    MISSING = "missing"
    INVALID = "invalid"
    INVALID_TIME_RANGE = "invalid_time_range"
    NON_UNIQUE = "non_unique"
    DANGLING_REFERENCE = "dangling_reference"


class StructuralError(BaseModel):
    """Ein lokaler Strukturfehler, gebunden an einen Feldpfad.

    Wird inline beim betroffenen Feld angezeigt und verlässt die lokale
    Schicht nie als eigenständige Antwort.
    """

    code: int = STRUCTURAL_ERROR_CODE
    path: str                 # z.B. "timeSlots[0].end", "lectures[2].courseId"
    rule: StructuralRule
    message: str
    details: Optional[str] = None

    def __str__(self) -> str:
        return f"{self.path}: {self.message}" if self.path else self.message


class IntegrityReport(BaseModel):
    """Ergebnis der Strukturprüfung (leere Fehlerliste = einreichbar)."""

    errors: list[StructuralError] = []

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def errors_for(self, prefix: str) -> list[StructuralError]:
        """Fehler eines Feldes oder einer Zeile, z.B. ``"lectures[0]"``."""
        return [
            e for e in self.errors
            if e.path == prefix
            or e.path.startswith(prefix + ".")
            or e.path.startswith(prefix + "[")
        ]

    def has_rule(self, rule: StructuralRule) -> bool:
        return any(e.rule == rule for e in self.errors)

    def print_rich(self) -> None:
        """Gibt den Report formatiert über Rich aus."""
        from rich.console import Console
        from rich.panel import Panel

        console = Console()
        if self.is_valid:
            lines = ["[bold green]✓ STRUKTUR OK[/bold green]"]
        else:
            lines = [f"[bold red]✗ {len(self.errors)} STRUKTURFEHLER[/bold red]"]
            for e in self.errors:
                lines.append(f"  [red]• [bold]{e.path or '<problem>'}[/bold] – {e.message}[/red]")
        console.print(Panel("\n".join(lines), title="Strukturprüfung", border_style="cyan"))


# Reihenfolge der Prüfung und Wire-Namen der Listen
_COLLECTIONS: list[tuple[str, type, str]] = [
    ("courses", Course, "Kurs"),
    ("lectures", Lecture, "Vorlesung"),
    ("rooms", Room, "Raum"),
    ("timeSlots", TimeSlot, "Zeitslot"),
]


def _join_path(prefix: str, loc: tuple) -> str:
    path = prefix
    for part in loc:
        if isinstance(part, int):
            path += f"[{part}]"
        else:
            path = f"{path}.{part}" if path else str(part)
    return path


def _errors_from_pydantic(prefix: str, exc: ValidationError) -> list[StructuralError]:
    """Übersetzt Pydantic-Fehler in feldbezogene StructuralErrors."""
    result: list[StructuralError] = []
    for err in exc.errors():
        path = _join_path(prefix, tuple(err["loc"]))
        if err["type"] in ("missing", "string_too_short"):
            rule = StructuralRule.MISSING
            message = "Pflichtfeld fehlt oder ist leer."
        elif err["type"] == "time_range":
            rule = StructuralRule.INVALID_TIME_RANGE
            message = err["msg"]
        elif err["type"] == "string_pattern_mismatch":
            rule = StructuralRule.INVALID
            message = "Uhrzeit muss im Format HH:mm (24h) angegeben werden."
        else:
            rule = StructuralRule.INVALID
            message = "Ungültiger Wert."
        result.append(StructuralError(
            path=path, rule=rule, message=message, details=err["msg"],
        ))
    return result


def validate_problem(
    problem: Union[SchedulingProblem, Mapping[str, Any]],
) -> IntegrityReport:
    """Prüft ein Problem (Modell oder rohes JSON-Objekt) auf Einreichbarkeit.

    Prüfungen:
    1. Jede der vier Listen existiert und ist nicht leer; Form jeder Zeile
    2. Referenzen: jede Lecture.courseId verweist auf einen Kurs
    3. Eindeutigkeit der IDs innerhalb jedes Entitätstyps
       (gleiche ID bei Kurs und Raum ist erlaubt)
    """
    if isinstance(problem, SchedulingProblem):
        raw: Mapping[str, Any] = problem.to_wire()
    elif isinstance(problem, Mapping):
        raw = problem
    else:
        return IntegrityReport(errors=[StructuralError(
            path="", rule=StructuralRule.INVALID,
            message="Problem muss ein JSON-Objekt sein.",
        )])

    errors: list[StructuralError] = []
    valid_rows: dict[str, list[tuple[int, Any]]] = {}
    # Jede nicht-leere String-ID, auch aus Zeilen mit Formfehlern
    row_ids: dict[str, list[tuple[int, str]]] = {}

    # ── 1. Listen + Zeilenform ────────────────────────────────────────────
    for key, model, label in _COLLECTIONS:
        valid_rows[key] = []
        row_ids[key] = []
        rows = raw.get(key)
        if rows is None:
            errors.append(StructuralError(
                path=key, rule=StructuralRule.MISSING,
                message=f"Mindestens ein {label} ist erforderlich.",
            ))
            continue
        if not isinstance(rows, (list, tuple)):
            errors.append(StructuralError(
                path=key, rule=StructuralRule.INVALID,
                message=f"'{key}' muss eine Liste sein.",
            ))
            continue
        if not rows:
            errors.append(StructuralError(
                path=key, rule=StructuralRule.MISSING,
                message=f"Mindestens ein {label} ist erforderlich.",
            ))
        for i, row in enumerate(rows):
            row_id = row.get("id") if isinstance(row, Mapping) else None
            if isinstance(row_id, str) and row_id:
                row_ids[key].append((i, row_id))
            try:
                valid_rows[key].append((i, model.model_validate(row)))
            except ValidationError as e:
                errors.extend(_errors_from_pydantic(f"{key}[{i}]", e))

    # ── 2. Referenzen ─────────────────────────────────────────────────────
    course_ids = {cid for _, cid in row_ids["courses"]}
    for i, lecture in valid_rows["lectures"]:
        if lecture.course_id not in course_ids:
            errors.append(StructuralError(
                path=f"lectures[{i}].courseId",
                rule=StructuralRule.DANGLING_REFERENCE,
                message=f"Kurs '{lecture.course_id}' existiert nicht.",
            ))

    # ── 3. Eindeutigkeit ──────────────────────────────────────────────────
    for key, _model, label in _COLLECTIONS:
        seen: set[str] = set()
        for i, item_id in row_ids[key]:
            if item_id in seen:
                errors.append(StructuralError(
                    path=f"{key}[{i}].id",
                    rule=StructuralRule.NON_UNIQUE,
                    message=f"{label}-ID '{item_id}' ist nicht eindeutig.",
                ))
            seen.add(item_id)

    return IntegrityReport(errors=errors)


def validate_schedule(
    schedule: Union[Schedule, Mapping[str, Any]],
    problem: Union[SchedulingProblem, Mapping[str, Any]],
) -> IntegrityReport:
    """Prüft, ob (Problem, Stundenplan) zur Validierung eingereicht werden können.

    Verwaiste Verweise einzelner Zuweisungen sind hier KEIN Fehler – die
    meldet der externe Validator als Verletzung.
    """
    errors = [
        e.model_copy(update={"path": _join_path("problem", (e.path,)) if e.path else "problem"})
        for e in validate_problem(problem).errors
    ]
    if not isinstance(schedule, Schedule):
        try:
            Schedule.model_validate(schedule)
        except ValidationError as e:
            errors.extend(_errors_from_pydantic("schedule", e))
    return IntegrityReport(errors=errors)


def validate_assignment(
    assignment: Assignment,
    problem: SchedulingProblem,
    index: Optional[ProblemIndex] = None,
) -> bool:
    """True wenn Vorlesung, Raum und Zeitslot der Zuweisung auflösbar sind."""
    index = index or ProblemIndex.of(problem)
    return (
        assignment.lecture_id in index.lectures
        and assignment.room_id in index.rooms
        and assignment.time_slot_id in index.time_slots
    )
