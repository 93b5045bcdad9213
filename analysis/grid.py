"""Rasteransicht: Zuweisungen auf eine (Zeitslot × Raum)-Matrix projizieren.

Filter werden zweimal angewendet: einmal für die Achsen des
Rasters und einmal pro Zuweisung. Eine Zuweisung kann auf einen Zeitslot
oder Raum verweisen, der nicht im sichtbaren Raster liegt, und darf dann
nicht erscheinen.
"""

from dataclasses import dataclass, field
from typing import Optional

from analysis.filters import ScheduleFilters
from analysis.integrity import validate_assignment
from analysis.lookup import ProblemIndex
from models.course import Course
from models.lecture import Lecture
from models.problem import SchedulingProblem
from models.room import Room
from models.schedule import Assignment, Schedule
from models.timeslot import TimeSlot


@dataclass(frozen=True)
class GridOccupant:
    """Eine Zuweisung in einer Rasterzelle samt aufgelöster Vorlesung/Kurs."""

    assignment: Assignment
    lecture: Optional[Lecture]
    course: Optional[Course]

    @property
    def enrollment(self) -> int:
        return self.lecture.enrollment if self.lecture else 0


@dataclass
class GridCell:
    """Belegung eines Raums in einem Zeitslot."""

    time_slot: TimeSlot
    room: Room
    occupants: list[GridOccupant] = field(default_factory=list)

    @property
    def has_conflict(self) -> bool:
        """Mehr als eine Zuweisung im selben Raum zur selben Zeit."""
        return len(self.occupants) > 1

    @property
    def total_enrollment(self) -> int:
        return sum(o.enrollment for o in self.occupants)

    @property
    def is_over_capacity(self) -> bool:
        """Summe der Teilnehmenden größer als die Raumkapazität.

        Unabhängig von ``has_conflict`` – beide können gleichzeitig gelten.
        """
        return self.total_enrollment > self.room.capacity

    @property
    def is_empty(self) -> bool:
        return not self.occupants


@dataclass
class ScheduleGrid:
    """Zeilen = gefilterte Zeitslots, Spalten = gefilterte Räume."""

    time_slots: list[TimeSlot]
    rooms: list[Room]
    _cells: dict[tuple[str, str], GridCell] = field(default_factory=dict, repr=False)

    @property
    def is_empty(self) -> bool:
        """True wenn keine Zeile oder keine Spalte den Filtern entspricht."""
        return not self.time_slots or not self.rooms

    def cell(self, time_slot_id: str, room_id: str) -> Optional[GridCell]:
        return self._cells.get((time_slot_id, room_id))

    def row(self, time_slot_id: str) -> list[GridCell]:
        """Alle Zellen eines Zeitslots in Spaltenreihenfolge."""
        return [
            self._cells[(time_slot_id, r.id)]
            for r in self.rooms
            if (time_slot_id, r.id) in self._cells
        ]

    def cells(self) -> list[GridCell]:
        """Alle Zellen zeilenweise."""
        return [c for t in self.time_slots for c in self.row(t.id)]

    def conflicts(self) -> list[GridCell]:
        return [c for c in self.cells() if c.has_conflict]

    def over_capacity(self) -> list[GridCell]:
        return [c for c in self.cells() if c.is_over_capacity]


def build_grid(
    problem: SchedulingProblem,
    schedule: Schedule,
    filters: Optional[ScheduleFilters] = None,
) -> ScheduleGrid:
    """Baut das Raster für einen Stundenplan.

    Zuweisungen mit nicht auflösbarer Vorlesung, Raum oder Zeitslot werden
    übersprungen. Ein verwaister Kursverweis ist erlaubt (Kurs = None),
    passt aber nie auf einen gesetzten Kursfilter. Innerhalb einer Zelle
    bleibt die Reihenfolge des Stundenplans erhalten.
    """
    filters = filters or ScheduleFilters()
    index = ProblemIndex.of(problem)

    # ── Achsen ────────────────────────────────────────────────────────────
    # Bei doppelten IDs gewinnt das erste Vorkommen, wie im ProblemIndex
    time_slots = [t for t in index.time_slots.values() if filters.matches_day(t)]
    rooms = [r for r in index.rooms.values() if filters.matches_room(r)]

    grid = ScheduleGrid(time_slots=time_slots, rooms=rooms)
    for slot in time_slots:
        for room in rooms:
            grid._cells[(slot.id, room.id)] = GridCell(time_slot=slot, room=room)

    # ── Belegung ──────────────────────────────────────────────────────────
    for assignment in schedule.assignments:
        if not validate_assignment(assignment, problem, index):
            continue
        lecture = index.lectures[assignment.lecture_id]
        course = index.course_of(lecture)
        if not filters.matches_course(course):
            continue

        time_slot = index.time_slots[assignment.time_slot_id]
        room = index.rooms[assignment.room_id]
        if not filters.matches_day(time_slot) or not filters.matches_room(room):
            continue

        cell = grid.cell(assignment.time_slot_id, assignment.room_id)
        if cell is not None:
            cell.occupants.append(GridOccupant(assignment=assignment, lecture=lecture, course=course))

    return grid
