"""Listenansicht: eine denormalisierte Zeile pro Zuweisung, gefiltert und sortiert."""

import unicodedata
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from analysis.filters import ScheduleFilters
from analysis.lookup import UNKNOWN_LABEL, ProblemIndex
from models.course import Course
from models.lecture import Lecture
from models.problem import SchedulingProblem
from models.room import Room
from models.schedule import Assignment, Schedule
from models.timeslot import TimeSlot


class SortField(str, Enum):
    LECTURE_ID = "lectureId"
    COURSE_ID = "courseId"
    ROOM_ID = "roomId"
    TIME_SLOT_ID = "timeSlotId"
    DAY = "day"
    ENROLLMENT = "enrollment"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class AssignmentRow:
    """Eine Zuweisung mit allen aufgelösten Entitäten (fehlende = None)."""

    position: int            # Index im ursprünglichen Stundenplan
    assignment: Assignment
    lecture: Optional[Lecture]
    course: Optional[Course]
    room: Optional[Room]
    time_slot: Optional[TimeSlot]

    @property
    def enrollment(self) -> int:
        return self.lecture.enrollment if self.lecture else 0

    @property
    def room_capacity(self) -> int:
        return self.room.capacity if self.room else 0

    @property
    def is_over_capacity(self) -> bool:
        return self.enrollment > self.room_capacity

    # ─── Anzeige ───

    @property
    def lecture_label(self) -> str:
        return self.lecture.id if self.lecture else UNKNOWN_LABEL

    @property
    def lecture_title(self) -> str:
        return self.lecture.title if self.lecture else UNKNOWN_LABEL

    @property
    def course_label(self) -> str:
        return self.course.name if self.course else UNKNOWN_LABEL

    @property
    def room_label(self) -> str:
        return self.room.name if self.room else UNKNOWN_LABEL

    @property
    def day_label(self) -> str:
        return self.time_slot.day.value if self.time_slot else UNKNOWN_LABEL

    @property
    def time_label(self) -> str:
        if self.time_slot is None:
            return "? - ?"
        return f"{self.time_slot.start} - {self.time_slot.end}"

    def sort_value(self, sort_field: SortField):
        """Rohwert für die Sortierung (fehlend = "" bzw. 0)."""
        if sort_field == SortField.ENROLLMENT:
            return self.enrollment
        if sort_field == SortField.LECTURE_ID:
            return self.lecture.id if self.lecture else ""
        if sort_field == SortField.COURSE_ID:
            return self.course.id if self.course else ""
        if sort_field == SortField.ROOM_ID:
            return self.room.id if self.room else ""
        if sort_field == SortField.TIME_SLOT_ID:
            return self.time_slot.id if self.time_slot else ""
        if sort_field == SortField.DAY:
            return self.time_slot.day.value if self.time_slot else ""
        return ""


def _text_key(value: str) -> tuple[str, str]:
    # Sprachbewusster Vergleich: Groß/Klein und Akzente zuerst ignorieren,
    # exakter String nur als zweites Kriterium.
    folded = unicodedata.normalize("NFKD", value).casefold()
    return folded, value


def toggle_sort(
    current_field: SortField,
    current_direction: SortDirection,
    clicked_field: SortField,
) -> tuple[SortField, SortDirection]:
    """Spaltenkopf-Verhalten: gleiche Spalte dreht die Richtung, neue Spalte startet aufsteigend."""
    if clicked_field == current_field:
        flipped = SortDirection.DESC if current_direction == SortDirection.ASC else SortDirection.ASC
        return current_field, flipped
    return clicked_field, SortDirection.ASC


def build_assignment_list(
    problem: SchedulingProblem,
    schedule: Schedule,
    filters: Optional[ScheduleFilters] = None,
    sort_field: SortField = SortField.LECTURE_ID,
    direction: SortDirection = SortDirection.ASC,
) -> list[AssignmentRow]:
    """Gefilterte und stabil sortierte Zeilen für die Tabellenansicht.

    Die Sortierung nutzt ``sorted`` (stabil); absteigend über
    ``reverse=True``, das gleiche Schlüssel ebenfalls in ursprünglicher
    Reihenfolge belässt.
    """
    filters = filters or ScheduleFilters()
    index = ProblemIndex.of(problem)

    rows: list[AssignmentRow] = []
    for position, assignment in enumerate(schedule.assignments):
        lecture = index.lectures.get(assignment.lecture_id)
        course = index.course_of(lecture)
        room = index.rooms.get(assignment.room_id)
        time_slot = index.time_slots.get(assignment.time_slot_id)

        if not filters.matches_course(course):
            continue
        if not filters.matches_room(room):
            continue
        if not filters.matches_day(time_slot):
            continue

        rows.append(AssignmentRow(
            position=position,
            assignment=assignment,
            lecture=lecture,
            course=course,
            room=room,
            time_slot=time_slot,
        ))

    if sort_field == SortField.ENROLLMENT:
        key = lambda r: r.enrollment
    else:
        key = lambda r: _text_key(r.sort_value(sort_field))

    return sorted(rows, key=key, reverse=(direction == SortDirection.DESC))
