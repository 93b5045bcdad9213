"""Anzeige-Filter für Raster- und Listenansicht."""

from dataclasses import dataclass
from typing import Optional

from models.course import Course
from models.problem import SchedulingProblem
from models.room import Room
from models.timeslot import Day, TimeSlot
from models.validation import Violation


@dataclass(frozen=True)
class ScheduleFilters:
    """Optionale Filter auf Kurs, Raum und Wochentag (None = alles)."""

    course_id: Optional[str] = None
    room_id: Optional[str] = None
    day: Optional[Day] = None

    @property
    def is_active(self) -> bool:
        return bool(self.course_id or self.room_id or self.day)

    # Ein gesetzter Filter passt nie auf eine fehlende (verwaiste) Entität.

    def matches_course(self, course: Optional[Course]) -> bool:
        if not self.course_id:
            return True
        return course is not None and course.id == self.course_id

    def matches_room(self, room: Optional[Room]) -> bool:
        if not self.room_id:
            return True
        return room is not None and room.id == self.room_id

    def matches_day(self, time_slot: Optional[TimeSlot]) -> bool:
        if not self.day:
            return True
        return time_slot is not None and time_slot.day == self.day


def available_days(problem: SchedulingProblem) -> list[Day]:
    """Alle im Problem vorkommenden Wochentage in Wochenreihenfolge."""
    used = {t.day for t in problem.time_slots}
    return [d for d in Day if d in used]


def filters_for_violation(
    violation: Violation, problem: SchedulingProblem
) -> ScheduleFilters:
    """Leitet aus den Rückverweisen einer Verletzung einen Anzeigefilter ab.

    - Vorlesung → Filter auf deren Kurs
    - Raum      → Filter auf den Raum
    - Zeitslot  → Filter auf dessen Wochentag
    Nicht auflösbare Verweise werden ignoriert.
    """
    course_id = None
    if violation.lecture_id:
        lecture = next((l for l in problem.lectures if l.id == violation.lecture_id), None)
        if lecture is not None:
            course_id = lecture.course_id

    room_id = None
    if violation.room_id and any(r.id == violation.room_id for r in problem.rooms):
        room_id = violation.room_id

    day = None
    if violation.time_slot_id:
        slot = next((t for t in problem.time_slots if t.id == violation.time_slot_id), None)
        if slot is not None:
            day = slot.day

    return ScheduleFilters(course_id=course_id, room_id=room_id, day=day)
