"""ID-Index über ein SchedulingProblem.

Bei doppelten IDs gewinnt – wie bei einer linearen Suche – das erste
Vorkommen. Verwaiste Verweise liefern ``None``; Aufrufer zeigen dann
``UNKNOWN_LABEL`` an, statt abzubrechen.
"""

from dataclasses import dataclass
from typing import Optional

from models.course import Course
from models.lecture import Lecture
from models.problem import SchedulingProblem
from models.room import Room
from models.timeslot import TimeSlot

UNKNOWN_LABEL = "Unknown"


def _first_by_id(items) -> dict:
    index: dict = {}
    for item in items:
        index.setdefault(item.id, item)
    return index


@dataclass(frozen=True)
class ProblemIndex:
    courses: dict[str, Course]
    lectures: dict[str, Lecture]
    rooms: dict[str, Room]
    time_slots: dict[str, TimeSlot]

    @classmethod
    def of(cls, problem: SchedulingProblem) -> "ProblemIndex":
        return cls(
            courses=_first_by_id(problem.courses),
            lectures=_first_by_id(problem.lectures),
            rooms=_first_by_id(problem.rooms),
            time_slots=_first_by_id(problem.time_slots),
        )

    def course_of(self, lecture: Optional[Lecture]) -> Optional[Course]:
        """Kurs einer Vorlesung (None bei fehlender Vorlesung oder verwaistem Verweis)."""
        if lecture is None:
            return None
        return self.courses.get(lecture.course_id)
