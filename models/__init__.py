from models.course import Course
from models.lecture import Lecture
from models.room import Room
from models.timeslot import Day, TimeSlot
from models.schedule import Assignment, Schedule
from models.validation import Violation, ValidationResult
from models.problem import SchedulingProblem, generate_unique_id

__all__ = [
    "Course",
    "Lecture",
    "Room",
    "Day",
    "TimeSlot",
    "Assignment",
    "Schedule",
    "Violation",
    "ValidationResult",
    "SchedulingProblem",
    "generate_unique_id",
]
