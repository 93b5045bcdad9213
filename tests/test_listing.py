"""Tests für die sortierbare Listenansicht."""

from analysis.filters import ScheduleFilters
from analysis.listing import SortDirection, SortField, build_assignment_list, toggle_sort
from models.course import Course
from models.lecture import Lecture
from models.schedule import Assignment, Schedule
from models.timeslot import Day


def _plan(*triples) -> Schedule:
    return Schedule(
        assignments=[Assignment(lecture_id=l, room_id=r, time_slot_id=t) for l, r, t in triples]
    )


class TestSorting:
    def test_default_lecture_id_ascending(self, problem, schedule):
        rows = build_assignment_list(problem, schedule)
        assert [r.lecture_label for r in rows] == ["l1", "l2"]

    def test_enrollment_ascending(self, problem, schedule):
        rows = build_assignment_list(problem, schedule, sort_field=SortField.ENROLLMENT)
        assert [r.enrollment for r in rows] == [25, 30]

    def test_enrollment_descending(self, problem, schedule):
        rows = build_assignment_list(
            problem, schedule, sort_field=SortField.ENROLLMENT, direction=SortDirection.DESC
        )
        assert [r.enrollment for r in rows] == [30, 25]

    def test_stable_for_equal_keys(self, problem):
        """Gleiche Schlüssel behalten die Reihenfolge des Stundenplans."""
        plan = _plan(("l2", "r1", "t1"), ("l1", "r1", "t2"), ("l2", "r2", "t2"))
        rows = build_assignment_list(problem, plan, sort_field=SortField.ROOM_ID)
        assert [r.position for r in rows] == [0, 1, 2]

    def test_stable_for_equal_enrollment_descending(self, problem):
        """Absteigend bleiben gleiche Teilnehmerzahlen in Stundenplan-Reihenfolge."""
        plan = _plan(("l2", "r1", "t1"), ("l1", "r2", "t1"), ("l1", "r1", "t2"), ("l2", "r2", "t2"))
        rows = build_assignment_list(
            problem, plan, sort_field=SortField.ENROLLMENT, direction=SortDirection.DESC
        )
        assert [r.position for r in rows] == [1, 2, 0, 3]

    def test_day_sort(self, problem):
        plan = _plan(("l1", "r1", "t2"), ("l2", "r1", "t1"))
        rows = build_assignment_list(problem, plan, sort_field=SortField.DAY)
        assert [r.day_label for r in rows] == ["Mon", "Tue"]

    def test_case_insensitive_text_order(self, problem):
        lectures = [
            Lecture(id="B", course_id="c1", title="x", enrollment=1),
            Lecture(id="a", course_id="c1", title="y", enrollment=1),
        ]
        problem = problem.model_copy(update={"lectures": lectures})
        rows = build_assignment_list(problem, _plan(("B", "r1", "t1"), ("a", "r1", "t2")))
        assert [r.lecture_label for r in rows] == ["a", "B"]


class TestFiltering:
    def test_day_filter(self, problem, schedule):
        rows = build_assignment_list(problem, schedule, ScheduleFilters(day=Day.MON))
        assert [r.lecture_label for r in rows] == ["l1"]

    def test_room_filter(self, problem, schedule):
        assert build_assignment_list(problem, schedule, ScheduleFilters(room_id="r2")) == []

    def test_course_filter(self, problem, schedule):
        extra = Course(id="c2", name="Course 2")
        problem = problem.model_copy(update={"courses": [*problem.courses, extra]})
        assert build_assignment_list(problem, schedule, ScheduleFilters(course_id="c2")) == []
        assert len(build_assignment_list(problem, schedule, ScheduleFilters(course_id="c1"))) == 2


class TestRows:
    def test_unknown_labels(self, problem):
        rows = build_assignment_list(problem, _plan(("l9", "r9", "t9")))
        row = rows[0]
        assert row.lecture_label == "Unknown"
        assert row.course_label == "Unknown"
        assert row.room_label == "Unknown"
        assert row.day_label == "Unknown"
        assert row.time_label == "? - ?"
        assert row.enrollment == 0

    def test_resolved_labels(self, problem, schedule):
        row = build_assignment_list(problem, schedule)[0]
        assert row.course_label == "Course 1"
        assert row.room_label == "Room A"
        assert row.time_label == "09:00 - 10:00"

    def test_over_capacity(self, problem):
        rows = build_assignment_list(problem, _plan(("l1", "r2", "t1"), ("l2", "r1", "t1")))
        assert [r.is_over_capacity for r in rows] == [True, False]


class TestToggleSort:
    def test_same_field_flips(self):
        assert toggle_sort(SortField.DAY, SortDirection.ASC, SortField.DAY) == (
            SortField.DAY, SortDirection.DESC)
        assert toggle_sort(SortField.DAY, SortDirection.DESC, SortField.DAY) == (
            SortField.DAY, SortDirection.ASC)

    def test_new_field_ascending(self):
        assert toggle_sort(SortField.DAY, SortDirection.DESC, SortField.ROOM_ID) == (
            SortField.ROOM_ID, SortDirection.ASC)
