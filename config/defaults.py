from config.schema import ApiConfig, ClientConfig, StorageConfig
from models.course import Course
from models.lecture import Lecture
from models.problem import SchedulingProblem
from models.room import Room
from models.schedule import Assignment, Schedule
from models.timeslot import Day, TimeSlot


def default_client_config() -> ClientConfig:
    """Standard-Konfiguration: lokaler Dienst auf Port 8080, Dateispeicher aktiv."""
    return ClientConfig(
        api=ApiConfig(base_url="http://localhost:8080"),
        storage=StorageConfig(directory=".vorlesungsplaner", enabled=True),
        log_level="WARNING",
    )


def sample_problem() -> SchedulingProblem:
    """Beispiel-Problem zum Ausprobieren.

    Ein Kurs, zwei Vorlesungen (30 und 25 Teilnehmende), zwei Räume
    (50 und 20 Plätze), zwei Zeitslots (Mo 09–10, Di 10–11).
    """
    return SchedulingProblem(
        courses=[Course(id="c1", name="Course 1")],
        lectures=[
            Lecture(id="l1", course_id="c1", title="Intro", enrollment=30),
            Lecture(id="l2", course_id="c1", title="Advanced", enrollment=25),
        ],
        rooms=[
            Room(id="r1", name="Room A", capacity=50),
            Room(id="r2", name="Room B", capacity=20),
        ],
        time_slots=[
            TimeSlot(id="t1", day=Day.MON, start="09:00", end="10:00"),
            TimeSlot(id="t2", day=Day.TUE, start="10:00", end="11:00"),
        ],
    )


def sample_schedule() -> Schedule:
    """Passender Beispiel-Stundenplan zu ``sample_problem``."""
    return Schedule(
        assignments=[
            Assignment(lecture_id="l1", room_id="r1", time_slot_id="t1"),
            Assignment(lecture_id="l2", room_id="r1", time_slot_id="t2"),
        ],
        score=0.87,
    )
